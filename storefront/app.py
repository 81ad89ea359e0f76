"""Local JSON API over the storefront client state.

- Catalog browsing decodes the request query string exactly like the
  catalog page URL, so a renderer can forward ``location.search`` as-is.
- Cart, wishlist, compare and currency/language preferences live in the
  device-local key-value store under ``STOREFRONT_DATA_DIR``.
- Responses are data only; product cards, drawers and price formatting are
  left to the renderer.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from pathlib import Path
from typing import Any, Literal, Optional, Union

from flask import Flask, jsonify, request
from flask_cors import CORS
from flask_talisman import Talisman
from pydantic import BaseModel, Field, ValidationError

from shopcore import query as query_codec
from shopcore.catalog import category_title
from shopcore.config import load_storefront_config
from shopcore.currency import CURRENCY_SIGNS, SUPPORTED_CURRENCIES
from shopcore.exceptions import (
    CompareCapacityExceeded,
    ProductNotFound,
    QuoteOnlyRejected,
    StorefrontError,
    UnsupportedPreference,
)
from shopcore.models import Product
from shopcore.state import ClientState
from shopcore.stores import SUPPORTED_LANGUAGES

BASE_DIR = Path(__file__).resolve().parent

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------
CONFIG = load_storefront_config(BASE_DIR)
DATA_DIR = CONFIG.data_dir

logging.basicConfig(level=CONFIG.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Flask app
# ---------------------------------------------------------------------------
app = Flask(__name__)
app.config.update(
    SECRET_KEY=CONFIG.secret_key,
    PREFERRED_URL_SCHEME="https" if CONFIG.force_tls else "http",
)
app.json.sort_keys = False

CORS(app, resources={r"/api/*": {"origins": list(CONFIG.allowed_origins)}})

# Security headers
Talisman(app, content_security_policy=None, force_https=CONFIG.force_tls)

_CLIENT_STATE: ClientState | None = None
_STATE_LOCK = threading.Lock()


def get_state() -> ClientState:
    """Return the shared client state, building it on first use."""

    global _CLIENT_STATE
    with _STATE_LOCK:
        if _CLIENT_STATE is None:
            _CLIENT_STATE = ClientState.from_config(replace(CONFIG, data_dir=Path(DATA_DIR)))
            logger.info("Client state ready at %s", _CLIENT_STATE.backend.root)
        return _CLIENT_STATE


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------
class QuantityModel(BaseModel):
    quantity: int = Field(1, ge=-999, le=999)


class PreferencesUpdateModel(BaseModel):
    currency: Optional[str] = None
    language: Optional[str] = None


class QueryPatchModel(BaseModel):
    current: str = ""
    patch: dict[str, Union[str, int, float, None]] = Field(default_factory=dict)


class QueryResetModel(BaseModel):
    current: str = ""


class LaptopFilterModel(BaseModel):
    current: str = ""
    key: Literal["cpu", "gpu", "ram", "ssd", "screen", "hz"]
    value: str = ""


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------
def _product_payload(product: Product, state: ClientState) -> dict[str, Any]:
    payload = product.model_dump(mode="json")
    payload["price"] = state.display_price(product.price_base)
    payload["old_price"] = (
        state.display_price(product.old_price_base) if product.old_price_base else None
    )
    return payload


def _cart_payload(state: ClientState) -> dict[str, Any]:
    lines = state.cart.lines()
    return {
        "items": [
            {
                "product": _product_payload(line.product, state),
                "quantity": line.quantity,
                "subtotal": state.display_price(line.subtotal),
            }
            for line in lines
        ],
        "count": state.cart.count(),
        "total": state.display_price(sum(line.subtotal for line in lines)),
        "currency": state.preferences.currency,
    }


def _wishlist_payload(state: ClientState) -> dict[str, Any]:
    return {
        "items": [_product_payload(p, state) for p in state.wishlist.items()],
        "count": state.wishlist.count(),
    }


def _compare_payload(state: ClientState) -> dict[str, Any]:
    return {
        "items": [_product_payload(p, state) for p in state.compare.items()],
        "rows": [
            {"key": row.key, "values": list(row.values), "differs": row.differs}
            for row in state.compare.rows()
        ],
        "count": state.compare.count(),
        "limit": state.compare.limit,
    }


def _preferences_payload(state: ClientState) -> dict[str, Any]:
    prefs = state.preferences.get()
    return {
        **prefs,
        "sign": CURRENCY_SIGNS.get(prefs["currency"], ""),
        "currencies": list(SUPPORTED_CURRENCIES),
        "languages": list(SUPPORTED_LANGUAGES),
    }


def _quantity_from_request(default: int = 1) -> int:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = dict(request.form) if request.form else {}
    payload.setdefault("quantity", default)
    return QuantityModel(**payload).quantity


# ---------------------------------------------------------------------------
# Outcome mapping
# ---------------------------------------------------------------------------
_ERROR_STATUS: dict[type[StorefrontError], tuple[int, str]] = {
    ProductNotFound: (404, "not_found"),
    QuoteOnlyRejected: (409, "quote_only"),
    CompareCapacityExceeded: (409, "compare_full"),
    UnsupportedPreference: (400, "unsupported_preference"),
}


@app.errorhandler(StorefrontError)
def handle_storefront_error(exc: StorefrontError):
    status, code = 400, "storefront_error"
    for exc_type, mapped in _ERROR_STATUS.items():
        if isinstance(exc, exc_type):
            status, code = mapped
            break
    return jsonify({"error": str(exc), "code": code}), status


# ---------------------------------------------------------------------------
# Routes: Catalog
# ---------------------------------------------------------------------------
@app.route("/api/catalog", methods=["GET"])
def get_catalog():
    state = get_state()
    result = state.browse(request.query_string.decode("utf-8"))
    return jsonify(
        {
            "filters": result.state.as_dict(),
            "title": result.title,
            "count": result.count,
            "laptop_filters_active": result.laptop_filters_active,
            "brands": state.catalog.brands(),
            "products": [_product_payload(p, state) for p in result.products],
        }
    )


@app.route("/api/featured", methods=["GET"])
def get_featured():
    state = get_state()
    return jsonify([_product_payload(p, state) for p in state.catalog.featured()])


@app.route("/api/products/<product_id>", methods=["GET"])
def get_product(product_id: str):
    state = get_state()
    product = state.catalog.by_id(product_id)
    payload = _product_payload(product, state)
    payload["category_title"] = category_title(product.category.value)
    payload["in_cart"] = product.id in state.cart.get()
    payload["in_wishlist"] = state.wishlist.contains(product.id)
    payload["in_compare"] = state.compare.contains(product.id)
    return jsonify(payload)


@app.route("/api/query", methods=["POST"])
def compose_query():
    try:
        body = QueryPatchModel(**(request.get_json(force=True) or {}))
    except ValidationError as err:
        return jsonify({"error": err.errors(include_url=False)}), 400
    return jsonify({"query": query_codec.encode(body.patch, body.current)})


@app.route("/api/query/reset", methods=["POST"])
def reset_query():
    try:
        body = QueryResetModel(**(request.get_json(force=True) or {}))
    except ValidationError as err:
        return jsonify({"error": err.errors(include_url=False)}), 400
    return jsonify({"query": query_codec.reset(body.current)})


@app.route("/api/query/laptop", methods=["POST"])
def laptop_query():
    try:
        body = LaptopFilterModel(**(request.get_json(force=True) or {}))
    except ValidationError as err:
        return jsonify({"error": err.errors(include_url=False)}), 400
    return jsonify({"query": query_codec.patch_laptop_attribute(body.current, body.key, body.value)})


# ---------------------------------------------------------------------------
# Routes: Cart
# ---------------------------------------------------------------------------
@app.route("/api/cart", methods=["GET"])
def get_cart():
    return jsonify(_cart_payload(get_state()))


@app.route("/api/cart/<product_id>", methods=["POST"])
def cart_add(product_id: str):
    try:
        quantity = _quantity_from_request()
    except ValidationError as err:
        return jsonify({"error": err.errors(include_url=False)}), 400
    state = get_state()
    state.cart.add(product_id, quantity)
    return jsonify(_cart_payload(state)), 201


@app.route("/api/cart/<product_id>", methods=["PUT"])
def cart_set_quantity(product_id: str):
    try:
        quantity = _quantity_from_request()
    except ValidationError as err:
        return jsonify({"error": err.errors(include_url=False)}), 400
    state = get_state()
    state.cart.set_quantity(product_id, quantity)
    return jsonify(_cart_payload(state))


@app.route("/api/cart/<product_id>", methods=["DELETE"])
def cart_remove(product_id: str):
    state = get_state()
    state.cart.remove(product_id)
    return jsonify(_cart_payload(state))


@app.route("/api/cart/clear", methods=["POST"])
def cart_clear():
    state = get_state()
    state.cart.clear()
    return jsonify(_cart_payload(state))


# ---------------------------------------------------------------------------
# Routes: Wishlist / compare
# ---------------------------------------------------------------------------
@app.route("/api/wishlist", methods=["GET"])
def get_wishlist():
    return jsonify(_wishlist_payload(get_state()))


@app.route("/api/wishlist/<product_id>/toggle", methods=["POST"])
def wishlist_toggle(product_id: str):
    state = get_state()
    present = state.wishlist.toggle(product_id)
    return jsonify({"present": present, **_wishlist_payload(state)})


@app.route("/api/compare", methods=["GET"])
def get_compare():
    return jsonify(_compare_payload(get_state()))


@app.route("/api/compare/<product_id>/toggle", methods=["POST"])
def compare_toggle(product_id: str):
    state = get_state()
    present = state.compare.toggle(product_id)
    return jsonify({"present": present, **_compare_payload(state)})


# ---------------------------------------------------------------------------
# Routes: Preferences, badges, quote and one-click requests
# ---------------------------------------------------------------------------
@app.route("/api/preferences", methods=["GET", "PUT"])
def preferences():
    state = get_state()
    if request.method == "PUT":
        try:
            updates = PreferencesUpdateModel(**(request.get_json(force=True) or {}))
        except ValidationError as err:
            return jsonify({"error": err.errors(include_url=False)}), 400
        if updates.currency is not None:
            state.preferences.set_currency(updates.currency.upper())
        if updates.language is not None:
            state.preferences.set_language(updates.language.lower())
    return jsonify(_preferences_payload(state))


@app.route("/api/badges", methods=["GET"])
def badges():
    return jsonify(get_state().badges())


@app.route("/api/quote/<product_id>", methods=["POST"])
def request_quote(product_id: str):
    product = get_state().catalog.by_id(product_id)
    # No quote backend yet; the request is only acknowledged and logged.
    logger.info("Quote requested for %s (%s)", product.id, product.name)
    return jsonify({"status": "accepted", "product_id": product.id, "requires_quote": product.requires_quote}), 202


@app.route("/api/oneclick/<product_id>", methods=["POST"])
def request_one_click(product_id: str):
    product = get_state().catalog.by_id(product_id)
    logger.info("One-click order requested for %s (%s)", product.id, product.name)
    return jsonify({"status": "accepted", "product_id": product.id, "name": product.name}), 202


# ---------------------------------------------------------------------------
# Security headers
# ---------------------------------------------------------------------------
@app.after_request
def secure_headers(resp):
    resp.headers["X-Content-Type-Options"] = "nosniff"
    resp.headers["X-Frame-Options"] = "DENY"
    return resp


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    ssl_ctx = "adhoc" if CONFIG.force_tls else None
    app.run(host=CONFIG.host, port=CONFIG.port, ssl_context=ssl_ctx)
