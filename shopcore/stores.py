"""Cart, wishlist, compare and preference stores.

Each store owns one or more keys in a ``KeyValueStore`` and validates what it
reads back with pydantic; anything that does not match the expected shape is
treated as missing and the store falls back to its empty default. Every
mutation writes the full collection and then emits a single ``StoreChange``
to the store's subscribers.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Annotated, Any, Callable

from pydantic import AfterValidator, Field, StrictInt, StrictStr, TypeAdapter

from .catalog import Catalog
from .currency import BASE_CURRENCY, SUPPORTED_CURRENCIES
from .exceptions import (
    CompareCapacityExceeded,
    ProductNotFound,
    QuoteOnlyRejected,
    UnsupportedPreference,
)
from .models import Product
from .storage import KeyValueStore

MIN_QUANTITY = 1
MAX_QUANTITY = 99
COMPARE_LIMIT = 4
SUPPORTED_LANGUAGES: tuple[str, ...] = ("ru", "kz", "en")
DEFAULT_LANGUAGE = "ru"
MISSING_SPEC = "—"


def _unique_ids(ids: list[str]) -> list[str]:
    if len(set(ids)) != len(ids):
        raise ValueError("duplicate product ids")
    return ids


_CART = TypeAdapter(dict[StrictStr, Annotated[StrictInt, Field(ge=MIN_QUANTITY, le=MAX_QUANTITY)]])
_WISHLIST = TypeAdapter(Annotated[list[StrictStr], AfterValidator(_unique_ids)])
_COMPARE = TypeAdapter(
    Annotated[list[StrictStr], Field(max_length=COMPARE_LIMIT), AfterValidator(_unique_ids)]
)
_CODE = TypeAdapter(StrictStr)


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


@dataclass(frozen=True)
class StoreKeys:
    """Versioned logical key names; a new shape gets a new version suffix."""

    prefix: str = "jg_"

    @property
    def cart(self) -> str:
        return f"{self.prefix}cart_v1"

    @property
    def wishlist(self) -> str:
        return f"{self.prefix}wishlist_v1"

    @property
    def compare(self) -> str:
        return f"{self.prefix}compare_v1"

    @property
    def currency(self) -> str:
        return f"{self.prefix}currency_v1"

    @property
    def language(self) -> str:
        return f"{self.prefix}lang_v1"


@dataclass(frozen=True)
class StoreChange:
    store: str
    value: Any


Listener = Callable[[StoreChange], None]


class ObservableStore:
    name = "store"

    def __init__(self, backend: KeyValueStore, catalog: Catalog):
        self._backend = backend
        self._catalog = catalog
        self._listeners: list[Listener] = []
        # Held across read, compute, write and emit of one mutation.
        self._lock = threading.RLock()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unregisters it."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, value: Any) -> None:
        change = StoreChange(self.name, value)
        for listener in list(self._listeners):
            listener(change)


# ----------------------------------------------------------------------
# Cart
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class CartLine:
    product: Product
    quantity: int

    @property
    def subtotal(self) -> int:
        return self.product.price_base * self.quantity


class CartStore(ObservableStore):
    name = "cart"

    def __init__(self, backend: KeyValueStore, catalog: Catalog, key: str):
        super().__init__(backend, catalog)
        self.key = key

    def get(self) -> dict[str, int]:
        return self._backend.read(self.key, {}, _CART.validate_python)

    def _commit(self, cart: dict[str, int]) -> dict[str, int]:
        self._backend.write(self.key, cart)
        self._emit(dict(cart))
        return cart

    def _purchasable(self, product_id: str) -> Product:
        product = self._catalog.by_id(product_id)
        if product.requires_quote:
            raise QuoteOnlyRejected(product.id)
        return product

    def add(self, product_id: str, qty: int = 1) -> dict[str, int]:
        product = self._purchasable(product_id)
        with self._lock:
            cart = self.get()
            cart[product.id] = clamp(cart.get(product.id, 0) + int(qty), MIN_QUANTITY, MAX_QUANTITY)
            return self._commit(cart)

    def set_quantity(self, product_id: str, qty: int) -> dict[str, int]:
        qty = int(qty)
        with self._lock:
            cart = self.get()
            if qty <= 0:
                if product_id not in cart and product_id not in self._catalog:
                    raise ProductNotFound(product_id)
                cart.pop(product_id, None)
                return self._commit(cart)
            product = self._purchasable(product_id)
            cart[product.id] = clamp(qty, MIN_QUANTITY, MAX_QUANTITY)
            return self._commit(cart)

    def increment(self, product_id: str) -> dict[str, int]:
        with self._lock:
            return self.set_quantity(product_id, self.get().get(product_id, 1) + 1)

    def decrement(self, product_id: str) -> dict[str, int]:
        with self._lock:
            return self.set_quantity(product_id, self.get().get(product_id, 1) - 1)

    def remove(self, product_id: str) -> dict[str, int]:
        return self.set_quantity(product_id, 0)

    def clear(self) -> dict[str, int]:
        with self._lock:
            return self._commit({})

    def lines(self) -> list[CartLine]:
        lines: list[CartLine] = []
        for product_id, quantity in self.get().items():
            product = self._catalog.get(product_id)
            if product is None:
                continue
            lines.append(CartLine(product, quantity))
        return lines

    def total(self) -> int:
        return sum(line.subtotal for line in self.lines())

    def count(self) -> int:
        return sum(self.get().values())


# ----------------------------------------------------------------------
# Wishlist / compare
# ----------------------------------------------------------------------
class _ProductListStore(ObservableStore):
    adapter: TypeAdapter = _WISHLIST

    def __init__(self, backend: KeyValueStore, catalog: Catalog, key: str):
        super().__init__(backend, catalog)
        self.key = key

    def get(self) -> list[str]:
        return self._backend.read(self.key, [], self.adapter.validate_python)

    def _commit(self, ids: list[str]) -> list[str]:
        self._backend.write(self.key, ids)
        self._emit(list(ids))
        return ids

    def _before_append(self, ids: list[str], product_id: str) -> None:
        """Hook for subclasses to veto an insert."""

    def toggle(self, product_id: str) -> bool:
        """Remove ``product_id`` if present, append it otherwise.

        Returns whether the id is in the collection after the call.
        """

        with self._lock:
            ids = self.get()
            if product_id in ids:
                ids.remove(product_id)
                self._commit(ids)
                return False
            self._catalog.by_id(product_id)
            self._before_append(ids, product_id)
            ids.append(product_id)
            self._commit(ids)
            return True

    def contains(self, product_id: str) -> bool:
        return product_id in self.get()

    def items(self) -> list[Product]:
        resolved = (self._catalog.get(product_id) for product_id in self.get())
        return [product for product in resolved if product is not None]

    def count(self) -> int:
        return len(self.get())

    def clear(self) -> list[str]:
        with self._lock:
            return self._commit([])


class WishlistStore(_ProductListStore):
    name = "wishlist"


@dataclass(frozen=True)
class CompareRow:
    key: str
    values: tuple[str, ...]

    @property
    def differs(self) -> bool:
        return len(set(self.values)) > 1


class CompareStore(_ProductListStore):
    name = "compare"
    adapter = _COMPARE
    limit = COMPARE_LIMIT

    def _before_append(self, ids: list[str], product_id: str) -> None:
        if len(ids) >= self.limit:
            raise CompareCapacityExceeded(product_id, self.limit)

    def rows(self) -> list[CompareRow]:
        """Side-by-side spec table for the compared products."""

        products = self.items()
        keys: set[str] = set()
        for product in products:
            keys.update(product.specs)
            if not product.specs:
                keys.add("type")
        return [
            CompareRow(
                key,
                tuple(p.specs[key] if key in p.specs else MISSING_SPEC for p in products),
            )
            for key in sorted(keys)
        ]


# ----------------------------------------------------------------------
# Preferences
# ----------------------------------------------------------------------
class PreferenceStore(ObservableStore):
    name = "preferences"

    def __init__(
        self,
        backend: KeyValueStore,
        catalog: Catalog,
        keys: StoreKeys,
        *,
        default_currency: str = BASE_CURRENCY,
        default_language: str = DEFAULT_LANGUAGE,
    ):
        super().__init__(backend, catalog)
        self._keys = keys
        self.default_currency = default_currency
        self.default_language = default_language

    @staticmethod
    def _allowed(allowed: tuple[str, ...]) -> Callable[[Any], str]:
        def validate(raw: Any) -> str:
            code = _CODE.validate_python(raw)
            if code not in allowed:
                raise ValueError(f"unsupported code {code!r}")
            return code

        return validate

    @property
    def currency(self) -> str:
        return self._backend.read(
            self._keys.currency, self.default_currency, self._allowed(SUPPORTED_CURRENCIES)
        )

    @property
    def language(self) -> str:
        return self._backend.read(
            self._keys.language, self.default_language, self._allowed(SUPPORTED_LANGUAGES)
        )

    def get(self) -> dict[str, str]:
        return {"currency": self.currency, "language": self.language}

    def set_currency(self, code: str) -> str:
        if code not in SUPPORTED_CURRENCIES:
            raise UnsupportedPreference("currency", code, SUPPORTED_CURRENCIES)
        with self._lock:
            self._backend.write(self._keys.currency, code)
            self._emit(self.get())
        return code

    def set_language(self, code: str) -> str:
        if code not in SUPPORTED_LANGUAGES:
            raise UnsupportedPreference("language", code, SUPPORTED_LANGUAGES)
        with self._lock:
            self._backend.write(self._keys.language, code)
            self._emit(self.get())
        return code
