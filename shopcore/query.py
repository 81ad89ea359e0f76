"""Mapping between the catalog URL query string and ``FilterState``.

Reading always decodes the whole query string. Writing is a patch merge: the
current query string is kept as-is except for the keys named in the patch,
so incremental UI actions compose into one shareable URL.
"""

from __future__ import annotations

import math
import re
from typing import Any, Mapping, Optional
from urllib.parse import parse_qsl, urlencode

from .models import LAPTOP_FILTER_KEYS, Category, FilterState, LaptopSpecFilter, SortMode

QUERY_KEYS = ("q", "cat", "brand", "stock", "sort", "min", "max", *LAPTOP_FILTER_KEYS)

_NUMBER = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


def _pairs(raw: str) -> list[tuple[str, str]]:
    raw = (raw or "").strip()
    if raw.startswith("?"):
        raw = raw[1:]
    return parse_qsl(raw, keep_blank_values=True)


def parse_number(text: str) -> Optional[float]:
    """Parse a decimal number; anything else (including inf/nan) is ``None``."""

    text = (text or "").strip()
    if not _NUMBER.match(text):
        return None
    value = float(text)
    if not math.isfinite(value):
        return None
    return int(value) if value.is_integer() else value


def decode(raw: str) -> FilterState:
    params: dict[str, str] = {}
    for key, value in _pairs(raw):
        params.setdefault(key, value)

    try:
        sort = SortMode(params.get("sort") or SortMode.POPULAR)
    except ValueError:
        sort = SortMode.POPULAR

    return FilterState(
        query=params.get("q", ""),
        category=params.get("cat", ""),
        brand=params.get("brand", ""),
        availability=params.get("stock", ""),
        sort=sort,
        price_min=parse_number(params.get("min", "")),
        price_max=parse_number(params.get("max", "")),
        laptop=LaptopSpecFilter(**{key: params.get(key, "") for key in LAPTOP_FILTER_KEYS}),
    )


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, float):
        return math.isnan(value)
    return False


def _format(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _set(pairs: list[tuple[str, str]], key: str, value: str) -> list[tuple[str, str]]:
    updated: list[tuple[str, str]] = []
    placed = False
    for name, current in pairs:
        if name != key:
            updated.append((name, current))
        elif not placed:
            updated.append((name, value))
            placed = True
    if not placed:
        updated.append((key, value))
    return updated


def encode(patch: Mapping[str, Any], current: str = "") -> str:
    """Overlay ``patch`` on ``current`` and return the new query string.

    Blank values (``None``, ``""``, NaN) delete their key; parameters the
    patch does not mention are preserved in their original order.
    """

    pairs = _pairs(current)
    for key, value in patch.items():
        if _is_blank(value):
            pairs = [(name, v) for name, v in pairs if name != key]
        else:
            pairs = _set(pairs, key, _format(value))
    return urlencode(pairs)


def reset(current: str) -> str:
    """Clear every filter except the category."""

    category = decode(current).category
    return encode({"cat": category}) if category else ""


def patch_laptop_attribute(current: str, key: str, value: str) -> str:
    """Set one laptop spec filter; any active spec filter pins ``cat=laptops``."""

    if key not in LAPTOP_FILTER_KEYS:
        raise ValueError(f"Unknown laptop filter: {key}")
    updated = encode({key: value}, current)
    if decode(updated).laptop.is_active:
        updated = encode({"cat": Category.LAPTOPS.value}, updated)
    return updated
