"""Apply a ``FilterState`` to a product sequence.

The engine is a fixed, ordered list of stages. Each stage narrows the working
list (or returns it untouched when its field is empty) and the sort runs
last. Nothing here performs I/O or mutates its inputs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

from .catalog import Catalog, category_title
from .models import B2B_CATEGORY, Category, FilterState, Product, SortMode
from . import query as query_codec

Stage = Callable[[list[Product], FilterState], list[Product]]


def _haystack(product: Product) -> str:
    return f"{product.name} {product.brand} {' '.join(product.tags)} ".lower()


def by_category(products: list[Product], state: FilterState) -> list[Product]:
    if not state.category or state.category == B2B_CATEGORY:
        return products
    return [p for p in products if p.category.value == state.category]


def by_text(products: list[Product], state: FilterState) -> list[Product]:
    needle = state.query.strip().lower()
    if not needle:
        return products
    return [p for p in products if needle in _haystack(p)]


def by_brand(products: list[Product], state: FilterState) -> list[Product]:
    if not state.brand:
        return products
    brand = state.brand.lower()
    return [p for p in products if p.brand.lower() == brand]


def by_availability(products: list[Product], state: FilterState) -> list[Product]:
    if not state.availability:
        return products
    return [p for p in products if p.availability.value == state.availability]


def by_price(products: list[Product], state: FilterState) -> list[Product]:
    if state.price_min is not None:
        products = [p for p in products if p.price_base >= state.price_min]
    if state.price_max is not None:
        products = [p for p in products if p.price_base <= state.price_max]
    return products


def by_laptop_specs(products: list[Product], state: FilterState) -> list[Product]:
    wanted = state.laptop.active()
    if not wanted:
        return products
    # Spec filters apply to laptops only.
    products = [p for p in products if p.category is Category.LAPTOPS]
    for key, value in wanted.items():
        products = [p for p in products if p.spec(key) == value]
    return products


def sort_products(products: list[Product], state: FilterState) -> list[Product]:
    if state.sort is SortMode.PRICE_ASC:
        return sorted(products, key=lambda p: p.price_base)
    if state.sort is SortMode.PRICE_DESC:
        return sorted(products, key=lambda p: p.price_base, reverse=True)
    if state.sort is SortMode.NEW:
        # No creation date exists; ids in reverse order stand in for recency.
        return sorted(products, key=lambda p: p.id, reverse=True)
    partitioned = sorted(products, key=lambda p: 1 if p.on_discount else 0)
    partitioned.reverse()
    return partitioned


STAGES: tuple[Stage, ...] = (
    by_category,
    by_text,
    by_brand,
    by_availability,
    by_price,
    by_laptop_specs,
    sort_products,
)


def apply(products: Iterable[Product], state: FilterState) -> list[Product]:
    working = list(products)
    for stage in STAGES:
        working = stage(working, state)
    return working


@dataclass(frozen=True)
class FilterResult:
    state: FilterState
    products: Sequence[Product]
    title: str

    @property
    def count(self) -> int:
        return len(self.products)

    @property
    def laptop_filters_active(self) -> bool:
        return self.state.category == Category.LAPTOPS.value or self.state.laptop.is_active


def browse(catalog: Catalog, raw_query: str) -> FilterResult:
    """Decode ``raw_query`` and run it against ``catalog``."""

    state = query_codec.decode(raw_query)
    return FilterResult(
        state=state,
        products=tuple(apply(catalog.all(), state)),
        title=category_title(state.category),
    )
