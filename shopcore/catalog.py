"""Read-only product catalog."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Iterator, Optional

from pydantic import TypeAdapter

from .exceptions import ProductNotFound
from .models import Product
from .seed import CATALOG_TITLE, CATEGORY_TITLES, PRODUCT_RECORDS

_PRODUCT_LIST = TypeAdapter(list[Product])


class Catalog:
    """Products in declaration order, indexed by id.

    The product set is fixed when the catalog is built; nothing here mutates
    it afterwards.
    """

    def __init__(self, products: Iterable[Product]):
        self._products = tuple(products)
        self._index: dict[str, Product] = {}
        for product in self._products:
            if product.id in self._index:
                raise ValueError(f"Duplicate product id: {product.id}")
            self._index[product.id] = product

    @classmethod
    def from_records(cls, records: Iterable[dict]) -> "Catalog":
        return cls(_PRODUCT_LIST.validate_python(list(records)))

    @classmethod
    def from_json(cls, path: Path | str) -> "Catalog":
        """Load a JSON array of product records from ``path``."""

        raw = Path(path).read_text(encoding="utf-8")
        return cls(_PRODUCT_LIST.validate_python(json.loads(raw)))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def all(self) -> tuple[Product, ...]:
        return self._products

    def get(self, product_id: str) -> Optional[Product]:
        return self._index.get(str(product_id))

    def by_id(self, product_id: str) -> Product:
        product = self.get(product_id)
        if product is None:
            raise ProductNotFound(str(product_id))
        return product

    def brands(self) -> list[str]:
        return sorted({product.brand for product in self._products})

    def featured(self, limit: int = 4) -> tuple[Product, ...]:
        return self._products[: max(0, limit)]

    def __contains__(self, product_id: object) -> bool:
        return isinstance(product_id, str) and product_id in self._index

    def __iter__(self) -> Iterator[Product]:
        return iter(self._products)

    def __len__(self) -> int:
        return len(self._products)


def default_catalog() -> Catalog:
    return Catalog.from_records(PRODUCT_RECORDS)


def category_title(value: str) -> str:
    if not value:
        return CATALOG_TITLE
    return CATEGORY_TITLES.get(value, CATALOG_TITLE)
