"""Catalog entities and the filter state derived from the URL."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Category(StrEnum):
    LAPTOPS = "laptops"
    PERIPHERY = "periphery"
    APPLIANCES = "appliances"
    COSMETIC = "cosmo"
    MEDICAL = "medical"


# UI grouping for business buyers; matches every product.
B2B_CATEGORY = "b2b"


class Availability(StrEnum):
    IN_STOCK = "in_stock"
    PREORDER = "preorder"


class SortMode(StrEnum):
    POPULAR = "popular"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    NEW = "new"


LAPTOP_SPEC_KEYS = ("cpu", "gpu", "ram", "ssd", "screen", "hz", "matrix", "os")
LAPTOP_FILTER_KEYS = ("cpu", "gpu", "ram", "ssd", "screen", "hz")
DEFAULT_PREORDER_DAYS = 8


class Product(BaseModel):
    """Immutable catalog entry. Prices are whole units of the base currency."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(..., min_length=1)
    category: Category
    brand: str
    name: str
    price_base: int = Field(..., ge=0)
    old_price_base: Optional[int] = Field(None, ge=0)
    availability: Availability
    preorder_days: int = Field(DEFAULT_PREORDER_DAYS, ge=0)
    tags: tuple[str, ...] = ()
    specs: dict[str, str] = Field(default_factory=dict)
    requires_quote: bool = False
    notice_text: Optional[str] = None
    image: Optional[str] = None

    @property
    def on_discount(self) -> bool:
        return bool(self.old_price_base)

    @property
    def is_laptop(self) -> bool:
        return self.category is Category.LAPTOPS

    def spec(self, key: str) -> str:
        return self.specs.get(key) or ""


@dataclass(frozen=True)
class LaptopSpecFilter:
    """Exact-match constraints on laptop specs; empty strings are unset."""

    cpu: str = ""
    gpu: str = ""
    ram: str = ""
    ssd: str = ""
    screen: str = ""
    hz: str = ""

    def active(self) -> dict[str, str]:
        return {key: getattr(self, key) for key in LAPTOP_FILTER_KEYS if getattr(self, key)}

    @property
    def is_active(self) -> bool:
        return bool(self.active())


@dataclass(frozen=True)
class FilterState:
    query: str = ""
    category: str = ""
    brand: str = ""
    availability: str = ""
    sort: SortMode = SortMode.POPULAR
    price_min: Optional[float] = None
    price_max: Optional[float] = None
    laptop: LaptopSpecFilter = field(default_factory=LaptopSpecFilter)

    def as_dict(self) -> dict:
        return {
            "q": self.query,
            "cat": self.category,
            "brand": self.brand,
            "stock": self.availability,
            "sort": self.sort.value,
            "min": self.price_min,
            "max": self.price_max,
            **{key: getattr(self.laptop, key) for key in LAPTOP_FILTER_KEYS},
        }
