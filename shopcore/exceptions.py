"""Exception types raised by the storefront state engine."""

from __future__ import annotations


class StorefrontError(Exception):
    """Base exception for all storefront outcomes reported to callers."""


class StoreError(RuntimeError):
    """Raised when a persistence operation fails."""


class ProductNotFound(StorefrontError, KeyError):
    """Raised when a product identifier is not in the catalog."""

    def __init__(self, product_id: str) -> None:
        super().__init__(product_id)
        self.product_id = product_id

    def __str__(self) -> str:
        return f"Product not found: {self.product_id}"


class QuoteOnlyRejected(StorefrontError):
    """Raised when a quote-only product is added to the cart."""

    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product {product_id} is available by quote request only")
        self.product_id = product_id


class CompareCapacityExceeded(StorefrontError):
    """Raised when the compare set is already full."""

    def __init__(self, product_id: str, limit: int) -> None:
        super().__init__(f"Cannot compare more than {limit} products")
        self.product_id = product_id
        self.limit = limit


class UnsupportedPreference(StorefrontError, ValueError):
    """Raised when a currency or language code is not supported."""

    def __init__(self, name: str, value: str, allowed: tuple[str, ...]) -> None:
        super().__init__(f"Unsupported {name} '{value}': expected one of {', '.join(allowed)}")
        self.name = name
        self.value = value
        self.allowed = allowed
