"""Client state engine for the storefront."""

from .catalog import Catalog, default_catalog  # noqa: F401
from .exceptions import (  # noqa: F401
    CompareCapacityExceeded,
    ProductNotFound,
    QuoteOnlyRejected,
    StoreError,
    StorefrontError,
    UnsupportedPreference,
)
from .state import ClientState
from .storage import EncryptedKeyValueStore, KeyValueStore

__all__ = [
    "Catalog",
    "default_catalog",
    "ClientState",
    "KeyValueStore",
    "EncryptedKeyValueStore",
    "StorefrontError",
    "StoreError",
    "ProductNotFound",
    "QuoteOnlyRejected",
    "CompareCapacityExceeded",
    "UnsupportedPreference",
]
