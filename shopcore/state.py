"""Wire the catalog, persistent stores and engine into one client state."""

from __future__ import annotations

from dataclasses import dataclass, field

from . import currency
from .catalog import Catalog, default_catalog
from .config import StorefrontConfig
from .filters import FilterResult, browse
from .storage import EncryptedKeyValueStore, KeyValueStore
from .stores import (
    DEFAULT_LANGUAGE,
    CartStore,
    CompareStore,
    PreferenceStore,
    StoreKeys,
    WishlistStore,
)


@dataclass
class ClientState:
    """Everything a renderer needs, built from explicit dependencies."""

    catalog: Catalog
    backend: KeyValueStore
    keys: StoreKeys = field(default_factory=StoreKeys)
    default_currency: str = currency.BASE_CURRENCY
    default_language: str = DEFAULT_LANGUAGE
    cart: CartStore = field(init=False)
    wishlist: WishlistStore = field(init=False)
    compare: CompareStore = field(init=False)
    preferences: PreferenceStore = field(init=False)

    def __post_init__(self) -> None:
        self.cart = CartStore(self.backend, self.catalog, self.keys.cart)
        self.wishlist = WishlistStore(self.backend, self.catalog, self.keys.wishlist)
        self.compare = CompareStore(self.backend, self.catalog, self.keys.compare)
        self.preferences = PreferenceStore(
            self.backend,
            self.catalog,
            self.keys,
            default_currency=self.default_currency,
            default_language=self.default_language,
        )

    @classmethod
    def from_config(cls, config: StorefrontConfig) -> "ClientState":
        if config.encrypt_store:
            backend: KeyValueStore = EncryptedKeyValueStore(config.data_dir, config.store_secret)
        else:
            backend = KeyValueStore(config.data_dir)
        catalog = Catalog.from_json(config.catalog_file) if config.catalog_file else default_catalog()
        return cls(
            catalog=catalog,
            backend=backend,
            keys=StoreKeys(config.key_prefix),
            default_currency=config.default_currency,
            default_language=config.default_language,
        )

    def browse(self, raw_query: str) -> FilterResult:
        return browse(self.catalog, raw_query)

    def display_price(self, amount_base: int) -> int:
        return currency.convert(amount_base, self.preferences.currency)

    def badges(self) -> dict[str, int]:
        return {
            "cart": self.cart.count(),
            "wishlist": self.wishlist.count(),
            "compare": self.compare.count(),
        }
