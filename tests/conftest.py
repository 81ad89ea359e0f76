import pytest

from shopcore.catalog import Catalog, default_catalog
from shopcore.state import ClientState
from shopcore.storage import KeyValueStore


@pytest.fixture
def catalog() -> Catalog:
    return default_catalog()


@pytest.fixture
def backend(tmp_path) -> KeyValueStore:
    return KeyValueStore(tmp_path / "store")


@pytest.fixture
def state(catalog, backend) -> ClientState:
    return ClientState(catalog=catalog, backend=backend)


@pytest.fixture
def make_product():
    def factory(product_id: str, **overrides) -> dict:
        record = {
            "id": product_id,
            "category": "periphery",
            "brand": "Acme",
            "name": product_id,
            "price_base": 1000,
            "availability": "in_stock",
        }
        record.update(overrides)
        return record

    return factory
