import json

import pytest
from pydantic import ValidationError

from shopcore.catalog import Catalog, category_title
from shopcore.exceptions import ProductNotFound
from shopcore.models import Availability, Category


def test_default_catalog_keeps_declaration_order(catalog):
    ids = [p.id for p in catalog.all()]
    assert ids == [
        "lap-911x-4060",
        "lap-g15-4070",
        "per-mouse-x1",
        "per-kb-mech",
        "app-kettle",
        "cos-laser-mini",
        "med-ecg-12",
    ]
    assert len(catalog) == 7


def test_by_id_and_get(catalog):
    ecg = catalog.by_id("med-ecg-12")
    assert ecg.requires_quote is True
    assert ecg.category is Category.MEDICAL
    assert ecg.availability is Availability.PREORDER
    assert ecg.preorder_days == 8
    assert "med-ecg-12" in catalog
    assert catalog.get("missing") is None
    with pytest.raises(ProductNotFound) as excinfo:
        catalog.by_id("missing")
    assert excinfo.value.product_id == "missing"


def test_products_are_immutable(catalog):
    product = catalog.by_id("app-kettle")
    with pytest.raises(ValidationError):
        product.price_base = 1


def test_brands_and_featured(catalog):
    assert catalog.brands() == ["DermaPro", "HomeLite", "KeyForge", "LogiPro", "MedLine", "THUNDEROBOT"]
    assert [p.id for p in catalog.featured()] == [
        "lap-911x-4060",
        "lap-g15-4070",
        "per-mouse-x1",
        "per-kb-mech",
    ]


def test_duplicate_ids_rejected(make_product):
    record = make_product("dup")
    with pytest.raises(ValueError):
        Catalog.from_records([record, dict(record)])


def test_from_json(tmp_path):
    path = tmp_path / "products.json"
    path.write_text(
        json.dumps(
            [
                {
                    "id": "p1",
                    "category": "appliances",
                    "brand": "HomeLite",
                    "name": "Desk Lamp",
                    "price_base": 3950,
                    "availability": "in_stock",
                    "tags": ["Warm light"],
                }
            ]
        ),
        encoding="utf-8",
    )
    loaded = Catalog.from_json(path)
    assert loaded.by_id("p1").tags == ("Warm light",)


def test_category_titles():
    assert category_title("laptops") == "Игровые ноутбуки"
    assert category_title("b2b") == "Юр. лица"
    assert category_title("") == "Каталог"
    assert category_title("unknown") == "Каталог"
