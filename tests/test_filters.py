import pytest

from shopcore.catalog import Catalog
from shopcore.filters import apply, browse
from shopcore.models import FilterState, LaptopSpecFilter, SortMode
from shopcore.query import decode


def ids(products):
    return [p.id for p in products]


def test_default_order_surfaces_discounted_first(catalog):
    result = apply(catalog.all(), FilterState())
    assert ids(result) == [
        "per-mouse-x1",
        "lap-911x-4060",
        "med-ecg-12",
        "cos-laser-mini",
        "app-kettle",
        "per-kb-mech",
        "lap-g15-4070",
    ]


def test_popular_sort_two_laptops(make_product):
    two = Catalog.from_records(
        [
            make_product("a", price_base=649000, old_price_base=699000, availability="preorder"),
            make_product("b", price_base=899000),
        ]
    )
    assert [p.price_base for p in apply(two.all(), decode(""))] == [649000, 899000]


def test_laptop_spec_filter_exact_match(catalog):
    assert ids(apply(catalog.all(), decode("cat=laptops&gpu=RTX 4060"))) == ["lap-911x-4060"]
    assert apply(catalog.all(), decode("cat=laptops&gpu=RTX+5090")) == []


def test_laptop_spec_filter_restricts_to_laptops(catalog):
    assert ids(apply(catalog.all(), decode("ram=32GB"))) == ["lap-g15-4070"]
    assert ids(apply(catalog.all(), decode("cat=b2b&hz=165"))) == ["lap-911x-4060"]
    assert apply(catalog.all(), decode("cat=periphery&ram=32GB")) == []


def test_laptop_spec_filter_missing_key_fails(make_product):
    products = Catalog.from_records(
        [make_product("bare", category="laptops", specs={"gpu": "RTX 4060"})]
    ).all()
    assert apply(products, FilterState(laptop=LaptopSpecFilter(gpu="RTX 4060"))) != []
    assert apply(products, FilterState(laptop=LaptopSpecFilter(cpu="Core i7"))) == []


def test_b2b_matches_everything(catalog):
    assert len(apply(catalog.all(), decode("cat=b2b"))) == len(catalog)


def test_unknown_category_matches_nothing(catalog):
    assert apply(catalog.all(), decode("cat=toys")) == []


def test_free_text_searches_name_brand_and_tags(catalog):
    assert ids(apply(catalog.all(), decode("q=  thunderobot  &sort=price_asc"))) == [
        "lap-911x-4060",
        "lap-g15-4070",
    ]
    assert ids(apply(catalog.all(), decode("q=12000 dpi"))) == ["per-mouse-x1"]
    assert ids(apply(catalog.all(), decode("q=запрос кп&sort=new"))) == ["med-ecg-12", "cos-laser-mini"]
    # Substring across the separator between brand and first tag.
    assert ids(apply(catalog.all(), decode("q=forge клав"))) == ["per-kb-mech"]


def test_brand_is_case_insensitive(catalog):
    assert ids(apply(catalog.all(), decode("brand=logipro"))) == ["per-mouse-x1"]


def test_availability_filter(catalog):
    in_stock = apply(catalog.all(), decode("stock=in_stock&sort=price_asc"))
    assert ids(in_stock) == ["app-kettle", "per-mouse-x1", "lap-g15-4070"]


def test_price_bounds_are_inclusive_and_independent(catalog):
    assert ids(apply(catalog.all(), decode("min=649000&max=890000&sort=price_asc"))) == [
        "lap-911x-4060",
        "med-ecg-12",
    ]
    assert ids(apply(catalog.all(), decode("max=18990"))) == ["per-mouse-x1", "app-kettle"]
    assert ids(apply(catalog.all(), decode("min=abc&max=15990"))) == ["app-kettle"]


def test_price_sorts_are_stable(make_product):
    products = Catalog.from_records(
        [
            make_product("x1", price_base=500),
            make_product("x2", price_base=100),
            make_product("x3", price_base=500),
            make_product("x4", price_base=100),
        ]
    ).all()
    assert ids(apply(products, FilterState(sort=SortMode.PRICE_ASC))) == ["x2", "x4", "x1", "x3"]
    assert ids(apply(products, FilterState(sort=SortMode.PRICE_DESC))) == ["x1", "x3", "x2", "x4"]


def test_new_sort_orders_ids_descending(catalog):
    assert ids(apply(catalog.all(), decode("sort=new"))) == sorted(ids(catalog.all()), reverse=True)


@pytest.mark.parametrize(
    "raw",
    ["", "sort=price_asc", "q=rtx&sort=new", "cat=laptops&hz=240", "stock=preorder&min=20000"],
)
def test_apply_is_deterministic_and_pure(catalog, raw):
    products = list(catalog.all())
    snapshot = list(products)
    state = decode(raw)
    assert apply(products, state) == apply(products, state)
    assert products == snapshot


def test_independent_filters_commute(catalog):
    left = apply(apply(catalog.all(), decode("brand=THUNDEROBOT")), decode("stock=in_stock"))
    right = apply(apply(catalog.all(), decode("stock=in_stock")), decode("brand=THUNDEROBOT"))
    assert ids(left) == ids(right) == ["lap-g15-4070"]


def test_browse_builds_result(catalog):
    result = browse(catalog, "?cat=laptops&sort=price_desc")
    assert result.title == "Игровые ноутбуки"
    assert result.count == 2
    assert ids(result.products) == ["lap-g15-4070", "lap-911x-4060"]
    assert result.laptop_filters_active is True
    assert browse(catalog, "cat=medical").laptop_filters_active is False
