from storefront import app as flask_app


def test_catalog_default_listing(client):
    response = client.get("/api/catalog")
    assert response.status_code == 200
    payload = response.get_json()
    assert payload["title"] == "Каталог"
    assert payload["count"] == 7
    assert payload["filters"]["sort"] == "popular"
    assert [p["id"] for p in payload["products"]][:2] == ["per-mouse-x1", "lap-911x-4060"]
    assert "THUNDEROBOT" in payload["brands"]
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"


def test_catalog_laptop_filter(client):
    payload = client.get("/api/catalog?cat=laptops&gpu=RTX+4060").get_json()
    assert [p["id"] for p in payload["products"]] == ["lap-911x-4060"]
    assert payload["laptop_filters_active"] is True
    assert payload["filters"]["gpu"] == "RTX 4060"

    empty = client.get("/api/catalog?cat=laptops&gpu=RTX+5090")
    assert empty.status_code == 200
    assert empty.get_json()["products"] == []


def test_catalog_ignores_malformed_price(client):
    payload = client.get("/api/catalog?min=cheap&max=20000").get_json()
    assert payload["filters"]["min"] is None
    assert payload["filters"]["max"] == 20000
    assert {p["id"] for p in payload["products"]} == {"per-mouse-x1", "app-kettle"}


def test_catalog_prices_follow_currency(client):
    client.put("/api/preferences", json={"currency": "rub"})
    payload = client.get("/api/catalog?q=911x").get_json()
    product = payload["products"][0]
    assert product["price_base"] == 649000
    assert product["price"] == 129800
    assert product["old_price"] == 139800


def test_product_detail_and_not_found(client):
    response = client.get("/api/products/med-ecg-12")
    assert response.status_code == 200
    payload = response.get_json()
    assert payload["requires_quote"] is True
    assert payload["category_title"] == "Медицинское оборудование"
    assert payload["in_cart"] is False

    missing = client.get("/api/products/nope")
    assert missing.status_code == 404
    assert missing.get_json()["code"] == "not_found"


def test_featured(client):
    payload = client.get("/api/featured").get_json()
    assert [p["id"] for p in payload] == ["lap-911x-4060", "lap-g15-4070", "per-mouse-x1", "per-kb-mech"]


def test_query_composition(client):
    response = client.post(
        "/api/query",
        json={"current": "cat=laptops&utm=x", "patch": {"sort": "price_asc", "min": 100000, "utm": None}},
    )
    assert response.status_code == 200
    assert response.get_json()["query"] == "cat=laptops&sort=price_asc&min=100000"

    reset = client.post("/api/query/reset", json={"current": "q=a&cat=medical&sort=new"})
    assert reset.get_json()["query"] == "cat=medical"

    laptop = client.post("/api/query/laptop", json={"current": "", "key": "hz", "value": "240"})
    assert laptop.get_json()["query"] == "hz=240&cat=laptops"


def test_query_composition_validation(client):
    response = client.post("/api/query/laptop", json={"key": "os", "value": "Windows"})
    assert response.status_code == 400
    assert "error" in response.get_json()


def test_state_is_built_in_temporary_dir(client, configure_test_env):
    client.post("/api/cart/app-kettle", json={"quantity": 1})
    assert flask_app.get_state().backend.root == configure_test_env
    assert (configure_test_env / "jg_cart_v1.json").exists()
