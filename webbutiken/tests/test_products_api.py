from __future__ import annotations


def _count(db, table):
    with db.connect() as conn:
        return conn.execute(f"SELECT COUNT(1) AS c FROM {table}").fetchone()["c"]


# ---------------- listing ----------------

def test_list_defaults(client, seeded):
    r = client.get("/products")
    assert r.status_code == 200
    data = r.json()
    assert data["page"] == 1
    assert data["limit"] == 10
    assert data["totalResults"] == 5
    assert [p["product_id"] for p in data["products"]] == [1, 2, 3, 4, 5]
    first = data["products"][0]
    assert first["manufacturers_name"] == "Acme"
    assert first["category_name"] == "Tools"


def test_list_price_bounds(client, seeded):
    r = client.get("/products", params={"minPrice": 75, "maxPrice": 250})
    assert r.status_code == 200
    prices = [p["price"] for p in r.json()["products"]]
    assert sorted(prices) == [75.0, 100.0, 250.0]
    assert r.json()["totalResults"] == 3

    # only a lower bound: no upper constraint
    r = client.get("/products", params={"minPrice": 200})
    assert sorted(p["price"] for p in r.json()["products"]) == [250.0, 400.0]

    r = client.get("/products", params={"maxPrice": 60})
    assert [p["name"] for p in r.json()["products"]] == ["Globex Hose"]


def test_list_sorting(client, seeded):
    r = client.get("/products", params={"sort": "price_desc"})
    assert [p["price"] for p in r.json()["products"]] == [400.0, 250.0, 100.0, 75.0, 50.0]

    r = client.get("/products", params={"sort": "name_asc"})
    names = [p["name"] for p in r.json()["products"]]
    assert names == sorted(names)


def test_list_unknown_sort_is_ignored(client, seeded):
    r = client.get("/products", params={"sort": "price; DROP TABLE products"})
    assert r.status_code == 200
    assert r.json()["totalResults"] == 5
    assert _count(seeded, "products") == 5


def test_list_pagination(client, seeded):
    r = client.get("/products", params={"page": 2, "limit": 2})
    assert r.status_code == 200
    data = r.json()
    assert data["page"] == 2 and data["limit"] == 2
    assert data["totalResults"] == 5
    assert [p["product_id"] for p in data["products"]] == [3, 4]

    r = client.get("/products", params={"page": 3, "limit": 2, "sort": "price_asc"})
    assert [p["price"] for p in r.json()["products"]] == [400.0]


def test_list_empty_page_is_404(client, seeded):
    r = client.get("/products", params={"page": 4, "limit": 2})
    assert r.status_code == 404
    assert "error" in r.json()

    r = client.get("/products", params={"minPrice": 1000})
    assert r.status_code == 404


def test_list_rejects_bad_paging(client, seeded):
    assert client.get("/products", params={"page": 0}).status_code == 400
    assert client.get("/products", params={"limit": "ten"}).status_code == 400


# ---------------- search / lookups ----------------

def test_search_requires_a_term(client, seeded):
    r = client.get("/products/search")
    assert r.status_code == 400
    assert r.json() == {"error": "Search term is required"}


def test_search_by_name_is_case_insensitive(client, seeded):
    r = client.get("/products/search", params={"name": "HAM"})
    assert r.status_code == 200
    items = r.json()
    assert len(items) == 1
    assert items[0]["name"] == "Acme Hammer"
    assert items[0]["manufacturers_name"] == "Acme"
    assert items[0]["stock_quantity"] == 5


def test_search_by_category_and_name(client, seeded):
    r = client.get("/products/search", params={"category": "gard"})
    assert {p["name"] for p in r.json()} == {"Globex Hose", "Globex Rake"}

    r = client.get("/products/search", params={"category": "tools", "name": "saw"})
    assert [p["name"] for p in r.json()] == ["Acme Saw"]


def test_search_no_match_is_404(client, seeded):
    r = client.get("/products/search", params={"name": "saw", "category": "garden"})
    assert r.status_code == 404


def test_products_by_category(client, seeded):
    r = client.get("/products/category/2")
    assert r.status_code == 200
    assert r.json() == [
        {"category_name": "Garden", "product_name": "Globex Hose"},
        {"category_name": "Garden", "product_name": "Globex Rake"},
    ]
    assert client.get("/products/category/3").json() == []
    assert client.get("/products/category/99").status_code == 404


def test_product_stats(client, seeded):
    r = client.get("/products/stats")
    assert r.status_code == 200
    stats = {s["category_name"]: s for s in r.json()}
    assert stats["Tools"]["total_products"] == 3
    assert stats["Tools"]["avg_price"] == 250.0
    assert stats["Garden"]["total_products"] == 2
    assert stats["Garden"]["avg_price"] == 62.5
    assert stats["Empty"]["total_products"] == 0
    assert stats["Empty"]["avg_price"] is None


def test_get_product(client, seeded):
    r = client.get("/products/3")
    assert r.status_code == 200
    assert r.json()["name"] == "Globex Hose"
    r = client.get("/products/42")
    assert r.status_code == 404
    assert r.json() == {"error": "Product not found"}


# ---------------- create ----------------

NEW_PRODUCT = {
    "manufacturer_id": 2,
    "name": "Globex Shovel",
    "description": "",
    "price": 120.5,
    "stock_quantity": 7,
}


def test_create_product(client, seeded):
    r = client.post("/products", json=NEW_PRODUCT)
    assert r.status_code == 201
    body = r.json()
    assert body["id"] == 6
    assert body["name"] == "Globex Shovel"
    assert body["description"] == ""

    stored = client.get("/products/6").json()
    assert stored["price"] == 120.5
    assert stored["stock_quantity"] == 7


def test_create_product_description_optional(client, seeded):
    payload = {k: v for k, v in NEW_PRODUCT.items() if k != "description"}
    r = client.post("/products", json=payload)
    assert r.status_code == 201
    assert r.json()["description"] == ""


def test_create_rejects_non_positive_price(client, seeded):
    for price in (0, -5):
        r = client.post("/products", json={**NEW_PRODUCT, "price": price})
        assert r.status_code == 400
        assert "price" in r.json()["error"]
    assert _count(seeded, "products") == 5


def test_create_rejects_bad_bodies(client, seeded):
    bad = [
        {k: v for k, v in NEW_PRODUCT.items() if k != "name"},
        {**NEW_PRODUCT, "name": ""},
        {**NEW_PRODUCT, "stock_quantity": 1.5},
        {**NEW_PRODUCT, "stock_quantity": -1},
        {**NEW_PRODUCT, "manufacturer_id": "acme"},
        {**NEW_PRODUCT, "color": "red"},
    ]
    for payload in bad:
        r = client.post("/products", json=payload)
        assert r.status_code == 400, payload
        assert isinstance(r.json()["error"], str)
    assert _count(seeded, "products") == 5


def test_create_with_unknown_manufacturer(client, seeded):
    r = client.post("/products", json={**NEW_PRODUCT, "manufacturer_id": 99})
    assert r.status_code == 400
    assert _count(seeded, "products") == 5


# ---------------- update ----------------

def test_update_touches_only_supplied_fields(client, seeded):
    before = client.get("/products/1").json()
    r = client.put("/products/1", json={"price": 110.0})
    assert r.status_code == 200
    after = r.json()
    assert after["price"] == 110.0
    for k in ("manufacturer_id", "name", "description", "stock_quantity"):
        assert after[k] == before[k]

    r = client.put("/products/1", json={"name": "Acme Hammer XL", "stock_quantity": 0})
    after = r.json()
    assert after["name"] == "Acme Hammer XL"
    assert after["stock_quantity"] == 0
    assert after["price"] == 110.0


def test_update_validation(client, seeded):
    assert client.put("/products/1", json={}).status_code == 400
    assert client.put("/products/1", json={"price": None}).status_code == 400
    assert client.put("/products/1", json={"price": 0}).status_code == 400
    assert client.put("/products/1", json={"product_id": 9}).status_code == 400
    assert client.put("/products/1", json={"stock_quantity": "many"}).status_code == 400
    assert client.get("/products/1").json()["price"] == 100.0


def test_update_missing_product(client, seeded):
    r = client.put("/products/99", json={"price": 10})
    assert r.status_code == 404
    assert r.json() == {"error": "Product not found."}


# ---------------- delete ----------------

def test_delete_cascades(client, seeded):
    assert _count(seeded, "reviews") == 3
    r = client.delete("/products/1")
    assert r.status_code == 200
    assert r.json()["deleted_reviews"] == 2

    assert client.get("/products/1").status_code == 404
    with seeded.connect() as conn:
        assert conn.execute("SELECT COUNT(1) FROM reviews WHERE product_id=1").fetchone()[0] == 0
        assert conn.execute("SELECT COUNT(1) FROM products_categories WHERE product_id=1").fetchone()[0] == 0
        assert conn.execute("SELECT COUNT(1) FROM orders_products WHERE product_id=1").fetchone()[0] == 0
    assert _count(seeded, "reviews") == 1


def test_delete_missing_does_not_mutate(client, seeded):
    r = client.delete("/products/99")
    assert r.status_code == 404
    assert _count(seeded, "products") == 5
    assert _count(seeded, "reviews") == 3


# ---------------- audit trail ----------------

def test_mutations_are_audited(client, seeded):
    client.post("/products", json=NEW_PRODUCT)
    client.delete("/products/99")

    r = client.get("/logs/search", params={"action": "CREATE_PRODUCT"})
    data = r.json()
    assert data["total"] == 1
    assert data["items"][0]["result"] == "OK"
    assert data["items"][0]["entity_id"] == "6"

    r = client.get("/logs/search", params={"action": "DELETE_PRODUCT"})
    item = r.json()["items"][0]
    assert item["result"] == "ERROR"
    assert item["err_msg"] == "Product not found."


# ---------------- numeric edge inputs ----------------

HUGE = 10**20


def test_create_rejects_non_finite_price(client, seeded):
    for price in ("inf", "-inf", "nan", "1e400"):
        r = client.post("/products", json={**NEW_PRODUCT, "price": price})
        assert r.status_code == 400, price
        assert "price" in r.json()["error"]
    assert _count(seeded, "products") == 5
    # listing still serializes
    assert client.get("/products").status_code == 200


def test_update_rejects_non_finite_price(client, seeded):
    for price in ("inf", "1e400", "nan"):
        r = client.put("/products/2", json={"price": price})
        assert r.status_code == 400, price
    r = client.get("/products/2")
    assert r.status_code == 200
    assert r.json()["price"] == 250.0


def test_out_of_range_integers_are_400(client, seeded):
    assert client.get("/products", params={"page": HUGE}).status_code == 400
    assert client.get(f"/products/{HUGE}").status_code == 400
    assert client.get(f"/products/category/{HUGE}").status_code == 400
    assert client.delete(f"/products/{HUGE}").status_code == 400
    assert client.put(f"/products/{HUGE}", json={"price": 1}).status_code == 400
    assert client.put("/products/1", json={"stock_quantity": HUGE}).status_code == 400
    assert client.post("/products", json={**NEW_PRODUCT, "manufacturer_id": HUGE}).status_code == 400
    assert _count(seeded, "products") == 5


def test_largest_page_is_an_empty_page(client, seeded):
    from webbutiken.routes.common import MAX_PAGE
    r = client.get("/products", params={"page": MAX_PAGE, "limit": 1000})
    assert r.status_code == 404


def test_large_limit_is_accepted(client, seeded):
    r = client.get("/products", params={"limit": 500})
    assert r.status_code == 200
    assert r.json()["totalResults"] == 5
    assert client.get("/products", params={"limit": 1001}).status_code == 400
