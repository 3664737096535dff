from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from app.models.comment import Comment
from app.models.product import Product

MISSING_ID = "00000000-0000-0000-0000-000000000000"


@pytest.fixture()
def make_category(client, auth_headers):
    def _make(name):
        response = client.post("/categories", headers=auth_headers, json={"name": name})
        assert response.status_code == 201, response.text
        return response.json()["id"]

    return _make


@pytest.fixture()
def make_product(client, auth_headers):
    def _make(**fields):
        response = client.post("/products", headers=auth_headers, json=fields)
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest.fixture()
def catalog(make_product):
    return [
        make_product(title="Cargo Van", content="Roomy delivery vehicle", discountPrice=100, loadCapacity=1200, size="Large", engine="Diesel V6"),
        make_product(title="City Minivan", content="Family friendly", discountPrice=150, loadCapacity=600, size="Medium", engine="Hybrid"),
        make_product(title="Pickup Truck", content="Off road", discountPrice=100, loadCapacity=900, size="large", engine="Petrol V8"),
    ]


def _titles(response):
    assert response.status_code == 200, response.text
    return sorted(item["title"] for item in response.json())


def test_create_product_with_categories(client, make_category, make_product):
    trucks = make_category("Trucks")
    product = make_product(
        title="Hauler",
        description="Heavy duty",
        price=25000,
        discountPrice=23000,
        imageUrls=["a.jpg", "b.jpg"],
        videoUrl="intro.mp4",
        category=[trucks],
        size="XL",
        loadCapacity=3000,
        engine="Diesel",
    )
    assert product["title"] == "Hauler"
    assert product["discountPrice"] == 23000
    assert product["imageUrls"] == ["a.jpg", "b.jpg"]
    assert product["videoUrl"] == "intro.mp4"
    assert product["loadCapacity"] == 3000
    assert [category["name"] for category in product["category"]] == ["Trucks"]
    assert product["comments"] == []


def test_create_product_does_not_require_fields(make_product):
    product = make_product(title="No price")
    assert product["price"] is None
    assert product["imageUrls"] == []


def test_create_product_rejects_unknown_category(client, auth_headers, db_session):
    response = client.post("/products", headers=auth_headers, json={"title": "x", "category": ["not-an-id"]})
    assert response.status_code == 400
    assert response.json()["code"] == "invalid_reference"
    assert db_session.scalar(select(func.count()).select_from(Product)) == 0


def test_create_product_requires_token(client):
    response = client.post("/products", json={"title": "x"})
    assert response.status_code == 401


def test_get_products_expands_comments_and_category(client, auth_headers, make_category, make_product):
    vans = make_category("Vans")
    product = make_product(title="Cargo Van", category=vans)
    comment = client.post(f"/products/{product['id']}/comments", headers=auth_headers, json={"content": "Great van"})
    assert comment.status_code == 201

    listing = client.get("/products")
    assert listing.status_code == 200
    [item] = listing.json()
    assert item["category"][0]["name"] == "Vans"
    assert item["comments"][0]["content"] == "Great van"
    assert item["comments"][0]["productId"] == product["id"]


def test_get_product_by_id(client, make_product):
    product = make_product(title="Cargo Van")
    response = client.get(f"/products/{product['id']}")
    assert response.status_code == 200
    assert response.json()["id"] == product["id"]


def test_get_missing_product(client):
    response = client.get(f"/products/{MISSING_ID}")
    assert response.status_code == 404
    assert response.json() == {"error": "Product not found", "code": "not_found"}


def test_search_without_criteria_matches_listing(client, catalog):
    everything = client.get("/products").json()
    assert client.post("/products/search", json={}).json() == everything
    assert client.post("/products/search").json() == everything


def test_search_title_is_case_insensitive_substring(client, catalog):
    assert _titles(client.post("/products/search", json={"title": "VAN"})) == ["Cargo Van", "City Minivan"]


def test_search_discount_price_is_exact(client, catalog):
    assert _titles(client.post("/products/search", json={"discountPrice": 100})) == ["Cargo Van", "Pickup Truck"]


def test_search_combines_criteria(client, catalog):
    response = client.post("/products/search", json={"size": "large", "engine": "v8", "loadCapacity": 900})
    assert _titles(response) == ["Pickup Truck"]


def test_search_content(client, catalog):
    assert _titles(client.post("/products/search", json={"content": "family"})) == ["City Minivan"]


def test_search_created_at_is_on_or_after(client, catalog):
    past = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()
    future = (datetime.now(timezone.utc) + timedelta(days=1)).isoformat()
    assert len(client.post("/products/search", json={"createdAt": past}).json()) == 3
    assert client.post("/products/search", json={"createdAt": future}).json() == []


def test_search_treats_like_wildcards_literally(client, catalog):
    assert client.post("/products/search", json={"title": "%"}).json() == []


def test_update_product_fields(client, auth_headers, make_product):
    product = make_product(title="Old", price=10, imageUrls=["a.jpg"], videoUrl="a.mp4")
    response = client.patch(
        f"/products/{product['id']}",
        headers=auth_headers,
        json={"title": "New", "imageUrls": [], "videoUrl": ""},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "New"
    assert body["price"] == 10
    assert body["imageUrls"] == ["a.jpg"]
    assert body["videoUrl"] == "a.mp4"


def test_update_product_category_keeps_valid_references(client, auth_headers, make_category, make_product):
    vans = make_category("Vans")
    trucks = make_category("Trucks")
    product = make_product(title="Hauler", category=[vans])

    response = client.patch(
        f"/products/{product['id']}",
        headers=auth_headers,
        json={"category": [trucks, "bogus", MISSING_ID]},
    )
    assert response.status_code == 200
    assert [category["name"] for category in response.json()["category"]] == ["Trucks"]


def test_update_product_invalid_category_list_is_no_change(client, auth_headers, make_category, make_product):
    vans = make_category("Vans")
    product = make_product(title="Hauler", category=[vans])
    for category in ([], ["bogus"]):
        response = client.patch(f"/products/{product['id']}", headers=auth_headers, json={"category": category})
        assert response.status_code == 200
        assert [item["name"] for item in response.json()["category"]] == ["Vans"]


def test_update_missing_product(client, auth_headers):
    response = client.patch(f"/products/{MISSING_ID}", headers=auth_headers, json={"title": "x"})
    assert response.status_code == 404


def test_delete_product_removes_comments(client, auth_headers, make_product, db_session):
    product = make_product(title="Cargo Van")
    client.post(f"/products/{product['id']}/comments", headers=auth_headers, json={"content": "nice"})
    response = client.delete(f"/products/{product['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Product deleted successfully"}
    assert db_session.scalar(select(func.count()).select_from(Product)) == 0
    assert db_session.scalar(select(func.count()).select_from(Comment)) == 0


def test_delete_missing_product_leaves_store_unchanged(client, auth_headers, make_product, db_session):
    make_product(title="Cargo Van")
    response = client.delete(f"/products/{MISSING_ID}", headers=auth_headers)
    assert response.status_code == 404
    assert db_session.scalar(select(func.count()).select_from(Product)) == 1


def test_comments_for_missing_product(client, auth_headers):
    assert client.get(f"/products/{MISSING_ID}/comments").status_code == 404
    response = client.post(f"/products/{MISSING_ID}/comments", headers=auth_headers, json={"content": "hi"})
    assert response.status_code == 404


def test_comment_records_author(client, auth_headers, make_product):
    product = make_product(title="Cargo Van")
    me = client.get("/auth/me", headers=auth_headers).json()
    created = client.post(f"/products/{product['id']}/comments", headers=auth_headers, json={"content": "hi"}).json()
    assert created["authorId"] == me["id"]
    listed = client.get(f"/products/{product['id']}/comments").json()
    assert [comment["id"] for comment in listed] == [created["id"]]


def test_runtime_failure_maps_to_unexpected_error(client, catalog):
    response = client.post("/products/search", json={"createdAt": "0001-01-01T00:00:00+14:00"})
    assert response.status_code == 400
    assert response.json() == {"error": "date value out of range", "code": "unexpected_error"}


def test_store_failure_maps_to_unexpected_error(client, monkeypatch):
    def _locked(db):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    monkeypatch.setattr("app.services.products.list_products", _locked)
    response = client.get("/products")
    assert response.status_code == 400
    assert response.json() == {"error": "database is locked", "code": "unexpected_error"}
