"""HTTP-level tests for the product routes, health check and index."""

import json

import pytest
from fastapi.testclient import TestClient

from fashion_shop_api.app.core.db import get_store
from fashion_shop_api.app.main import create_app


def test_create_product(client, make_product):
    response = client.post("/api/products", json=make_product())
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["productName"] == "Red Scarf"
    assert body["data"]["season"] == "Winter"
    assert "createdAt" in body["data"]
    assert "id" not in body["data"]


def test_create_trims_strings(client, make_product):
    response = client.post(
        "/api/products", json=make_product(productName="  Red Scarf  ", productCategory=" Accessories ")
    )
    assert response.status_code == 201
    assert response.json()["data"]["productName"] == "Red Scarf"
    assert response.json()["data"]["productCategory"] == "Accessories"


def test_create_duplicate(client, make_product):
    assert client.post("/api/products", json=make_product(unitsSold=50)).status_code == 201
    response = client.post("/api/products", json=make_product(unitsSold=7))
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "DuplicateKey"
    assert "already exists" in body["message"]

    listed = client.get("/api/products").json()
    assert listed["count"] == 1
    assert listed["data"][0]["unitsSold"] == 50


def test_create_reports_exactly_the_violated_fields(client, make_product):
    payload = make_product(customerRating=7, unitsSold=-1)
    del payload["season"]
    response = client.post("/api/products", json=payload)
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "ValidationError"
    assert body["errors"] == {
        "customerRating": "Rating cannot exceed 5",
        "unitsSold": "Units sold cannot be negative",
        "season": "Season is required",
    }
    assert client.get("/api/products").json()["count"] == 0


@pytest.mark.parametrize(
    "overrides, field, message",
    [
        ({"season": "Autumn"}, "season", "Autumn is not a valid season"),
        ({"trendScore": 11}, "trendScore", "Trend score cannot exceed 10"),
        ({"trendScore": -1}, "trendScore", "Trend score cannot be less than 0"),
        ({"customerRating": -0.5}, "customerRating", "Rating cannot be less than 0"),
        ({"productName": "   "}, "productName", "Product name is required"),
        ({"revenue": None}, "revenue", "Revenue is required"),
        ({"stockLevel": -2}, "stockLevel", "Stock level cannot be negative"),
    ],
)
def test_create_field_messages(client, make_product, overrides, field, message):
    response = client.post("/api/products", json=make_product(**overrides))
    assert response.status_code == 400
    assert response.json()["errors"] == {field: message}


def test_create_rejects_non_object_body(client):
    response = client.post("/api/products", json=["not", "an", "object"])
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_update_product(client, make_product):
    client.post("/api/products", json=make_product())
    response = client.post("/api/products/update/Red Scarf", json={"unitsSold": 75, "stockLevel": 5})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["unitsSold"] == 75
    assert data["stockLevel"] == 5
    assert data["revenue"] == 500
    assert data["customerRating"] == 4.2


def test_update_invalid_value(client, make_product):
    client.post("/api/products", json=make_product())
    response = client.post("/api/products/update/Red Scarf", json={"customerRating": 9})
    assert response.status_code == 400
    assert response.json()["errors"] == {"customerRating": "Rating cannot exceed 5"}


def test_update_wrong_type(client, make_product):
    client.post("/api/products", json=make_product())
    response = client.post("/api/products/update/Red Scarf", json={"unitsSold": "many"})
    assert response.status_code == 400
    assert "unitsSold" in response.json()["errors"]


def test_update_missing_product(client):
    response = client.post("/api/products/update/Ghost", json={"unitsSold": 1})
    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "NotFound"
    assert "Ghost" in body["message"]


def test_update_rename_onto_existing(client, make_product):
    client.post("/api/products", json=make_product(productName="A"))
    client.post("/api/products", json=make_product(productName="B"))
    response = client.post("/api/products/update/A", json={"productName": "B"})
    assert response.status_code == 400
    assert response.json()["error"] == "DuplicateKey"


def test_delete_product(client, make_product):
    client.post("/api/products", json=make_product())
    response = client.post("/api/products/delete/Red Scarf")
    assert response.status_code == 200
    assert response.json()["data"]["productName"] == "Red Scarf"

    again = client.post("/api/products/delete/Red Scarf")
    assert again.status_code == 404
    assert again.json()["success"] is False


def test_list_products_limit(client, make_product):
    for i in range(12):
        client.post("/api/products", json=make_product(productName=f"Item {i}"))
    assert client.get("/api/products").json()["count"] == 10
    assert client.get("/api/products", params={"limit": 3}).json()["count"] == 3
    assert client.get("/api/products", params={"limit": 50}).json()["count"] == 12


@pytest.mark.parametrize("limit", ["0", "abc", "5000"])
def test_list_products_bad_limit(client, limit):
    response = client.get("/api/products", params={"limit": limit})
    assert response.status_code == 400
    assert "limit" in response.json()["errors"]


def test_season_totals(client, make_product):
    client.post("/api/products", json=make_product(productName="A", unitsSold=10, revenue=100))
    client.post("/api/products", json=make_product(productName="B", unitsSold=15, revenue=50))
    response = client.get("/api/products/season-totals/Winter")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["season"] == "Winter"
    assert body["data"]["totalUnitsSold"] == 25
    assert body["data"]["totalRevenue"] == 150
    assert body["data"]["totalProducts"] == 2


def test_season_totals_empty(client):
    response = client.get("/api/products/season-totals/Spring")
    assert response.status_code == 200
    assert response.json()["data"] == {
        "totalUnitsSold": 0,
        "totalReturns": 0,
        "totalRevenue": 0,
        "averageRating": 0,
        "totalProducts": 0,
    }


def test_high_sales(client, make_product):
    for name, units in [("A", 5), ("B", 120), ("C", 101), ("D", 100)]:
        client.post("/api/products", json=make_product(productName=name, unitsSold=units))
    response = client.get("/api/products/high-sales/Winter/100")
    assert response.status_code == 200
    body = response.json()
    assert body["minUnits"] == 100
    assert body["count"] == 2
    assert [p["productName"] for p in body["data"]] == ["B", "C"]


def test_high_sales_bad_threshold(client):
    response = client.get("/api/products/high-sales/Winter/lots")
    assert response.status_code == 400
    assert response.json()["error"] == "InvalidArgument"


def test_rating_filter(client, make_product):
    client.post("/api/products", json=make_product(productName="A", customerRating=4.0))
    client.post("/api/products", json=make_product(productName="B", customerRating=3.1))
    response = client.get("/api/products/rating/Winter/equal/4.0")
    assert response.status_code == 200
    body = response.json()
    assert body["condition"] == "equal"
    assert body["ratingValue"] == 4.0
    assert [p["productName"] for p in body["data"]] == ["A"]


@pytest.mark.parametrize("value", ["4.0", "x"])
def test_rating_filter_bogus_condition(client, value):
    response = client.get(f"/api/products/rating/Summer/bogus/{value}")
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "InvalidArgument"


def test_rating_filter_bad_value(client):
    response = client.get("/api/products/rating/Summer/greater/high")
    assert response.status_code == 400
    assert response.json()["error"] == "InvalidArgument"


def test_end_to_end_lifecycle(client):
    scarf = {
        "productCategory": "Accessories",
        "productName": "Red Scarf",
        "season": "Winter",
        "unitsSold": 50,
        "returns": 2,
        "revenue": 500,
        "customerRating": 4.2,
        "stockLevel": 20,
        "trendScore": 6,
    }
    created = client.post("/api/products", json=scarf)
    assert created.status_code == 201
    assert created.json()["data"]["unitsSold"] == 50

    totals = client.get("/api/products/season-totals/Winter").json()
    assert totals["data"]["totalUnitsSold"] >= 50

    assert client.post("/api/products/delete/Red Scarf").status_code == 200
    assert client.post("/api/products/delete/Red Scarf").status_code == 404
    assert client.post("/api/products/update/Red Scarf", json={"unitsSold": 1}).status_code == 404


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "UP"
    assert body["database"] == "Connected"
    assert body["timestamp"]


def test_index_lists_endpoints(client):
    body = client.get("/").json()
    assert any("/health" in line for line in body["endpoints"])


def test_create_rejects_infinite_revenue(client, make_product):
    body = json.dumps(make_product(revenue="__inf__")).replace('"__inf__"', "Infinity")
    response = client.post("/api/products", content=body, headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert "revenue" in response.json()["errors"]

    totals = client.get("/api/products/season-totals/Winter").json()["data"]
    assert totals["totalRevenue"] == 0
    assert totals["totalProducts"] == 0


def test_create_rejects_integer_beyond_store_range(client, make_product):
    response = client.post("/api/products", json=make_product(unitsSold=10**20))
    assert response.status_code == 400
    assert response.json()["error"] == "ValidationError"
    assert "unitsSold" in response.json()["errors"]


def test_high_sales_threshold_beyond_store_range(client):
    response = client.get("/api/products/high-sales/Winter/99999999999999999999")
    assert response.status_code == 400
    assert response.json()["error"] == "InvalidArgument"


def test_update_reports_camel_case_fields(client, make_product):
    client.post("/api/products", json=make_product())
    response = client.post("/api/products/update/Red Scarf", json={"stockLevel": -4, "trendScore": 10.5})
    assert response.status_code == 400
    assert response.json()["errors"] == {
        "stockLevel": "Stock level cannot be negative",
        "trendScore": "Trend score cannot exceed 10",
    }


class _FailingStore:
    def find(self, *args, **kwargs):
        raise RuntimeError("disk unavailable")


def test_unexpected_error_returns_500_with_message():
    app = create_app(database_path=":memory:")
    app.dependency_overrides[get_store] = lambda: _FailingStore()
    with TestClient(app, raise_server_exceptions=False) as c:
        response = c.get("/api/products")
    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "disk unavailable"


def test_health_reports_disconnected_store(client):
    client.app.state.store = None
    body = client.get("/health").json()
    assert body["status"] == "UP"
    assert body["database"] == "Disconnected"
