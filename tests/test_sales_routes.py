from __future__ import annotations

from fastapi.testclient import TestClient

from app.domain.errors import StoreUnavailableError
from app.domain.query import QueryDefaults
from app.services.dependencies import get_sales_service
from app.services.sales_service import SalesService


class _UnavailableRepository:
    def search(self, predicate, ordering, offset, limit):
        raise StoreUnavailableError("Sales store is unavailable")

    def get_by_id(self, transaction_id):
        raise StoreUnavailableError("Sales store is unavailable")

    def distinct_values(self, field):
        raise StoreUnavailableError("Sales store is unavailable")


def test_requires_authentication(client):
    for path in ("/api/sales", "/api/sales/filters", "/api/sales/1"):
        response = client.get(path)
        assert response.status_code in (401, 403)
        assert response.json()["success"] is False


def test_rejects_invalid_token(client):
    response = client.get("/api/sales", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid or expired token."}


def test_list_sales_envelope(client, auth_headers):
    response = client.get("/api/sales", headers=auth_headers)
    assert response.status_code == 200
    body = response.json()

    assert body["success"] is True
    assert body["count"] == 5
    assert body["total"] == 5
    assert body["page"] == 1
    assert body["pages"] == 1
    assert body["summary"] == {"totalUnitsSold": 14, "totalAmount": 550.0, "totalDiscount": 46.0}
    assert [row["transactionId"] for row in body["data"]] == [5, 3, 4, 2, 1]

    first = body["data"][0]
    assert first["customerName"] == "Alice Cooper"
    assert first["productCategory"] == "Clothing"
    assert first["finalAmount"] == 40.0
    assert first["date"].startswith("2023-04-01T00:00:00")


def test_list_sales_with_filters_and_paging(client, auth_headers):
    response = client.get(
        "/api/sales",
        params={
            "customerRegion": "North,East",
            "tags": "organic,wireless",
            "sortBy": "quantity-desc",
            "page": "2",
            "limit": "2",
        },
        headers=auth_headers,
    )
    body = response.json()
    assert response.status_code == 200
    assert body["total"] == 3
    assert body["pages"] == 2
    assert body["count"] == 1
    assert [row["transactionId"] for row in body["data"]] == [4]
    assert body["summary"]["totalUnitsSold"] == 11


def test_empty_result_is_success(client, auth_headers):
    body = client.get("/api/sales", params={"search": "zzz"}, headers=auth_headers).json()
    assert body["success"] is True
    assert body["total"] == 0
    assert body["pages"] == 0
    assert body["data"] == []
    assert body["summary"] == {"totalUnitsSold": 0, "totalAmount": 0.0, "totalDiscount": 0.0}


def test_unknown_sort_uses_default(client, auth_headers):
    body = client.get("/api/sales", params={"sortBy": "bogus"}, headers=auth_headers).json()
    assert [row["transactionId"] for row in body["data"]] == [5, 3, 4, 2, 1]


def test_malformed_filters_are_rejected(client, auth_headers):
    for params in (
        {"minAge": "abc"},
        {"startDate": "yesterday"},
        {"page": "0"},
        {"limit": "x"},
        {"page": "99999999999999999999"},
        {"maxAge": "99999999999999999999"},
    ):
        response = client.get("/api/sales", params=params, headers=auth_headers)
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"]


def test_filter_options_with_etag(client, auth_headers):
    response = client.get("/api/sales/filters", headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["filters"]["customerRegions"] == ["East", "North", "South", "West"]
    assert body["filters"]["tags"] == ["casual", "gadgets", "organic", "skincare", "wireless"]

    etag = response.headers["ETag"]
    assert response.headers["Vary"] == "Authorization"
    cached = client.get("/api/sales/filters", headers={**auth_headers, "If-None-Match": etag})
    assert cached.status_code == 304


def test_get_sale(client, auth_headers):
    response = client.get("/api/sales/2", headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["customerName"] == "bob smith"
    assert sorted(body["data"]["tags"]) == ["gadgets", "wireless"]


def test_get_missing_sale(client, auth_headers):
    response = client.get("/api/sales/999", headers=auth_headers)
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Sale not found"}


def test_non_numeric_id_is_a_validation_error(client, auth_headers):
    response = client.get("/api/sales/abc", headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_store_failure_is_reported(api, auth_headers):
    api.dependency_overrides[get_sales_service] = lambda: SalesService(
        _UnavailableRepository(), QueryDefaults()
    )
    client = TestClient(api)
    for path in ("/api/sales", "/api/sales/filters", "/api/sales/1"):
        response = client.get(path, headers=auth_headers)
        assert response.status_code == 503
        assert response.json() == {"success": False, "message": "Sales store is unavailable"}
