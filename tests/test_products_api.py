"""Tests for the products REST controller."""

import pytest
from fastapi.testclient import TestClient

from storefront_catalog.api import create_app


@pytest.fixture
def api(remote_service):
    """Test client over the service backed by the fake remote store."""
    with TestClient(create_app(remote_service)) as client:
        yield client


@pytest.fixture
def offline_api(offline_service):
    """Test client over the service with no remote store."""
    with TestClient(create_app(offline_service)) as client:
        yield client


class TestReadEndpoints:
    """Test read endpoints."""

    def test_health_reports_remote_mode(self, api, offline_api):
        assert api.get("/health").json() == {"status": "healthy", "remote_catalog": "configured"}
        assert offline_api.get("/health").json()["remote_catalog"] == "unconfigured"

    def test_list_products(self, api):
        response = api.get("/products")

        assert response.status_code == 200
        assert response.json() == [{"id": "b", "nombre": "Bomba"}]

    def test_list_products_offline(self, offline_api):
        response = offline_api.get("/products")

        assert [p["id"] for p in response.json()] == ["a", "bomba-pg-20"]

    def test_get_product(self, offline_api):
        response = offline_api.get("/products/a")

        assert response.status_code == 200
        assert response.json()["nombre"] == "Filtro X"

    def test_get_missing_product(self, api):
        assert api.get("/products/missing").status_code == 404

    def test_exists(self, offline_api):
        assert offline_api.get("/products/exists", params={"nombre": "FILTRO X"}).json() == {
            "exists": True
        }
        assert offline_api.get("/products/exists", params={"nombre": "Nada"}).json() == {
            "exists": False
        }


class TestWriteEndpoints:
    """Test write endpoints and error mapping."""

    def test_create_product(self, api):
        response = api.post("/products", json={"nombre": "Válvula Ñ 1"})

        assert response.status_code == 201
        assert response.json()["id"] == "valvula-n-1"
        assert api.get("/products/valvula-n-1").status_code == 200

    def test_create_duplicate_conflicts(self, api):
        response = api.post("/products", json={"id": "b", "nombre": "Bomba"})

        assert response.status_code == 409

    def test_create_without_name_is_rejected(self, api):
        assert api.post("/products", json={"descripcion": "x"}).status_code == 422

    def test_create_underivable_id_is_rejected(self, api):
        assert api.post("/products", json={"nombre": "!!!"}).status_code == 422

    def test_create_offline_unavailable(self, offline_api):
        assert offline_api.post("/products", json={"nombre": "Sello"}).status_code == 503

    def test_update_product(self, api):
        response = api.patch("/products/b", json={"descripcion": "Bomba de pistones"})

        assert response.status_code == 200
        assert response.json() == {"id": "b", "nombre": "Bomba", "descripcion": "Bomba de pistones"}

    def test_update_with_null_name_is_rejected(self, api, remote_store):
        response = api.patch("/products/b", json={"nombre": None})

        assert response.status_code == 422
        assert remote_store.items["b"]["nombre"] == "Bomba"
        assert api.get("/products/exists", params={"nombre": "x"}).json() == {"exists": False}

    def test_create_with_unsafe_id_is_rejected(self, api):
        assert api.post("/products", json={"id": "Foo Bar", "nombre": "Sello"}).status_code == 422

    def test_update_missing_product(self, api):
        assert api.patch("/products/missing", json={"nombre": "X"}).status_code == 404

    def test_delete_product(self, api):
        assert api.delete("/products/b").status_code == 204
        assert api.delete("/products/b").status_code == 404

    def test_remote_failure_is_bad_gateway(self, api, remote_store):
        remote_store.failing.add("delete_by_id")

        assert api.delete("/products/b").status_code == 502
