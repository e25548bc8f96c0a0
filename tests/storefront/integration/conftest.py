import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from storefront.api import routers
from storefront.api.errors import register_error_handlers


@pytest.fixture()
def client():
    app = FastAPI()
    for router in routers:
        app.include_router(router)
    register_error_handlers(app)
    return TestClient(app)


@pytest.fixture()
def listed_product(client):
    response = client.post(
        "/products",
        json={"name": "Kashmiri Shawl", "price": 2500.0, "stock": 5},
        headers={"X-User-Id": "seller-001", "X-User-Role": "SELLER"},
    )
    assert response.status_code == 201
    return response.json()
