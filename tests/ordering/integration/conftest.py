import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from ordering.api import cart_router, order_router, product_router, promotion_router, register_error_handlers


@pytest.fixture()
def client(notifier):
    app = FastAPI()
    app.include_router(cart_router)
    app.include_router(order_router)
    app.include_router(product_router)
    app.include_router(promotion_router)
    register_error_handlers(app)
    return TestClient(app)


@pytest.fixture()
def product(client):
    """Create a product through the admin API and return its id."""

    def _create(name="Oxford Shirt", price=100000.0, stock=10):
        response = client.post(
            "/products",
            json={"name": name, "price": price, "stock_quantity": stock},
            headers={"X-User-Id": "admin-1", "X-User-Role": "admin"},
        )
        assert response.status_code == 201
        return response.json()["product_id"]

    return _create
