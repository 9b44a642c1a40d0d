"""Shared helpers for the ordering application tests."""

import pytest
from ordering.catalogue.management import AddProduct
from ordering.checkout.service import OrderService
from protean import current_domain

SHIPPING = {
    "name": "Nguyen Van A",
    "phone": "0901234567",
    "address": "12 Le Loi",
    "city": "Ho Chi Minh",
    "district": "District 1",
}


@pytest.fixture()
def add_product():
    def _add(stock=10, price=100000.0, name="Oxford Shirt"):
        return current_domain.process(
            AddProduct(name=name, price=price, stock_quantity=stock),
            asynchronous=False,
        )

    return _add


@pytest.fixture()
def place_order(add_product, notifier):
    """Place a COD order and return its serialized form."""

    def _place(product_id=None, quantity=1, user_id="user-001", **kwargs):
        product_id = product_id or add_product()
        result = OrderService().create_order(
            user_id,
            [{"product_id": product_id, "quantity": quantity}],
            SHIPPING,
            "COD",
            **kwargs,
        )
        assert result.success, result.message
        return result.data

    return _place
