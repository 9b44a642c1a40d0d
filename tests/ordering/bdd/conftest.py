"""Shared BDD fixtures and step definitions for order placement."""

import pytest
from ordering.cart.service import CartService
from ordering.catalogue.management import AddProduct
from ordering.catalogue.product import Product
from ordering.checkout.service import OrderService
from protean import current_domain
from pytest_bdd import given, parsers, then

SHIPPING = {
    "name": "Nguyen Van A",
    "phone": "0901234567",
    "address": "12 Le Loi",
    "city": "Ho Chi Minh",
    "district": "District 1",
}


@pytest.fixture()
def catalogue():
    """Product ids by name."""
    return {}


@pytest.fixture()
def shipping():
    return dict(SHIPPING)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced {price:d} with {stock:d} in stock'))
def _(catalogue, name, price, stock):
    catalogue[name] = current_domain.process(
        AddProduct(name=name, price=float(price), stock_quantity=stock),
        asynchronous=False,
    )


@given(parsers.cfparse('"{user_id}" has {quantity:d} "{name}" in the cart'))
def _(catalogue, user_id, quantity, name):
    result = CartService().add_item(user_id, catalogue[name], quantity)
    assert result.success, result.message


@given(parsers.cfparse('"{user_id}" has ordered {quantity:d} "{name}"'), target_fixture="result")
def _(catalogue, shipping, notifier, user_id, quantity, name):
    result = OrderService().create_order(
        user_id, [{"product_id": catalogue[name], "quantity": quantity}], shipping, "COD"
    )
    assert result.success, result.message
    return result


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def _(catalogue, name, stock):
    assert current_domain.repository_for(Product).get(catalogue[name]).stock_quantity == stock


@then(parsers.cfparse('"{name}" is out of stock'))
def _(catalogue, name):
    product = current_domain.repository_for(Product).get(catalogue[name])
    assert product.stock_quantity == 0
    assert product.in_stock is False
