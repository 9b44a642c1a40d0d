"""BDD tests for order placement and cancellation."""

from ordering.cart.service import CartService
from ordering.checkout.service import OrderService
from pytest_bdd import parsers, scenarios, then, when

scenarios("features/order_placement.feature")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('"{user_id}" orders {quantity:d} "{name}" paying "{method}"'), target_fixture="result")
def _(catalogue, shipping, notifier, user_id, quantity, name, method):
    items = [{"product_id": catalogue[name], "quantity": quantity}]
    return OrderService().create_order(user_id, items, shipping, method)


_BASKET = '"{user_id}" orders a basket of {first_qty:d} "{first}" and {second_qty:d} "{second}" paying "{method}"'


@when(parsers.cfparse(_BASKET), target_fixture="result")
def _(catalogue, shipping, notifier, user_id, first_qty, first, second_qty, second, method):
    items = [
        {"product_id": catalogue[first], "quantity": first_qty},
        {"product_id": catalogue[second], "quantity": second_qty},
    ]
    return OrderService().create_order(user_id, items, shipping, method)


@when(parsers.cfparse('"{user_id}" checks out the cart paying "{method}"'), target_fixture="result")
def _(shipping, notifier, user_id, method):
    return OrderService().checkout_cart(user_id, shipping, method)


@when(parsers.cfparse('"{user_id}" cancels the order'), target_fixture="cancellation")
def _(result, user_id):
    return OrderService().cancel_order(result.data["id"], user_id)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order is placed as "{status}"'))
def _(result, status):
    assert result.success is True, result.message
    assert result.data["status"] == status


@then(parsers.cfparse('the order is rejected with "{code}"'))
def _(result, code):
    assert result.success is False
    assert result.error_code == code


@then(parsers.cfparse("the order total is {amount:d}"))
def _(result, amount):
    assert result.data["total"] == amount


@then(parsers.cfparse("the order shipping is {amount:d}"))
def _(result, amount):
    assert result.data["shipping"] == amount


@then(parsers.cfparse('the cart of "{user_id}" is empty'))
def _(user_id):
    assert CartService().get_cart(user_id).data["items"] == []


@then(parsers.cfparse('the order status is "{status}"'))
def _(result, cancellation, status):
    assert cancellation.success is True, cancellation.message
    assert OrderService().get_order(result.data["id"]).data["status"] == status
