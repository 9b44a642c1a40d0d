"""Application tests for placement under concurrent writers and failing saves."""

import threading
from unittest.mock import MagicMock, patch

from ordering.catalogue.management import AddProduct
from ordering.catalogue.product import Product
from ordering.checkout.service import MAX_PLACEMENT_ATTEMPTS, OrderService
from ordering.domain import ordering
from ordering.order.order import Order
from ordering.order.repository import OrderRepository
from protean import current_domain
from protean.exceptions import ExpectedVersionError

SHIPPING = {
    "name": "Nguyen Van A",
    "phone": "0901234567",
    "address": "12 Le Loi",
    "city": "Ho Chi Minh",
    "district": "District 1",
}


def _add_product(stock):
    return current_domain.process(
        AddProduct(name="Last Linen Shirt", price=100000.0, stock_quantity=stock),
        asynchronous=False,
    )


def _stock(product_id):
    return current_domain.repository_for(Product).get(product_id).stock_quantity


def _orders():
    return current_domain.repository_for(Order)._dao.query.all().items


class TestRaceForTheLastUnit:
    def test_exactly_one_buyer_wins(self, notifier):
        product_id = _add_product(stock=1)
        start = threading.Barrier(2)
        results = {}

        def buy(user_id):
            with ordering.domain_context():
                start.wait()
                results[user_id] = OrderService().create_order(
                    user_id, [{"product_id": product_id, "quantity": 1}], SHIPPING, "COD"
                )

        buyers = [threading.Thread(target=buy, args=(user_id,)) for user_id in ("user-001", "user-002")]
        for thread in buyers:
            thread.start()
        for thread in buyers:
            thread.join(timeout=30)

        outcomes = sorted((r.success, r.error_code) for r in results.values())
        assert outcomes == [(False, "insufficient_stock"), (True, None)]
        assert _stock(product_id) == 0
        assert len(_orders()) == 1


class TestPersistentConflicts:
    def test_gives_up_after_the_last_attempt(self):
        domain = MagicMock()
        domain.process.side_effect = ExpectedVersionError("Wrong expected version: 3 (Aggregate: Product)")

        with patch("ordering.checkout.service.current_domain", domain):
            result = OrderService().create_order(
                "user-001", [{"product_id": "any-product", "quantity": 1}], SHIPPING, "COD"
            )

        assert result.success is False
        assert result.error_code == "internal_error"
        assert "concurrent updates" in result.message
        assert domain.process.call_count == MAX_PLACEMENT_ATTEMPTS

    def test_a_single_conflict_is_retried(self, notifier):
        product_id = _add_product(stock=2)
        real_process = ordering.process
        calls = []

        def flaky(command, asynchronous=False):
            calls.append(command)
            if len(calls) == 1:
                raise ExpectedVersionError("Wrong expected version: 0 (Aggregate: Product)")
            return real_process(command, asynchronous=asynchronous)

        with patch.object(ordering, "process", side_effect=flaky):
            result = OrderService().create_order(
                "user-001", [{"product_id": product_id, "quantity": 1}], SHIPPING, "COD"
            )

        assert result.success is True, result.message
        assert len(calls) == 2
        assert _stock(product_id) == 1
        assert len(_orders()) == 1


class TestFailedSave:
    def test_order_save_failure_leaves_stock_unchanged(self, notifier):
        product_id = _add_product(stock=3)

        with patch.object(OrderRepository, "add", side_effect=RuntimeError("connection reset")):
            result = OrderService().create_order(
                "user-001", [{"product_id": product_id, "quantity": 2}], SHIPPING, "COD"
            )

        assert result.success is False
        assert result.error_code == "internal_error"
        assert _stock(product_id) == 3
        assert _orders() == []
        assert notifier.sent == []
