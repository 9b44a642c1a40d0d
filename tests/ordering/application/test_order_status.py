"""Application tests for administrative status updates."""

from ordering.catalogue.product import Product
from ordering.checkout.service import OrderService
from ordering.order.order import Order, OrderStatus
from protean import current_domain


def _stock(product_id):
    return current_domain.repository_for(Product).get(product_id).stock_quantity


def _status(order_id):
    return current_domain.repository_for(Order).get(order_id).status


class TestStatusTransitions:
    def test_happy_path_to_delivered(self, place_order):
        order = place_order()
        service = OrderService()

        for status in ("Confirmed", "Processing", "Shipped", "Delivered"):
            result = service.update_order_status(order["id"], status, changed_by="admin-1")
            assert result.success is True, result.message
            assert result.data["status"] == status

        delivered = service.get_order(order["id"]).data
        assert delivered["can_review"] is True
        assert len(delivered["tracking"]) == 5
        assert len(delivered["history"]) == 5
        assert delivered["tracking"][-1]["status"] == "delivered"

    def test_status_names_are_matched_case_insensitively(self, place_order):
        order = place_order()
        result = OrderService().update_order_status(order["id"], "confirmed", changed_by="admin-1")
        assert result.data["status"] == "Confirmed"

    def test_note_is_recorded(self, place_order):
        order = place_order()
        result = OrderService().update_order_status(
            order["id"], "Confirmed", changed_by="admin-1", note="Payment verified"
        )
        assert result.data["history"][-1]["note"] == "Payment verified"
        assert result.data["history"][-1]["changed_by"] == "admin-1"
        assert result.data["tracking"][-1]["description"] == "Payment verified"

    def test_skipping_a_step_is_rejected(self, place_order):
        order = place_order()
        result = OrderService().update_order_status(order["id"], "Shipped", changed_by="admin-1")

        assert result.error_code == "invalid_status_transition"
        assert _status(order["id"]) == OrderStatus.PENDING.value

    def test_unknown_status_is_rejected(self, place_order):
        order = place_order()
        result = OrderService().update_order_status(order["id"], "Lost", changed_by="admin-1")
        assert result.error_code == "invalid_status_transition"

    def test_return_after_delivery(self, place_order):
        order = place_order()
        service = OrderService()
        for status in ("Confirmed", "Processing", "Shipped", "Delivered", "Returned"):
            service.update_order_status(order["id"], status, changed_by="admin-1")
        assert _status(order["id"]) == OrderStatus.RETURNED.value

    def test_unknown_order(self):
        result = OrderService().update_order_status("no-such-order", "Confirmed", changed_by="admin-1")
        assert result.error_code == "order_not_found"

    def test_customer_hears_about_each_move(self, place_order, notifier):
        order = place_order()
        OrderService().update_order_status(order["id"], "Confirmed", changed_by="admin-1")

        last = notifier.messages_for(order["order_number"])[-1]
        assert last["status"] == "Confirmed"


class TestCancelThroughStatus:
    def test_cancel_restocks(self, add_product, place_order):
        product_id = add_product(stock=3)
        order = place_order(product_id, quantity=3)
        assert _stock(product_id) == 0

        result = OrderService().update_order_status(
            order["id"], "Cancelled", changed_by="admin-1", note="Customer called"
        )

        assert result.success is True
        assert result.data["status"] == "Cancelled"
        assert result.data["cancel_reason"] == "Customer called"
        assert _stock(product_id) == 3

    def test_cancel_after_processing_is_rejected(self, add_product, place_order):
        product_id = add_product(stock=3)
        order = place_order(product_id)
        service = OrderService()
        service.update_order_status(order["id"], "Confirmed", changed_by="admin-1")
        service.update_order_status(order["id"], "Processing", changed_by="admin-1")

        result = service.update_order_status(order["id"], "Cancelled", changed_by="admin-1")

        assert result.error_code == "invalid_status_transition"
        assert _stock(product_id) == 2
        assert _status(order["id"]) == OrderStatus.PROCESSING.value

    def test_cancelling_twice_is_rejected(self, add_product, place_order):
        product_id = add_product(stock=3)
        order = place_order(product_id)
        service = OrderService()
        service.update_order_status(order["id"], "Cancelled", changed_by="admin-1")

        result = service.update_order_status(order["id"], "Cancelled", changed_by="admin-1")

        assert result.error_code == "invalid_status_transition"
        assert _stock(product_id) == 3


class TestForcedStatus:
    def test_force_skips_the_state_machine(self, place_order):
        order = place_order()

        result = OrderService().update_order_status(
            order["id"], "Delivered", changed_by="admin-1", note="Delivered by hand", force=True
        )

        assert result.success is True
        assert result.data["status"] == "Delivered"
        entry = result.data["history"][-1]
        assert entry["note"] == "Override: Pending -> Delivered. Delivered by hand"
        assert len(result.data["tracking"]) == 2

    def test_force_out_of_a_terminal_state(self, place_order):
        order = place_order()
        service = OrderService()
        service.cancel_order(order["id"], "user-001")

        result = service.update_order_status(order["id"], "Pending", changed_by="admin-1", force=True)

        assert result.data["status"] == "Pending"
        assert result.data["history"][-1]["note"] == "Override: Cancelled -> Pending"

    def test_forced_cancel_leaves_stock_alone(self, add_product, place_order):
        product_id = add_product(stock=4)
        order = place_order(product_id, quantity=2)

        result = OrderService().update_order_status(order["id"], "Cancelled", changed_by="admin-1", force=True)

        assert result.data["status"] == "Cancelled"
        assert _stock(product_id) == 2
