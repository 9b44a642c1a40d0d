"""Repository for the Order aggregate."""

from protean.exceptions import ObjectNotFoundError

from ordering.domain import ordering
from ordering.errors import AccessDenied, OrderNotFound
from ordering.order.order import Order, OrderStatus
from ordering.utils.clock import as_utc


@ordering.repository(part_of=Order)
class OrderRepository:
    def find_for_user(self, user_id, status=None, date_from=None, date_to=None) -> list[Order]:
        """A user's orders, newest first, optionally narrowed by status and creation date."""
        filters = {"user_id": str(user_id)}
        if status:
            parsed = OrderStatus.parse(status)
            filters["status"] = parsed.value if parsed else str(status)

        orders = self._dao.query.filter(**filters).all().items
        if date_from:
            orders = [o for o in orders if o.created_at and as_utc(o.created_at) >= as_utc(date_from)]
        if date_to:
            orders = [o for o in orders if o.created_at and as_utc(o.created_at) <= as_utc(date_to)]
        return sorted(orders, key=lambda o: as_utc(o.created_at), reverse=True)

    def find_by_number(self, order_number) -> Order | None:
        orders = self._dao.query.filter(order_number=order_number).all().items
        return orders[0] if orders else None

    def get_for(self, order_id, user_id=None) -> Order:
        """Order by id, checked against its owner when `user_id` is given."""
        try:
            order = self.get(str(order_id))
        except ObjectNotFoundError:
            raise OrderNotFound(str(order_id))
        if user_id is not None and not order.is_owned_by(user_id):
            raise AccessDenied()
        return order
