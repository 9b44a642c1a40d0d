"""Read side of orders: lookups for customers and admins, plus serialization."""

from protean.utils.globals import current_domain

from ordering.order.order import Order
from ordering.utils.clock import as_utc


def _iso(value):
    return as_utc(value).isoformat() if value else None


def line_to_dict(line) -> dict:
    return {
        "id": str(line.id),
        "product_id": str(line.product_id),
        "product_name": line.product_name,
        "product_image": line.product_image,
        "quantity": line.quantity,
        "size": line.size,
        "color": line.color,
        "price": line.price,
        "original_price": line.original_price,
        "promotion_id": str(line.promotion_id) if line.promotion_id else None,
        "total_price": line.total_price,
    }


def tracking_to_dict(entry) -> dict:
    return {
        "status": entry.status,
        "location": entry.location,
        "description": entry.description,
        "time": _iso(entry.occurred_at),
    }


def history_to_dict(entry) -> dict:
    return {
        "status": entry.status,
        "changed_by": entry.changed_by,
        "note": entry.note,
        "changed_at": _iso(entry.changed_at),
    }


def tracking_of(order) -> list[dict]:
    entries = sorted(order.tracking or [], key=lambda e: as_utc(e.occurred_at))
    return [tracking_to_dict(e) for e in entries]


def order_to_dict(order) -> dict:
    history = sorted(order.history or [], key=lambda e: as_utc(e.changed_at))
    return {
        "id": str(order.id),
        "order_number": order.order_number,
        "user_id": str(order.user_id),
        "status": order.status,
        "subtotal": order.subtotal,
        "shipping": order.shipping,
        "tax": order.tax,
        "total": order.total,
        "payment_method": order.payment_method,
        "payment_id": order.payment_id,
        "shipping_info": order.shipping_info.to_dict() if order.shipping_info else None,
        "items": [line_to_dict(line) for line in order.lines or []],
        "tracking": tracking_of(order),
        "history": [history_to_dict(e) for e in history],
        "note": order.note,
        "cancel_reason": order.cancel_reason,
        "can_review": order.can_review,
        "created_at": _iso(order.created_at),
        "updated_at": _iso(order.updated_at),
    }


def get_order(order_id, user_id=None) -> Order:
    """Order by id; with `user_id` the caller must own it."""
    return current_domain.repository_for(Order).get_for(order_id, user_id=user_id)


def list_orders(user_id, status=None, date_from=None, date_to=None) -> list[Order]:
    return current_domain.repository_for(Order).find_for_user(
        user_id, status=status, date_from=date_from, date_to=date_to
    )


def get_tracking(order_id, user_id=None) -> list[dict]:
    return tracking_of(get_order(order_id, user_id=user_id))
