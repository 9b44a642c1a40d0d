"""Read side of carts."""

from protean.utils.globals import current_domain

from ordering.cart.cart import Cart
from ordering.utils.clock import as_utc


def cart_line_to_dict(line) -> dict:
    return {
        "id": str(line.id),
        "product_id": str(line.product_id),
        "quantity": line.quantity,
        "size": line.size,
        "color": line.color,
        "price": line.price,
        "total_price": line.total_price,
    }


def cart_to_dict(cart) -> dict:
    lines = sorted(cart.lines or [], key=lambda ln: as_utc(ln.created_at))
    return {
        "id": str(cart.id),
        "user_id": str(cart.user_id),
        "items": [cart_line_to_dict(line) for line in lines],
        **cart.summary(),
        "created_at": as_utc(cart.created_at).isoformat() if cart.created_at else None,
        "updated_at": as_utc(cart.updated_at).isoformat() if cart.updated_at else None,
    }


def get_cart(user_id) -> Cart:
    """The user's cart, created on first access."""
    return current_domain.repository_for(Cart).get_or_create(user_id)
