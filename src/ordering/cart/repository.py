"""Repository for the Cart aggregate."""

from ordering.cart.cart import Cart
from ordering.domain import ordering


@ordering.repository(part_of=Cart)
class CartRepository:
    def find_for_user(self, user_id) -> Cart | None:
        carts = self._dao.query.filter(user_id=str(user_id)).all().items
        return carts[0] if carts else None

    def get_or_create(self, user_id) -> Cart:
        """The user's cart, created and stored on first access."""
        cart = self.find_for_user(user_id)
        if cart is None:
            cart = Cart.create(user_id)
            self.add(cart)
        return cart
