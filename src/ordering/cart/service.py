"""Cart operations folded into OperationResult."""

from protean.utils.globals import current_domain

from ordering.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartLine
from ordering.cart.queries import cart_to_dict, get_cart
from ordering.results import run_operation


class CartService:
    def get_cart(self, user_id):
        return run_operation(
            "Cart lookup", lambda: cart_to_dict(get_cart(user_id)), "Cart retrieved successfully", user_id=str(user_id)
        )

    def add_item(self, user_id, product_id, quantity, size=None, color=None):
        def op():
            current_domain.process(
                AddToCart(user_id=user_id, product_id=product_id, quantity=quantity, size=size, color=color),
                asynchronous=False,
            )
            return cart_to_dict(get_cart(user_id))

        return run_operation("Add to cart", op, "Item added to cart successfully", user_id=str(user_id))

    def update_item(self, user_id, line_id, quantity=None, size=None, color=None):
        def op():
            current_domain.process(
                UpdateCartLine(user_id=user_id, line_id=line_id, quantity=quantity, size=size, color=color),
                asynchronous=False,
            )
            return cart_to_dict(get_cart(user_id))

        return run_operation("Cart update", op, "Cart item updated successfully", user_id=str(user_id))

    def remove_item(self, user_id, line_id):
        def op():
            current_domain.process(RemoveFromCart(user_id=user_id, line_id=line_id), asynchronous=False)
            return cart_to_dict(get_cart(user_id))

        return run_operation("Cart removal", op, "Item removed from cart successfully", user_id=str(user_id))

    def clear(self, user_id):
        def op():
            current_domain.process(ClearCart(user_id=user_id), asynchronous=False)
            return cart_to_dict(get_cart(user_id))

        return run_operation("Cart clear", op, "Cart cleared successfully", user_id=str(user_id))
