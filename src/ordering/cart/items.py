"""Cart line management — commands and handler."""

from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart
from ordering.domain import ordering
from ordering.errors import ProductNotFound
from ordering.inventory.ledger import InventoryLedger


@ordering.command(part_of="Cart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    size = String(max_length=50, sanitize=False)
    color = String(max_length=50, sanitize=False)


@ordering.command(part_of="Cart")
class UpdateCartLine:
    user_id = Identifier(required=True)
    line_id = Identifier(required=True)
    quantity = Integer()  # zero or less removes the line
    size = String(max_length=50, sanitize=False)
    color = String(max_length=50, sanitize=False)


@ordering.command(part_of="Cart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    line_id = Identifier(required=True)


@ordering.command(part_of="Cart")
class ClearCart:
    user_id = Identifier(required=True)


@ordering.command_handler(part_of=Cart)
class ManageCartLinesHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = InventoryLedger().load(command.product_id)
        if product is None:
            raise ProductNotFound(str(command.product_id))

        repo = current_domain.repository_for(Cart)
        cart = repo.get_or_create(command.user_id)
        line = cart.add_line(
            product,
            quantity=command.quantity,
            size=command.size,
            color=command.color,
        )
        repo.add(cart)
        return str(line.id)

    @handle(UpdateCartLine)
    def update_cart_line(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get_or_create(command.user_id)
        line = cart.update_line(
            command.line_id,
            quantity=command.quantity,
            size=command.size,
            color=command.color,
        )
        repo.add(cart)
        return str(line.id) if line else None

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get_or_create(command.user_id)
        cart.remove_line(command.line_id)
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get_or_create(command.user_id)
        cart.clear()
        repo.add(cart)
