"""Catalogue maintenance — commands and handler.

Only what the ordering workflow needs from the catalogue: adding products and
putting stock back. Everything else about catalogue editing lives elsewhere.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ordering.catalogue.product import Product
from ordering.domain import ordering
from ordering.errors import ProductNotFound


@ordering.command(part_of="Product")
class AddProduct:
    name = String(required=True, max_length=255, sanitize=False)
    price = Float(required=True, min_value=0.0)
    original_price = Float(min_value=0.0)
    stock_quantity = Integer(default=0, min_value=0)
    description = Text(sanitize=False)
    image = String(max_length=1000, sanitize=False)
    category_id = Identifier()


@ordering.command(part_of="Product")
class RestockProduct:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    reason = String(max_length=255, sanitize=False)


@ordering.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(AddProduct)
    def add_product(self, command):
        product = Product.create(
            name=command.name,
            price=command.price,
            original_price=command.original_price,
            stock_quantity=command.stock_quantity or 0,
            description=command.description,
            image=command.image,
            category_id=command.category_id,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(RestockProduct)
    def restock_product(self, command):
        repo = current_domain.repository_for(Product)
        try:
            product = repo.get(command.product_id)
        except ObjectNotFoundError:
            raise ProductNotFound(str(command.product_id))
        product.restock(command.quantity, reason=command.reason or "restock")
        repo.add(product)
