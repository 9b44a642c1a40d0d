"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Product")
class ProductAdded:
    """A product was added to the catalogue with an opening stock level."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True, sanitize=False)
    price = Float(required=True)
    stock_quantity = Integer(required=True)
    added_at = DateTime(required=True)


@ordering.event(part_of="Product")
class StockWithdrawn:
    """Stock was taken out of a product to back order lines."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    withdrawn_at = DateTime(required=True)


@ordering.event(part_of="Product")
class StockRestored:
    """Stock was put back into a product (restock or cancelled order)."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    reason = String(max_length=255, sanitize=False)
    restored_at = DateTime(required=True)
