"""Order placement — turn explicit line items or the user's cart into an order.

Everything is validated before anything is written: line quantities, product
existence and stock, shipping details and payment method. The writes (order
number, stock withdrawals, the order itself and the cart reconciliation) then
happen inside the command handler's unit of work, so either all of them land
or none do.

A product changed by a concurrent placement between validation and save
aborts the unit of work with ``ExpectedVersionError``; the caller retries the
whole command, and the retry's validation sees the fresh stock.
"""

import json
from dataclasses import dataclass

import structlog
from protean import handle
from protean.fields import Boolean, DateTime, Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart, line_key
from ordering.domain import ordering
from ordering.errors import EmptyOrder, InvalidPaymentMethod, InvalidQuantity, InvalidShippingInfo
from ordering.inventory.ledger import InventoryLedger
from ordering.order.numbering import allocate_order_number
from ordering.order.order import Order, OrderLine, ShippingInfo
from ordering.policy import compute_charges, parse_payment_method
from ordering.pricing.resolver import resolve_price
from ordering.promotion.promotion import Promotion
from ordering.utils.clock import utc_now

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class LineItem:
    product_id: str
    quantity: int
    size: str | None = None
    color: str | None = None

    @property
    def key(self):
        return line_key(self.product_id, self.size, self.color)

    @classmethod
    def from_dict(cls, data: dict) -> "LineItem":
        return cls(
            product_id=str(data["product_id"]),
            quantity=data.get("quantity"),
            size=data.get("size"),
            color=data.get("color"),
        )


@ordering.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    lines = Text(sanitize=False)  # JSON: [{product_id, quantity, size, color}, ...]
    from_cart = Boolean(default=False)
    shipping_info = Text(required=True, sanitize=False)  # JSON: {name, phone, address, city, district, note}
    payment_method = String(max_length=20)
    payment_id = String(max_length=255, sanitize=False)
    note = String(max_length=1000, sanitize=False)
    placed_at = DateTime()  # defaults to now


def shipping_info_from(data) -> ShippingInfo:
    """Build the shipping snapshot, reporting every missing required part."""
    data = data or {}
    fields = ("name", "phone", "address", "city", "district", "note")
    values = {field: (data.get(field) or "").strip() or None for field in fields}
    info = ShippingInfo(**values)
    missing = info.missing_fields()
    if missing:
        raise InvalidShippingInfo(missing)
    return info


def cart_line_items(cart) -> list[LineItem]:
    if cart is None:
        return []
    return [
        LineItem(product_id=str(line.product_id), quantity=line.quantity, size=line.size, color=line.color)
        for line in cart.lines or []
    ]


def build_order_lines(items, products, promotions, now) -> list[OrderLine]:
    """Price every line item and copy the product data the order keeps."""
    lines = []
    for item in items:
        product = products[str(item.product_id)]
        resolved = resolve_price(product, promotions, now)
        lines.append(
            OrderLine(
                product_id=str(product.id),
                product_name=product.name,
                product_image=product.image,
                quantity=item.quantity,
                size=item.size,
                color=item.color,
                price=resolved.unit_price,
                original_price=product.price,
                promotion_id=resolved.promotion_id,
                total_price=round(resolved.unit_price * item.quantity, 2),
            )
        )
    return lines


def place_order_for(
    user_id,
    items,
    shipping_info,
    payment_method,
    payment_id=None,
    note=None,
    now=None,
) -> Order:
    """Validate, price and persist an order for `items` within the current unit of work."""
    now = now or utc_now()
    items = list(items or [])
    if not items:
        raise EmptyOrder()
    for item in items:
        if item.quantity is None or item.quantity <= 0:
            raise InvalidQuantity(item.product_id, item.quantity)

    promotions = current_domain.repository_for(Promotion).find_active(now)

    ledger = InventoryLedger()
    products = ledger.validate_all(items)

    order_lines = build_order_lines(items, products, promotions, now)
    subtotal = round(sum(line.total_price for line in order_lines), 2)
    charges = compute_charges(subtotal)

    info = shipping_info_from(shipping_info)
    method = parse_payment_method(payment_method)
    if method is None:
        raise InvalidPaymentMethod(payment_method)

    # Writes start here
    order_number = allocate_order_number(now)
    ledger.commit_all(items, products)

    order = Order.create(
        order_number=order_number,
        user_id=user_id,
        lines=order_lines,
        charges=charges,
        shipping_info=info,
        payment_method=method.value,
        placed_by=user_id,
        payment_id=payment_id,
        note=note,
        placed_at=now,
    )
    current_domain.repository_for(Order).add(order)

    cart_repo = current_domain.repository_for(Cart)
    cart = cart_repo.find_for_user(user_id)
    if cart is not None and cart.remove_lines_matching([item.key for item in items], order_id=order.id):
        cart_repo.add(cart)

    logger.info(
        "Order placed",
        order_id=str(order.id),
        order_number=order.order_number,
        user_id=str(user_id),
        line_count=len(order_lines),
        total=order.total,
    )
    return order


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        if command.from_cart:
            cart = current_domain.repository_for(Cart).find_for_user(command.user_id)
            items = cart_line_items(cart)
        else:
            raw = json.loads(command.lines) if isinstance(command.lines, str) else command.lines
            items = [LineItem.from_dict(entry) for entry in raw or []]

        shipping_info = command.shipping_info
        if isinstance(shipping_info, str):
            shipping_info = json.loads(shipping_info)

        order = place_order_for(
            user_id=command.user_id,
            items=items,
            shipping_info=shipping_info,
            payment_method=command.payment_method,
            payment_id=command.payment_id,
            note=command.note,
            now=command.placed_at,
        )
        return str(order.id)
