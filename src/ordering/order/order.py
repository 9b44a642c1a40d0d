"""Order aggregate — a persisted purchase and its lifecycle.

State machine:
    Pending → Confirmed → Processing → Shipped → Delivered → Returned
    Pending / Confirmed → Cancelled

Every status change appends exactly one tracking entry (customer facing) and
one history entry (audit, with the actor). Both trails are append-only.
Administrators can force any target status; forced moves are marked as
overrides in the history.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from ordering.domain import ordering
from ordering.errors import InvalidStatusTransition, OrderNotCancellable, OrderNotEditable
from ordering.order.events import OrderCancelled, OrderInfoUpdated, OrderPlaced, OrderStatusChanged


class OrderStatus(Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"
    RETURNED = "Returned"

    @classmethod
    def parse(cls, value):
        """Match a status by value or name, ignoring case; None when unknown."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        return next((s for s in cls if s.value.lower() == text or s.name.lower() == text), None)


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: {OrderStatus.RETURNED},
    OrderStatus.CANCELLED: set(),
    OrderStatus.RETURNED: set(),
}

_CANCELLABLE_STATES = {OrderStatus.PENDING, OrderStatus.CONFIRMED}

SYSTEM_LOCATION = "System"

_TRACKING_DESCRIPTIONS = {
    OrderStatus.PENDING: "Order has been placed",
    OrderStatus.CONFIRMED: "Order has been confirmed",
    OrderStatus.PROCESSING: "Order is being prepared",
    OrderStatus.SHIPPED: "Order has been handed to the carrier",
    OrderStatus.DELIVERED: "Order has been delivered",
    OrderStatus.CANCELLED: "Order has been cancelled",
    OrderStatus.RETURNED: "Order has been returned",
}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class ShippingInfo:
    """Delivery details captured at checkout.

    Name, phone and address must be present for an order to be placed; the
    check happens in the placement workflow so it can report every missing
    part at once.
    """

    name = String(max_length=255, sanitize=False)
    phone = String(max_length=50, sanitize=False)
    address = String(max_length=500, sanitize=False)
    city = String(max_length=100, sanitize=False)
    district = String(max_length=100, sanitize=False)
    note = String(max_length=500, sanitize=False)

    REQUIRED = ("name", "phone", "address")

    def missing_fields(self) -> list[str]:
        return [field for field in self.REQUIRED if not (getattr(self, field) or "").strip()]

    def merged_with(self, changes: dict) -> "ShippingInfo":
        """Copy with the non-empty entries of `changes` applied."""
        values = self.to_dict()
        values.update({k: v for k, v in changes.items() if k in values and v})
        return ShippingInfo(**values)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderLine:
    """A product as it was sold: name, image and price are copied at order time."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255, sanitize=False)
    product_image = String(max_length=1000, sanitize=False)
    quantity = Integer(required=True, min_value=1)
    size = String(max_length=50, sanitize=False)
    color = String(max_length=50, sanitize=False)
    price = Float(required=True, min_value=0.0)
    original_price = Float(min_value=0.0)
    promotion_id = Identifier()
    total_price = Float(required=True, min_value=0.0)

    @invariant.post
    def total_price_must_match_quantity(self):
        if abs((self.total_price or 0.0) - (self.price or 0.0) * (self.quantity or 0)) > 0.005:
            raise ValidationError({"total_price": ["Line total must equal price times quantity"]})


@ordering.entity(part_of="Order")
class OrderTracking:
    status = String(required=True, max_length=50)
    location = String(max_length=255, sanitize=False)
    description = String(max_length=500, sanitize=False)
    occurred_at = DateTime(required=True)


@ordering.entity(part_of="Order")
class OrderHistory:
    status = String(required=True, max_length=50)
    changed_by = String(required=True, max_length=255, sanitize=False)
    note = String(max_length=1000, sanitize=False)
    changed_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    user_id = Identifier(required=True)
    order_number = String(required=True, max_length=20)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    subtotal = Float(default=0.0)
    shipping = Float(default=0.0)
    tax = Float(default=0.0)
    total = Float(default=0.0)
    payment_method = String(required=True, max_length=20)
    payment_id = String(max_length=255, sanitize=False)
    shipping_info = ValueObject(ShippingInfo)
    lines = HasMany(OrderLine)
    tracking = HasMany(OrderTracking)
    history = HasMany(OrderHistory)
    note = String(max_length=1000, sanitize=False)
    cancel_reason = String(max_length=500, sanitize=False)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_must_equal_its_parts(self):
        expected = (self.subtotal or 0.0) + (self.shipping or 0.0) + (self.tax or 0.0)
        if abs((self.total or 0.0) - expected) > 0.005:
            raise ValidationError({"total": ["Total must equal subtotal plus shipping plus tax"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        order_number,
        user_id,
        lines,
        charges,
        shipping_info,
        payment_method,
        placed_by,
        payment_id=None,
        note=None,
        placed_at=None,
    ):
        """Build a Pending order with its seed tracking and history entries.

        `lines` are OrderLine entities; `charges` carries subtotal, shipping,
        tax and total as computed by the charges policy. `placed_at` stamps
        the creation time and the seed entries, and defaults to now.
        """
        now = placed_at or datetime.now(UTC)
        order = cls(
            order_number=order_number,
            user_id=str(user_id),
            status=OrderStatus.PENDING.value,
            subtotal=charges.subtotal,
            shipping=charges.shipping,
            tax=charges.tax,
            total=charges.total,
            payment_method=payment_method,
            payment_id=payment_id,
            shipping_info=shipping_info,
            lines=list(lines),
            note=note,
            created_at=now,
            updated_at=now,
        )
        order._record(OrderStatus.PENDING, placed_by, note="Order placed", at=now)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                user_id=str(order.user_id),
                customer_name=shipping_info.name if shipping_info else None,
                status=order.status,
                subtotal=order.subtotal,
                shipping=order.shipping,
                tax=order.tax,
                total=order.total,
                payment_method=order.payment_method,
                line_count=len(order.lines),
                lines=json.dumps(order._line_quantities(with_price=True)),
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    @property
    def can_review(self) -> bool:
        return self.status == OrderStatus.DELIVERED.value

    @property
    def is_cancellable(self) -> bool:
        return OrderStatus(self.status) in _CANCELLABLE_STATES

    @property
    def customer_name(self):
        return self.shipping_info.name if self.shipping_info else None

    def is_owned_by(self, user_id) -> bool:
        return str(self.user_id) == str(user_id)

    def _line_quantities(self, with_price=False):
        entries = []
        for line in self.lines or []:
            entry = {"product_id": str(line.product_id), "quantity": line.quantity}
            if with_price:
                entry["price"] = line.price
            entries.append(entry)
        return entries

    def _record(self, status, actor, note=None, description=None, at=None):
        """Append one tracking entry and one history entry for `status`."""
        at = at or datetime.now(UTC)
        self.add_tracking(
            OrderTracking(
                status=status.value.lower(),
                location=SYSTEM_LOCATION,
                description=description or _TRACKING_DESCRIPTIONS[status],
                occurred_at=at,
            )
        )
        self.add_history(
            OrderHistory(
                status=status.value,
                changed_by=str(actor),
                note=note,
                changed_at=at,
            )
        )

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def cancel(self, actor, reason=None):
        """Cancel a Pending or Confirmed order."""
        current = OrderStatus(self.status)
        if current not in _CANCELLABLE_STATES:
            raise OrderNotCancellable(current.value)

        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = OrderStatus.CANCELLED.value
            self.cancel_reason = reason
            self.updated_at = now
            self._record(OrderStatus.CANCELLED, actor, note=reason, at=now)

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                order_number=self.order_number,
                user_id=str(self.user_id),
                customer_name=self.customer_name,
                previous_status=current.value,
                reason=reason,
                cancelled_by=str(actor),
                lines=json.dumps(self._line_quantities()),
                cancelled_at=now,
            )
        )

    def update_status(self, new_status, actor, note=None, force=False):
        """Move the order to `new_status` following the transition table.

        With ``force`` any target is accepted and the history entry is marked
        as an override. Unforced cancellation goes through ``cancel``.
        """
        current = OrderStatus(self.status)
        target = OrderStatus.parse(new_status)
        if target is None:
            raise InvalidStatusTransition(current.value, str(new_status))

        if not force:
            if target not in _VALID_TRANSITIONS[current]:
                raise InvalidStatusTransition(current.value, target.value)
            if target == OrderStatus.CANCELLED:
                self.cancel(actor, reason=note)
                return

        history_note = note
        if force:
            override = f"Override: {current.value} -> {target.value}"
            history_note = f"{override}. {note}" if note else override

        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = target.value
            self.updated_at = now
            self._record(target, actor, note=history_note, description=note, at=now)

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                user_id=str(self.user_id),
                customer_name=self.customer_name,
                previous_status=current.value,
                new_status=target.value,
                note=note,
                changed_by=str(actor),
                forced=force,
                changed_at=now,
            )
        )

    def update_info(self, actor, shipping_info=None, note=None):
        """Edit shipping details and/or the note while the order is Pending.

        `shipping_info` is a dict of the parts to change; empty values are
        ignored.
        """
        current = OrderStatus(self.status)
        if current != OrderStatus.PENDING:
            raise OrderNotEditable(current.value)

        new_info = self.shipping_info
        if shipping_info:
            base = self.shipping_info or ShippingInfo()
            new_info = base.merged_with(shipping_info)

        now = datetime.now(UTC)
        with atomic_change(self):
            if shipping_info:
                self.shipping_info = new_info
            if note is not None:
                self.note = note
            self.updated_at = now
            self.add_history(
                OrderHistory(
                    status=current.value,
                    changed_by=str(actor),
                    note="Order information updated",
                    changed_at=now,
                )
            )

        self.raise_(
            OrderInfoUpdated(
                order_id=str(self.id),
                order_number=self.order_number,
                changed_by=str(actor),
                shipping_info=json.dumps(new_info.to_dict()) if shipping_info and new_info else None,
                note=note,
                updated_at=now,
            )
        )
