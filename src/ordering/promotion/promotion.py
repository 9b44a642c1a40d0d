"""Promotion aggregate: time-boxed discounts on a set of products.

A promotion is read-only input to pricing: the resolver only asks whether it
is running at a given instant, whether it covers a product and how much it
takes off a base price.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, String, Text

from ordering.domain import ordering
from ordering.utils.clock import as_utc


class DiscountType(Enum):
    PERCENT = "percent"
    AMOUNT = "amount"


@ordering.aggregate
class Promotion:
    name = String(required=True, max_length=255, sanitize=False)
    description = Text(sanitize=False)
    discount_type = String(choices=DiscountType, default=DiscountType.PERCENT.value)
    discount_value = Float(required=True, min_value=0.0)
    start_date = DateTime(required=True)
    end_date = DateTime(required=True)
    is_active = Boolean(default=True)
    product_ids = Text(sanitize=False)  # JSON array of product ids

    @invariant.post
    def window_must_be_ordered(self):
        if self.start_date and self.end_date and as_utc(self.start_date) > as_utc(self.end_date):
            raise ValidationError({"end_date": ["Promotion must end after it starts"]})

    @invariant.post
    def percentage_cannot_exceed_hundred(self):
        if self.discount_type == DiscountType.PERCENT.value and (self.discount_value or 0) > 100:
            raise ValidationError({"discount_value": ["Percentage discount cannot exceed 100"]})

    @classmethod
    def create(cls, name, discount_type, discount_value, start_date, end_date, product_ids, description=None):
        return cls(
            name=name,
            description=description,
            discount_type=discount_type,
            discount_value=discount_value,
            start_date=start_date,
            end_date=end_date,
            is_active=True,
            product_ids=json.dumps([str(pid) for pid in product_ids]),
        )

    @property
    def eligible_product_ids(self) -> set[str]:
        return set(json.loads(self.product_ids)) if self.product_ids else set()

    def is_running(self, now=None):
        """Active flag set and `now` inside [start_date, end_date]."""
        now = as_utc(now or datetime.now(UTC))
        return bool(self.is_active) and as_utc(self.start_date) <= now <= as_utc(self.end_date)

    def covers(self, product_id):
        return str(product_id) in self.eligible_product_ids

    def discount_for(self, base_price):
        """Amount taken off `base_price`, clamped to [0, base_price]."""
        if self.discount_type == DiscountType.PERCENT.value:
            discount = base_price * (self.discount_value or 0.0) / 100
        else:
            discount = self.discount_value or 0.0
        return round(min(max(discount, 0.0), base_price), 2)

    def deactivate(self):
        self.is_active = False
