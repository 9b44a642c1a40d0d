"""Domain tests for the pricing resolver."""

import json
from datetime import UTC, datetime, timedelta

from ordering.catalogue.product import Product
from ordering.pricing.resolver import resolve_price
from ordering.promotion.promotion import DiscountType, Promotion

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=UTC)


def _product(price=200000.0):
    return Product.create(name="Linen Shirt", price=price, stock_quantity=10)


def _promotion(product, discount_type=DiscountType.PERCENT.value, value=10.0, **overrides):
    defaults = {
        "name": "Spring sale",
        "discount_type": discount_type,
        "discount_value": value,
        "start_date": NOW - timedelta(days=1),
        "end_date": NOW + timedelta(days=1),
        "is_active": True,
        "product_ids": json.dumps([str(product.id)]),
    }
    defaults.update(overrides)
    return Promotion(**defaults)


class TestResolvePrice:
    def test_no_promotions_keeps_base_price(self):
        product = _product()
        resolved = resolve_price(product, [], NOW)
        assert resolved.unit_price == 200000.0
        assert resolved.promotion_id is None
        assert resolved.discounted is False

    def test_percentage_discount(self):
        product = _product()
        promotion = _promotion(product, value=10.0)
        resolved = resolve_price(product, [promotion], NOW)
        assert resolved.unit_price == 180000.0
        assert resolved.promotion_id == str(promotion.id)
        assert resolved.original_price == 200000.0

    def test_amount_discount_is_clamped_to_price(self):
        product = _product()
        promotion = _promotion(product, discount_type=DiscountType.AMOUNT.value, value=250000.0)
        resolved = resolve_price(product, [promotion], NOW)
        assert resolved.unit_price == 0.0

    def test_promotion_for_another_product_is_ignored(self):
        product = _product()
        other = _product()
        resolved = resolve_price(product, [_promotion(other)], NOW)
        assert resolved.unit_price == 200000.0

    def test_inactive_promotion_is_ignored(self):
        product = _product()
        resolved = resolve_price(product, [_promotion(product, is_active=False)], NOW)
        assert resolved.promotion_id is None

    def test_promotion_outside_window_is_ignored(self):
        product = _product()
        future = _promotion(product, start_date=NOW + timedelta(days=1), end_date=NOW + timedelta(days=5))
        expired = _promotion(product, start_date=NOW - timedelta(days=5), end_date=NOW - timedelta(days=1))
        assert resolve_price(product, [future, expired], NOW).unit_price == 200000.0

    def test_window_bounds_are_inclusive(self):
        product = _product()
        promotion = _promotion(product, start_date=NOW, end_date=NOW)
        assert resolve_price(product, [promotion], NOW).promotion_id == str(promotion.id)


class TestTieBreak:
    def test_largest_discount_wins(self):
        product = _product()
        ten_percent = _promotion(product, value=10.0)
        fifty_thousand = _promotion(product, discount_type=DiscountType.AMOUNT.value, value=50000.0)
        resolved = resolve_price(product, [ten_percent, fifty_thousand], NOW)
        assert resolved.promotion_id == str(fifty_thousand.id)
        assert resolved.unit_price == 150000.0

    def test_equal_discounts_prefer_earliest_start(self):
        product = _product()
        later = _promotion(product, start_date=NOW - timedelta(hours=1))
        earlier = _promotion(product, start_date=NOW - timedelta(days=3))
        resolved = resolve_price(product, [later, earlier], NOW)
        assert resolved.promotion_id == str(earlier.id)

    def test_equal_discount_and_start_prefer_lowest_id(self):
        product = _product()
        b = _promotion(product, id="promo-b")
        a = _promotion(product, id="promo-a")
        resolved = resolve_price(product, [b, a], NOW)
        assert resolved.promotion_id == "promo-a"
