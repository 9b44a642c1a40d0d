"""Application tests for promotion management and lookup."""

import json
from datetime import UTC, datetime, timedelta

import pytest
from ordering.errors import PromotionNotFound
from ordering.promotion.management import CreatePromotion, DeactivatePromotion
from ordering.promotion.promotion import Promotion
from protean import current_domain
from protean.exceptions import ValidationError

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=UTC)


def _create(product_ids=("p-1",), start=NOW - timedelta(days=1), end=NOW + timedelta(days=1), **overrides):
    values = {
        "name": "Summer sale",
        "discount_type": "percent",
        "discount_value": 20.0,
        "start_date": start,
        "end_date": end,
        "product_ids": json.dumps(list(product_ids)),
    }
    values.update(overrides)
    return current_domain.process(CreatePromotion(**values), asynchronous=False)


class TestCreatePromotion:
    def test_promotion_is_stored(self):
        promotion_id = _create(product_ids=["p-1", "p-2"])

        promotion = current_domain.repository_for(Promotion).get(promotion_id)
        assert promotion.name == "Summer sale"
        assert promotion.is_active is True
        assert promotion.eligible_product_ids == {"p-1", "p-2"}

    def test_window_must_be_ordered(self):
        with pytest.raises(ValidationError):
            _create(start=NOW, end=NOW - timedelta(days=1))

    def test_percent_above_hundred_is_rejected(self):
        with pytest.raises(ValidationError):
            _create(discount_value=120.0)

    def test_unknown_discount_type_is_rejected(self):
        with pytest.raises(ValidationError):
            _create(discount_type="bogo")


class TestActivePromotions:
    def test_only_running_promotions_are_active(self):
        running = _create()
        _create(start=NOW + timedelta(days=2), end=NOW + timedelta(days=3))
        _create(start=NOW - timedelta(days=3), end=NOW - timedelta(days=2))

        active = current_domain.repository_for(Promotion).find_active(NOW)

        assert [str(p.id) for p in active] == [running]

    def test_deactivated_promotions_are_skipped(self):
        promotion_id = _create()
        current_domain.process(DeactivatePromotion(promotion_id=promotion_id), asynchronous=False)

        assert current_domain.repository_for(Promotion).find_active(NOW) == []
        assert current_domain.repository_for(Promotion).get(promotion_id).is_active is False

    def test_deactivate_unknown_promotion(self):
        with pytest.raises(PromotionNotFound):
            current_domain.process(DeactivatePromotion(promotion_id="no-such-promotion"), asynchronous=False)
