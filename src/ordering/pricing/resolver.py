"""Effective unit price of a product under promotions.

Pure function over already-loaded data: the caller fetches the active
promotions once per request and passes them in for every line.

Among several running promotions covering the same product, the one taking
the most off wins; ties go to the promotion that started first, then to the
lowest promotion id.
"""

from dataclasses import dataclass
from datetime import UTC, datetime

from ordering.utils.clock import as_utc


@dataclass(frozen=True)
class ResolvedPrice:
    unit_price: float
    promotion_id: str | None = None
    original_price: float | None = None

    @property
    def discounted(self) -> bool:
        return self.promotion_id is not None


def _rank(promotion, base_price):
    return (-promotion.discount_for(base_price), as_utc(promotion.start_date), str(promotion.id))


def resolve_price(product, active_promotions, now=None) -> ResolvedPrice:
    """Unit price of `product` at `now` after the best eligible promotion."""
    now = now or datetime.now(UTC)
    base_price = product.price or 0.0

    eligible = [
        promotion
        for promotion in active_promotions or []
        if promotion.is_running(now) and promotion.covers(product.id)
    ]
    if not eligible:
        return ResolvedPrice(unit_price=base_price, original_price=base_price)

    best = min(eligible, key=lambda promotion: _rank(promotion, base_price))
    unit_price = round(max(base_price - best.discount_for(base_price), 0.0), 2)
    return ResolvedPrice(unit_price=unit_price, promotion_id=str(best.id), original_price=base_price)
