"""Repository for the Promotion aggregate."""

from datetime import UTC, datetime

from ordering.domain import ordering
from ordering.promotion.promotion import Promotion


@ordering.repository(part_of=Promotion)
class PromotionRepository:
    def find_active(self, now=None) -> list[Promotion]:
        """Promotions flagged active whose window contains `now`."""
        now = now or datetime.now(UTC)
        flagged = self._dao.query.filter(is_active=True).all().items
        return [promotion for promotion in flagged if promotion.is_running(now)]
