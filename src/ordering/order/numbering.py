"""Order numbers of the form `YYYYMMDD-NNNN`, counted per UTC day.

The counter for a day lives in its own aggregate keyed by the date, so two
placements on the same day contend on the same record and the version check
on save keeps numbers unique.
"""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError
from protean.fields import Integer, String
from protean.utils.globals import current_domain

from ordering.domain import ordering


@ordering.aggregate
class OrderNumberSequence:
    day = String(identifier=True, max_length=8)  # YYYYMMDD
    last_value = Integer(default=0, min_value=0)

    def next_number(self) -> str:
        self.last_value = (self.last_value or 0) + 1
        return f"{self.day}-{self.last_value:04d}"


def day_key(now=None) -> str:
    now = now or datetime.now(UTC)
    if now.tzinfo is not None:
        now = now.astimezone(UTC)
    return now.strftime("%Y%m%d")


def _get_or_create(key):
    repo = current_domain.repository_for(OrderNumberSequence)
    try:
        return repo.get(key)
    except ObjectNotFoundError:
        return OrderNumberSequence(day=key, last_value=0)


def allocate_order_number(now=None) -> str:
    """Next order number for the UTC day of `now`, persisted immediately."""
    sequence = _get_or_create(day_key(now))
    number = sequence.next_number()
    current_domain.repository_for(OrderNumberSequence).add(sequence)
    return number
