"""Ordering bounded context — carts, orders and stock reconciliation.

Turns a shopping cart (or an explicit list of line items) into a persisted
order while checking stock, applying promotional pricing, decrementing
inventory and reconciling the originating cart. Products and promotions live
here as reference data so that every write of an order placement shares one
unit of work.
"""

from protean.domain import Domain

from ordering.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

ordering = Domain(name="ordering")
