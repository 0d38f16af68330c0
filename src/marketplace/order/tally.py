"""Seller order tally: per-seller counts by status, plus revenue.

Feeds the admin dashboard totals and a seller's own summary.
"""

from decimal import Decimal as D

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import Decimal, Identifier, Integer
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.order.events import OrderCompleted, OrderConfirmed, OrderPlaced
from marketplace.order.order import Order


@marketplace.projection
class SellerOrderTally:
    seller_id = Identifier(identifier=True, required=True)
    pending = Integer(default=0)
    confirmed = Integer(default=0)
    completed = Integer(default=0)
    placed_revenue = Decimal(default=D("0"))


def _get_or_create(seller_id):
    repo = current_domain.repository_for(SellerOrderTally)
    try:
        return repo.get(seller_id)
    except ObjectNotFoundError:
        return SellerOrderTally(seller_id=seller_id, pending=0, confirmed=0, completed=0, placed_revenue=D("0"))


def tally_for(seller_id):
    """The seller's tally, or an all-zero one if they have no orders yet."""
    return _get_or_create(str(seller_id))


def marketplace_totals() -> dict:
    """Order counts by status across every seller."""
    tallies = current_domain.repository_for(SellerOrderTally)._dao.query.limit(None).all().items
    totals = {"pending": 0, "confirmed": 0, "completed": 0}
    for tally in tallies:
        totals["pending"] += tally.pending or 0
        totals["confirmed"] += tally.confirmed or 0
        totals["completed"] += tally.completed or 0
    totals["total"] = sum(totals.values())
    return totals


@marketplace.projector(projector_for=SellerOrderTally, aggregates=[Order])
class SellerOrderTallyProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        tally = _get_or_create(event.seller_id)
        tally.pending = (tally.pending or 0) + 1
        tally.placed_revenue = (tally.placed_revenue or D("0")) + event.total_price
        current_domain.repository_for(SellerOrderTally).add(tally)

    @on(OrderConfirmed)
    def on_order_confirmed(self, event):
        tally = _get_or_create(event.seller_id)
        tally.pending = max((tally.pending or 0) - 1, 0)
        tally.confirmed = (tally.confirmed or 0) + 1
        current_domain.repository_for(SellerOrderTally).add(tally)

    @on(OrderCompleted)
    def on_order_completed(self, event):
        tally = _get_or_create(event.seller_id)
        tally.confirmed = max((tally.confirmed or 0) - 1, 0)
        tally.completed = (tally.completed or 0) + 1
        current_domain.repository_for(SellerOrderTally).add(tally)
