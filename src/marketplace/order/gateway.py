"""Order gateway: the boundary between the marketplace core and order storage.

Writes go through commands so they run inside a command handler's
UnitOfWork. Reads query the Order repository and join the directory cards in
memory. Any storage-level failure surfaces as ``PersistenceError`` and means
nothing was changed.
"""

import json

from protean.exceptions import DatabaseError, ExpectedVersionError, TransactionError
from protean.utils.globals import current_domain

from marketplace.access.gate import visibility_criteria
from marketplace.directory.cards import MemberCard, ProductCard
from marketplace.domain import logger
from marketplace.errors import IllegalTransition, PersistenceError
from marketplace.order.lifecycle import OrderAction, OrderStatus, action_towards
from marketplace.order.order import Order
from marketplace.order.placement import PlaceOrders
from marketplace.order.transitions import CompleteOrder, ConfirmOrder
from marketplace.order.views import OrderView

_STORAGE_FAILURES = (DatabaseError, TransactionError, ExpectedVersionError)

_COMMAND_FOR_ACTION = {
    OrderAction.CONFIRM: ConfirmOrder,
    OrderAction.COMPLETE: CompleteOrder,
}


class OrderGateway:
    def _process(self, command, what):
        try:
            return current_domain.process(command, asynchronous=False)
        except PersistenceError:
            raise
        except _STORAGE_FAILURES as exc:
            logger.error("order_storage_failed", operation=what, error=str(exc))
            raise PersistenceError(f"Could not {what}: {exc}", original_exception=exc) from exc

    # -------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------
    def insert_orders(self, requests) -> list[str]:
        """Store every request as a pending order, all or nothing. Returns the new ids."""
        rows = [request.to_row() for request in requests]
        if not rows:
            return []
        return self._process(PlaceOrders(orders=json.dumps(rows)), "store order batch")

    def update_order_status(self, order_id, status, viewer) -> Order:
        status = OrderStatus(status)
        if status == OrderStatus.PENDING:
            raise IllegalTransition(f"Cannot transition to {status.value}")
        command_cls = _COMMAND_FOR_ACTION[action_towards(status)]
        command = command_cls(order_id=str(order_id), viewer_id=str(viewer.user_id), viewer_role=viewer.role)
        return self._process(command, f"move order {order_id} to {status.value}")

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def fetch_orders_for_viewer(self, viewer) -> list[OrderView]:
        """Orders the viewer bought or sold, newest first."""
        return self._fetch(visibility_criteria(viewer.user_id))

    def fetch_all_orders(self) -> list[OrderView]:
        """Every order, newest first. Callers must gate this to admins."""
        return self._fetch(None)

    def _fetch(self, criteria) -> list[OrderView]:
        query = current_domain.repository_for(Order)._dao.query
        if criteria is not None:
            query = query.filter(criteria)
        try:
            orders = query.order_by("-created_at").limit(None).all().items
        except _STORAGE_FAILURES as exc:
            raise PersistenceError(f"Could not read orders: {exc}", original_exception=exc) from exc
        return self._joined(orders)

    def _joined(self, orders) -> list[OrderView]:
        if not orders:
            return []

        member_ids = {o.buyer_id for o in orders} | {o.seller_id for o in orders}
        product_ids = {o.product_id for o in orders}
        members = _cards_by_id(MemberCard, "member_id", member_ids)
        products = _cards_by_id(ProductCard, "product_id", product_ids)

        return [
            OrderView.join(
                order,
                product=products.get(order.product_id),
                buyer=members.get(order.buyer_id),
                seller=members.get(order.seller_id),
            )
            for order in orders
        ]


def _cards_by_id(card_cls, id_field, ids) -> dict:
    query = current_domain.repository_for(card_cls)._dao.query
    cards = query.filter(**{f"{id_field}__in": sorted(ids)}).limit(None).all().items
    return {getattr(card, id_field): card for card in cards}
