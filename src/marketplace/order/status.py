"""Order status service: applies a seller's confirm or complete action."""

from marketplace.domain import logger
from marketplace.order.gateway import OrderGateway
from marketplace.order.lifecycle import OrderAction, target_of
from marketplace.utils.guard import InFlightGuard

status_guard = InFlightGuard("order status change")


class OrderStatusMachine:
    def __init__(self, gateway: OrderGateway | None = None, guard: InFlightGuard | None = None):
        self.gateway = gateway or OrderGateway()
        self.guard = guard or status_guard

    def apply(self, order_id, action, viewer):
        """Move the stored order one step forward and return it.

        Raises ``IllegalTransition`` when the step is not allowed for this
        viewer, and ``PersistenceError`` when the store fails. In both cases
        the stored order is unchanged and callers should re-read it.
        """
        target = target_of(action)
        with self.guard.hold(order_id):
            order = self.gateway.update_order_status(order_id, target, viewer)

        logger.info("order_status_changed", order_id=str(order_id), status=target.value, seller_id=str(viewer.user_id))
        return order

    def confirm(self, order_id, viewer):
        return self.apply(order_id, OrderAction.CONFIRM, viewer)

    def complete(self, order_id, viewer):
        return self.apply(order_id, OrderAction.COMPLETE, viewer)
