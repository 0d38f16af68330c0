"""Order status changes: commands and handlers.

The viewer travels with the command so that the aggregate, not the caller,
decides whether the transition is legal.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.access.viewer import Role, Viewer
from marketplace.domain import marketplace
from marketplace.order.order import Order


@marketplace.command(part_of="Order")
class ConfirmOrder:
    order_id = Identifier(required=True)
    viewer_id = Identifier(required=True)
    viewer_role = String(required=True, choices=Role, max_length=20)


@marketplace.command(part_of="Order")
class CompleteOrder:
    order_id = Identifier(required=True)
    viewer_id = Identifier(required=True)
    viewer_role = String(required=True, choices=Role, max_length=20)


def _viewer_of(command) -> Viewer:
    return Viewer.of(command.viewer_id, command.viewer_role)


@marketplace.command_handler(part_of=Order)
class OrderTransitionHandler:
    @handle(ConfirmOrder)
    def confirm_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.confirm(_viewer_of(command))
        repo.add(order)
        return order

    @handle(CompleteOrder)
    def complete_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.complete(_viewer_of(command))
        repo.add(order)
        return order
