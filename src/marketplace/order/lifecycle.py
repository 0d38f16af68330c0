"""Order status machine.

State Machine:
    PENDING → CONFIRMED → COMPLETED

Orders only ever move one step forward. Only the seller who owns an order
may advance it; buyers and admins never can. There is no cancellation and no
way back.
"""

from enum import Enum

from marketplace.access.viewer import Role, covering_every_role
from marketplace.errors import IllegalTransition


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"


class OrderAction(Enum):
    CONFIRM = "confirm"
    COMPLETE = "complete"


class PaymentMethod(Enum):
    BANK_TRANSFER = "bank_transfer"
    CASH = "cash"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED},
    OrderStatus.CONFIRMED: {OrderStatus.COMPLETED},
    OrderStatus.COMPLETED: set(),  # Terminal
}

_ACTION_TARGETS = {
    OrderAction.CONFIRM: OrderStatus.CONFIRMED,
    OrderAction.COMPLETE: OrderStatus.COMPLETED,
}

# Which roles may advance an order they own
_MAY_ADVANCE = covering_every_role(
    {
        Role.BUYER: False,
        Role.SELLER: True,
        Role.ADMIN: False,
    },
    name="order advancement table",
)


def target_of(action) -> OrderStatus:
    """The status an action moves an order into."""
    return _ACTION_TARGETS[OrderAction(action)]


def action_towards(target) -> OrderAction:
    """The action that moves an order into ``target``."""
    target = OrderStatus(target)
    for action, status in _ACTION_TARGETS.items():
        if status == target:
            return action
    raise ValueError(f"No action leads to {target.value}")


def is_next_status(current, target) -> bool:
    return OrderStatus(target) in _VALID_TRANSITIONS[OrderStatus(current)]


def can_transition(order, target, viewer) -> bool:
    """True iff ``viewer`` may move ``order`` into ``target`` right now.

    ``order`` is anything carrying ``status`` and ``seller_id``: the ``Order``
    aggregate or a denormalized ``OrderView`` row.
    """
    if not is_next_status(order.status, target):
        return False
    if not _MAY_ADVANCE[viewer.role_kind]:
        return False
    return str(viewer.user_id) == str(order.seller_id)


def ensure_transition(order, target, viewer) -> None:
    current = OrderStatus(order.status)
    target = OrderStatus(target)
    if not can_transition(order, target, viewer):
        raise IllegalTransition(
            f"Cannot transition from {current.value} to {target.value} as {viewer.role} {viewer.user_id}"
        )


def payment_method_value(method) -> str:
    """Accept a ``PaymentMethod`` or its raw value; field validation rejects anything else."""
    return method.value if isinstance(method, PaymentMethod) else method
