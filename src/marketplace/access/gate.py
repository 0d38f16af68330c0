"""Role gate: who sees which orders, and what they may do with them.

Visibility is by participation: a viewer sees an order when they are its
buyer or its seller. The legal actions on an order come straight from the
status machine. Which party's details a viewer is shown is a display rule
keyed by role, not an authorization decision.
"""

from enum import Enum

from protean import Q
from protean.fields import String

from marketplace.access.viewer import Role, covering_every_role
from marketplace.domain import marketplace
from marketplace.errors import Unauthorized
from marketplace.order.lifecycle import OrderAction, can_transition, target_of


class Counterpart(Enum):
    SELLER = "seller"
    BUYER = "buyer"


_COUNTERPART_SHOWN_TO = covering_every_role(
    {
        Role.BUYER: Counterpart.SELLER,
        Role.SELLER: Counterpart.BUYER,
        Role.ADMIN: Counterpart.BUYER,
    },
    name="counterpart panel table",
)

_MAY_CHECKOUT = covering_every_role(
    {
        Role.BUYER: True,
        Role.SELLER: False,
        Role.ADMIN: False,
    },
    name="checkout permission table",
)

_MAY_READ_ALL_ORDERS = covering_every_role(
    {
        Role.BUYER: False,
        Role.SELLER: False,
        Role.ADMIN: True,
    },
    name="admin read permission table",
)


@marketplace.value_object
class CounterpartPanel:
    """The other party of an order, as presented to the viewer."""

    side = String(required=True, choices=Counterpart, max_length=10)
    display_name = String(max_length=255, sanitize=False)
    email = String(max_length=255)


# ---------------------------------------------------------------------------
# Visibility
# ---------------------------------------------------------------------------
def visible_orders_filter(viewer_id):
    """Predicate over orders: True when ``viewer_id`` is the buyer or the seller."""
    viewer_id = str(viewer_id)

    def is_visible(order) -> bool:
        return str(order.buyer_id) == viewer_id or str(order.seller_id) == viewer_id

    return is_visible


def visibility_criteria(viewer_id) -> Q:
    """The same rule as ``visible_orders_filter``, as repository query criteria."""
    viewer_id = str(viewer_id)
    return Q(buyer_id=viewer_id) | Q(seller_id=viewer_id)


# ---------------------------------------------------------------------------
# Actions and display routing
# ---------------------------------------------------------------------------
def actions_for(order, viewer) -> frozenset:
    return frozenset(action for action in OrderAction if can_transition(order, target_of(action), viewer))


def counterpart_panel(view, viewer) -> CounterpartPanel:
    side = _COUNTERPART_SHOWN_TO[viewer.role_kind]
    if side == Counterpart.SELLER:
        return CounterpartPanel(
            side=side.value,
            display_name=view.seller_brand_name or view.seller_name,
            email=view.seller_email,
        )
    return CounterpartPanel(side=side.value, display_name=view.buyer_name, email=view.buyer_email)


# ---------------------------------------------------------------------------
# Role checks
# ---------------------------------------------------------------------------
def ensure_buyer(viewer, operation="checkout") -> None:
    if not _MAY_CHECKOUT[viewer.role_kind]:
        raise Unauthorized(f"Only buyers may {operation}; {viewer.user_id} is a {viewer.role}")


def ensure_admin(viewer) -> None:
    if not _MAY_READ_ALL_ORDERS[viewer.role_kind]:
        raise Unauthorized(f"Only admins may list every order; {viewer.user_id} is a {viewer.role}")
