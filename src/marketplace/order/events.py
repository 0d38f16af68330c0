"""Domain events for the Order aggregate.

Each is a versioned, immutable fact about one order. Amounts are carried as
decimals, which Protean string-encodes in payloads.
"""

from protean.fields import DateTime, Decimal, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Order")
class OrderPlaced:
    """An order was created from one cart line at checkout."""

    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    total_price = Decimal(required=True)
    payment_method = String(required=True)
    placed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderConfirmed:
    """The seller accepted a pending order."""

    __version__ = 1

    order_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    confirmed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderCompleted:
    """The seller marked a confirmed order as fulfilled."""

    __version__ = 1

    order_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    completed_at = DateTime(required=True)
