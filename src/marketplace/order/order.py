"""Order aggregate: one purchased cart line and its fulfilment status.

Orders are created in bulk at checkout (one per cart line) and afterwards only
ever change status. Price and quantity are frozen at placement.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Decimal, Identifier, Integer, String

from marketplace.domain import marketplace
from marketplace.order.events import OrderCompleted, OrderConfirmed, OrderPlaced
from marketplace.order.lifecycle import (
    OrderStatus,
    PaymentMethod,
    ensure_transition,
    payment_method_value,
)


@marketplace.aggregate
class Order:
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    total_price = Decimal(required=True, min_value=0)
    payment_method = String(required=True, choices=PaymentMethod, max_length=20)
    status = String(
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, buyer_id, seller_id, product_id, quantity, total_price, payment_method):
        """Create a pending order for a single product line."""
        now = datetime.now(UTC)
        order = cls(
            buyer_id=str(buyer_id),
            seller_id=str(seller_id),
            product_id=str(product_id),
            quantity=quantity,
            total_price=total_price,
            payment_method=payment_method_value(payment_method),
            status=OrderStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                buyer_id=order.buyer_id,
                seller_id=order.seller_id,
                product_id=order.product_id,
                quantity=order.quantity,
                total_price=order.total_price,
                payment_method=order.payment_method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def confirm(self, viewer):
        """Seller accepts the order. Only legal from PENDING."""
        ensure_transition(self, OrderStatus.CONFIRMED, viewer)
        now = datetime.now(UTC)
        self.status = OrderStatus.CONFIRMED.value
        self.updated_at = now
        self.raise_(OrderConfirmed(order_id=str(self.id), seller_id=self.seller_id, confirmed_at=now))

    def complete(self, viewer):
        """Seller marks the order fulfilled. Only legal from CONFIRMED."""
        ensure_transition(self, OrderStatus.COMPLETED, viewer)
        now = datetime.now(UTC)
        self.status = OrderStatus.COMPLETED.value
        self.updated_at = now
        self.raise_(OrderCompleted(order_id=str(self.id), seller_id=self.seller_id, completed_at=now))

