"""Order placement: a batch of orders written as one unit of work.

Checkout fans a cart out into one ``OrderRequest`` per line, possibly across
several sellers. ``PlaceOrders`` carries the whole batch and its handler
persists every row inside the single UnitOfWork that wraps a command handler,
so either all orders are stored or none are.
"""

import json

from protean import handle
from protean.fields import Decimal, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from marketplace.domain import logger, marketplace
from marketplace.order.lifecycle import OrderStatus, PaymentMethod, payment_method_value
from marketplace.order.order import Order


@marketplace.value_object
class OrderRequest:
    """One order-creation row, built from a single cart line."""

    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    total_price = Decimal(required=True, min_value=0)
    payment_method = String(required=True, choices=PaymentMethod, max_length=20)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)

    @classmethod
    def for_line(cls, line, buyer_id, payment_method):
        return cls(
            buyer_id=str(buyer_id),
            seller_id=line.seller_id,
            product_id=line.product_id,
            quantity=line.quantity,
            total_price=line.line_total,
            payment_method=payment_method_value(payment_method),
            status=OrderStatus.PENDING.value,
        )

    def to_row(self) -> dict:
        return {
            "buyer_id": str(self.buyer_id),
            "seller_id": str(self.seller_id),
            "product_id": str(self.product_id),
            "quantity": self.quantity,
            "total_price": str(self.total_price),
            "payment_method": self.payment_method,
            "status": self.status,
        }


@marketplace.command(part_of="Order")
class PlaceOrders:
    orders = Text(required=True, sanitize=False)  # JSON: list of OrderRequest rows


def _order_from_row(row: dict) -> Order:
    return Order.place(
        buyer_id=row["buyer_id"],
        seller_id=row["seller_id"],
        product_id=row["product_id"],
        quantity=row["quantity"],
        total_price=row["total_price"],
        payment_method=row["payment_method"],
    )


@marketplace.command_handler(part_of=Order)
class PlaceOrdersHandler:
    @handle(PlaceOrders)
    def place_orders(self, command):
        repo = current_domain.repository_for(Order)
        order_ids = []
        for row in json.loads(command.orders):
            order = _order_from_row(row)
            repo.add(order)
            order_ids.append(str(order.id))

        logger.info("orders_placed", count=len(order_ids))
        return order_ids
