"""Checkout: converts a buyer's cart into one pending order per cart line.

Preconditions are checked in a fixed order and the first failure wins:

1. the viewer must be a buyer (``Unauthorized``)
2. the cart must not be empty (``EmptyCart``)
3. the payment method must be bank transfer or cash (``ValidationError``)
4. no line may ask for more than the product's current stock (``ValidationError``)

The batch is stored all or nothing. The cart is cleared only after the
store has accepted every order; on any failure it is left exactly as it was.
"""

from decimal import Decimal as D

from protean.exceptions import ValidationError
from protean.fields import Decimal, Identifier, Integer, List, String

from marketplace.access.gate import ensure_buyer
from marketplace.directory.cards import stock_levels
from marketplace.domain import logger, marketplace
from marketplace.errors import EmptyCart
from marketplace.order.gateway import OrderGateway
from marketplace.order.lifecycle import PaymentMethod
from marketplace.order.placement import OrderRequest
from marketplace.utils.guard import InFlightGuard

checkout_guard = InFlightGuard("checkout")


@marketplace.value_object
class OrderBatchReceipt:
    order_ids = List(content_type=Identifier)
    grand_total = Decimal(required=True, min_value=0)
    line_count = Integer(required=True, min_value=0)
    seller_count = Integer(required=True, min_value=0)
    payment_method = String(required=True, choices=PaymentMethod, max_length=20)


def payment_method_from(value) -> PaymentMethod:
    try:
        return PaymentMethod(value)
    except ValueError:
        allowed = ", ".join(method.value for method in PaymentMethod)
        raise ValidationError({"payment_method": [f"Unsupported payment method {value!r}; use one of {allowed}"]}) from None


def order_requests_for(cart, buyer_id, payment_method) -> list[OrderRequest]:
    """One pending order request per cart line."""
    return [OrderRequest.for_line(line, buyer_id, payment_method) for line in cart]


def ensure_stock_covers(cart) -> None:
    """Re-check every line against live stock before any order is written.

    Lines whose product has no directory card are let through; the stock
    ceiling stored on the line still bounds them.
    """
    levels = stock_levels(line.product_id for line in cart)
    short = []
    for line in cart:
        stock = levels.get(line.product_id)
        if stock is None:
            logger.warning("checkout_stock_unknown", product_id=line.product_id)
            continue
        if line.quantity > stock:
            short.append(f"{line.name} ({line.product_id}): requested {line.quantity}, available {stock}")
    if short:
        raise ValidationError({"stock": short})


class CheckoutConverter:
    def __init__(self, gateway: OrderGateway | None = None, guard: InFlightGuard | None = None):
        self.gateway = gateway or OrderGateway()
        self.guard = guard or checkout_guard

    def checkout(self, session, viewer, payment_method) -> OrderBatchReceipt:
        with self.guard.hold(session.key):
            ensure_buyer(viewer)
            cart = session.cart
            if cart.is_empty:
                raise EmptyCart()
            method = payment_method_from(payment_method)
            ensure_stock_covers(cart)

            requests = order_requests_for(cart, viewer.user_id, method)
            order_ids = self.gateway.insert_orders(requests)
            session.clear()

        receipt = OrderBatchReceipt(
            order_ids=order_ids,
            grand_total=sum((request.total_price for request in requests), D("0")),
            line_count=len(requests),
            seller_count=len(cart.seller_ids),
            payment_method=method.value,
        )
        logger.info(
            "checkout_completed",
            buyer_id=str(viewer.user_id),
            orders=receipt.line_count,
            sellers=receipt.seller_count,
            grand_total=str(receipt.grand_total),
        )
        return receipt
