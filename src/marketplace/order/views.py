"""Denormalized order rows as shown in order listings."""

from protean.fields import DateTime, Decimal, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.value_object
class OrderView:
    """An order joined with its product and both parties' directory cards.

    Product and member fields are ``None`` when the directory has no card for
    the referenced id.
    """

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    total_price = Decimal(required=True)
    payment_method = String(required=True, max_length=20)
    status = String(required=True, max_length=20)
    created_at = DateTime()

    product_name = String(max_length=255, sanitize=False)
    product_image_url = String(max_length=2048, sanitize=False)
    buyer_name = String(max_length=255, sanitize=False)
    buyer_email = String(max_length=255)
    seller_name = String(max_length=255, sanitize=False)
    seller_email = String(max_length=255)
    seller_brand_name = String(max_length=255, sanitize=False)

    @classmethod
    def join(cls, order, product=None, buyer=None, seller=None):
        return cls(
            order_id=str(order.id),
            buyer_id=order.buyer_id,
            seller_id=order.seller_id,
            product_id=order.product_id,
            quantity=order.quantity,
            total_price=order.total_price,
            payment_method=order.payment_method,
            status=order.status,
            created_at=order.created_at,
            product_name=product.name if product else None,
            product_image_url=product.image_url if product else None,
            buyer_name=buyer.name if buyer else None,
            buyer_email=buyer.email if buyer else None,
            seller_name=seller.name if seller else None,
            seller_email=seller.email if seller else None,
            seller_brand_name=seller.brand_name if seller else None,
        )
