"""Pydantic request/response schemas for the Marketplace API.

These are external contracts (anti-corruption layer), separate from
internal Protean value objects and commands.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str

    model_config = {"json_schema_extra": {"examples": [{"product_id": "prod-001"}]}}


class SetQuantityRequest(BaseModel):
    quantity: int


class CheckoutRequest(BaseModel):
    payment_method: str = Field(description="bank_transfer or cash")

    model_config = {"json_schema_extra": {"examples": [{"payment_method": "cash"}]}}


class CartLineResponse(BaseModel):
    id: str
    name: str
    price: Decimal
    image_url: str | None = None
    seller_id: str
    quantity: int
    max_quantity: int
    line_total: Decimal


class CartResponse(BaseModel):
    items: list[CartLineResponse]
    item_count: int
    grand_total: Decimal

    @classmethod
    def of(cls, cart) -> "CartResponse":
        return cls(
            items=[
                CartLineResponse(
                    id=line.product_id,
                    name=line.name,
                    price=line.unit_price,
                    image_url=line.image_url,
                    seller_id=line.seller_id,
                    quantity=line.quantity,
                    max_quantity=line.max_quantity,
                    line_total=line.line_total,
                )
                for line in cart
            ],
            item_count=cart.item_count,
            grand_total=cart.grand_total,
        )


class ReceiptResponse(BaseModel):
    order_ids: list[str]
    grand_total: Decimal
    line_count: int
    seller_count: int
    payment_method: str


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class CounterpartSchema(BaseModel):
    side: str
    display_name: str | None = None
    email: str | None = None


class OrderResponse(BaseModel):
    order_id: str
    buyer_id: str
    seller_id: str
    product_id: str
    product_name: str | None = None
    product_image_url: str | None = None
    quantity: int
    total_price: Decimal
    payment_method: str
    status: str
    created_at: datetime | None = None
    actions: list[str] = Field(default_factory=list)
    counterpart: CounterpartSchema | None = None


class AdminOrderResponse(BaseModel):
    order_id: str
    product_name: str | None = None
    quantity: int
    total_price: Decimal
    payment_method: str
    status: str
    created_at: datetime | None = None
    buyer_name: str | None = None
    buyer_email: str | None = None
    seller_name: str | None = None
    seller_email: str | None = None
    seller_brand_name: str | None = None


class OrderStatusResponse(BaseModel):
    order_id: str
    status: str


class OrderTotalsResponse(BaseModel):
    total: int
    pending: int
    confirmed: int
    completed: int


# ---------------------------------------------------------------------------
# Directory sync
# ---------------------------------------------------------------------------
class MemberCardRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    role: str
    brand_name: str | None = None


class ProductCardRequest(BaseModel):
    name: str
    price: Decimal = Field(ge=0)
    seller_id: str
    stock: int = Field(ge=0, default=0)
    image_url: str | None = None


class StatusResponse(BaseModel):
    status: str = "ok"
