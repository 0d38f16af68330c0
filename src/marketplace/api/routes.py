"""FastAPI routes for the Marketplace: cart, orders, admin and directory sync."""

from fastapi import APIRouter, Depends
from protean.exceptions import ObjectNotFoundError

from marketplace.access.gate import actions_for, counterpart_panel, ensure_admin, ensure_buyer
from marketplace.access.viewer import Viewer
from marketplace.api.dependencies import cart_session, current_viewer
from marketplace.api.schemas import (
    AddToCartRequest,
    AdminOrderResponse,
    CartResponse,
    CheckoutRequest,
    CounterpartSchema,
    MemberCardRequest,
    OrderResponse,
    OrderStatusResponse,
    OrderTotalsResponse,
    ProductCardRequest,
    ReceiptResponse,
    SetQuantityRequest,
    StatusResponse,
)
from marketplace.cart.session import CartSession
from marketplace.directory.cards import product_card, record_member, record_product
from marketplace.order.checkout import CheckoutConverter
from marketplace.order.gateway import OrderGateway
from marketplace.order.status import OrderStatusMachine
from marketplace.order.tally import marketplace_totals, tally_for

# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def get_cart(session: CartSession = Depends(cart_session)) -> CartResponse:
    return CartResponse.of(session.cart)


@cart_router.post("/items", response_model=CartResponse)
async def add_cart_item(
    body: AddToCartRequest,
    viewer: Viewer = Depends(current_viewer),
    session: CartSession = Depends(cart_session),
) -> CartResponse:
    ensure_buyer(viewer, "add items to the cart")
    product = product_card(body.product_id)
    if product is None:
        raise ObjectNotFoundError(f"Product {body.product_id} does not exist")
    return CartResponse.of(session.add_item(product))


@cart_router.put("/items/{product_id}", response_model=CartResponse)
async def set_cart_item_quantity(
    product_id: str,
    body: SetQuantityRequest,
    session: CartSession = Depends(cart_session),
) -> CartResponse:
    return CartResponse.of(session.set_quantity(product_id, body.quantity))


@cart_router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_cart_item(product_id: str, session: CartSession = Depends(cart_session)) -> CartResponse:
    return CartResponse.of(session.remove_item(product_id))


@cart_router.delete("", response_model=CartResponse)
async def clear_cart(session: CartSession = Depends(cart_session)) -> CartResponse:
    return CartResponse.of(session.clear())


@cart_router.post("/checkout", status_code=201, response_model=ReceiptResponse)
async def checkout(
    body: CheckoutRequest,
    viewer: Viewer = Depends(current_viewer),
    session: CartSession = Depends(cart_session),
) -> ReceiptResponse:
    receipt = CheckoutConverter().checkout(session, viewer, body.payment_method)
    return ReceiptResponse(
        order_ids=[str(order_id) for order_id in receipt.order_ids],
        grand_total=receipt.grand_total,
        line_count=receipt.line_count,
        seller_count=receipt.seller_count,
        payment_method=receipt.payment_method,
    )


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


def _order_response(view, viewer) -> OrderResponse:
    panel = counterpart_panel(view, viewer)
    return OrderResponse(
        order_id=view.order_id,
        buyer_id=view.buyer_id,
        seller_id=view.seller_id,
        product_id=view.product_id,
        product_name=view.product_name,
        product_image_url=view.product_image_url,
        quantity=view.quantity,
        total_price=view.total_price,
        payment_method=view.payment_method,
        status=view.status,
        created_at=view.created_at,
        actions=sorted(action.value for action in actions_for(view, viewer)),
        counterpart=CounterpartSchema(side=panel.side, display_name=panel.display_name, email=panel.email),
    )


@order_router.get("", response_model=list[OrderResponse])
async def list_orders(viewer: Viewer = Depends(current_viewer)) -> list[OrderResponse]:
    views = OrderGateway().fetch_orders_for_viewer(viewer)
    return [_order_response(view, viewer) for view in views]


@order_router.get("/summary", response_model=OrderTotalsResponse)
async def seller_summary(viewer: Viewer = Depends(current_viewer)) -> OrderTotalsResponse:
    tally = tally_for(viewer.user_id)
    return OrderTotalsResponse(
        total=tally.pending + tally.confirmed + tally.completed,
        pending=tally.pending,
        confirmed=tally.confirmed,
        completed=tally.completed,
    )


@order_router.post("/{order_id}/confirm", response_model=OrderStatusResponse)
async def confirm_order(order_id: str, viewer: Viewer = Depends(current_viewer)) -> OrderStatusResponse:
    order = OrderStatusMachine().confirm(order_id, viewer)
    return OrderStatusResponse(order_id=str(order.id), status=order.status)


@order_router.post("/{order_id}/complete", response_model=OrderStatusResponse)
async def complete_order(order_id: str, viewer: Viewer = Depends(current_viewer)) -> OrderStatusResponse:
    order = OrderStatusMachine().complete(order_id, viewer)
    return OrderStatusResponse(order_id=str(order.id), status=order.status)


# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/admin", tags=["admin"])


@admin_router.get("/orders", response_model=list[AdminOrderResponse])
async def list_all_orders(viewer: Viewer = Depends(current_viewer)) -> list[AdminOrderResponse]:
    ensure_admin(viewer)
    return [
        AdminOrderResponse(
            order_id=view.order_id,
            product_name=view.product_name,
            quantity=view.quantity,
            total_price=view.total_price,
            payment_method=view.payment_method,
            status=view.status,
            created_at=view.created_at,
            buyer_name=view.buyer_name,
            buyer_email=view.buyer_email,
            seller_name=view.seller_name,
            seller_email=view.seller_email,
            seller_brand_name=view.seller_brand_name,
        )
        for view in OrderGateway().fetch_all_orders()
    ]


@admin_router.get("/orders/totals", response_model=OrderTotalsResponse)
async def order_totals(viewer: Viewer = Depends(current_viewer)) -> OrderTotalsResponse:
    ensure_admin(viewer)
    return OrderTotalsResponse(**marketplace_totals())


# ---------------------------------------------------------------------------
# Directory Router (pushed by the identity and catalog services)
# ---------------------------------------------------------------------------
directory_router = APIRouter(prefix="/directory", tags=["directory"])


@directory_router.put("/members/{member_id}", response_model=StatusResponse)
async def sync_member(member_id: str, body: MemberCardRequest) -> StatusResponse:
    record_member(member_id, name=body.name, email=body.email, role=body.role, brand_name=body.brand_name)
    return StatusResponse()


@directory_router.put("/products/{product_id}", response_model=StatusResponse)
async def sync_product(product_id: str, body: ProductCardRequest) -> StatusResponse:
    record_product(
        product_id,
        name=body.name,
        price=body.price,
        seller_id=body.seller_id,
        stock=body.stock,
        image_url=body.image_url,
    )
    return StatusResponse()
