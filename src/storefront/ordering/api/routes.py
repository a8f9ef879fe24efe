"""FastAPI endpoints for orders."""

import json

from fastapi import APIRouter, Body, Depends, Query
from protean.utils.globals import current_domain

from storefront.account.user import User
from storefront.api.auth import admin_user, current_user
from storefront.api.envelope import Envelope, Page, Pagination
from storefront.catalogue.listing import pagination
from storefront.ordering.api.schemas import (
    CancelOrderRequest,
    CreateOrderRequest,
    OrderView,
    ReorderResponse,
    TrackingView,
    UpdateOrderStatusRequest,
)
from storefront.ordering.cancellation import CancelOrder, owned_order
from storefront.ordering.lifecycle import AdvanceOrderStatus
from storefront.ordering.order import Order
from storefront.ordering.placement import PlaceOrder
from storefront.ordering.reorder import Reorder
from storefront.shopping.api.routes import cart_view
from storefront.shopping.cart import Cart

order_router = APIRouter(prefix="/order", tags=["orders"])


def _order_view(order_id) -> OrderView:
    return OrderView.model_validate(current_domain.repository_for(Order).fetch(order_id))


@order_router.post("/create", status_code=201, response_model=Envelope[OrderView])
async def create_order(body: CreateOrderRequest, user: User = Depends(current_user)) -> Envelope[OrderView]:
    items = [
        {
            "product_id": line.product_id,
            "quantity": line.quantity,
            "size": line.size,
            "color_name": line.color.name if line.color else None,
            "color_hex": line.color.hex if line.color else None,
        }
        for line in body.items
    ]
    command = PlaceOrder(
        user_id=user.id,
        shipping_address_id=body.shipping_address_id,
        payment_method=body.payment_method,
        coupon_code=body.coupon_code,
        items=json.dumps(items),
    )
    order_id = current_domain.process(command, asynchronous=False)
    return Envelope(message="Order placed successfully", data=_order_view(order_id))


@order_router.get("/my-orders", response_model=Page[OrderView])
async def my_orders(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    status: str | None = None,
    user: User = Depends(current_user),
) -> Page[OrderView]:
    limit = limit or int(current_domain.config["custom"]["DEFAULT_PAGE_SIZE"])
    orders, total = current_domain.repository_for(Order).for_user(user.id, status=status, page=page, limit=limit)
    return Page(
        data=[OrderView.model_validate(o) for o in orders],
        pagination=Pagination(**pagination(page, limit, total)),
    )


@order_router.get("/{order_id}", response_model=Envelope[OrderView])
async def get_order(order_id: str, user: User = Depends(current_user)) -> Envelope[OrderView]:
    return Envelope(data=OrderView.model_validate(owned_order(order_id, user.id, action="view")))


@order_router.put("/{order_id}/cancel", response_model=Envelope[OrderView])
async def cancel_order(
    order_id: str,
    body: CancelOrderRequest | None = Body(None),
    user: User = Depends(current_user),
) -> Envelope[OrderView]:
    command = CancelOrder(order_id=order_id, user_id=user.id, reason=body.reason if body else None)
    current_domain.process(command, asynchronous=False)
    return Envelope(message="Order cancelled successfully", data=_order_view(order_id))


@order_router.get("/{order_id}/track", response_model=Envelope[TrackingView])
async def track_order(order_id: str, user: User = Depends(current_user)) -> Envelope[TrackingView]:
    order = owned_order(order_id, user.id, action="track")
    return Envelope(data=TrackingView.model_validate(order.tracking()))


@order_router.post("/{order_id}/reorder", response_model=ReorderResponse)
async def reorder(order_id: str, user: User = Depends(current_user)) -> ReorderResponse:
    added = current_domain.process(Reorder(order_id=order_id, user_id=user.id), asynchronous=False)
    cart = current_domain.repository_for(Cart).for_user(user.id)
    return ReorderResponse(message="Items added to cart", count=added, data=cart_view(cart))


@order_router.put("/{order_id}/status", response_model=Envelope[OrderView])
async def update_order_status(
    order_id: str, body: UpdateOrderStatusRequest, admin: User = Depends(admin_user)
) -> Envelope[OrderView]:
    command = AdvanceOrderStatus(order_id=order_id, status=body.status, note=body.note)
    current_domain.process(command, asynchronous=False)
    return Envelope(message="Order status updated", data=_order_view(order_id))
