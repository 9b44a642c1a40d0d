"""FastAPI routes for the Ordering domain — carts, orders and catalogue seeding.

The acting user arrives in the ``X-User-Id`` header and their role in
``X-User-Role``; issuing and checking tokens happens upstream.
"""

import json
from datetime import datetime

from fastapi import APIRouter, Depends, Header, HTTPException
from protean.utils.globals import current_domain

from ordering.api.errors import result_response
from ordering.api.schemas import (
    AddCartItemRequest,
    AddProductRequest,
    CancelOrderRequest,
    CheckoutRequest,
    CreateOrderRequest,
    CreatePromotionRequest,
    ProductIdResponse,
    PromotionIdResponse,
    RestockProductRequest,
    StatusResponse,
    UpdateCartItemRequest,
    UpdateOrderInfoRequest,
    UpdateOrderStatusRequest,
)
from ordering.cart.service import CartService
from ordering.catalogue.management import AddProduct, RestockProduct
from ordering.checkout.service import OrderService
from ordering.errors import AccessDenied
from ordering.promotion.management import CreatePromotion, DeactivatePromotion
from ordering.utils.logging import bind_request_context

ADMIN_ROLE = "admin"


# ---------------------------------------------------------------------------
# Caller identity
# ---------------------------------------------------------------------------
class Caller:
    def __init__(self, user_id: str, role: str | None):
        self.user_id = user_id
        self.role = (role or "").lower()

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    @property
    def owner_filter(self):
        """User id orders must belong to, or None for admins."""
        return None if self.is_admin else self.user_id


def current_caller(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> Caller:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Authentication required")
    bind_request_context(user_id=x_user_id)
    return Caller(x_user_id, x_user_role)


def admin_caller(caller: Caller = Depends(current_caller)) -> Caller:
    if not caller.is_admin:
        raise AccessDenied("Administrator role required")
    return caller


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("")
async def get_cart(caller: Caller = Depends(current_caller)):
    return result_response(CartService().get_cart(caller.user_id))


@cart_router.post("/items")
async def add_cart_item(body: AddCartItemRequest, caller: Caller = Depends(current_caller)):
    result = CartService().add_item(
        caller.user_id,
        product_id=body.product_id,
        quantity=body.quantity,
        size=body.size,
        color=body.color,
    )
    return result_response(result)


@cart_router.put("/items/{line_id}")
async def update_cart_item(line_id: str, body: UpdateCartItemRequest, caller: Caller = Depends(current_caller)):
    result = CartService().update_item(
        caller.user_id,
        line_id,
        quantity=body.quantity,
        size=body.size,
        color=body.color,
    )
    return result_response(result)


@cart_router.delete("/items/{line_id}")
async def remove_cart_item(line_id: str, caller: Caller = Depends(current_caller)):
    return result_response(CartService().remove_item(caller.user_id, line_id))


@cart_router.delete("")
async def clear_cart(caller: Caller = Depends(current_caller)):
    return result_response(CartService().clear(caller.user_id))


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("")
async def create_order(body: CreateOrderRequest, caller: Caller = Depends(current_caller)):
    result = OrderService().create_order(
        caller.user_id,
        items=[item.model_dump() for item in body.items],
        shipping_info=body.shipping_info.model_dump(),
        payment_method=body.payment_method,
        payment_id=body.payment_id,
        note=body.note,
    )
    return result_response(result, success_status=201)


@order_router.post("/checkout")
async def checkout(body: CheckoutRequest, caller: Caller = Depends(current_caller)):
    result = OrderService().checkout_cart(
        caller.user_id,
        shipping_info=body.shipping_info.model_dump(),
        payment_method=body.payment_method,
        payment_id=body.payment_id,
        note=body.note,
    )
    return result_response(result, success_status=201)


@order_router.get("")
async def list_orders(
    status: str | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    caller: Caller = Depends(current_caller),
):
    result = OrderService().list_orders(caller.user_id, status=status, date_from=date_from, date_to=date_to)
    return result_response(result)


@order_router.get("/{order_id}")
async def get_order(order_id: str, caller: Caller = Depends(current_caller)):
    return result_response(OrderService().get_order(order_id, user_id=caller.owner_filter))


@order_router.get("/{order_id}/tracking")
async def get_tracking(order_id: str, caller: Caller = Depends(current_caller)):
    return result_response(OrderService().get_tracking(order_id, user_id=caller.owner_filter))


@order_router.put("/{order_id}/cancel")
async def cancel_order(
    order_id: str,
    body: CancelOrderRequest | None = None,
    caller: Caller = Depends(current_caller),
):
    reason = body.reason if body else None
    return result_response(OrderService().cancel_order(order_id, caller.user_id, reason=reason))


@order_router.put("/{order_id}/status")
async def update_order_status(
    order_id: str,
    body: UpdateOrderStatusRequest,
    caller: Caller = Depends(admin_caller),
):
    result = OrderService().update_order_status(
        order_id,
        status=body.status,
        changed_by=caller.user_id,
        note=body.note,
        force=body.force,
    )
    return result_response(result)


@order_router.put("/{order_id}/update-info")
async def update_order_info(order_id: str, body: UpdateOrderInfoRequest, caller: Caller = Depends(current_caller)):
    shipping_info = body.shipping_info.model_dump(exclude_none=True) if body.shipping_info else None
    result = OrderService().update_order_info(order_id, caller.user_id, shipping_info=shipping_info, note=body.note)
    return result_response(result)


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def add_product(body: AddProductRequest, caller: Caller = Depends(admin_caller)) -> ProductIdResponse:
    command = AddProduct(
        name=body.name,
        price=body.price,
        original_price=body.original_price,
        stock_quantity=body.stock_quantity,
        description=body.description,
        image=body.image,
        category_id=body.category_id,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.put("/{product_id}/restock", response_model=StatusResponse)
async def restock_product(
    product_id: str, body: RestockProductRequest, caller: Caller = Depends(admin_caller)
) -> StatusResponse:
    command = RestockProduct(product_id=product_id, quantity=body.quantity, reason=body.reason)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Promotion Router
# ---------------------------------------------------------------------------
promotion_router = APIRouter(prefix="/promotions", tags=["promotions"])


@promotion_router.post("", status_code=201, response_model=PromotionIdResponse)
async def create_promotion(
    body: CreatePromotionRequest, caller: Caller = Depends(admin_caller)
) -> PromotionIdResponse:
    command = CreatePromotion(
        name=body.name,
        description=body.description,
        discount_type=body.discount_type,
        discount_value=body.discount_value,
        start_date=body.start_date,
        end_date=body.end_date,
        product_ids=json.dumps(body.product_ids),
    )
    result = current_domain.process(command, asynchronous=False)
    return PromotionIdResponse(promotion_id=result)


@promotion_router.put("/{promotion_id}/deactivate", response_model=StatusResponse)
async def deactivate_promotion(promotion_id: str, caller: Caller = Depends(admin_caller)) -> StatusResponse:
    current_domain.process(DeactivatePromotion(promotion_id=promotion_id), asynchronous=False)
    return StatusResponse()
