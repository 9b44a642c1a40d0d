"""Pydantic request/response schemas for the Ordering API.

These are external contracts, separate from internal Protean commands.
Quantities and shipping details are deliberately loose here: the ordering
workflow reports their problems with its own error codes.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class ShippingInfoSchema(BaseModel):
    name: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    district: str | None = None
    note: str | None = None


class OrderLineRequest(BaseModel):
    product_id: str
    quantity: int
    size: str | None = None
    color: str | None = None


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class AddCartItemRequest(BaseModel):
    product_id: str
    quantity: int = 1
    size: str | None = None
    color: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "prod-001",
                    "quantity": 2,
                    "size": "M",
                    "color": "Black",
                }
            ]
        }
    }


class UpdateCartItemRequest(BaseModel):
    quantity: int | None = None
    size: str | None = None
    color: str | None = None


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class CreateOrderRequest(BaseModel):
    items: list[OrderLineRequest] = Field(default_factory=list)
    shipping_info: ShippingInfoSchema = Field(default_factory=ShippingInfoSchema)
    payment_method: str | None = None
    payment_id: str | None = None
    note: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"product_id": "prod-001", "quantity": 2, "size": "M", "color": "Black"}],
                    "shipping_info": {
                        "name": "Nguyen Van A",
                        "phone": "0901234567",
                        "address": "12 Le Loi",
                        "city": "Ho Chi Minh",
                        "district": "District 1",
                    },
                    "payment_method": "COD",
                }
            ]
        }
    }


class CheckoutRequest(BaseModel):
    shipping_info: ShippingInfoSchema = Field(default_factory=ShippingInfoSchema)
    payment_method: str | None = None
    payment_id: str | None = None
    note: str | None = None


class CancelOrderRequest(BaseModel):
    reason: str | None = None


class UpdateOrderStatusRequest(BaseModel):
    status: str
    note: str | None = None
    force: bool = False


class UpdateOrderInfoRequest(BaseModel):
    shipping_info: ShippingInfoSchema | None = None
    note: str | None = None


# ---------------------------------------------------------------------------
# Catalogue Request Schemas
# ---------------------------------------------------------------------------
class AddProductRequest(BaseModel):
    name: str
    price: float = Field(ge=0)
    original_price: float | None = Field(default=None, ge=0)
    stock_quantity: int = Field(default=0, ge=0)
    description: str | None = None
    image: str | None = None
    category_id: str | None = None


class RestockProductRequest(BaseModel):
    quantity: int = Field(ge=1)
    reason: str | None = None


class CreatePromotionRequest(BaseModel):
    name: str
    description: str | None = None
    discount_type: str = Field(pattern="^(percent|amount)$")
    discount_value: float = Field(ge=0)
    start_date: datetime
    end_date: datetime
    product_ids: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class ApiResponse(BaseModel):
    success: bool
    message: str
    data: Any = None
    error: dict | None = None


class ProductIdResponse(BaseModel):
    product_id: str


class PromotionIdResponse(BaseModel):
    promotion_id: str


class StatusResponse(BaseModel):
    status: str = "ok"
