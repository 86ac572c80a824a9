"""Pydantic request/response schemas for the storefront API.

These are external contracts, kept separate from the domain aggregates and the
service-layer views they are built from.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddCartItemRequest(BaseModel):
    product_id: int = Field(gt=0)
    quantity: int = Field(ge=1, default=1)

    model_config = {"json_schema_extra": {"examples": [{"product_id": 1, "quantity": 2}]}}


class DecreaseCartItemRequest(BaseModel):
    amount: int = Field(ge=1, default=1)


class CartLineResponse(BaseModel):
    product_id: int
    product_name: str
    price: Decimal
    quantity: int
    line_total: Decimal


class CartResponse(BaseModel):
    cart_id: str | None
    user_id: str
    items: list[CartLineResponse]
    item_count: int
    subtotal: Decimal


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    user_id: str = Field(min_length=1)

    model_config = {"json_schema_extra": {"examples": [{"user_id": "user-001"}]}}


class OrderPlacedResponse(BaseModel):
    order_id: str
    message: str


class OrderItemResponse(BaseModel):
    product_id: int
    product_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class OrderResponse(BaseModel):
    id: str
    user_id: str
    order_date: datetime
    total_price: Decimal
    items: list[OrderItemResponse]


class OrderPageResponse(BaseModel):
    total_count: int
    page: int
    page_size: int
    items: list[OrderResponse]


# ---------------------------------------------------------------------------
# Stock alerts
# ---------------------------------------------------------------------------
class StockAlertResponse(BaseModel):
    id: int
    product_id: int
    product_name: str
    quantity_at_trigger: int
    triggered_at: datetime
    is_acknowledged: bool


class CountResponse(BaseModel):
    count: int


# ---------------------------------------------------------------------------
# Common
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"
    message: str = ""
