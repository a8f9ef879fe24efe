"""Pydantic request/response schemas for the ordering API.

These are external contracts (anti-corruption layer), separate from the
internal Protean commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from storefront.shopping.api.schemas import CartView, ColourChoice


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------
class OrderItemView(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    product_id: str
    name: str
    image: str | None = None
    quantity: int
    size: str
    color_name: str | None = None
    color_hex: str | None = None
    price: float


class StatusEntryView(BaseModel):
    model_config = {"from_attributes": True}

    status: str
    timestamp: datetime
    note: str | None = None


class ShippingAddressView(BaseModel):
    model_config = {"from_attributes": True}

    full_name: str
    phone: str
    address_line1: str
    address_line2: str | None = None
    city: str
    state: str
    pincode: str
    country: str | None = None


class DeliveryWindowView(BaseModel):
    model_config = {"from_attributes": True}

    min_days: int
    max_days: int


class OrderView(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    order_number: str
    user_id: str
    items: list[OrderItemView]
    shipping_address: ShippingAddressView | None = None
    payment_method: str
    payment_status: str
    items_price: float
    delivery_charge: float
    gst: float
    discount: float
    coupon_code: str | None = None
    total_amount: float
    status: str
    status_history: list[StatusEntryView]
    expected_delivery: DeliveryWindowView | None = None
    delivered_at: datetime | None = None
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None
    created_at: datetime | None = None

    @field_validator("status_history")
    @classmethod
    def oldest_first(cls, entries: list[StatusEntryView]) -> list[StatusEntryView]:
        return sorted(entries, key=lambda e: e.timestamp)


class TrackingView(BaseModel):
    order_number: str
    current_status: str
    status_history: list[StatusEntryView]
    expected_delivery: DeliveryWindowView | None = None
    delivered_at: datetime | None = None
    ordered_at: datetime | None = None


class ReorderResponse(BaseModel):
    success: bool = True
    message: str
    count: int
    data: CartView


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------
class OrderLineRequest(BaseModel):
    product_id: str
    quantity: int = Field(1, ge=1)
    size: str = Field(..., max_length=20)
    color: ColourChoice | None = None


class CreateOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [
                        {
                            "product_id": "3f1c2b9e-0d52-4a57-9f3a-0a6d3c1b7e21",
                            "quantity": 1,
                            "size": "M",
                            "color": {"name": "Indigo", "hex": "#3F51B5"},
                        }
                    ],
                    "shipping_address_id": "8d0e6a55-1c1b-4d3f-bb5e-2f1f4b9d7c10",
                    "payment_method": "cod",
                    "coupon_code": "FIRST20",
                }
            ]
        }
    }

    items: list[OrderLineRequest] = []
    shipping_address_id: str
    payment_method: str
    coupon_code: str | None = Field(None, max_length=50)


class CancelOrderRequest(BaseModel):
    reason: str | None = None


class UpdateOrderStatusRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "shipped", "note": "Handed to courier"}]}}

    status: str
    note: str | None = None
