"""Pydantic request/response schemas for the cart and favorites API."""

from datetime import datetime

from pydantic import BaseModel, Field


class ProductSummary(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    name: str
    brand: str | None = None
    price: float
    discount_price: float | None = None
    images: list[str] = []
    rating: float = 0.0


class CartLineView(BaseModel):
    id: str
    product_id: str
    quantity: int
    size: str
    color_name: str | None = None
    color_hex: str | None = None
    price: float
    added_at: datetime | None = None
    product: ProductSummary | None = None


class CartView(BaseModel):
    id: str
    user_id: str
    items: list[CartLineView]
    total_items: int
    total_amount: float
    updated_at: datetime | None = None


class FavoriteCheck(BaseModel):
    success: bool = True
    is_favorite: bool


class ColourChoice(BaseModel):
    name: str = Field(..., max_length=50)
    hex: str | None = Field(None, max_length=7)


class AddToCartRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "3f1c2b9e-0d52-4a57-9f3a-0a6d3c1b7e21",
                    "quantity": 1,
                    "size": "M",
                    "color": {"name": "Indigo", "hex": "#3F51B5"},
                }
            ]
        }
    }

    product_id: str
    quantity: int = Field(1, ge=1)
    size: str = Field(..., max_length=20)
    color: ColourChoice | None = None


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(..., ge=0)
