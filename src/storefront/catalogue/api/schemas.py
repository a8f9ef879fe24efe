"""Pydantic request/response schemas for the catalogue API."""

from datetime import datetime

from pydantic import BaseModel, Field

from storefront.api.envelope import Pagination


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------
class SizeView(BaseModel):
    model_config = {"from_attributes": True}

    size: str
    stock: int


class ColourView(BaseModel):
    model_config = {"from_attributes": True}

    name: str
    hex: str | None = None


class ReviewView(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    user_id: str
    name: str | None = None
    rating: int
    comment: str | None = None
    created_at: datetime | None = None


class ProductView(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    name: str
    description: str
    brand: str | None = None
    category_id: str | None = None
    gender: str
    price: float
    discount_price: float | None = None
    images: list[str] = []
    sizes: list[SizeView] = []
    colors: list[ColourView] = []
    total_stock: int
    rating: float
    num_reviews: int
    reviews: list[ReviewView] = []
    is_featured: bool
    is_active: bool
    created_at: datetime | None = None


class CategoryView(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    name: str
    slug: str
    gender: str
    parent_id: str | None = None
    image: str | None = None
    is_active: bool
    is_main: bool


class OrganizedGender(BaseModel):
    main: list[CategoryView] = []
    subcategories: dict[str, list[CategoryView]] = {}


class CategoryListing(BaseModel):
    success: bool = True
    data: list[CategoryView]
    organized: dict[str, OrganizedGender]


class CategoryDetail(BaseModel):
    category: CategoryView
    subcategories: list[CategoryView] = []


class CategorySummary(BaseModel):
    name: str
    slug: str


class CategoryProductsPage(BaseModel):
    success: bool = True
    data: list[ProductView]
    category: CategorySummary
    pagination: Pagination


class SearchResults(BaseModel):
    success: bool = True
    data: list[ProductView]
    count: int


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------
class SizeStockSchema(BaseModel):
    size: str = Field(..., max_length=20)
    stock: int = Field(0, ge=0)


class ColourSchema(BaseModel):
    name: str = Field(..., max_length=50)
    hex: str | None = Field(None, max_length=7)


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Linen Kurta",
                    "description": "Breathable straight-cut kurta",
                    "brand": "Fabindia",
                    "gender": "male",
                    "price": 600,
                    "images": ["https://cdn.example.com/kurta.jpg"],
                    "sizes": [{"size": "M", "stock": 10}, {"size": "L", "stock": 4}],
                    "colors": [{"name": "Indigo", "hex": "#3F51B5"}],
                }
            ]
        }
    }

    name: str = Field(..., max_length=200)
    description: str
    brand: str | None = Field(None, max_length=100)
    category_id: str | None = None
    gender: str | None = None
    price: float = Field(..., ge=0)
    discount_price: float | None = Field(None, ge=0)
    images: list[str] = []
    sizes: list[SizeStockSchema] = []
    colors: list[ColourSchema] = []
    is_featured: bool = False


class AddReviewRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: str | None = None


class CreateCategoryRequest(BaseModel):
    model_config = {
        "json_schema_extra": {"examples": [{"name": "Ethnic Wear", "gender": "female", "image": None}]}
    }

    name: str = Field(..., max_length=100)
    slug: str | None = Field(None, max_length=120)
    gender: str
    parent_id: str | None = None
    image: str | None = Field(None, max_length=500)
