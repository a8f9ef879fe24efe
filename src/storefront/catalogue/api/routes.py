"""FastAPI endpoints for products and categories."""

import json

from fastapi import APIRouter, Depends, Query
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from storefront.account.user import User
from storefront.api.auth import admin_user, current_user
from storefront.api.envelope import Envelope, Page, Pagination
from storefront.catalogue.api.schemas import (
    AddReviewRequest,
    CategoryDetail,
    CategoryListing,
    CategoryProductsPage,
    CategorySummary,
    CategoryView,
    CreateCategoryRequest,
    CreateProductRequest,
    OrganizedGender,
    ProductView,
    SearchResults,
)
from storefront.catalogue.category import Category, CreateCategory, organize
from storefront.catalogue.creation import CreateProduct
from storefront.catalogue.listing import DEFAULT_SORT, pagination
from storefront.catalogue.product import Product
from storefront.catalogue.reviews import AddReview

product_router = APIRouter(prefix="/products", tags=["products"])
category_router = APIRouter(prefix="/categories", tags=["categories"])


def _page_size(limit: int | None) -> int:
    return limit or int(current_domain.config["custom"]["DEFAULT_PAGE_SIZE"])


def _product(product_id) -> Product:
    try:
        return current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError as exc:
        raise ObjectNotFoundError("Product not found") from exc


# --- Product endpoints ---


@product_router.get("", response_model=Page[ProductView])
async def list_products(
    category: str | None = None,
    gender: str | None = None,
    brand: str | None = None,
    min_price: float | None = None,
    max_price: float | None = None,
    size: str | None = None,
    color: str | None = None,
    search: str | None = None,
    sort: str = DEFAULT_SORT,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
) -> Page[ProductView]:
    limit = _page_size(limit)
    products, total = current_domain.repository_for(Product).browse(
        category_id=category,
        gender=gender,
        brand=brand,
        min_price=min_price,
        max_price=max_price,
        size=size,
        color=color,
        search=search,
        sort=sort,
        page=page,
        limit=limit,
    )
    return Page(
        data=[ProductView.model_validate(p) for p in products],
        pagination=Pagination(**pagination(page, limit, total)),
    )


@product_router.get("/search", response_model=SearchResults)
async def search_products(q: str | None = None) -> SearchResults:
    if not q or not q.strip():
        raise ValidationError({"q": ["Search query is required"]})

    limit = int(current_domain.config["custom"]["SEARCH_RESULT_LIMIT"])
    products = current_domain.repository_for(Product).search(q.strip(), limit=limit)
    return SearchResults(data=[ProductView.model_validate(p) for p in products], count=len(products))


@product_router.get("/category/{slug}", response_model=CategoryProductsPage)
async def products_in_category(
    slug: str, sort: str = DEFAULT_SORT, page: int = Query(1, ge=1), limit: int | None = Query(None, ge=1)
) -> CategoryProductsPage:
    category = current_domain.repository_for(Category).find_by_slug(slug)
    if category is None:
        raise ObjectNotFoundError("Category not found")

    limit = _page_size(limit)
    products, total = current_domain.repository_for(Product).browse(
        category_id=category.id, sort=sort, page=page, limit=limit
    )
    return CategoryProductsPage(
        data=[ProductView.model_validate(p) for p in products],
        category=CategorySummary(name=category.name, slug=category.slug),
        pagination=Pagination(**pagination(page, limit, total)),
    )


@product_router.get("/{product_id}", response_model=Envelope[ProductView])
async def get_product(product_id: str) -> Envelope[ProductView]:
    return Envelope(data=ProductView.model_validate(_product(product_id)))


@product_router.post("", status_code=201, response_model=Envelope[ProductView])
async def create_product(body: CreateProductRequest, admin: User = Depends(admin_user)) -> Envelope[ProductView]:
    command = CreateProduct(
        name=body.name,
        description=body.description,
        brand=body.brand,
        category_id=body.category_id,
        gender=body.gender,
        price=body.price,
        discount_price=body.discount_price,
        images=json.dumps(body.images),
        sizes=json.dumps([s.model_dump() for s in body.sizes]),
        colors=json.dumps([c.model_dump() for c in body.colors]),
        is_featured=body.is_featured,
    )
    product_id = current_domain.process(command, asynchronous=False)
    return Envelope(message="Product created successfully", data=ProductView.model_validate(_product(product_id)))


@product_router.post("/{product_id}/reviews", status_code=201, response_model=Envelope[ProductView])
async def add_review(
    product_id: str, body: AddReviewRequest, user: User = Depends(current_user)
) -> Envelope[ProductView]:
    _product(product_id)
    command = AddReview(product_id=product_id, user_id=user.id, rating=body.rating, comment=body.comment)
    current_domain.process(command, asynchronous=False)
    return Envelope(message="Review added successfully", data=ProductView.model_validate(_product(product_id)))


# --- Category endpoints ---


@category_router.get("", response_model=CategoryListing)
async def list_categories(gender: str | None = None) -> CategoryListing:
    categories = current_domain.repository_for(Category).active(gender=gender)
    organized = {
        gender_key: OrganizedGender(
            main=[CategoryView.model_validate(c) for c in bucket["main"]],
            subcategories={
                parent: [CategoryView.model_validate(c) for c in children]
                for parent, children in bucket["subcategories"].items()
            },
        )
        for gender_key, bucket in organize(categories).items()
    }
    return CategoryListing(data=[CategoryView.model_validate(c) for c in categories], organized=organized)


@category_router.get("/{slug}", response_model=Envelope[CategoryDetail])
async def get_category(slug: str) -> Envelope[CategoryDetail]:
    repo = current_domain.repository_for(Category)
    category = repo.find_by_slug(slug)
    if category is None:
        raise ObjectNotFoundError("Category not found")

    subcategories = repo.children_of(category.id) if category.is_main else []
    return Envelope(
        data=CategoryDetail(
            category=CategoryView.model_validate(category),
            subcategories=[CategoryView.model_validate(c) for c in subcategories],
        )
    )


@category_router.post("", status_code=201, response_model=Envelope[CategoryView])
async def create_category(body: CreateCategoryRequest, admin: User = Depends(admin_user)) -> Envelope[CategoryView]:
    command = CreateCategory(
        name=body.name,
        slug=body.slug,
        gender=body.gender,
        parent_id=body.parent_id,
        image=body.image,
    )
    category_id = current_domain.process(command, asynchronous=False)
    category = current_domain.repository_for(Category).get(category_id)
    return Envelope(message="Category created successfully", data=CategoryView.model_validate(category))
