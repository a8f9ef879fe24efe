"""FastAPI endpoints for the cart and favorites."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.account.user import User
from storefront.api.auth import current_user
from storefront.api.envelope import Envelope
from storefront.catalogue.product import Product
from storefront.shopping.api.schemas import (
    AddToCartRequest,
    CartLineView,
    CartView,
    FavoriteCheck,
    ProductSummary,
    UpdateCartItemRequest,
)
from storefront.shopping.cart import Cart
from storefront.shopping.favorites import AddFavorite, Favorites, OpenFavorites, RemoveFavorite
from storefront.shopping.items import AddToCart, ClearCart, OpenCart, RemoveCartItem, UpdateCartItem

cart_router = APIRouter(prefix="/cart", tags=["cart"])
favorites_router = APIRouter(prefix="/favorites", tags=["favorites"])


def _products_by_id(product_ids) -> dict[str, Product]:
    products = current_domain.repository_for(Product).active_by_ids(product_ids)
    return {str(p.id): p for p in products}


def cart_view(cart: Cart) -> CartView:
    products = _products_by_id({str(item.product_id) for item in cart.items})
    lines = []
    for item in cart.items:
        product = products.get(str(item.product_id))
        lines.append(
            CartLineView(
                id=str(item.id),
                product_id=str(item.product_id),
                quantity=item.quantity,
                size=item.size,
                color_name=item.color_name,
                color_hex=item.color_hex,
                price=item.price,
                added_at=item.added_at,
                product=ProductSummary.model_validate(product) if product else None,
            )
        )
    return CartView(
        id=str(cart.id),
        user_id=str(cart.user_id),
        items=lines,
        total_items=cart.total_items,
        total_amount=cart.total_amount,
        updated_at=cart.updated_at,
    )


def _current_cart(user_id) -> CartView:
    current_domain.process(OpenCart(user_id=user_id), asynchronous=False)
    return cart_view(current_domain.repository_for(Cart).for_user(user_id))


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
@cart_router.get("", response_model=Envelope[CartView])
async def get_cart(user: User = Depends(current_user)) -> Envelope[CartView]:
    return Envelope(data=_current_cart(user.id))


@cart_router.post("/add", response_model=Envelope[CartView])
async def add_to_cart(body: AddToCartRequest, user: User = Depends(current_user)) -> Envelope[CartView]:
    command = AddToCart(
        user_id=user.id,
        product_id=body.product_id,
        quantity=body.quantity,
        size=body.size,
        color_name=body.color.name if body.color else None,
        color_hex=body.color.hex if body.color else None,
    )
    current_domain.process(command, asynchronous=False)
    return Envelope(message="Item added to cart", data=_current_cart(user.id))


@cart_router.put("/item/{item_id}", response_model=Envelope[CartView])
async def update_cart_item(
    item_id: str, body: UpdateCartItemRequest, user: User = Depends(current_user)
) -> Envelope[CartView]:
    command = UpdateCartItem(user_id=user.id, item_id=item_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return Envelope(message="Cart updated", data=_current_cart(user.id))


@cart_router.delete("/item/{item_id}", response_model=Envelope[CartView])
async def remove_cart_item(item_id: str, user: User = Depends(current_user)) -> Envelope[CartView]:
    current_domain.process(RemoveCartItem(user_id=user.id, item_id=item_id), asynchronous=False)
    return Envelope(message="Item removed from cart", data=_current_cart(user.id))


@cart_router.delete("/clear", response_model=Envelope[CartView])
async def clear_cart(user: User = Depends(current_user)) -> Envelope[CartView]:
    current_domain.process(ClearCart(user_id=user.id), asynchronous=False)
    return Envelope(message="Cart cleared", data=_current_cart(user.id))


# ---------------------------------------------------------------------------
# Favorites
# ---------------------------------------------------------------------------
def _favorite_products(user_id) -> list[ProductSummary]:
    favorites = current_domain.repository_for(Favorites).for_user(user_id)
    if favorites is None:
        return []
    products = current_domain.repository_for(Product).active_by_ids(favorites.product_ids)
    return [ProductSummary.model_validate(p) for p in products]


@favorites_router.get("", response_model=Envelope[list[ProductSummary]])
async def get_favorites(user: User = Depends(current_user)) -> Envelope[list[ProductSummary]]:
    current_domain.process(OpenFavorites(user_id=user.id), asynchronous=False)
    return Envelope(data=_favorite_products(user.id))


@favorites_router.get("/check/{product_id}", response_model=FavoriteCheck)
async def check_favorite(product_id: str, user: User = Depends(current_user)) -> FavoriteCheck:
    favorites = current_domain.repository_for(Favorites).for_user(user.id)
    return FavoriteCheck(is_favorite=bool(favorites and favorites.contains(product_id)))


@favorites_router.post("/{product_id}", response_model=Envelope[list[ProductSummary]])
async def add_favorite(product_id: str, user: User = Depends(current_user)) -> Envelope[list[ProductSummary]]:
    current_domain.process(AddFavorite(user_id=user.id, product_id=product_id), asynchronous=False)
    return Envelope(message="Added to favorites", data=_favorite_products(user.id))


@favorites_router.delete("/{product_id}", response_model=Envelope[list[ProductSummary]])
async def remove_favorite(product_id: str, user: User = Depends(current_user)) -> Envelope[list[ProductSummary]]:
    current_domain.process(RemoveFavorite(user_id=user.id, product_id=product_id), asynchronous=False)
    return Envelope(message="Removed from favorites", data=_favorite_products(user.id))
