"""Cart and favorites API package."""

from storefront.shopping.api.routes import cart_router, favorites_router

__all__ = ["cart_router", "favorites_router"]
