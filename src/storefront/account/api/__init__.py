"""Account API package."""

from storefront.account.api.routes import auth_router, users_router

__all__ = ["auth_router", "users_router"]
