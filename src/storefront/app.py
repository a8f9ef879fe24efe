"""Storefront FastAPI application.

Web server that processes commands synchronously via HTTP. Every request
runs inside the storefront domain context and carries a ``request_id``
that is bound into all log lines emitted while serving it.

Usage:
    uvicorn storefront.app:create_app --factory --host 0.0.0.0 --port 8000 --reload
"""

import time
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.domain import logger, storefront
from storefront.utils.logging import add_context, clear_context, configure_logging


def create_app(init_domain: bool = True) -> FastAPI:
    """Build the application.

    Args:
        init_domain: initialize the domain and logging. Test suites that
            already hold an initialized domain pass ``False``.
    """
    if init_domain:
        configure_logging()
        storefront.init()

    app = FastAPI(
        title="Storefront API",
        description="Clothing storefront: accounts, catalogue, cart, favorites and orders",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        """Push the domain context and bind request details for logging."""
        clear_context()
        request_id = request.headers.get("X-Request-ID") or uuid4().hex
        add_context(request_id=request_id, method=request.method, path=request.url.path)
        started = time.perf_counter()

        with storefront.domain_context():
            response = await call_next(request)

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return response

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------
    from storefront.account.api import auth_router, users_router
    from storefront.api.envelope import register_exception_handlers
    from storefront.catalogue.api import category_router, product_router
    from storefront.ordering.api import order_router
    from storefront.shopping.api import cart_router, favorites_router

    for router in (
        auth_router,
        users_router,
        product_router,
        category_router,
        cart_router,
        favorites_router,
        order_router,
    ):
        app.include_router(router)

    register_exception_handlers(app)

    @app.get("/health")
    async def health():
        return JSONResponse(content={"success": True, "status": "ok", "domain": storefront.name})

    return app
