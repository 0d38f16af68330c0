"""Attach the marketplace routers to a FastAPI app."""

from fastapi import FastAPI
from protean.integrations.fastapi import DomainContextMiddleware

from marketplace.api.errors import register_error_handlers
from marketplace.api.routes import admin_router, cart_router, directory_router, order_router
from marketplace.domain import marketplace

ROUTERS = (cart_router, order_router, admin_router, directory_router)


def install(app: FastAPI) -> FastAPI:
    """Include every router, push the domain context per request, map errors."""
    app.add_middleware(
        DomainContextMiddleware,
        route_domain_map={router.prefix: marketplace for router in ROUTERS},
    )
    for router in ROUTERS:
        app.include_router(router)
    register_error_handlers(app)
    return app
