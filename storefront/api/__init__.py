# storefront/api/__init__.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.api.errors import register_exception_handlers
from storefront.api.routers import (
    health,
    categories,
    products,
    orders,
    saved_carts,
    cart,
    emails,
    shop,
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront Service",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(health.router)
    app.include_router(shop.router)
    app.include_router(cart.router)
    app.include_router(emails.router)
    app.include_router(categories.router)
    app.include_router(products.router)
    app.include_router(orders.router)
    app.include_router(saved_carts.router)

    return app
