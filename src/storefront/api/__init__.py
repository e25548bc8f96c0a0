"""Storefront HTTP API package."""

from storefront.api.routes import (
    admin_router,
    cart_router,
    order_router,
    payment_router,
    product_router,
    seller_router,
)

routers = [product_router, cart_router, order_router, admin_router, seller_router, payment_router]

__all__ = [
    "admin_router",
    "cart_router",
    "order_router",
    "payment_router",
    "product_router",
    "routers",
    "seller_router",
]
