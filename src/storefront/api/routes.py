"""FastAPI endpoints for the storefront."""

from fastapi import APIRouter, Depends, Query

from storefront.access.policy import Actor
from storefront.api.dependencies import current_actor, run_in_domain
from storefront.api.schemas import (
    AddToCartRequest,
    CartResponse,
    CreateOrderRequest,
    CreateProductRequest,
    DashboardStatsResponse,
    OrderResponse,
    PaymentMethodResponse,
    PaymentResultResponse,
    PaymentVerificationResponse,
    ProductResponse,
    SellerStatsResponse,
    SetStockRequest,
    SettlePaymentRequest,
    UpdateCartItemRequest,
    UpdateOrderStatusRequest,
    UpdateProductRequest,
)
from storefront.cart import service as carts
from storefront.catalogue import service as catalogue
from storefront.checkout import service as checkout
from storefront.order import queries as orders
from storefront.payment.methods import demo_mode, payment_methods
from storefront.payment.settlement import settle_payment
from storefront.payment.verification import verify_payment

product_router = APIRouter(prefix="/products", tags=["products"])
cart_router = APIRouter(prefix="/cart", tags=["cart"])
order_router = APIRouter(prefix="/orders", tags=["orders"])
admin_router = APIRouter(prefix="/admin", tags=["admin"])
seller_router = APIRouter(prefix="/seller", tags=["seller"])
payment_router = APIRouter(prefix="/payments", tags=["payments"])


# --- Product endpoints ---


@product_router.get("", response_model=list[ProductResponse])
async def list_products(
    search: str | None = None,
    category: str | None = None,
    min_price: float | None = Query(default=None, alias="minPrice"),
    max_price: float | None = Query(default=None, alias="maxPrice"),
    seller_id: str | None = Query(default=None, alias="sellerId"),
) -> list[dict]:
    return await run_in_domain(
        catalogue.list_products,
        search=search,
        category=category,
        min_price=min_price,
        max_price=max_price,
        seller_id=seller_id,
    )


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> dict:
    return await run_in_domain(catalogue.get_product, product_id)


@product_router.post("", status_code=201, response_model=ProductResponse)
async def create_product(body: CreateProductRequest, actor: Actor = Depends(current_actor)) -> dict:
    return await run_in_domain(
        catalogue.add_product,
        actor,
        name=body.name,
        price=body.price,
        stock=body.stock,
        description=body.description,
        category=body.category,
    )


@product_router.put("/{product_id}", response_model=ProductResponse)
async def update_product(product_id: str, body: UpdateProductRequest, actor: Actor = Depends(current_actor)) -> dict:
    return await run_in_domain(
        catalogue.update_product,
        actor,
        product_id,
        name=body.name,
        description=body.description,
        category=body.category,
        price=body.price,
        is_active=body.is_active,
    )


@product_router.put("/{product_id}/stock", response_model=ProductResponse)
async def set_stock(product_id: str, body: SetStockRequest, actor: Actor = Depends(current_actor)) -> dict:
    return await run_in_domain(catalogue.set_stock, actor, product_id, body.stock)


# --- Cart endpoints ---


@cart_router.get("", response_model=CartResponse)
async def get_cart(actor: Actor = Depends(current_actor)) -> dict:
    return await run_in_domain(carts.view_cart, actor)


@cart_router.post("/items", response_model=CartResponse)
async def add_to_cart(body: AddToCartRequest, actor: Actor = Depends(current_actor)) -> dict:
    return await run_in_domain(carts.add_item, actor, body.product_id, body.quantity)


@cart_router.put("/items/{item_id}", response_model=CartResponse)
async def update_cart_item(item_id: str, body: UpdateCartItemRequest, actor: Actor = Depends(current_actor)) -> dict:
    return await run_in_domain(carts.update_item, actor, item_id, body.quantity)


@cart_router.delete("/items/{item_id}", response_model=CartResponse)
async def remove_cart_item(item_id: str, actor: Actor = Depends(current_actor)) -> dict:
    return await run_in_domain(carts.remove_item, actor, item_id)


@cart_router.delete("", response_model=CartResponse)
async def clear_cart(actor: Actor = Depends(current_actor)) -> dict:
    return await run_in_domain(carts.clear, actor)


# --- Order endpoints ---


@order_router.post("", status_code=201, response_model=OrderResponse)
async def create_order(body: CreateOrderRequest, actor: Actor = Depends(current_actor)) -> dict:
    return await run_in_domain(
        checkout.place_order,
        actor,
        payment_method=body.payment_method,
        shipping_address=body.shipping_address,
        phone=body.phone,
        notes=body.notes,
    )


@order_router.get("", response_model=list[OrderResponse])
async def list_my_orders(actor: Actor = Depends(current_actor)) -> list[dict]:
    return await run_in_domain(orders.list_orders, actor)


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, actor: Actor = Depends(current_actor)) -> dict:
    return await run_in_domain(orders.get_order, actor, order_id)


@order_router.post("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(order_id: str, actor: Actor = Depends(current_actor)) -> dict:
    return await run_in_domain(checkout.cancel_order, actor, order_id)


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str, body: UpdateOrderStatusRequest, actor: Actor = Depends(current_actor)
) -> dict:
    return await run_in_domain(checkout.update_order_status, actor, order_id, body.status)


@admin_router.get("/orders", response_model=list[OrderResponse])
async def list_all_orders(
    status: str | None = None,
    payment_status: str | None = None,
    actor: Actor = Depends(current_actor),
) -> list[dict]:
    return await run_in_domain(orders.list_all_orders, actor, status=status, payment_status=payment_status)


@admin_router.post("/orders/{order_id}/restore-stock", response_model=OrderResponse)
async def restore_stock(order_id: str, actor: Actor = Depends(current_actor)) -> dict:
    return await run_in_domain(checkout.restore_stock, actor, order_id)


@admin_router.get("/stats", response_model=DashboardStatsResponse)
async def dashboard_stats(actor: Actor = Depends(current_actor)) -> dict:
    return await run_in_domain(orders.dashboard_stats, actor)


@seller_router.get("/products", response_model=list[ProductResponse])
async def list_seller_products(actor: Actor = Depends(current_actor)) -> list[dict]:
    return await run_in_domain(catalogue.seller_products, actor)


@seller_router.get("/orders", response_model=list[OrderResponse])
async def list_seller_orders(actor: Actor = Depends(current_actor)) -> list[dict]:
    return await run_in_domain(orders.list_seller_orders, actor)


@seller_router.get("/stats", response_model=SellerStatsResponse)
async def seller_stats(actor: Actor = Depends(current_actor)) -> dict:
    return await run_in_domain(orders.seller_stats, actor)


# --- Payment endpoints ---


@payment_router.get("/methods", response_model=list[PaymentMethodResponse])
async def list_payment_methods() -> list[dict]:
    return payment_methods()


@payment_router.post("/{provider}", response_model=PaymentResultResponse)
async def pay(provider: str, body: SettlePaymentRequest, actor: Actor = Depends(current_actor)) -> dict:
    result = await run_in_domain(
        settle_payment,
        actor,
        provider,
        body.order_id,
        **body.model_dump(exclude={"order_id"}, exclude_none=True),
    )
    return {
        "provider": result.provider,
        "payment_id": result.provider_payment_id,
        "transaction_id": result.provider_transaction_id,
        "amount": result.amount,
        "currency": result.currency,
        "display_amount": result.display_amount,
        "status": result.status,
        "message": result.message,
        "timestamp": result.timestamp,
        "demo_mode": demo_mode(),
    }


@payment_router.get("/verify/{order_id}", response_model=PaymentVerificationResponse)
async def verify(order_id: str, actor: Actor = Depends(current_actor)) -> dict:
    return await run_in_domain(verify_payment, actor, order_id)
