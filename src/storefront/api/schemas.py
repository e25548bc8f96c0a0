"""Pydantic request/response schemas for the Storefront API.

These are external contracts, kept separate from the Protean commands they
are translated into.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
class CreateProductRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    category: str | None = Field(default=None, max_length=100)
    price: float = Field(gt=0)
    stock: int = Field(ge=0, default=0)


class UpdateProductRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    category: str | None = Field(default=None, max_length=100)
    price: float | None = Field(default=None, gt=0)
    is_active: bool | None = None


class SetStockRequest(BaseModel):
    stock: int = Field(ge=0)


class ProductResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    category: str | None = None
    price: float
    is_active: bool
    seller_id: str
    stock: int


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = 1

    model_config = {"json_schema_extra": {"examples": [{"product_id": "prod-001", "quantity": 2}]}}


class UpdateCartItemRequest(BaseModel):
    quantity: int


class CartItemResponse(BaseModel):
    id: str
    product_id: str
    name: str
    price: float
    quantity: int
    stock: int
    is_active: bool
    line_total: float


class CartResponse(BaseModel):
    id: str
    user_id: str
    items: list[CartItemResponse]
    total: float


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class CreateOrderRequest(BaseModel):
    payment_method: str
    shipping_address: str
    phone: str
    notes: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "payment_method": "jazzcash",
                    "shipping_address": "House 12, Street 4, F-7/2, Islamabad",
                    "phone": "03001234567",
                    "notes": "Call before delivery",
                }
            ]
        }
    }


class UpdateOrderStatusRequest(BaseModel):
    status: str


class OrderItemResponse(BaseModel):
    id: str
    product_id: str
    product_name: str
    seller_id: str | None = None
    quantity: int
    unit_price: float
    line_total: float
    restocked: bool = False


class OrderResponse(BaseModel):
    id: str
    user_id: str
    items: list[OrderItemResponse]
    total_amount: float
    status: str
    payment_method: str
    payment_status: str
    payment_id: str | None = None
    shipping_address: str
    phone: str
    notes: str | None = None
    cancelled_by: str | None = None
    stock_restored: bool = False
    created_at: str | None = None
    updated_at: str | None = None


class DashboardStatsResponse(BaseModel):
    total_products: int
    total_orders: int
    pending_orders: int
    total_revenue: float


class SellerStatsResponse(BaseModel):
    total_products: int
    active_products: int
    total_orders: int
    total_revenue: float


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------
class SettlePaymentRequest(BaseModel):
    order_id: str
    phone: str | None = None
    mpin: str | None = None
    card_number: str | None = None
    expiry_month: str | None = None
    expiry_year: str | None = None
    cvc: str | None = None


class PaymentResultResponse(BaseModel):
    success: bool = True
    provider: str
    payment_id: str
    transaction_id: str
    amount: float
    currency: str
    display_amount: float
    status: str
    message: str
    timestamp: datetime
    demo_mode: bool = False


class PaymentVerificationResponse(BaseModel):
    order_id: str
    payment_id: str | None = None
    payment_status: str
    order_status: str
    amount: float


class PaymentMethodResponse(BaseModel):
    id: str
    name: str
    description: str
    color: str
    currency: str
    requires_phone: bool
    requires_mpin: bool
    requires_card: bool
    supported_cards: list[str] | None = None
    demo_mode: bool
