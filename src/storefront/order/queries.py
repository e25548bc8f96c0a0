"""Order read side: views and role-scoped listings."""

from protean.utils.globals import current_domain

from storefront.access.policy import Actor, require_admin, require_order_access, require_seller
from storefront.catalogue.product import Product
from storefront.errors import InvalidInput
from storefront.order.order import Order, OrderStatus, PaymentStatus, load_order


def order_view(order: Order, items=None) -> dict:
    items = order.items if items is None else items
    return {
        "id": str(order.id),
        "user_id": str(order.user_id),
        "items": [
            {
                "id": str(item.id),
                "product_id": str(item.product_id),
                "product_name": item.product_name,
                "seller_id": str(item.seller_id) if item.seller_id else None,
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "line_total": item.line_total,
                "restocked": bool(item.restocked),
            }
            for item in items
        ],
        "total_amount": order.total_amount,
        "status": order.status,
        "payment_method": order.payment_method,
        "payment_status": order.payment_status,
        "payment_id": order.payment_id,
        "shipping_address": order.shipping_address,
        "phone": order.phone,
        "notes": order.notes,
        "cancelled_by": order.cancelled_by,
        "stock_restored": bool(order.stock_restored),
        "created_at": order.created_at.isoformat() if order.created_at else None,
        "updated_at": order.updated_at.isoformat() if order.updated_at else None,
    }


def get_order(actor: Actor, order_id) -> dict:
    order = load_order(order_id)
    require_order_access(actor, order, "view this order")
    return order_view(order)


def list_orders(actor: Actor) -> list[dict]:
    """The caller's own orders, newest first."""
    return [order_view(o) for o in current_domain.repository_for(Order).for_user(actor.user_id)]


def _checked(enum_cls, value, field):
    if value is None:
        return None
    try:
        return enum_cls(value).value
    except ValueError:
        raise InvalidInput({field: [f"Unknown {field}: {value}"]}) from None


def list_all_orders(actor: Actor, status=None, payment_status=None) -> list[dict]:
    require_admin(actor, "list all orders")
    orders = current_domain.repository_for(Order).matching(
        status=_checked(OrderStatus, status, "status"),
        payment_status=_checked(PaymentStatus, payment_status, "payment_status"),
    )
    return [order_view(o) for o in orders]


def list_seller_orders(actor: Actor) -> list[dict]:
    """Orders containing the seller's products, with only that seller's lines."""
    require_seller(actor, "list seller orders")
    views = []
    for order in current_domain.repository_for(Order).matching():
        own_items = [i for i in order.items if i.seller_id and str(i.seller_id) == actor.user_id]
        if own_items:
            views.append(order_view(order, items=own_items))
    return views


def dashboard_stats(actor: Actor) -> dict:
    """Order counts and settled revenue for the admin dashboard."""
    require_admin(actor, "view dashboard statistics")
    repo = current_domain.repository_for(Order)
    settled = repo.matching(payment_status=PaymentStatus.COMPLETED.value)
    return {
        "total_products": current_domain.repository_for(Product).count(),
        "total_orders": repo.count(),
        "pending_orders": repo.count(status=OrderStatus.PENDING.value),
        "total_revenue": round(sum(o.total_amount for o in settled), 2),
    }


def seller_stats(actor: Actor) -> dict:
    """Product counts and line revenue for the seller dashboard.

    Revenue sums the seller's own lines across every order that has one,
    whatever the order's status.
    """
    require_seller(actor, "view seller statistics")
    products = current_domain.repository_for(Product)
    total_orders = 0
    revenue = 0.0
    for order in current_domain.repository_for(Order).matching():
        own_items = [i for i in order.items if i.seller_id and str(i.seller_id) == actor.user_id]
        if own_items:
            total_orders += 1
            revenue += sum(i.line_total for i in own_items)
    return {
        "total_products": products.count(seller_id=actor.user_id),
        "active_products": products.count(seller_id=actor.user_id, is_active=True),
        "total_orders": total_orders,
        "total_revenue": round(revenue, 2),
    }
