"""Payment status lookup for an order."""

from storefront.access.policy import Actor, require_order_access
from storefront.order.order import load_order


def verify_payment(actor: Actor, order_id) -> dict:
    order = load_order(order_id)
    require_order_access(actor, order, "view this order")
    return {
        "order_id": str(order.id),
        "payment_id": order.payment_id,
        "payment_status": order.payment_status,
        "order_status": order.status,
        "amount": order.total_amount,
    }
