"""Checkout orchestration: cart → order, cancellation and status updates.

Placing an order is a two-phase operation across two stores:

1. Reserve every cart line in the stock ledger (all or nothing).
2. Persist the order and drain the cart in one Protean unit of work.

If step 2 fails, every line reserved in step 1 is released before the error
propagates, so stock is never left decremented without an order.

Cancellation runs in the opposite order: the Pending → Cancelled transition
is committed first, and only the caller that made that transition releases
the stock. It gives the lines back one at a time and records each on the order,
so a failure partway leaves the order Cancelled with `stock_restored` unset
and an admin can finish the remaining lines later with `restore_stock`. A
second cancel fails on the state machine and releases nothing.
"""

import json

import structlog
from protean.utils.globals import current_domain

from storefront.access.policy import Actor, require_admin, require_elevated, require_order_access
from storefront.cart.service import get_or_create
from storefront.catalogue.product import load_product
from storefront.errors import EmptyCart, InsufficientStock, InvalidInput, InvalidTransition
from storefront.inventory.ledger import StockLine, get_ledger
from storefront.order.cancellation import CancelOrder, RecordLineRestocked
from storefront.order.creation import PlaceOrder
from storefront.order.order import OrderStatus, PaymentMethod, load_order
from storefront.order.queries import order_view
from storefront.order.status import ConfirmOrder, MarkDelivered, MarkProcessing, MarkShipped
from storefront.utils.locks import cart_locks, order_locks
from storefront.utils.retry import retry_on_failure

logger = structlog.get_logger(__name__)

_STATUS_COMMANDS = {
    OrderStatus.CONFIRMED: ConfirmOrder,
    OrderStatus.PROCESSING: MarkProcessing,
    OrderStatus.SHIPPED: MarkShipped,
    OrderStatus.DELIVERED: MarkDelivered,
}


def _payment_method(value):
    try:
        return PaymentMethod.from_slug(value)
    except ValueError:
        raise InvalidInput({"payment_method": [f"Unsupported payment method: {value}"]}) from None


def _snapshot_lines(cart):
    """Freeze product data for every cart line and pre-check stock."""
    ledger = get_ledger()
    levels = ledger.levels([item.product_id for item in cart.items])

    snapshot = []
    for item in cart.items:
        product = load_product(item.product_id, active_only=True)
        available = levels.get(str(product.id), 0)
        if item.quantity > available:
            raise InsufficientStock(product.id, item.quantity, available, product_name=product.name)
        snapshot.append(
            {
                "product_id": str(product.id),
                "product_name": product.name,
                "seller_id": str(product.seller_id),
                "quantity": item.quantity,
                "unit_price": product.price,
            }
        )
    return snapshot


def place_order(actor: Actor, payment_method, shipping_address, phone, notes=None) -> dict:
    """Convert the caller's cart into a pending order."""
    method = _payment_method(payment_method)
    if not shipping_address or not phone:
        raise InvalidInput({"shipping_address": ["Shipping address and phone are required"]})

    with cart_locks.hold(actor.user_id):
        cart = get_or_create(actor.user_id)
        if not cart.items:
            raise EmptyCart()

        snapshot = _snapshot_lines(cart)

        ledger = get_ledger()
        reserved = ledger.reserve_all(
            StockLine(product_id=line["product_id"], quantity=line["quantity"], product_name=line["product_name"])
            for line in snapshot
        )

        try:
            order_id = current_domain.process(
                PlaceOrder(
                    user_id=actor.user_id,
                    cart_id=str(cart.id),
                    items=json.dumps(snapshot),
                    payment_method=method.value,
                    shipping_address=shipping_address,
                    phone=phone,
                    notes=notes,
                ),
                asynchronous=False,
            )
        except Exception:
            logger.warning(
                "Order persistence failed, releasing reservation",
                user_id=actor.user_id,
                lines=len(reserved),
                exc_info=True,
            )
            ledger.release_all(reserved)
            raise

    order = load_order(order_id)
    logger.info(
        "Order placed",
        order_id=order_id,
        user_id=actor.user_id,
        total=order.total_amount,
        payment_method=method.value,
    )
    return order_view(order)


@retry_on_failure(max_attempts=5, backoff=0.1)
def _release_line(product_id, quantity):
    get_ledger().release(product_id, quantity)


def _restore_stock(order):
    """Give back every line not yet restocked, one line at a time.

    Only the release of a single line is retried, and each line is recorded
    as restocked as soon as it is back, so a line is never given back twice.
    Lines that still fail stay pending and the last failure is raised.
    """
    failure = None
    for item in order.pending_restock():
        try:
            _release_line(str(item.product_id), item.quantity)
        except Exception as exc:
            failure = exc
            continue
        current_domain.process(
            RecordLineRestocked(order_id=str(order.id), item_id=str(item.id)),
            asynchronous=False,
        )

    if failure is not None:
        pending = load_order(order.id).pending_restock()
        logger.error(
            "Stock restoration incomplete for cancelled order",
            order_id=str(order.id),
            pending=[(str(item.product_id), item.quantity) for item in pending],
            exc_info=failure,
        )
        raise failure


def cancel_order(actor: Actor, order_id) -> dict:
    """Cancel a pending order and give its stock back exactly once."""
    with order_locks.hold(order_id):
        order = load_order(order_id)
        require_order_access(actor, order, "cancel this order")

        current_domain.process(
            CancelOrder(order_id=str(order.id), cancelled_by=actor.role.value),
            asynchronous=False,
        )
        _restore_stock(load_order(order_id))

        logger.info("Order cancelled", order_id=str(order.id), cancelled_by=actor.role.value)
        return order_view(load_order(order_id))


def restore_stock(actor: Actor, order_id) -> dict:
    """Finish giving back the stock of a cancelled order whose restore stopped partway."""
    require_admin(actor, "restore stock")
    with order_locks.hold(order_id):
        order = load_order(order_id)
        if OrderStatus(order.status) != OrderStatus.CANCELLED:
            raise InvalidTransition(order.status, "Restocked")

        _restore_stock(order)

        logger.info("Cancelled order restocked", order_id=str(order.id), actor=actor.user_id)
        return order_view(load_order(order_id))


def update_order_status(actor: Actor, order_id, new_status) -> dict:
    """Move an order along the fulfillment path (sellers and admins only)."""
    require_elevated(actor, "update order status")
    try:
        target = OrderStatus(new_status)
    except ValueError:
        raise InvalidInput({"status": [f"Unknown status: {new_status}"]}) from None

    if target == OrderStatus.CANCELLED:
        return cancel_order(actor, order_id)

    with order_locks.hold(order_id):
        order = load_order(order_id)
        command_cls = _STATUS_COMMANDS.get(target)
        if command_cls is None:
            raise InvalidTransition(order.status, target.value)

        current_domain.process(command_cls(order_id=str(order.id)), asynchronous=False)
        logger.info("Order status updated", order_id=str(order.id), status=target.value, actor=actor.user_id)
        return order_view(load_order(order_id))
