"""Order aggregate: the immutable record produced from a cart at checkout.

Line items carry snapshot prices, names and sellers taken at placement time
and never change afterwards. Only the status and payment fields move, and
only along the transition table below.

State Machine:
    PENDING → CONFIRMED → PROCESSING → SHIPPED → DELIVERED
    PENDING → CANCELLED
    DELIVERED and CANCELLED are terminal.

Payment status runs in parallel: PENDING → COMPLETED on settlement,
PENDING → FAILED on cancellation.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.errors import AlreadyPaid, InvalidTransition, ItemNotFound, OrderNotFound
from storefront.order.events import (
    OrderCancelled,
    OrderLineRestocked,
    OrderPlaced,
    OrderStatusChanged,
    PaymentSettled,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class PaymentStatus(Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    FAILED = "Failed"


class PaymentMethod(Enum):
    JAZZCASH = "JazzCash"
    EASYPAISA = "EasyPaisa"
    STRIPE = "Stripe"

    @classmethod
    def from_slug(cls, slug):
        """Resolve ``jazzcash`` / ``JazzCash`` / ``JAZZCASH`` to a member."""
        for member in cls:
            if str(slug).lower() == member.value.lower():
                return member
        raise ValueError(f"Unknown payment method: {slug}")

    @property
    def slug(self):
        return self.value.lower()


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

TERMINAL_STATES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """A purchased line with the price, name and seller frozen at placement."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    seller_id = Identifier()
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    restocked = Boolean(default=False)

    @property
    def line_total(self):
        return round(self.unit_price * self.quantity, 2)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    user_id = Identifier(required=True)
    items = HasMany(OrderItem)
    total_amount = Float(required=True, min_value=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_method = String(choices=PaymentMethod, required=True)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    payment_id = String(max_length=255)
    shipping_address = Text(required=True)
    phone = String(required=True, max_length=20)
    notes = Text()
    cancelled_by = String(max_length=50)
    stock_restored = Boolean(default=False)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, user_id, items_data, payment_method, shipping_address, phone, notes=None):
        """Create a pending order from snapshot line data.

        Args:
            user_id: The buyer.
            items_data: List of dicts with product_id, product_name, seller_id,
                        quantity and unit_price captured from the live catalogue.
        """
        now = datetime.now(UTC)
        items = [
            OrderItem(
                product_id=item["product_id"],
                product_name=item["product_name"],
                seller_id=item.get("seller_id"),
                quantity=item["quantity"],
                unit_price=item["unit_price"],
            )
            for item in items_data
        ]
        total_amount = round(sum(i.unit_price * i.quantity for i in items), 2)

        order = cls(
            user_id=user_id,
            items=items,
            total_amount=total_amount,
            status=OrderStatus.PENDING.value,
            payment_method=payment_method,
            payment_status=PaymentStatus.PENDING.value,
            shipping_address=shipping_address,
            phone=phone,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                items=json.dumps(items_data),
                total_amount=total_amount,
                payment_method=payment_method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State machine
    # -------------------------------------------------------------------
    def can_transition_to(self, target_status):
        return target_status in _VALID_TRANSITIONS.get(OrderStatus(self.status), set())

    def _assert_can_transition(self, target_status):
        """Validate that the current state allows transition to target."""
        if not self.can_transition_to(target_status):
            raise InvalidTransition(self.status, target_status.value)

    def _move_to(self, target_status):
        self._assert_can_transition(target_status)
        previous_status = self.status
        now = datetime.now(UTC)
        self.status = target_status.value
        self.updated_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous_status,
                new_status=target_status.value,
                changed_at=now,
            )
        )

    @property
    def is_terminal(self):
        return OrderStatus(self.status) in TERMINAL_STATES

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def assert_payable(self):
        """Payment may be captured once, and never for a cancelled order.

        A pending order is confirmed by its payment. An order already confirmed
        by staff keeps its status and only has its payment recorded.
        """
        if PaymentStatus(self.payment_status) == PaymentStatus.COMPLETED:
            raise AlreadyPaid(self.id)
        if OrderStatus(self.status) == OrderStatus.CANCELLED:
            raise InvalidTransition(self.status, OrderStatus.CONFIRMED.value)

    def record_payment(self, payment_id, amount, provider):
        """Settlement succeeded: mark the order paid, confirming it if still pending."""
        self.assert_payable()
        self.payment_id = payment_id
        self.payment_status = PaymentStatus.COMPLETED.value
        if OrderStatus(self.status) == OrderStatus.PENDING:
            self._move_to(OrderStatus.CONFIRMED)
        else:
            self.updated_at = datetime.now(UTC)
        self.raise_(
            PaymentSettled(
                order_id=str(self.id),
                payment_id=payment_id,
                provider=provider,
                amount=amount,
            )
        )

    # -------------------------------------------------------------------
    # Fulfillment
    # -------------------------------------------------------------------
    def confirm(self):
        """Confirm without a captured payment (manual confirmation by staff)."""
        self._move_to(OrderStatus.CONFIRMED)

    def mark_processing(self):
        self._move_to(OrderStatus.PROCESSING)

    def mark_shipped(self):
        self._move_to(OrderStatus.SHIPPED)

    def mark_delivered(self):
        self._move_to(OrderStatus.DELIVERED)

    # -------------------------------------------------------------------
    # Cancellation
    # -------------------------------------------------------------------
    def cancel(self, cancelled_by):
        """Cancel a pending order. The caller restores stock for every line."""
        self._assert_can_transition(OrderStatus.CANCELLED)
        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.payment_status = PaymentStatus.FAILED.value
        self.cancelled_by = cancelled_by
        self.updated_at = now
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                cancelled_by=cancelled_by,
                items=json.dumps([{"product_id": str(i.product_id), "quantity": i.quantity} for i in self.items]),
                cancelled_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Restocking after cancellation
    # -------------------------------------------------------------------
    def pending_restock(self):
        """Lines of a cancelled order whose stock has not been given back yet."""
        if OrderStatus(self.status) != OrderStatus.CANCELLED:
            return []
        return [i for i in self.items if not i.restocked]

    def mark_restocked(self, item_id):
        """Record that one line's stock is back in the ledger. Repeat calls are no-ops."""
        if OrderStatus(self.status) != OrderStatus.CANCELLED:
            raise InvalidTransition(self.status, "Restocked")

        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ItemNotFound(item_id)
        if item.restocked:
            return

        now = datetime.now(UTC)
        item.restocked = True
        self.stock_restored = all(i.restocked for i in self.items)
        self.updated_at = now
        self.raise_(
            OrderLineRestocked(
                order_id=str(self.id),
                item_id=str(item.id),
                product_id=str(item.product_id),
                quantity=item.quantity,
                restocked_at=now,
            )
        )


def load_order(order_id) -> Order:
    try:
        return current_domain.repository_for(Order).get(str(order_id))
    except ObjectNotFoundError:
        raise OrderNotFound(order_id) from None
