"""Domain events for the Order aggregate.

All events are versioned, immutable facts about an order's lifecycle.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A cart was converted into a pending order and its stock reserved."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of snapshot line dicts
    total_amount = Float(required=True)
    payment_method = String(required=True, max_length=50)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    """The order moved along the lifecycle state machine."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True, max_length=50)
    new_status = String(required=True, max_length=50)
    changed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentSettled:
    """The payment provider confirmed the charge for the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    payment_id = String(required=True, max_length=255)
    provider = String(required=True, max_length=50)
    amount = Float(required=True)


@storefront.event(part_of="Order")
class OrderCancelled:
    """A pending order was cancelled. Its lines go back to the ledger."""

    __version__ = 1

    order_id = Identifier(required=True)
    cancelled_by = String(required=True, max_length=50)
    items = Text(required=True)  # JSON: list of {product_id, quantity}
    cancelled_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderLineRestocked:
    """One line of a cancelled order was given back to the stock ledger."""

    __version__ = 1

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    restocked_at = DateTime(required=True)
