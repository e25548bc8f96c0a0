"""Error kinds raised by storefront operations.

Input and state errors are Protean ``ValidationError`` subclasses carrying a
field-keyed ``messages`` dict, the same shape every aggregate raises. Lookups
that miss are ``ObjectNotFoundError`` subclasses. Each kind knows the HTTP
status it maps to; the API layer renders ``{"error": messages, "kind": kind}``.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class StorefrontError(Exception):
    """Mixin that tags an exception with a kind and an HTTP status."""

    kind = "Error"
    status_code = 400


# ---------------------------------------------------------------------------
# NotFound
# ---------------------------------------------------------------------------
class NotFound(StorefrontError, ObjectNotFoundError):
    """A lookup missed. ``ObjectNotFoundError`` keeps no ``messages``, so set them here."""

    kind = "NotFound"
    status_code = 404

    def __init__(self, field, message):
        messages = {field: [message]}
        super().__init__(messages)
        self.messages = messages


class ProductNotFound(NotFound):
    def __init__(self, product_id):
        self.product_id = str(product_id)
        super().__init__("product_id", f"Product {product_id} not found")


class ItemNotFound(NotFound):
    def __init__(self, item_id):
        self.item_id = str(item_id)
        super().__init__("item_id", "Item not found in cart")


class OrderNotFound(NotFound):
    def __init__(self, order_id):
        self.order_id = str(order_id)
        super().__init__("order_id", f"Order {order_id} not found")


# ---------------------------------------------------------------------------
# NotAuthorized
# ---------------------------------------------------------------------------
class NotAuthorized(StorefrontError):
    kind = "NotAuthorized"
    status_code = 403

    def __init__(self, action):
        self.action = action
        self.messages = {"_actor": [f"Not authorized to {action}"]}
        super().__init__(self.messages)


# ---------------------------------------------------------------------------
# Input and state errors
# ---------------------------------------------------------------------------
class InvalidInput(StorefrontError, ValidationError):
    kind = "InvalidInput"

    def __init__(self, messages):
        super().__init__(messages)


class InvalidQuantity(InvalidInput):
    def __init__(self, quantity):
        self.quantity = quantity
        super().__init__({"quantity": ["Quantity must be at least 1"]})


class InsufficientStock(StorefrontError, ValidationError):
    kind = "InsufficientStock"
    status_code = 409

    def __init__(self, product_id, requested, available, product_name=None):
        self.product_id = str(product_id)
        self.requested = requested
        self.available = available
        label = product_name or self.product_id
        super().__init__(
            {"quantity": [f"Insufficient stock for {label}: {available} available, {requested} requested"]}
        )


class EmptyCart(StorefrontError, ValidationError):
    kind = "EmptyCart"

    def __init__(self):
        super().__init__({"cart": ["Cart is empty"]})


class AlreadyPaid(StorefrontError, ValidationError):
    kind = "AlreadyPaid"
    status_code = 409

    def __init__(self, order_id):
        self.order_id = str(order_id)
        super().__init__({"payment_status": ["Order already paid"]})


class InvalidTransition(StorefrontError, ValidationError):
    kind = "InvalidTransition"
    status_code = 409

    def __init__(self, current, target):
        self.current = current
        self.target = target
        super().__init__({"status": [f"Cannot transition from {current} to {target}"]})
