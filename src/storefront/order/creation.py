"""Order placement: command and handler.

The handler persists the order and drains the buyer's cart in the same unit
of work. Stock has already been reserved by the caller; if this unit of work
fails, the caller gives the reservation back.
"""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.domain import storefront
from storefront.order.order import Order, PaymentMethod


@storefront.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    cart_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of snapshot line dicts
    payment_method = String(required=True, choices=PaymentMethod)
    shipping_address = Text(required=True)
    phone = String(required=True, max_length=20)
    notes = Text()


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        order = Order.place(
            user_id=command.user_id,
            items_data=json.loads(command.items),
            payment_method=command.payment_method,
            shipping_address=command.shipping_address,
            phone=command.phone,
            notes=command.notes,
        )
        current_domain.repository_for(Order).add(order)

        cart_repo = current_domain.repository_for(Cart)
        cart = cart_repo.get(command.cart_id)
        cart.clear()
        cart_repo.add(cart)

        return str(order.id)
