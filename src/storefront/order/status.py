"""Fulfillment status changes: commands and handler.

Cancellation is not a status update; it goes through ``CancelOrder`` so that
stock restoration is tied to the single Pending → Cancelled transition.
"""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order


@storefront.command(part_of="Order")
class ConfirmOrder:
    order_id = Identifier(required=True)


@storefront.command(part_of="Order")
class MarkProcessing:
    order_id = Identifier(required=True)


@storefront.command(part_of="Order")
class MarkShipped:
    order_id = Identifier(required=True)


@storefront.command(part_of="Order")
class MarkDelivered:
    order_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class OrderFulfillmentHandler:
    @handle(ConfirmOrder)
    def confirm_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.confirm()
        repo.add(order)

    @handle(MarkProcessing)
    def mark_processing(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.mark_processing()
        repo.add(order)

    @handle(MarkShipped)
    def mark_shipped(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.mark_shipped()
        repo.add(order)

    @handle(MarkDelivered)
    def mark_delivered(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.mark_delivered()
        repo.add(order)
