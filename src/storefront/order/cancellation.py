"""Order cancellation: commands and handler.

Cancelling commits the status change first. Each line's stock is then given
back to the ledger and recorded with ``RecordLineRestocked`` before the next
line starts, so a restore that stops halfway can be resumed without giving
any line back twice.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order


@storefront.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    cancelled_by = String(required=True, max_length=50)


@storefront.command(part_of="Order")
class RecordLineRestocked:
    order_id = Identifier(required=True)
    item_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.cancel(cancelled_by=command.cancelled_by)
        repo.add(order)

    @handle(RecordLineRestocked)
    def record_line_restocked(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.mark_restocked(command.item_id)
        repo.add(order)
