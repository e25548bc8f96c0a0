"""Payment recording: command and handler.

The handler re-reads the order inside its unit of work and refuses to record
a second payment, so a settlement that raced another one fails with
AlreadyPaid instead of charging twice.
"""

from protean import handle
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order


@storefront.command(part_of="Order")
class RecordPayment:
    order_id = Identifier(required=True)
    payment_id = String(required=True, max_length=255)
    provider = String(required=True, max_length=50)
    amount = Float(required=True)


@storefront.command_handler(part_of=Order)
class RecordPaymentHandler:
    @handle(RecordPayment)
    def record_payment(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.record_payment(
            payment_id=command.payment_id,
            amount=command.amount,
            provider=command.provider,
        )
        repo.add(order)
