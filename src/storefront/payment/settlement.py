"""Payment settlement for an order.

Checks run in a fixed order: payer input, order exists, caller owns it,
not already paid, still pending. The simulator round trip then happens
under the order's lock, and the outcome is recorded in one unit of work
that sets the payment id, marks the payment completed and confirms the
order.
"""

import structlog
from protean.utils.globals import current_domain

from storefront.access.policy import Actor, require_order_owner
from storefront.errors import InvalidInput
from storefront.order.order import PaymentMethod, load_order
from storefront.order.payment import RecordPayment
from storefront.payment.simulator import PaymentResult, get_simulator
from storefront.payment.validation import validate_payer
from storefront.utils.locks import order_locks

logger = structlog.get_logger(__name__)


def _method(provider) -> PaymentMethod:
    try:
        return PaymentMethod.from_slug(provider)
    except ValueError:
        raise InvalidInput({"provider": [f"Unsupported payment provider: {provider}"]}) from None


def settle_payment(actor: Actor, provider, order_id, **payer_fields) -> PaymentResult:
    method = _method(provider)
    if not order_id:
        raise InvalidInput({"order_id": ["Order ID is required"]})
    payer = validate_payer(method, payer_fields)

    with order_locks.hold(order_id):
        order = load_order(order_id)
        require_order_owner(actor, order)
        order.assert_payable()

        logger.info(
            "Settling payment",
            order_id=str(order.id),
            provider=method.value,
            amount=order.total_amount,
            **payer,
        )
        result = get_simulator().settle(method, order.total_amount, order.id)

        current_domain.process(
            RecordPayment(
                order_id=str(order.id),
                payment_id=result.provider_payment_id,
                provider=method.value,
                amount=result.amount,
            ),
            asynchronous=False,
        )

    logger.info("Payment settled", order_id=str(order.id), payment_id=result.provider_payment_id)
    return result
