"""Payment simulator: stands in for the JazzCash, EasyPaisa and Stripe rails.

Every settlement succeeds after an artificial delay and yields identifiers
shaped like the real provider's. The delay is configurable (and can be
switched off) through ``PAYMENT_SIMULATOR_DELAY``, e.g. ``"1,3"`` or ``"0"``.
"""

import os
import random
import string
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime

import structlog

from storefront.order.order import PaymentMethod
from storefront.payment.methods import currency_for, to_display_amount

logger = structlog.get_logger(__name__)

DEFAULT_DELAY = (1.0, 3.0)

_BASE36 = string.digits + string.ascii_lowercase

_ID_FORMATS = {
    PaymentMethod.JAZZCASH: lambda base, ms: (f"JC{base.upper()}", f"TXN{ms}"),
    PaymentMethod.EASYPAISA: lambda base, ms: (f"EP{base.upper()}", f"EPTXN{ms}"),
    PaymentMethod.STRIPE: lambda base, ms: (f"pi_{base}", f"ch_{base}"),
}


@dataclass(frozen=True)
class PaymentResult:
    """Outcome of a simulated settlement."""

    provider: str
    provider_payment_id: str
    provider_transaction_id: str
    amount: float
    currency: str
    display_amount: float
    message: str
    status: str = "completed"
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


def _to_base36(number: int) -> str:
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits)) or "0"


def delay_from_env() -> tuple[float, float]:
    raw = os.getenv("PAYMENT_SIMULATOR_DELAY")
    if raw is None or not raw.strip():
        return DEFAULT_DELAY
    parts = [float(p) for p in raw.split(",")]
    if len(parts) == 1:
        return (parts[0], parts[0])
    return (parts[0], parts[1])


class PaymentSimulator:
    def __init__(self, delay=None, sleep=time.sleep, rng=None):
        self.delay = delay_from_env() if delay is None else tuple(delay)
        self.sleep = sleep
        self.rng = rng or random.Random()

    def _wait(self):
        low, high = self.delay
        seconds = self.rng.uniform(low, high) if high > low else low
        if seconds > 0:
            self.sleep(seconds)

    def _base_id(self, now_ms: int) -> str:
        suffix = "".join(self.rng.choice(_BASE36) for _ in range(9))
        return _to_base36(now_ms) + suffix

    def settle(self, method: PaymentMethod, amount: float, order_id) -> PaymentResult:
        """Simulate the provider round trip. Always completes."""
        self._wait()

        now = datetime.now(UTC)
        now_ms = int(now.timestamp() * 1000)
        payment_id, transaction_id = _ID_FORMATS[method](self._base_id(now_ms), now_ms)

        result = PaymentResult(
            provider=method.value,
            provider_payment_id=payment_id,
            provider_transaction_id=transaction_id,
            amount=amount,
            currency=currency_for(method),
            display_amount=to_display_amount(method, amount),
            message=f"Payment processed successfully via {method.value}",
            timestamp=now,
        )
        logger.info(
            "Payment simulated",
            order_id=str(order_id),
            provider=method.value,
            payment_id=payment_id,
            amount=amount,
        )
        return result


_current_simulator: PaymentSimulator | None = None


def get_simulator() -> PaymentSimulator:
    """Return the active simulator, built from the environment on first use."""
    global _current_simulator
    if _current_simulator is None:
        _current_simulator = PaymentSimulator()
    return _current_simulator


def set_simulator(simulator: PaymentSimulator) -> None:
    """Override the active simulator (useful for tests)."""
    global _current_simulator
    _current_simulator = simulator


def reset_simulator() -> None:
    global _current_simulator
    _current_simulator = None
