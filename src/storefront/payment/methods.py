"""Catalogue of the simulated payment rails."""

import os

from storefront.order.order import PaymentMethod

# Fixed display conversion for card payments priced in PKR.
PKR_PER_USD = 280

CURRENCIES = {
    PaymentMethod.JAZZCASH: "PKR",
    PaymentMethod.EASYPAISA: "PKR",
    PaymentMethod.STRIPE: "USD",
}


def demo_mode() -> bool:
    return os.getenv("DEMO_MODE", "true").lower() in ("1", "true", "yes")


def currency_for(method: PaymentMethod) -> str:
    return CURRENCIES[method]


def to_display_amount(method: PaymentMethod, amount_pkr: float) -> float:
    """Amount as shown to the payer: PKR for wallets, USD for cards."""
    if currency_for(method) == "USD":
        return round(amount_pkr / PKR_PER_USD, 2)
    return round(amount_pkr, 2)


def payment_methods(demo=None) -> list[dict]:
    demo = demo_mode() if demo is None else demo
    return [
        {
            "id": PaymentMethod.JAZZCASH.slug,
            "name": PaymentMethod.JAZZCASH.value,
            "description": "Pay using your JazzCash mobile wallet",
            "color": "#ED1C24",
            "currency": "PKR",
            "requires_phone": True,
            "requires_mpin": True,
            "requires_card": False,
            "demo_mode": demo,
        },
        {
            "id": PaymentMethod.EASYPAISA.slug,
            "name": PaymentMethod.EASYPAISA.value,
            "description": "Pay using your EasyPaisa account",
            "color": "#00A651",
            "currency": "PKR",
            "requires_phone": True,
            "requires_mpin": False,
            "requires_card": False,
            "demo_mode": demo,
        },
        {
            "id": PaymentMethod.STRIPE.slug,
            "name": "Credit/Debit Card",
            "description": "Pay with Visa, Mastercard, or other cards",
            "color": "#635BFF",
            "currency": "USD",
            "requires_phone": False,
            "requires_mpin": False,
            "requires_card": True,
            "supported_cards": ["Visa", "Mastercard", "American Express", "Discover"],
            "demo_mode": demo,
        },
    ]
