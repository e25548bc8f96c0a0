"""Payer input checks for each rail.

Wallet rails need a Pakistani mobile number; the card rail needs a
plausible card number, CVC and expiry. Nothing here contacts a provider.
"""

import re
from dataclasses import dataclass

from storefront.errors import InvalidInput
from storefront.order.order import PaymentMethod

PHONE_PATTERN = re.compile(r"^(\+92|0)?3[0-9]{9}$")
CARD_NUMBER_PATTERN = re.compile(r"^\d{13,19}$")
CVC_PATTERN = re.compile(r"^\d{3,4}$")


@dataclass(frozen=True)
class CardDetails:
    brand: str
    last4: str


def _strip(value) -> str:
    return re.sub(r"\s+", "", str(value or ""))


def validate_phone(phone, field="phone") -> str:
    """Return the normalized number or raise InvalidInput."""
    normalized = _strip(phone)
    if not normalized:
        raise InvalidInput({field: ["Phone number is required"]})
    if not PHONE_PATTERN.match(normalized):
        raise InvalidInput({field: ["Invalid phone number format. Use 03XXXXXXXXX"]})
    return normalized


def detect_card_brand(card_number) -> str:
    number = _strip(card_number)
    if number.startswith("4"):
        return "Visa"
    if re.match(r"^5[1-5]", number):
        return "Mastercard"
    if re.match(r"^3[47]", number):
        return "American Express"
    if re.match(r"^6(?:011|5)", number):
        return "Discover"
    return "Unknown"


def validate_card(card_number, expiry_month, expiry_year, cvc) -> CardDetails:
    errors = {}
    number = _strip(card_number)
    if not number:
        errors["card_number"] = ["Card number is required"]
    elif not CARD_NUMBER_PATTERN.match(number):
        errors["card_number"] = ["Invalid card number"]

    if not expiry_month or not expiry_year:
        errors["expiry"] = ["Card expiry month and year are required"]

    if not cvc:
        errors["cvc"] = ["CVC is required"]
    elif not CVC_PATTERN.match(str(cvc)):
        errors["cvc"] = ["Invalid CVC"]

    if errors:
        raise InvalidInput(errors)
    return CardDetails(brand=detect_card_brand(number), last4=number[-4:])


def mask(value) -> str:
    value = _strip(value)
    return "*" * max(len(value) - 4, 0) + value[-4:]


def validate_payer(method: PaymentMethod, fields: dict) -> dict:
    """Check the payer fields the rail needs and return what may be logged."""
    if method == PaymentMethod.STRIPE:
        card = validate_card(
            fields.get("card_number"),
            fields.get("expiry_month"),
            fields.get("expiry_year"),
            fields.get("cvc"),
        )
        return {"card_brand": card.brand, "last4": card.last4}

    phone = validate_phone(fields.get("phone"))
    return {"phone": mask(phone)}
