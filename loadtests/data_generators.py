"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the storefront's validation
rules (Pakistani mobile numbers, well-known test card numbers) and match the
field names expected by the API's Pydantic request schemas.
"""

import random
import uuid

from faker import Faker

fake = Faker()

TEST_CARDS = ["4242424242424242", "5555555555554444", "378282246310005"]


def unique_user_id(prefix="lt-user") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def wallet_phone() -> str:
    """Mobile numbers in the 03XXXXXXXXX form the wallet rails accept."""
    return f"03{random.randint(0, 4)}{random.randint(0, 9)}{random.randint(1000000, 9999999)}"


def product_data(stock=None) -> dict:
    """CreateProductRequest payload."""
    return {
        "name": f"{fake.color_name()} {random.choice(['Shawl', 'Khussa', 'Kurta', 'Ajrak', 'Rug'])}"[:255],
        "description": fake.sentence(nb_words=12),
        "price": round(random.uniform(500, 15000), 2),
        "stock": random.randint(20, 200) if stock is None else stock,
    }


def checkout_data(payment_method=None) -> dict:
    """CreateOrderRequest payload."""
    return {
        "payment_method": payment_method or random.choice(["jazzcash", "easypaisa", "stripe"]),
        "shipping_address": f"{fake.street_address()}, {random.choice(['Lahore', 'Karachi', 'Islamabad'])}",
        "phone": wallet_phone(),
        "notes": fake.sentence() if random.random() < 0.2 else None,
    }


def payment_data(order_id: str, provider: str) -> dict:
    """SettlePaymentRequest payload for ``provider``."""
    if provider == "stripe":
        expiry = fake.future_date(end_date="+1500d")
        return {
            "order_id": order_id,
            "card_number": random.choice(TEST_CARDS),
            "expiry_month": f"{expiry.month:02d}",
            "expiry_year": str(expiry.year % 100),
            "cvc": f"{random.randint(0, 999):03d}",
        }
    return {"order_id": order_id, "phone": wallet_phone(), "mpin": f"{random.randint(0, 9999):04d}"}
