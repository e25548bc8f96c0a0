"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance keeps its own identity and the ids returned by
creation endpoints so follow-up requests can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class ShopperState:
    """A simulated buyer working through cart, checkout and payment."""

    user_id: str
    cart_item_ids: list[str] = field(default_factory=list)
    order_id: str | None = None
    order_status: str | None = None
    payment_id: str | None = None

    @property
    def headers(self) -> dict:
        return {"X-User-Id": self.user_id, "X-User-Role": "USER"}


@dataclass
class SellerState:
    """A simulated seller listing products and fulfilling orders."""

    user_id: str
    product_ids: list[str] = field(default_factory=list)

    @property
    def headers(self) -> dict:
        return {"X-User-Id": self.user_id, "X-User-Role": "SELLER"}
