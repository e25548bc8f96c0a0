"""Storefront domain: catalogue, cart, orders and simulated payment settlement.

Carts are converted into immutable orders against the stock ledger, and
orders are settled through simulated payment rails. Everything is registered
on a single Protean domain; ``storefront.init()`` picks up every module under
this package.
"""

import structlog
from protean.domain import Domain

storefront = Domain(name="storefront")

logger = structlog.get_logger(__name__)
