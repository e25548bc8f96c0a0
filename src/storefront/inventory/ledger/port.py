"""Stock ledger port (abstract interface).

The ledger is the single owner of on-hand stock. Adapters must make
``reserve`` a check-and-decrement in one atomic step so concurrent
reservations can never drive stock below zero.
"""

from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass

import structlog

from storefront.errors import InsufficientStock, InvalidInput, InvalidQuantity

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class StockLine:
    """One product/quantity pair to reserve or release."""

    product_id: str
    quantity: int
    product_name: str | None = None


def merge_lines(lines) -> list[StockLine]:
    """Collapse duplicate products and sort by product id.

    A stable acquisition order keeps multi-line reservations from
    interleaving differently across concurrent orders.
    """
    totals = Counter()
    names = {}
    for line in lines:
        totals[str(line.product_id)] += line.quantity
        names.setdefault(str(line.product_id), line.product_name)
    return [StockLine(product_id=pid, quantity=totals[pid], product_name=names[pid]) for pid in sorted(totals)]


class StockLedger(ABC):
    """Abstract stock ledger."""

    @abstractmethod
    def stock(self, product_id: str, quantity: int) -> None:
        """Create or overwrite the on-hand level of a product."""
        ...

    @abstractmethod
    def available(self, product_id: str) -> int:
        """Current on-hand level. Raises ProductNotFound for unknown products."""
        ...

    @abstractmethod
    def levels(self, product_ids) -> dict[str, int]:
        """On-hand levels for several products. Unknown products are omitted."""
        ...

    @abstractmethod
    def reserve(self, product_id: str, quantity: int) -> None:
        """Atomically decrement stock by ``quantity`` or raise InsufficientStock."""
        ...

    @abstractmethod
    def release(self, product_id: str, quantity: int) -> None:
        """Increment stock by ``quantity``. Never fails for a known product."""
        ...

    # -------------------------------------------------------------------
    # Multi-line operations
    # -------------------------------------------------------------------
    def reserve_all(self, lines) -> list[StockLine]:
        """Reserve every line or none of them.

        Lines are reserved in product-id order. When one fails, the lines
        already reserved are released before the error propagates.
        """
        reserved = []
        try:
            for line in merge_lines(lines):
                try:
                    self.reserve(line.product_id, line.quantity)
                except InsufficientStock as exc:
                    raise InsufficientStock(
                        line.product_id, exc.requested, exc.available, product_name=line.product_name
                    ) from exc
                reserved.append(line)
        except Exception:
            if reserved:
                logger.info(
                    "Rolling back partial reservation",
                    released=[(line.product_id, line.quantity) for line in reserved],
                )
                self.release_all(reserved)
            raise
        return reserved

    def release_all(self, lines) -> None:
        for line in merge_lines(lines):
            self.release(line.product_id, line.quantity)

    @staticmethod
    def _check_quantity(quantity):
        if quantity is None or int(quantity) < 1:
            raise InvalidQuantity(quantity)

    @staticmethod
    def _check_level(quantity):
        if quantity is None or int(quantity) < 0:
            raise InvalidInput({"stock": ["Stock cannot be negative"]})
