"""In-process stock ledger for development and tests."""

from threading import RLock

from storefront.errors import InsufficientStock, ProductNotFound
from storefront.inventory.ledger.port import StockLedger


class MemoryStockLedger(StockLedger):
    """Stock levels in a dict, every check-and-write done under one lock."""

    def __init__(self):
        self._lock = RLock()
        self._levels: dict[str, int] = {}

    def stock(self, product_id, quantity):
        self._check_level(quantity)
        with self._lock:
            self._levels[str(product_id)] = int(quantity)

    def available(self, product_id):
        with self._lock:
            try:
                return self._levels[str(product_id)]
            except KeyError:
                raise ProductNotFound(product_id) from None

    def levels(self, product_ids):
        with self._lock:
            return {str(pid): self._levels[str(pid)] for pid in product_ids if str(pid) in self._levels}

    def reserve(self, product_id, quantity):
        self._check_quantity(quantity)
        with self._lock:
            on_hand = self.available(product_id)
            if on_hand < quantity:
                raise InsufficientStock(product_id, quantity, on_hand)
            self._levels[str(product_id)] = on_hand - quantity

    def release(self, product_id, quantity):
        self._check_quantity(quantity)
        with self._lock:
            self._levels[str(product_id)] = self.available(product_id) + quantity

    def clear(self) -> None:
        with self._lock:
            self._levels.clear()
