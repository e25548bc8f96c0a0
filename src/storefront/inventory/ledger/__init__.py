"""Stock ledger factory.

Provides get_ledger() / set_ledger() to swap implementations:
- MemoryStockLedger for development and testing (default)
- SqlStockLedger when STOCK_LEDGER_URI names a database
"""

import os
from threading import Lock

from storefront.inventory.ledger.memory_adapter import MemoryStockLedger
from storefront.inventory.ledger.port import StockLedger, StockLine

__all__ = ["StockLedger", "StockLine", "get_ledger", "set_ledger", "reset_ledger"]

_current_ledger: StockLedger | None = None
_factory_lock = Lock()


def get_ledger() -> StockLedger:
    """Return the current stock ledger, creating it from the environment on first use."""
    global _current_ledger
    with _factory_lock:
        if _current_ledger is None:
            database_uri = os.getenv("STOCK_LEDGER_URI")
            if database_uri:
                from storefront.inventory.ledger.sql_adapter import SqlStockLedger

                ledger = SqlStockLedger.from_uri(database_uri)
                ledger.create_schema()
                _current_ledger = ledger
            else:
                _current_ledger = MemoryStockLedger()
    return _current_ledger


def set_ledger(ledger: StockLedger) -> None:
    """Override the active ledger (useful for tests)."""
    global _current_ledger
    _current_ledger = ledger


def reset_ledger() -> None:
    """Reset to the environment-selected ledger."""
    global _current_ledger
    _current_ledger = None
