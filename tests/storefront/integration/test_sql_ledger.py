"""Integration tests for the SQLAlchemy stock ledger on a SQLite file."""

import threading

import pytest
from sqlalchemy.exc import IntegrityError
from storefront.errors import InsufficientStock, ProductNotFound
from storefront.inventory.ledger import StockLine, get_ledger, reset_ledger
from storefront.inventory.ledger.sql_adapter import SqlStockLedger, stock_levels


@pytest.fixture()
def sql_ledger(tmp_path):
    ledger = SqlStockLedger.from_uri(f"sqlite:///{tmp_path / 'ledger.db'}")
    ledger.create_schema()
    ledger.stock("prod-A", 5)
    ledger.stock("prod-B", 2)
    yield ledger
    ledger.drop_schema()
    ledger.engine.dispose()


class TestSqlLedger:
    def test_reserve_and_release(self, sql_ledger):
        sql_ledger.reserve("prod-A", 3)
        assert sql_ledger.available("prod-A") == 2
        sql_ledger.release("prod-A", 3)
        assert sql_ledger.available("prod-A") == 5

    def test_insufficient_stock_is_conditional(self, sql_ledger):
        with pytest.raises(InsufficientStock) as exc_info:
            sql_ledger.reserve("prod-A", 6)
        assert exc_info.value.available == 5
        assert sql_ledger.available("prod-A") == 5

    def test_unknown_product(self, sql_ledger):
        with pytest.raises(ProductNotFound):
            sql_ledger.reserve("prod-X", 1)
        with pytest.raises(ProductNotFound):
            sql_ledger.available("prod-X")

    def test_stock_upserts(self, sql_ledger):
        sql_ledger.stock("prod-C", 4)
        sql_ledger.stock("prod-C", 9)
        assert sql_ledger.levels(["prod-A", "prod-C", "prod-X"]) == {"prod-A": 5, "prod-C": 9}

    def test_reserve_all_rolls_back(self, sql_ledger):
        with pytest.raises(InsufficientStock):
            sql_ledger.reserve_all([StockLine("prod-A", 2), StockLine("prod-B", 3)])
        assert sql_ledger.available("prod-A") == 5
        assert sql_ledger.available("prod-B") == 2

    def test_check_constraint_blocks_negative_rows(self, sql_ledger):
        with pytest.raises(IntegrityError):
            with sql_ledger.engine.begin() as conn:
                conn.execute(stock_levels.update().values(on_hand=-1))
        assert sql_ledger.available("prod-A") == 5

    def test_threads_never_oversell(self, sql_ledger):
        sql_ledger.stock("prod-hot", 10)
        barrier = threading.Barrier(6)
        results = []

        def _grab():
            barrier.wait()
            try:
                sql_ledger.reserve("prod-hot", 3)
                results.append("ok")
            except InsufficientStock:
                results.append("short")

        threads = [threading.Thread(target=_grab) for _ in range(6)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

        assert results.count("ok") == 3
        assert sql_ledger.available("prod-hot") == 1


def test_factory_selects_sql_ledger_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("STOCK_LEDGER_URI", f"sqlite:///{tmp_path / 'env.db'}")
    reset_ledger()

    ledger = get_ledger()

    assert isinstance(ledger, SqlStockLedger)
    ledger.stock("prod-A", 1)
    assert ledger.available("prod-A") == 1
    ledger.engine.dispose()
