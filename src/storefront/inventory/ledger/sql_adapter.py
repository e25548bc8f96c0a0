"""SQL stock ledger on SQLAlchemy Core.

Each reservation is one conditional ``UPDATE`` guarded by
``on_hand >= :quantity``; the affected row count decides success, so the
database row lock is the only synchronization needed across processes.
"""

from datetime import UTC, datetime

import structlog
from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Engine,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    insert,
    select,
    update,
)

from storefront.errors import InsufficientStock, ProductNotFound
from storefront.inventory.ledger.port import StockLedger

logger = structlog.get_logger(__name__)

metadata = MetaData()

stock_levels = Table(
    "stock_levels",
    metadata,
    Column("product_id", String(255), primary_key=True),
    Column("on_hand", Integer, nullable=False, default=0),
    Column("updated_at", DateTime(timezone=True)),
    CheckConstraint("on_hand >= 0", name="ck_stock_levels_on_hand_non_negative"),
)


class SqlStockLedger(StockLedger):
    def __init__(self, engine: Engine):
        self.engine = engine

    @classmethod
    def from_uri(cls, database_uri: str) -> "SqlStockLedger":
        return cls(create_engine(database_uri, pool_pre_ping=True))

    # -------------------------------------------------------------------
    # Schema
    # -------------------------------------------------------------------
    def create_schema(self) -> None:
        metadata.create_all(self.engine)

    def drop_schema(self) -> None:
        metadata.drop_all(self.engine)

    # -------------------------------------------------------------------
    # Ledger operations
    # -------------------------------------------------------------------
    def stock(self, product_id, quantity):
        self._check_level(quantity)
        now = datetime.now(UTC)
        with self.engine.begin() as conn:
            result = conn.execute(
                update(stock_levels)
                .where(stock_levels.c.product_id == str(product_id))
                .values(on_hand=int(quantity), updated_at=now)
            )
            if result.rowcount == 0:
                conn.execute(
                    insert(stock_levels).values(product_id=str(product_id), on_hand=int(quantity), updated_at=now)
                )

    def available(self, product_id):
        with self.engine.connect() as conn:
            on_hand = conn.execute(
                select(stock_levels.c.on_hand).where(stock_levels.c.product_id == str(product_id))
            ).scalar_one_or_none()
        if on_hand is None:
            raise ProductNotFound(product_id)
        return on_hand

    def levels(self, product_ids):
        ids = [str(pid) for pid in product_ids]
        if not ids:
            return {}
        with self.engine.connect() as conn:
            rows = conn.execute(
                select(stock_levels.c.product_id, stock_levels.c.on_hand).where(stock_levels.c.product_id.in_(ids))
            ).all()
        return {row.product_id: row.on_hand for row in rows}

    def reserve(self, product_id, quantity):
        self._check_quantity(quantity)
        with self.engine.begin() as conn:
            result = conn.execute(
                update(stock_levels)
                .where(stock_levels.c.product_id == str(product_id))
                .where(stock_levels.c.on_hand >= quantity)
                .values(on_hand=stock_levels.c.on_hand - quantity, updated_at=datetime.now(UTC))
            )
            if result.rowcount == 1:
                return

            on_hand = conn.execute(
                select(stock_levels.c.on_hand).where(stock_levels.c.product_id == str(product_id))
            ).scalar_one_or_none()

        if on_hand is None:
            raise ProductNotFound(product_id)
        raise InsufficientStock(product_id, quantity, on_hand)

    def release(self, product_id, quantity):
        self._check_quantity(quantity)
        with self.engine.begin() as conn:
            result = conn.execute(
                update(stock_levels)
                .where(stock_levels.c.product_id == str(product_id))
                .values(on_hand=stock_levels.c.on_hand + quantity, updated_at=datetime.now(UTC))
            )
        if result.rowcount == 0:
            raise ProductNotFound(product_id)
        logger.debug("Stock released", product_id=str(product_id), quantity=quantity)
