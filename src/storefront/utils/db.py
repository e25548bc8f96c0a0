"""Schema setup for SQL-backed stores."""

import os

from protean.domain import Domain
from sqlalchemy import create_engine

from storefront.inventory.ledger import get_ledger


def _sql_providers(domain: Domain):
    for _, provider in domain.providers.items():
        if provider.conn_info["provider"] in ("sqlite", "postgresql"):
            yield provider


def setup_db(domain: Domain):
    """Create Protean provider tables and the stock ledger table."""
    with domain.domain_context():
        for provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])

            # Accessing _dao registers each element's model with the provider metadata
            for _, aggregate_record in domain.registry.aggregates.items():
                if aggregate_record.cls.meta_.provider == provider.name:
                    domain.repository_for(aggregate_record.cls)._dao  # noqa: B018

            for _, entity_record in domain.registry.entities.items():
                if entity_record.cls.meta_.provider == provider.name:
                    domain.repository_for(entity_record.cls)._dao  # noqa: B018

            provider._metadata.create_all(engine)

    if os.getenv("STOCK_LEDGER_URI"):
        get_ledger().create_schema()


def drop_db(domain: Domain):
    """Drop Protean provider tables and the stock ledger table."""
    with domain.domain_context():
        for provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.drop_all(engine)

    if os.getenv("STOCK_LEDGER_URI"):
        get_ledger().drop_schema()
