"""SQLite database engine, schema, and ID counters via SQLAlchemy Core."""

from fundctl.infrastructure.database.counters import claim_campaign_id, peek_campaign_count
from fundctl.infrastructure.database.engine import create_db_engine, init_database
from fundctl.infrastructure.database.schema import (
    campaign_titles,
    campaigns,
    donations,
    event_wal,
    id_counters,
    ledger_meta,
    metadata,
    transfers,
)

__all__ = [
    "campaign_titles",
    "campaigns",
    "claim_campaign_id",
    "create_db_engine",
    "donations",
    "event_wal",
    "id_counters",
    "init_database",
    "ledger_meta",
    "metadata",
    "peek_campaign_count",
    "transfers",
]
