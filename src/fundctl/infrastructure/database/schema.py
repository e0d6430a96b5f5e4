"""SQLAlchemy Core table definitions for the fundctl ledger database.

Heights and amounts are unbounded Python ints (heights go up to
``2**128 - 1``), which do not fit SQLite's 64-bit INTEGER. They are
stored as decimal text through :class:`BigInt` and compared in Python.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    TypeDecorator,
)


class BigInt(TypeDecorator[int]):
    """Arbitrary-precision signed integer stored as decimal text."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Any) -> str | None:
        if value is None:
            return None
        return str(int(value))

    def process_result_value(self, value: Any, dialect: Any) -> int | None:
        if value is None:
            return None
        return int(value)


metadata = MetaData()

# Campaign ids use SQLite's native INTEGER; an id above this can never
# have been assigned.
MAX_ROW_ID = 2**63 - 1

# Scalar ledger state: authority, creation_fee, block_height.
ledger_meta = Table(
    "ledger_meta",
    metadata,
    Column("key", Text, primary_key=True),
    Column("value", Text),
)

id_counters = Table(
    "id_counters",
    metadata,
    Column("name", Text, primary_key=True),
    Column("next_value", Integer, nullable=False, default=0, server_default="0"),
)

campaigns = Table(
    "campaigns",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("title", Text, nullable=False),
    Column("goal_amount", BigInt, nullable=False),
    Column("total_raised", BigInt, nullable=False, default=0),
    Column("deadline", BigInt, nullable=False),
    Column("is_active", Integer, nullable=False, default=1, server_default="1"),
    Column("organizer", Text, nullable=False),
    Column("created_at", BigInt, nullable=False, default=0),
)

campaign_titles = Table(
    "campaign_titles",
    metadata,
    Column("title", Text, primary_key=True),
    Column("campaign_id", Integer, ForeignKey("campaigns.id"), nullable=False),
)

donations = Table(
    "donations",
    metadata,
    Column("campaign_id", Integer, ForeignKey("campaigns.id"), primary_key=True),
    Column("donor", Text, primary_key=True),
    Column("amount", BigInt, nullable=False),
)

transfers = Table(
    "transfers",
    metadata,
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column("kind", Text, nullable=False),  # creation_fee | donation | withdrawal
    Column("campaign_id", Integer),
    Column("amount", BigInt, nullable=False),
    Column("source", Text, nullable=False),
    Column("destination", Text, nullable=False),
    Column("height", BigInt, nullable=False),
)

event_wal = Table(
    "event_wal",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("hook_name", Text, nullable=False),
    Column("payload", Text, nullable=False),  # JSON
    Column("status", Text, nullable=False),  # pending | completed | failed
    Column("error", Text),
    Column("created", Text, nullable=False),
    Column("completed", Text),
)

# ---------------------------------------------------------------------------
# Indexes for frequently filtered columns
# ---------------------------------------------------------------------------

Index("ix_transfers_campaign", transfers.c.campaign_id)
Index("ix_event_wal_status", event_wal.c.status)
