"""Database engine setup for SQLite.

SQLite is the persistence layer: WAL mode for concurrent reads and
immediate-mode ACID transactions for ledger integrity. On disk the DB lives at
``{ledger_root}/.fundctl/ledger.db``; tests use a shared in-memory
database pinned to a single connection.

SQLAlchemy Core (not ORM) is used because fundctl is a short-lived
CLI process with a handful of flat tables.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import Connection, create_engine, event, insert, select
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from fundctl.infrastructure.database.schema import id_counters, ledger_meta, metadata

CAMPAIGN_COUNTER = "campaign"

# How long a writer waits for another process to release the ledger.
BUSY_TIMEOUT_SECONDS = 15.0


def create_db_engine(db_path: Path | None) -> Engine:
    """Create a SQLite engine with foreign keys enabled.

    ``None`` creates an in-memory database on a single shared connection.

    pysqlite's own transaction handling is switched off and every
    SQLAlchemy transaction opens with ``BEGIN IMMEDIATE``. The write lock
    is therefore held from the first SELECT of a ledger operation to its
    COMMIT, so two processes on one ledger file cannot both pass the same
    uniqueness or balance check.
    """
    if db_path is None:
        engine = create_engine(
            "sqlite://",
            echo=False,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_engine(
            f"sqlite:///{db_path}",
            echo=False,
            connect_args={"timeout": BUSY_TIMEOUT_SECONDS},
        )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        if db_path is not None:
            cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn: Connection) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def init_database(db_path: Path | None, *, creation_fee: int = 1000) -> Engine:
    """Create (or open) the ledger database and seed its fixed rows.

    Creates parent directories and all tables, then seeds the campaign id
    counter at 0 and the creation fee and block height meta rows.
    Idempotent: an existing ledger keeps its stored fee and height.
    """
    if db_path is not None:
        db_path.parent.mkdir(parents=True, exist_ok=True)

    engine = create_db_engine(db_path)
    metadata.create_all(engine)
    seed_database(engine, creation_fee=creation_fee)
    return engine


def seed_database(engine: Engine, *, creation_fee: int) -> None:
    """Insert the counter and meta rows if they don't exist."""
    with engine.begin() as conn:
        row = conn.execute(
            select(id_counters.c.name).where(id_counters.c.name == CAMPAIGN_COUNTER)
        ).first()
        if row is None:
            conn.execute(insert(id_counters).values(name=CAMPAIGN_COUNTER, next_value=0))

        defaults = {"creation_fee": str(creation_fee), "block_height": "0"}
        for key, value in defaults.items():
            existing = conn.execute(
                select(ledger_meta.c.key).where(ledger_meta.c.key == key)
            ).first()
            if existing is None:
                conn.execute(insert(ledger_meta).values(key=key, value=value))
