"""Block-height sources for deadline computation and expiry checks.

The ledger never reads wall-clock time. A :class:`Clock` supplies the
current height: :class:`ManualClock` holds it in memory (tests and
embedding), :class:`StoredClock` keeps it in the ``ledger_meta`` table
so successive CLI invocations agree on "now".
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from sqlalchemy import select, update

from fundctl.infrastructure.database.schema import ledger_meta

if TYPE_CHECKING:
    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

_HEIGHT_KEY = "block_height"


@runtime_checkable
class Clock(Protocol):
    """Anything that can report the current block height."""

    def current_height(self) -> int: ...


class ManualClock:
    """In-memory height that only moves when told to."""

    def __init__(self, height: int = 0) -> None:
        if height < 0:
            msg = f"Block height cannot be negative: {height}"
            raise ValueError(msg)
        self._height = height

    def current_height(self) -> int:
        return self._height

    def set(self, height: int) -> None:
        if height < 0:
            msg = f"Block height cannot be negative: {height}"
            raise ValueError(msg)
        self._height = height

    def advance(self, blocks: int = 1) -> int:
        """Move forward by *blocks* and return the new height."""
        self.set(self._height + blocks)
        return self._height


class StoredClock:
    """Height persisted in the ledger database.

    Pass the owning store's lock so height reads and writes queue behind
    any open ledger transaction on the same engine.
    """

    def __init__(self, engine: Engine, *, lock: threading.RLock | None = None) -> None:
        self._engine = engine
        self._lock = lock or threading.RLock()

    def current_height(self) -> int:
        with self._lock, self._engine.connect() as conn:
            return _read_height(conn)

    def set(self, height: int) -> None:
        with self._lock, self._engine.begin() as conn:
            _write_height(conn, height)

    def advance(self, blocks: int = 1) -> int:
        """Move forward by *blocks* in one transaction and return the new height."""
        with self._lock, self._engine.begin() as conn:
            height = _read_height(conn) + blocks
            _write_height(conn, height)
        return height


def _read_height(conn: Connection) -> int:
    value = conn.execute(
        select(ledger_meta.c.value).where(ledger_meta.c.key == _HEIGHT_KEY)
    ).scalar_one_or_none()
    return int(value) if value is not None else 0


def _write_height(conn: Connection, height: int) -> None:
    if height < 0:
        msg = f"Block height cannot be negative: {height}"
        raise ValueError(msg)
    conn.execute(
        update(ledger_meta).where(ledger_meta.c.key == _HEIGHT_KEY).values(value=str(height))
    )
