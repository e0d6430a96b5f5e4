"""Post-commit delivery of ledger events to plugins.

A ledger event is journaled in ``event_wal`` as ``pending`` before any
hook sees it, then flipped to ``completed`` or ``failed``. Delivery only
ever starts after the ledger transaction that produced the event has
committed, so the journal is an audit trail of what plugins were told,
never of what the ledger did.

INVARIANT: Plugin failures are warnings, never errors.
"""

from __future__ import annotations

import json
import logging
import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import pluggy
from sqlalchemy import insert, select, update

from fundctl.infrastructure.database.schema import event_wal
from fundctl.services._helpers import now_iso

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


class EventBus:
    """Delivers ledger events to a pluggy manager, journaling each one.

    Parameters:
        engine: Ledger engine holding the ``event_wal`` table.
        plugin_manager: Manager built by :func:`load_ledger_plugins`.
        lock: The owning store's lock. Journal writes take it so they
            never share a connection with an open ledger transaction.
    """

    def __init__(
        self,
        engine: Engine,
        plugin_manager: pluggy.PluginManager,
        *,
        lock: threading.RLock | None = None,
    ) -> None:
        self._engine = engine
        self._pm = plugin_manager
        self._lock = lock or threading.RLock()

    @property
    def plugin_manager(self) -> pluggy.PluginManager:
        return self._pm

    def dispatch(self, hook_name: str, payload: dict[str, Any]) -> int:
        """Journal the event, call its hooks, and return the journal row id."""
        with self._journal() as conn:
            event_id = conn.execute(
                insert(event_wal).values(
                    hook_name=hook_name,
                    payload=json.dumps(payload),
                    status="pending",
                    created=now_iso(),
                )
            ).inserted_primary_key[0]

        hook = getattr(self._pm.hook, hook_name, None)
        status, error = "completed", None
        if hook is not None:
            try:
                hook(**payload)
            except Exception as exc:
                logger.warning("Plugin hook %s failed for event %d: %s", hook_name, event_id, exc)
                status, error = "failed", str(exc)

        with self._journal() as conn:
            conn.execute(
                update(event_wal)
                .where(event_wal.c.id == event_id)
                .values(status=status, error=error, completed=now_iso())
            )
        return int(event_id)

    def failed_events(self) -> list[dict[str, Any]]:
        """Journal rows whose hooks raised, oldest first."""
        with self._journal() as conn:
            rows = conn.execute(
                select(event_wal.c.id, event_wal.c.hook_name, event_wal.c.error)
                .where(event_wal.c.status == "failed")
                .order_by(event_wal.c.id)
            ).fetchall()
        return [{"id": r.id, "hook_name": r.hook_name, "error": r.error} for r in rows]

    @contextmanager
    def _journal(self) -> Iterator[Connection]:
        with self._lock, self._engine.begin() as conn:
            yield conn
