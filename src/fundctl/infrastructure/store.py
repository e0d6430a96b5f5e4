"""LedgerStore: the explicitly owned ledger state and its transactions.

The store is the single dependency injected into every service. It owns
the database engine plus the three external collaborators: the identity
provider (who is calling), the clock (what height it is), and the
transfer service (how funds move). There are no module-level singletons;
every test can build its own isolated store.

:meth:`LedgerStore.transaction` is the serialization point. Threads in
one process queue on the store lock; separate processes queue on the
SQLite write lock, which ``BEGIN IMMEDIATE`` takes before the first read
(see :mod:`fundctl.infrastructure.database.engine`). Either way the whole
read-validate-write sequence runs alone, and any exception (including a
failed transfer) rolls back every write made inside it.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select, update

from fundctl.domain.campaign import Campaign
from fundctl.infrastructure.clock import StoredClock
from fundctl.infrastructure.database.counters import claim_campaign_id, peek_campaign_count
from fundctl.infrastructure.database.engine import init_database, seed_database
from fundctl.infrastructure.database.schema import (
    MAX_ROW_ID,
    campaign_titles,
    campaigns,
    donations,
    ledger_meta,
    metadata,
    transfers,
)
from fundctl.infrastructure.identity import StaticIdentity
from fundctl.infrastructure.transfers import JournalTransferService

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Connection, Row
    from sqlalchemy.engine import Engine

    from fundctl.config.settings import FundSettings
    from fundctl.infrastructure.clock import Clock
    from fundctl.infrastructure.identity import IdentityProvider
    from fundctl.infrastructure.transfers import TransferKind, TransferService
    from fundctl.plugins.event_bus import EventBus

logger = logging.getLogger(__name__)


def _assignable(campaign_id: int) -> bool:
    return 0 <= campaign_id <= MAX_ROW_ID


def _row_to_campaign(row: Row[Any]) -> Campaign:
    return Campaign(
        id=row.id,
        title=row.title,
        goal_amount=row.goal_amount,
        total_raised=row.total_raised,
        deadline=row.deadline,
        is_active=bool(row.is_active),
        organizer=row.organizer,
        created_at=row.created_at,
    )


# ---------------------------------------------------------------------------
# LedgerTransaction: yielded to callers within transaction()
# ---------------------------------------------------------------------------


@dataclass
class LedgerTransaction:
    """Active transaction with the consolidated ledger data-access patterns.

    All writes go through ``conn`` so they commit or roll back together.
    """

    conn: Connection
    _store: LedgerStore

    # -- scalar state ---------------------------------------------------

    def get_meta(self, key: str) -> str | None:
        return self.conn.execute(
            select(ledger_meta.c.value).where(ledger_meta.c.key == key)
        ).scalar_one_or_none()

    def set_meta(self, key: str, value: str) -> None:
        existing = self.conn.execute(
            select(ledger_meta.c.key).where(ledger_meta.c.key == key)
        ).first()
        if existing is None:
            self.conn.execute(insert(ledger_meta).values(key=key, value=value))
        else:
            self.conn.execute(
                update(ledger_meta).where(ledger_meta.c.key == key).values(value=value)
            )

    def authority(self) -> str | None:
        """The fee-receiving authority, or None if not yet set."""
        return self.get_meta("authority")

    def creation_fee(self) -> int:
        value = self.get_meta("creation_fee")
        return int(value) if value is not None else self._store.settings.ledger.creation_fee

    def campaign_count(self) -> int:
        return peek_campaign_count(self.conn)

    # -- campaigns ------------------------------------------------------

    def load_campaign(self, campaign_id: int) -> Campaign | None:
        if not _assignable(campaign_id):
            return None
        row = self.conn.execute(select(campaigns).where(campaigns.c.id == campaign_id)).first()
        return _row_to_campaign(row) if row is not None else None

    def list_campaigns(self) -> list[Campaign]:
        rows = self.conn.execute(select(campaigns).order_by(campaigns.c.id)).fetchall()
        return [_row_to_campaign(r) for r in rows]

    def title_taken(self, title: str) -> bool:
        row = self.conn.execute(
            select(campaign_titles.c.campaign_id).where(campaign_titles.c.title == title)
        ).first()
        return row is not None

    def insert_campaign(
        self,
        *,
        title: str,
        goal_amount: int,
        deadline: int,
        organizer: str,
        created_at: int,
    ) -> Campaign:
        """Claim the next id, store the campaign, and reserve its title."""
        campaign_id = claim_campaign_id(self.conn)
        campaign = Campaign(
            id=campaign_id,
            title=title,
            goal_amount=goal_amount,
            total_raised=0,
            deadline=deadline,
            is_active=True,
            organizer=organizer,
            created_at=created_at,
        )
        self.conn.execute(
            insert(campaigns).values(
                id=campaign.id,
                title=campaign.title,
                goal_amount=campaign.goal_amount,
                total_raised=campaign.total_raised,
                deadline=campaign.deadline,
                is_active=1,
                organizer=campaign.organizer,
                created_at=campaign.created_at,
            )
        )
        self.conn.execute(insert(campaign_titles).values(title=title, campaign_id=campaign_id))
        return campaign

    def set_total_raised(self, campaign_id: int, total_raised: int) -> None:
        self.conn.execute(
            update(campaigns)
            .where(campaigns.c.id == campaign_id)
            .values(total_raised=total_raised)
        )

    # -- donations ------------------------------------------------------

    def get_donation(self, campaign_id: int, donor: str) -> int:
        """Accumulated amount donated by *donor* to the campaign (0 if none)."""
        if not _assignable(campaign_id):
            return 0
        value = self.conn.execute(
            select(donations.c.amount).where(
                donations.c.campaign_id == campaign_id,
                donations.c.donor == donor,
            )
        ).scalar_one_or_none()
        return int(value) if value is not None else 0

    def add_donation(self, campaign_id: int, donor: str, amount: int) -> int:
        """Increment the donor's entry, creating it lazily. Returns the new total."""
        current = self.conn.execute(
            select(donations.c.amount).where(
                donations.c.campaign_id == campaign_id,
                donations.c.donor == donor,
            )
        ).scalar_one_or_none()
        if current is None:
            self.conn.execute(
                insert(donations).values(campaign_id=campaign_id, donor=donor, amount=amount)
            )
            return amount
        new_total = int(current) + amount
        self.conn.execute(
            update(donations)
            .where(donations.c.campaign_id == campaign_id, donations.c.donor == donor)
            .values(amount=new_total)
        )
        return new_total

    # -- transfers ------------------------------------------------------

    def transfer(
        self,
        kind: TransferKind,
        *,
        amount: int,
        source: str,
        destination: str,
        height: int,
        campaign_id: int | None = None,
    ) -> int:
        """Run a transfer on this transaction's connection.

        Raises:
            TransferError: Propagated from the transfer service; aborts
                the enclosing transaction.
        """
        return self._store.transfer_service.transfer(
            self.conn,
            kind=kind,
            amount=amount,
            source=source,
            destination=destination,
            height=height,
            campaign_id=campaign_id,
        )

    def list_transfers(self, campaign_id: int | None = None) -> list[dict[str, Any]]:
        if campaign_id is not None and not _assignable(campaign_id):
            return []
        stmt = select(transfers).order_by(transfers.c.seq)
        if campaign_id is not None:
            stmt = stmt.where(transfers.c.campaign_id == campaign_id)
        return [dict(r._mapping) for r in self.conn.execute(stmt).fetchall()]


# ---------------------------------------------------------------------------
# LedgerStore: the repository
# ---------------------------------------------------------------------------


class LedgerStore:
    """Process-wide ledger state with explicit construction and reset.

    Constructed once per CLI invocation (or per test) from
    :class:`FundSettings`. Collaborators default to the CLI
    implementations: a :class:`StaticIdentity` for ``[identity] caller``,
    a :class:`StoredClock`, and the :class:`JournalTransferService`.
    """

    def __init__(
        self,
        settings: FundSettings,
        *,
        identity: IdentityProvider | None = None,
        clock: Clock | None = None,
        transfer_service: TransferService | None = None,
    ) -> None:
        self._settings = settings
        self._lock = threading.RLock()
        self._engine: Engine = init_database(
            settings.db_path, creation_fee=settings.ledger.creation_fee
        )
        self._identity: IdentityProvider = identity or StaticIdentity(
            settings.effective_caller,
            burn_identity=settings.ledger.burn_identity,
        )
        self._clock: Clock = clock or StoredClock(self._engine, lock=self._lock)
        self._transfer_service: TransferService = transfer_service or JournalTransferService()
        self._event_bus: EventBus | None = None

    @property
    def settings(self) -> FundSettings:
        return self._settings

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for direct access when needed)."""
        return self._engine

    @property
    def identity(self) -> IdentityProvider:
        return self._identity

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def transfer_service(self) -> TransferService:
        return self._transfer_service

    @property
    def custody_identity(self) -> str:
        """Identity holding donated funds until the organizer withdraws them."""
        return self._settings.ledger.custody_identity

    @property
    def event_bus(self) -> EventBus | None:
        """The plugin event bus (None if not initialized)."""
        return self._event_bus

    def init_event_bus(self) -> None:
        """Load the configured plugins and wire up the EventBus.

        The bus shares this store's lock, so its WAL writes never
        interleave with an open ledger transaction.
        """
        from fundctl.plugins.event_bus import EventBus
        from fundctl.plugins.manager import load_ledger_plugins

        pm = load_ledger_plugins(self._settings.plugins)
        self._event_bus = EventBus(self._engine, pm, lock=self._lock)

    @contextmanager
    def transaction(self) -> Iterator[LedgerTransaction]:
        """Serialized, all-or-nothing access to ledger state.

        The lock is re-entrant and held for the whole block, and the
        database write lock is taken when the block opens. The DB
        transaction commits when the block exits normally and rolls back
        on any exception, which is then re-raised.

        Usage::

            with store.transaction() as txn:
                campaign = txn.load_campaign(0)
                txn.transfer(TransferKind.DONATION, ...)
                txn.set_total_raised(0, campaign.total_raised + amount)
        """
        with self._lock, self._engine.begin() as conn:
            yield LedgerTransaction(conn=conn, _store=self)

    def reset(self) -> None:
        """Drop all ledger state and reseed. Test and maintenance hook only."""
        with self._lock:
            metadata.drop_all(self._engine)
            metadata.create_all(self._engine)
            seed_database(self._engine, creation_fee=self._settings.ledger.creation_fee)
        logger.debug("Ledger state reset")

    def close(self) -> None:
        """Dispose of the engine's connection pool."""
        self._engine.dispose()
