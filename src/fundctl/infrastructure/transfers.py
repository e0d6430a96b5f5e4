"""Abstract fund transfers between identities.

There is no token implementation: a transfer is a journal entry with a
source, a destination, and an amount. The transfer runs on the caller's
connection, so it commits or rolls back together with the ledger
mutation that triggered it.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

from sqlalchemy import insert

from fundctl.infrastructure.database.schema import transfers

if TYPE_CHECKING:
    from sqlalchemy import Connection

logger = logging.getLogger(__name__)


class TransferKind(StrEnum):
    CREATION_FEE = "creation_fee"
    DONATION = "donation"
    WITHDRAWAL = "withdrawal"


class TransferError(Exception):
    """Raised when a transfer cannot be executed.

    Raising inside a ledger transaction aborts the whole operation.
    """


class TransferService(Protocol):
    """Executes a transfer within an active transaction."""

    def transfer(
        self,
        conn: Connection,
        *,
        kind: TransferKind,
        amount: int,
        source: str,
        destination: str,
        height: int,
        campaign_id: int | None = None,
    ) -> int: ...


class JournalTransferService:
    """Records transfers in the ``transfers`` table.

    Rejects non-positive amounts. A transfer whose source is also its
    destination is journaled like any other, so an organizer who is the
    authority pays the creation fee to itself.
    """

    def transfer(
        self,
        conn: Connection,
        *,
        kind: TransferKind,
        amount: int,
        source: str,
        destination: str,
        height: int,
        campaign_id: int | None = None,
    ) -> int:
        """Append a transfer to the journal and return its sequence number."""
        if amount <= 0:
            msg = f"Transfer amount must be positive, got {amount}"
            raise TransferError(msg)

        result = conn.execute(
            insert(transfers).values(
                kind=str(kind),
                campaign_id=campaign_id,
                amount=amount,
                source=source,
                destination=destination,
                height=height,
            )
        )
        seq = result.inserted_primary_key[0]
        logger.debug("Transfer %s #%s: %s -> %s (%d)", kind, seq, source, destination, amount)
        return int(seq)
