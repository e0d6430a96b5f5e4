"""Dense campaign id allocation.

Ids start at 0 and increase by exactly one per created campaign; they
are never reused. The counter row lives in ``id_counters`` so the
increment participates in the same transaction as the campaign insert.

The caller owns the transaction; pass a ``Connection`` obtained from
``engine.begin()`` so a rollback also rolls back the claimed id.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select, update

from fundctl.infrastructure.database.engine import CAMPAIGN_COUNTER
from fundctl.infrastructure.database.schema import id_counters

if TYPE_CHECKING:
    from sqlalchemy import Connection


def peek_campaign_count(conn: Connection) -> int:
    """Return the next campaign id, which equals the number of campaigns created."""
    return int(
        conn.execute(
            select(id_counters.c.next_value).where(id_counters.c.name == CAMPAIGN_COUNTER)
        ).scalar_one()
    )


def claim_campaign_id(conn: Connection) -> int:
    """Claim the next campaign id and advance the counter.

    Args:
        conn: Active SQLAlchemy connection (caller owns the transaction).

    Returns:
        The claimed id (the counter value before the increment).
    """
    current_value = peek_campaign_count(conn)

    conn.execute(
        update(id_counters)
        .where(id_counters.c.name == CAMPAIGN_COUNTER)
        .values(next_value=current_value + 1)
    )

    return current_value
