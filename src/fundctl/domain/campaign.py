"""Campaign record and the pure validation rules around it.

Heights are unsigned 128-bit values. A deadline computed past
:data:`MAX_HEIGHT` is treated as an overflow and rejected, the same
as a zero or negative duration.

INVARIANT: ``deadline > created_at`` for every stored campaign.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from fundctl.domain.errors import LedgerError

MAX_HEIGHT = 2**128 - 1
DEFAULT_MAX_TITLE_LENGTH = 100


class Campaign(BaseModel):
    """A stored fundraising campaign."""

    model_config = {"frozen": True}

    id: int
    title: str
    goal_amount: int
    total_raised: int = 0
    deadline: int
    is_active: bool = True
    organizer: str
    created_at: int = 0

    def accepts_donations(self, height: int) -> bool:
        """Whether a donation at *height* is still inside the campaign window."""
        return self.is_active and height <= self.deadline

    def goal_met(self) -> bool:
        """Live goal check against the current ``total_raised``."""
        return self.total_raised >= self.goal_amount

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()


def validate_title(title: str, *, max_length: int = DEFAULT_MAX_TITLE_LENGTH) -> bool:
    """Title must be non-empty and at most *max_length* characters."""
    return bool(title) and len(title) <= max_length


def validate_amount(amount: int) -> bool:
    """Amounts (goals, donations, withdrawals) must be strictly positive."""
    return amount > 0


def compute_deadline(height: int, duration: int) -> int | None:
    """Return ``height + duration``, or None when it is not a valid deadline.

    None covers zero and negative durations as well as a sum that would
    overflow an unsigned 128-bit height.
    """
    deadline = height + duration
    if deadline <= height or deadline > MAX_HEIGHT:
        return None
    return deadline


def check_create(
    title: str,
    goal_amount: int,
    duration: int,
    height: int,
    *,
    max_title_length: int = DEFAULT_MAX_TITLE_LENGTH,
) -> int | LedgerError:
    """Input checks for campaign creation, in order. First failure wins.

    Returns the deadline when every check passes. Title uniqueness and
    authority checks need ledger state and are done by the service
    afterwards.
    """
    if not validate_title(title, max_length=max_title_length):
        return LedgerError.INVALID_TITLE
    if not validate_amount(goal_amount):
        return LedgerError.INVALID_GOAL
    deadline = compute_deadline(height, duration)
    if deadline is None:
        return LedgerError.INVALID_DEADLINE
    return deadline
