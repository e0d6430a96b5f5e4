"""Ledger error kinds and their numeric codes.

Every rejected ledger operation maps to exactly one kind. The numeric
codes are stable and appear in ``ServiceError.detail["code"]`` so
machine consumers can match on either form.
"""

from __future__ import annotations

from enum import StrEnum


class LedgerError(StrEnum):
    """Typed failure kinds returned by ledger operations."""

    NOT_AUTHORIZED = "not-authorized"
    CAMPAIGN_ENDED = "campaign-ended"
    GOAL_NOT_MET = "goal-not-met"
    INVALID_AMOUNT = "invalid-amount"
    INVALID_GOAL = "invalid-goal"
    INVALID_DEADLINE = "invalid-deadline"
    ALREADY_INITIALIZED = "already-initialized"
    NOT_ORGANIZER = "not-organizer"
    INVALID_TITLE = "invalid-title"
    CAMPAIGN_NOT_FOUND = "campaign-not-found"
    AUTHORITY_NOT_VERIFIED = "authority-not-verified"
    TRANSFER_FAILED = "transfer-failed"

    @property
    def numeric(self) -> int:
        """Stable numeric code for this kind (100-111)."""
        return ERROR_CODES[self]


ERROR_CODES: dict[LedgerError, int] = {
    LedgerError.NOT_AUTHORIZED: 100,
    LedgerError.CAMPAIGN_ENDED: 101,
    LedgerError.GOAL_NOT_MET: 102,
    LedgerError.INVALID_AMOUNT: 103,
    LedgerError.INVALID_GOAL: 104,
    LedgerError.INVALID_DEADLINE: 105,
    LedgerError.ALREADY_INITIALIZED: 106,
    LedgerError.NOT_ORGANIZER: 107,
    LedgerError.INVALID_TITLE: 108,
    LedgerError.CAMPAIGN_NOT_FOUND: 109,
    LedgerError.AUTHORITY_NOT_VERIFIED: 110,
    LedgerError.TRANSFER_FAILED: 111,
}

ERROR_MESSAGES: dict[LedgerError, str] = {
    LedgerError.NOT_AUTHORIZED: "Identity is not allowed for this operation",
    LedgerError.CAMPAIGN_ENDED: "Campaign is no longer accepting donations",
    LedgerError.GOAL_NOT_MET: "Campaign has not reached its funding goal",
    LedgerError.INVALID_AMOUNT: "Amount must be a positive integer",
    LedgerError.INVALID_GOAL: "Goal amount must be a positive integer",
    LedgerError.INVALID_DEADLINE: "Duration must place the deadline after the current height",
    LedgerError.ALREADY_INITIALIZED: "Value is already set",
    LedgerError.NOT_ORGANIZER: "Only the campaign organizer may withdraw funds",
    LedgerError.INVALID_TITLE: "Title must be non-empty and within the length limit",
    LedgerError.CAMPAIGN_NOT_FOUND: "Campaign not found",
    LedgerError.AUTHORITY_NOT_VERIFIED: "No fee-receiving authority has been set",
    LedgerError.TRANSFER_FAILED: "Fund transfer failed",
}
