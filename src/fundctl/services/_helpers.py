"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fundctl.domain.errors import ERROR_MESSAGES, LedgerError
from fundctl.services.result import ServiceError, ServiceResult


def now_iso() -> str:
    """Current UTC time as standard ISO 8601 (for the event WAL)."""
    return datetime.now(UTC).isoformat()


def ledger_failure(
    op: str,
    kind: LedgerError,
    *,
    message: str | None = None,
    **detail: Any,
) -> ServiceResult:
    """Build a failed ServiceResult for a ledger error kind.

    ``detail`` always carries the numeric code under ``"code"``.
    """
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(
            code=str(kind),
            message=message or ERROR_MESSAGES[kind],
            detail={"code": kind.numeric, **detail},
        ),
    )
