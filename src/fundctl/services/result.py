"""What every ledger operation returns.

Rejected input is never raised: an operation hands back a ServiceResult
with ``ok`` False and a ServiceError naming the rejection, and callers
(the CLI or an embedding program) branch on ``ok``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Why an operation was rejected.

    ``code`` is the kebab-case error kind such as ``"goal-not-met"``.
    ``detail`` holds its numeric code under ``"code"`` plus whatever
    context the operation adds (campaign id, amounts).
    """

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one ledger operation, named by ``op``.

    ``data`` is the operation's payload, ``warnings`` are notes that did
    not stop it, and ``meta`` carries extras such as the telemetry span.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
