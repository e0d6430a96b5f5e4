"""AuthorityService: the one-time fee-receiving authority.

The authority is set at most once (first writer wins) and can never be
the reserved burn identity. Campaign creation is blocked until it is set.
"""

from __future__ import annotations

import logging

from fundctl.domain.errors import LedgerError
from fundctl.services._helpers import ledger_failure
from fundctl.services.base import BaseService
from fundctl.services.result import ServiceResult
from fundctl.services.telemetry import Stage, trace_span, traced

logger = logging.getLogger(__name__)


class AuthorityService(BaseService):
    """Sets and reads the fee-receiving authority."""

    @traced
    def set_authority(self, identity: str) -> ServiceResult:
        """Record *identity* as the authority that receives creation fees."""
        op = "set_authority"
        warnings: list[str] = []

        if not identity or identity == self._store.identity.burn_identity:
            return ledger_failure(op, LedgerError.NOT_AUTHORIZED, identity=identity)

        with self._store.transaction() as txn:
            current = txn.authority()
            if current is not None:
                return ledger_failure(
                    op,
                    LedgerError.ALREADY_INITIALIZED,
                    message=f"Authority is already set to {current}",
                    authority=current,
                )
            with trace_span(Stage.COMMIT):
                txn.set_meta("authority", identity)

        logger.debug("Authority set to %s", identity)
        self._dispatch_event("post_authority_set", {"authority": identity}, warnings)

        return ServiceResult(
            ok=True,
            op=op,
            data={"authority": identity, "set": True},
            warnings=warnings,
        )

    @traced
    def get_authority(self) -> ServiceResult:
        """Return the current authority, or None if it has not been set."""
        with self._store.transaction() as txn:
            authority = txn.authority()
        return ServiceResult(ok=True, op="get_authority", data={"authority": authority})
