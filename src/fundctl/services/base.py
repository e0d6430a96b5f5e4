"""BaseService: abstract foundation for all fundctl services.

Every service receives a :class:`LedgerStore` at construction time. The
store provides serialized, transactional access to ledger state plus the
identity, clock, and transfer collaborators. Services own their
transaction boundaries via ``self._store.transaction()``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from fundctl.infrastructure.store import LedgerStore

logger = logging.getLogger(__name__)


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class FundingService(BaseService):
            def donate(self, campaign_id: int, amount: int) -> ServiceResult:
                with self._store.transaction() as txn:
                    ...
    """

    def __init__(self, store: LedgerStore) -> None:
        self._store = store

    @property
    def caller(self) -> str:
        """Identity performing the current operation."""
        return self._store.identity.caller

    def _height(self) -> int:
        """Current block height, read once per operation before the transaction."""
        return self._store.clock.current_height()

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Dispatch a lifecycle event. No-op if event bus not initialized.

        Called only after the ledger transaction has committed.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        bus = self._store.event_bus
        if bus is None:
            return
        try:
            bus.dispatch(hook_name, payload)
        except Exception:
            logger.debug("Event dispatch failed for %s", hook_name, exc_info=True)
            warnings.append(f"Event dispatch failed for {hook_name}")
