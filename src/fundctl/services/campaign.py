"""CampaignService: campaign registration and campaign reads.

Creation pipeline: VALIDATE INPUT → VALIDATE STATE → CHARGE FEE → PERSIST → EVENT → RESPOND

Input checks (title, goal, deadline) run before the transaction; title
uniqueness and the authority check run inside it, under the ledger lock.
The creation fee, the id claim, the campaign row, and the title entry
commit together or not at all.
"""

from __future__ import annotations

import logging

from fundctl.domain.campaign import check_create
from fundctl.domain.errors import LedgerError
from fundctl.infrastructure.transfers import TransferError, TransferKind
from fundctl.services._helpers import ledger_failure
from fundctl.services.base import BaseService
from fundctl.services.result import ServiceResult
from fundctl.services.telemetry import Stage, trace_span, traced

logger = logging.getLogger(__name__)


class CampaignService(BaseService):
    """Registers campaigns and serves campaign reads."""

    @traced
    def create_campaign(self, title: str, goal_amount: int, duration: int) -> ServiceResult:
        """Register a new campaign organized by the current caller.

        The deadline is the current height plus *duration*. Charges the
        fixed creation fee from the caller to the authority.
        """
        op = "create_campaign"
        warnings: list[str] = []
        height = self._height()
        organizer = self.caller
        max_title_length = self._store.settings.ledger.max_title_length

        # ── VALIDATE INPUT ────────────────────────────────────────
        with trace_span(Stage.VALIDATE):
            checked = check_create(
                title,
                goal_amount,
                duration,
                height,
                max_title_length=max_title_length,
            )
        if isinstance(checked, LedgerError):
            logger.debug("create_campaign rejected: %s", checked)
            return ledger_failure(op, checked, title=title)
        deadline = checked

        try:
            with self._store.transaction() as txn:
                # ── VALIDATE STATE ────────────────────────────────
                if txn.title_taken(title):
                    return ledger_failure(
                        op,
                        LedgerError.ALREADY_INITIALIZED,
                        message=f"A campaign titled {title!r} already exists",
                        title=title,
                    )
                authority = txn.authority()
                if authority is None:
                    return ledger_failure(op, LedgerError.AUTHORITY_NOT_VERIFIED)

                # ── CHARGE FEE + PERSIST ──────────────────────────
                with trace_span(Stage.COMMIT):
                    fee = txn.creation_fee()
                    txn.transfer(
                        TransferKind.CREATION_FEE,
                        amount=fee,
                        source=organizer,
                        destination=authority,
                        height=height,
                        campaign_id=txn.campaign_count(),
                    )
                    campaign = txn.insert_campaign(
                        title=title,
                        goal_amount=goal_amount,
                        deadline=deadline,
                        organizer=organizer,
                        created_at=height,
                    )
        except TransferError as exc:
            logger.warning("Creation fee transfer failed for %r: %s", title, exc)
            return ledger_failure(op, LedgerError.TRANSFER_FAILED, message=str(exc), title=title)

        logger.debug("Created campaign %d %r (deadline %d)", campaign.id, title, deadline)

        # ── EVENT ─────────────────────────────────────────────────
        with trace_span(Stage.DISPATCH):
            self._dispatch_event(
                "post_campaign_create",
                {
                    "campaign_id": campaign.id,
                    "title": campaign.title,
                    "organizer": campaign.organizer,
                    "goal_amount": campaign.goal_amount,
                    "deadline": campaign.deadline,
                },
                warnings,
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": campaign.id,
                "title": campaign.title,
                "goal_amount": campaign.goal_amount,
                "deadline": campaign.deadline,
                "organizer": campaign.organizer,
                "fee": fee,
            },
            warnings=warnings,
        )

    @traced
    def get_campaign(self, campaign_id: int) -> ServiceResult:
        """Return the full campaign record, or campaign-not-found."""
        op = "get_campaign"
        with self._store.transaction() as txn:
            campaign = txn.load_campaign(campaign_id)
        if campaign is None:
            return ledger_failure(op, LedgerError.CAMPAIGN_NOT_FOUND, id=campaign_id)
        return ServiceResult(ok=True, op=op, data=campaign.to_dict())

    @traced
    def get_campaign_count(self) -> ServiceResult:
        """Number of campaigns ever created (the next id to be assigned)."""
        with self._store.transaction() as txn:
            count = txn.campaign_count()
        return ServiceResult(ok=True, op="get_campaign_count", data={"count": count})

    @traced
    def list_campaigns(self) -> ServiceResult:
        """All campaigns in id order."""
        with self._store.transaction() as txn:
            items = [c.to_dict() for c in txn.list_campaigns()]
        return ServiceResult(
            ok=True,
            op="list_campaigns",
            data={"items": items, "count": len(items)},
        )
