"""FundingService: donations, withdrawals, and the fund journal.

Donated funds move from the donor into the ledger's custody identity,
not to the organizer. The organizer withdraws from custody once the
campaign's live ``total_raised`` meets its goal.

The goal check runs on every withdrawal against the current
``total_raised``, so an earlier partial withdrawal can drop a campaign
back below its goal and block further withdrawals. A withdrawal larger
than ``total_raised`` is not clamped and can leave it negative; the
result then carries a warning.
"""

from __future__ import annotations

import logging

from fundctl.domain.campaign import validate_amount
from fundctl.domain.errors import LedgerError
from fundctl.infrastructure.transfers import TransferError, TransferKind
from fundctl.services._helpers import ledger_failure
from fundctl.services.base import BaseService
from fundctl.services.result import ServiceResult
from fundctl.services.telemetry import Stage, trace_span, traced

logger = logging.getLogger(__name__)


class FundingService(BaseService):
    """Moves funds into and out of campaign custody."""

    @traced
    def donate(self, campaign_id: int, amount: int) -> ServiceResult:
        """Donate *amount* from the caller to a campaign."""
        op = "donate"
        warnings: list[str] = []
        height = self._height()
        donor = self.caller

        try:
            with self._store.transaction() as txn:
                with trace_span(Stage.VALIDATE):
                    campaign = txn.load_campaign(campaign_id)
                    if campaign is None:
                        return ledger_failure(op, LedgerError.CAMPAIGN_NOT_FOUND, id=campaign_id)
                    if not campaign.accepts_donations(height):
                        return ledger_failure(
                            op,
                            LedgerError.CAMPAIGN_ENDED,
                            id=campaign_id,
                            deadline=campaign.deadline,
                            height=height,
                        )
                    if not validate_amount(amount):
                        return ledger_failure(op, LedgerError.INVALID_AMOUNT, amount=amount)

                with trace_span(Stage.COMMIT):
                    txn.transfer(
                        TransferKind.DONATION,
                        amount=amount,
                        source=donor,
                        destination=self._store.custody_identity,
                        height=height,
                        campaign_id=campaign_id,
                    )
                    donated = txn.add_donation(campaign_id, donor, amount)
                    total_raised = campaign.total_raised + amount
                    txn.set_total_raised(campaign_id, total_raised)
        except TransferError as exc:
            logger.warning("Donation transfer failed for campaign %d: %s", campaign_id, exc)
            return ledger_failure(op, LedgerError.TRANSFER_FAILED, message=str(exc), id=campaign_id)

        logger.debug("Donation of %d to campaign %d by %s", amount, campaign_id, donor)
        self._dispatch_event(
            "post_donate",
            {
                "campaign_id": campaign_id,
                "donor": donor,
                "amount": amount,
                "total_raised": total_raised,
            },
            warnings,
        )

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": campaign_id,
                "donor": donor,
                "amount": amount,
                "total_raised": total_raised,
                "donated": donated,
            },
            warnings=warnings,
        )

    @traced
    def withdraw_funds(self, campaign_id: int, amount: int) -> ServiceResult:
        """Withdraw *amount* from custody to the campaign organizer."""
        op = "withdraw_funds"
        warnings: list[str] = []
        height = self._height()
        caller = self.caller

        try:
            with self._store.transaction() as txn:
                with trace_span(Stage.VALIDATE):
                    campaign = txn.load_campaign(campaign_id)
                    if campaign is None:
                        return ledger_failure(op, LedgerError.CAMPAIGN_NOT_FOUND, id=campaign_id)
                    if campaign.organizer != caller:
                        return ledger_failure(op, LedgerError.NOT_ORGANIZER, id=campaign_id)
                    if not campaign.goal_met():
                        return ledger_failure(
                            op,
                            LedgerError.GOAL_NOT_MET,
                            id=campaign_id,
                            total_raised=campaign.total_raised,
                            goal_amount=campaign.goal_amount,
                        )
                    if not validate_amount(amount):
                        return ledger_failure(op, LedgerError.INVALID_AMOUNT, amount=amount)

                with trace_span(Stage.COMMIT):
                    txn.transfer(
                        TransferKind.WITHDRAWAL,
                        amount=amount,
                        source=self._store.custody_identity,
                        destination=caller,
                        height=height,
                        campaign_id=campaign_id,
                    )
                    total_raised = campaign.total_raised - amount
                    txn.set_total_raised(campaign_id, total_raised)
        except TransferError as exc:
            logger.warning("Withdrawal transfer failed for campaign %d: %s", campaign_id, exc)
            return ledger_failure(op, LedgerError.TRANSFER_FAILED, message=str(exc), id=campaign_id)

        if total_raised < 0:
            logger.warning(
                "Campaign %d total_raised is negative (%d) after withdrawal of %d",
                campaign_id,
                total_raised,
                amount,
            )
            warnings.append(
                f"Withdrawal exceeded raised funds; total_raised is now {total_raised}"
            )

        self._dispatch_event(
            "post_withdraw",
            {
                "campaign_id": campaign_id,
                "organizer": caller,
                "amount": amount,
                "total_raised": total_raised,
            },
            warnings,
        )

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": campaign_id,
                "organizer": caller,
                "amount": amount,
                "total_raised": total_raised,
            },
            warnings=warnings,
        )

    @traced
    def get_donation(self, campaign_id: int, donor: str | None = None) -> ServiceResult:
        """Accumulated donation by *donor* (default: the caller) to a campaign."""
        op = "get_donation"
        donor = donor or self.caller
        with self._store.transaction() as txn:
            if txn.load_campaign(campaign_id) is None:
                return ledger_failure(op, LedgerError.CAMPAIGN_NOT_FOUND, id=campaign_id)
            amount = txn.get_donation(campaign_id, donor)
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": campaign_id, "donor": donor, "amount": amount},
        )

    @traced
    def list_transfers(self, campaign_id: int | None = None) -> ServiceResult:
        """The transfer journal, optionally filtered to one campaign."""
        with self._store.transaction() as txn:
            items = txn.list_transfers(campaign_id)
        return ServiceResult(
            ok=True,
            op="list_transfers",
            data={"items": items, "count": len(items)},
        )
