"""Built-in activity log plugin.

Emits one structured log event per ledger mutation on the
``fundctl.activity`` logger. Visible with ``--verbose``; with
``--log-json`` each line is machine-readable.
"""

from __future__ import annotations

import pluggy
import structlog

hookimpl = pluggy.HookimplMarker("fundctl")


class ActivityLogPlugin:
    """Logs ledger lifecycle events."""

    def __init__(self) -> None:
        self._log = structlog.get_logger("fundctl.activity")

    @hookimpl
    def post_authority_set(self, authority: str) -> None:
        self._log.info("authority.set", authority=authority)

    @hookimpl
    def post_campaign_create(
        self,
        campaign_id: int,
        title: str,
        organizer: str,
        goal_amount: int,
        deadline: int,
    ) -> None:
        self._log.info(
            "campaign.created",
            campaign_id=campaign_id,
            title=title,
            organizer=organizer,
            goal_amount=goal_amount,
            deadline=deadline,
        )

    @hookimpl
    def post_donate(self, campaign_id: int, donor: str, amount: int, total_raised: int) -> None:
        self._log.info(
            "campaign.donation",
            campaign_id=campaign_id,
            donor=donor,
            amount=amount,
            total_raised=total_raised,
        )

    @hookimpl
    def post_withdraw(
        self, campaign_id: int, organizer: str, amount: int, total_raised: int
    ) -> None:
        self._log.info(
            "campaign.withdrawal",
            campaign_id=campaign_id,
            organizer=organizer,
            amount=amount,
            total_raised=total_raised,
        )
