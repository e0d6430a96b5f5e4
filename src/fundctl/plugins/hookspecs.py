"""Pluggy hook specifications for ledger lifecycle events.

Events fire after the ledger transaction commits, so a hook never sees
state that could still roll back.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("fundctl")


class FundctlHookSpec:
    """Hook specifications for the fundctl plugin system."""

    @hookspec
    def post_authority_set(self, authority: str) -> None:
        """Called after the fee-receiving authority is set."""

    @hookspec
    def post_campaign_create(
        self,
        campaign_id: int,
        title: str,
        organizer: str,
        goal_amount: int,
        deadline: int,
    ) -> None:
        """Called after a campaign is created and its fee charged."""

    @hookspec
    def post_donate(
        self,
        campaign_id: int,
        donor: str,
        amount: int,
        total_raised: int,
    ) -> None:
        """Called after a donation is recorded."""

    @hookspec
    def post_withdraw(
        self,
        campaign_id: int,
        organizer: str,
        amount: int,
        total_raised: int,
    ) -> None:
        """Called after the organizer withdraws funds."""
