"""Donation, withdrawal, and transfer journal commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from fundctl.commands._base import LedgerCommand, LedgerGroup
from fundctl.services.funding import FundingService

if TYPE_CHECKING:
    from fundctl.commands._context import AppContext
    from fundctl.services.result import ServiceResult


@click.command(
    cls=LedgerCommand,
    examples="""\
  fundctl donate 0 500
  fundctl --as ST3DONOR donate 0 9500""",
)
@click.argument("campaign_id", type=int)
@click.argument("amount", type=int)
@click.pass_obj
def donate(app: AppContext, campaign_id: int, amount: int) -> ServiceResult:
    """Donate AMOUNT to a campaign as the calling identity."""
    return FundingService(app.store).donate(campaign_id, amount)


@click.command(
    cls=LedgerCommand,
    examples="""\
  fundctl withdraw 0 5000
  fundctl --as ST3ORG withdraw 1 2500""",
)
@click.argument("campaign_id", type=int)
@click.argument("amount", type=int)
@click.pass_obj
def withdraw(app: AppContext, campaign_id: int, amount: int) -> ServiceResult:
    """Withdraw AMOUNT of raised funds. Organizer only, goal must be met."""
    return FundingService(app.store).withdraw_funds(campaign_id, amount)


@click.command(
    cls=LedgerCommand,
    examples="""\
  fundctl transfers
  fundctl transfers --campaign 0""",
)
@click.option("--campaign", "campaign_id", type=int, default=None, help="Only this campaign.")
@click.pass_obj
def transfers(app: AppContext, campaign_id: int | None) -> ServiceResult:
    """Show the fund transfer journal."""
    return FundingService(app.store).list_transfers(campaign_id)


@click.group(cls=LedgerGroup)
def donation() -> None:
    """Inspect per-donor donation totals."""


@donation.command(
    examples="""\
  fundctl donation show 0
  fundctl donation show 0 ST3DONOR"""
)
@click.argument("campaign_id", type=int)
@click.argument("donor", required=False)
@click.pass_obj
def show(app: AppContext, campaign_id: int, donor: str | None) -> ServiceResult:
    """Show how much DONOR (default: the caller) has given to a campaign."""
    return FundingService(app.store).get_donation(campaign_id, donor)
