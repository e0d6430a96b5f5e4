"""Command group: campaign registration and reads."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from fundctl.commands._base import LedgerGroup
from fundctl.services.campaign import CampaignService

if TYPE_CHECKING:
    from fundctl.commands._context import AppContext
    from fundctl.services.result import ServiceResult

_CAMPAIGN_EXAMPLES = """\
  fundctl campaign create "School Build" --goal 10000 --duration 30
  fundctl --as ST3ORG campaign create "Well Repair" --goal 2500 --duration 144
  fundctl campaign show 0
  fundctl campaign list
  fundctl --json campaign count"""


@click.group(cls=LedgerGroup, examples=_CAMPAIGN_EXAMPLES)
def campaign() -> None:
    """Create and inspect fundraising campaigns."""


@campaign.command(
    examples="""\
  fundctl campaign create "School Build" --goal 10000 --duration 30
  fundctl --as ST3ORG campaign create "Well Repair" --goal 2500 --duration 144"""
)
@click.argument("title")
@click.option("--goal", "goal_amount", type=int, required=True, help="Funding goal.")
@click.option(
    "--duration",
    type=int,
    required=True,
    help="Blocks from the current height until the deadline.",
)
@click.pass_obj
def create(app: AppContext, title: str, goal_amount: int, duration: int) -> ServiceResult:
    """Create a campaign organized by the calling identity."""
    return CampaignService(app.store).create_campaign(title, goal_amount, duration)


@campaign.command()
@click.argument("campaign_id", type=int)
@click.pass_obj
def show(app: AppContext, campaign_id: int) -> ServiceResult:
    """Show one campaign."""
    return CampaignService(app.store).get_campaign(campaign_id)


@campaign.command("list")
@click.pass_obj
def list_cmd(app: AppContext) -> ServiceResult:
    """List all campaigns."""
    return CampaignService(app.store).list_campaigns()


@campaign.command()
@click.pass_obj
def count(app: AppContext) -> ServiceResult:
    """Show how many campaigns have been created."""
    return CampaignService(app.store).get_campaign_count()
