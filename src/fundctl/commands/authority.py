"""Command group: the fee-receiving authority."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from fundctl.commands._base import LedgerGroup
from fundctl.services.authority import AuthorityService

if TYPE_CHECKING:
    from fundctl.commands._context import AppContext
    from fundctl.services.result import ServiceResult


@click.group(
    cls=LedgerGroup,
    examples="""\
  fundctl authority set ST2TEST
  fundctl authority show""",
)
def authority() -> None:
    """Set or show the authority that receives creation fees."""


@authority.command("set", examples="  fundctl authority set ST2TEST")
@click.argument("identity")
@click.pass_obj
def set_cmd(app: AppContext, identity: str) -> ServiceResult:
    """Set the authority. Succeeds only once per ledger."""
    return AuthorityService(app.store).set_authority(identity)


@authority.command("show")
@click.pass_obj
def show(app: AppContext) -> ServiceResult:
    """Show the current authority."""
    return AuthorityService(app.store).get_authority()
