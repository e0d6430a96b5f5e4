"""Command group: the stored block height used for deadlines."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from fundctl.commands._base import LedgerGroup
from fundctl.infrastructure.clock import StoredClock
from fundctl.services.result import ServiceResult

if TYPE_CHECKING:
    from fundctl.commands._context import AppContext


def _stored_clock(app: AppContext) -> StoredClock:
    clock = app.store.clock
    if not isinstance(clock, StoredClock):
        raise click.ClickException("This ledger does not use a stored block height.")
    return clock


@click.group(
    cls=LedgerGroup,
    examples="""\
  fundctl chain height
  fundctl chain advance 31""",
)
def chain() -> None:
    """Show or advance the ledger's block height."""


@chain.command()
@click.pass_obj
def height(app: AppContext) -> ServiceResult:
    """Show the current block height."""
    current = _stored_clock(app).current_height()
    return ServiceResult(ok=True, op="chain_height", data={"height": current})


@chain.command()
@click.argument("blocks", type=click.IntRange(min=1), default=1)
@click.pass_obj
def advance(app: AppContext, blocks: int) -> ServiceResult:
    """Advance the block height by BLOCKS (default 1)."""
    new_height = _stored_clock(app).advance(blocks)
    return ServiceResult(ok=True, op="chain_advance", data={"height": new_height})
