"""Click base classes shared by every fundctl command.

``LedgerCommand`` callbacks return the :class:`ServiceResult` they
produce; the command hands it to :meth:`AppContext.emit`, which owns
output routing and the exit code. Commands and groups both accept an
``examples`` string, shown by an eager ``--examples`` flag.
"""

from __future__ import annotations

from typing import Any

import click

from fundctl.commands._context import AppContext
from fundctl.services.result import ServiceResult


def _examples_flag(examples: str) -> click.Option:
    def show(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if value:
            click.echo(f"Examples for '{ctx.command_path}':\n\n{examples}")
            ctx.exit(0)

    return click.Option(
        ["--examples"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=show,
        help="Show usage examples and exit.",
    )


class _WithExamples:
    params: list[click.Parameter]

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(_examples_flag(examples))


class LedgerCommand(_WithExamples, click.Command):
    """A command whose callback returns the ledger result to print."""

    def invoke(self, ctx: click.Context) -> Any:
        result = super().invoke(ctx)
        if isinstance(result, ServiceResult):
            ctx.find_object(AppContext).emit(result)  # type: ignore[union-attr]
        return result


class LedgerGroup(_WithExamples, click.Group):
    """Group whose ``@group.command()`` subcommands are LedgerCommands."""

    command_class = LedgerCommand
    group_class = type
