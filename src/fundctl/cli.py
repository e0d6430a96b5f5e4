"""The ``fundctl`` entry point: global options, then the ledger commands."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from fundctl import __version__
from fundctl.commands import register_commands
from fundctl.commands._base import LedgerGroup
from fundctl.commands._context import AppContext
from fundctl.config.settings import FundSettings

# Boolean flags left off the command line fall through to the environment
# and fundctl.toml, so they are only forwarded when set.
_SWITCHES = (
    click.option("--json", "json_output", is_flag=True, help="Print results as JSON."),
    click.option("-q", "--quiet", is_flag=True, help="Print only the essential value."),
    click.option("-v", "--verbose", is_flag=True, help="Show debug logs and operation timings."),
    click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines."),
)

_LOCATION = (
    click.option(
        "-c",
        "--config",
        "config_path",
        default=None,
        help="Read this fundctl.toml instead of searching for one.",
    ),
    click.option(
        "--root",
        "ledger_root",
        type=click.Path(file_okay=False, path_type=Path),
        default=None,
        help="Ledger directory (default: nearest one above the working directory).",
    ),
    click.option("--as", "caller", default=None, help="Identity to act as."),
)


def _apply(options: tuple[Callable[[Any], Any], ...]) -> Callable[[Any], Any]:
    def decorate(func: Any) -> Any:
        for option in reversed(options):
            func = option(func)
        return func

    return decorate


@click.group(
    cls=LedgerGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(version=__version__, prog_name="fundctl")
@_apply(_SWITCHES)
@_apply(_LOCATION)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: str | None,
    ledger_root: Path | None,
    caller: str | None,
    **switches: bool,
) -> None:
    """fundctl: a crowdfunding campaign ledger."""
    settings = FundSettings.from_cli(
        config_path=config_path,
        ledger_root=ledger_root,
        caller=caller,
        **{name: True for name, on in switches.items() if on},
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
