"""Subcommand modules for fundctl.

Provides register_commands() which uses deferred imports to keep
``fundctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from fundctl.commands.authority import authority
    from fundctl.commands.campaign import campaign
    from fundctl.commands.chain import chain
    from fundctl.commands.funding import donation

    cli.add_command(authority)
    cli.add_command(campaign)
    cli.add_command(donation)
    cli.add_command(chain)

    # --- Standalone commands ---
    from fundctl.commands.funding import donate, transfers, withdraw

    cli.add_command(donate)
    cli.add_command(withdraw)
    cli.add_command(transfers)
