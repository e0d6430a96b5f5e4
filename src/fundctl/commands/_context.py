"""AppContext: per-invocation state handed to every fundctl command.

The root group builds one from the resolved settings. It owns the
ledger store, opened on first use so ``--help``, ``--examples`` and
``--version`` never create a database, and it turns ServiceResults into
output and exit codes.
"""

from __future__ import annotations

from functools import cached_property
from typing import TYPE_CHECKING

import click

from fundctl.config.logging import configure_logging
from fundctl.output.formatters import OutputSettings, format_result
from fundctl.services.telemetry import enable_telemetry

if TYPE_CHECKING:
    from fundctl.config.settings import FundSettings
    from fundctl.infrastructure.store import LedgerStore
    from fundctl.services.result import ServiceResult


class AppContext:
    def __init__(self, settings: FundSettings) -> None:
        self.settings = settings
        configure_logging(
            verbose=settings.verbose,
            log_json=settings.log_json,
            caller=settings.effective_caller,
            ledger_root=settings.ledger_root,
        )
        if settings.verbose:
            enable_telemetry()

    @cached_property
    def store(self) -> LedgerStore:
        from fundctl.infrastructure.store import LedgerStore

        store = LedgerStore(self.settings)
        if self.settings.plugins.enabled:
            store.init_event_bus()
        return store

    @cached_property
    def output(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def emit(self, result: ServiceResult) -> None:
        """Print *result*; a failed result exits with status 1.

        Successes go to stdout. Rejections go to stderr, and so do
        warnings in plain ``--quiet`` mode, keeping stdout to the one
        value a script reads.
        """
        text = format_result(result, settings=self.output)
        if not result.ok:
            click.echo(text, err=True)
            raise SystemExit(1)

        click.echo(text)
        if self.output.quiet and not self.output.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
