"""FundSettings: the one frozen settings object a ledger invocation uses.

Sources, strongest first:

1. Keyword arguments (the CLI's global flags).
2. ``FUNDCTL_*`` environment variables, ``__`` between section and key
   (``FUNDCTL_LEDGER__CREATION_FEE=250``).
3. The ledger's ``fundctl.toml``, found by :func:`locate_ledger`.
4. Defaults on the section models.

The TOML file is read with pydantic-settings' own
``TomlConfigSettingsSource``. Which file to read is decided per call of
:meth:`FundSettings.from_cli` and handed to the source hook through a
context variable.
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, TomlConfigSettingsSource

from fundctl.config.discovery import locate_ledger
from fundctl.config.models import DatabaseConfig, IdentityConfig, LedgerConfig, PluginsConfig

_toml_file: ContextVar[Path | None] = ContextVar("fundctl_toml_file", default=None)


class FundSettings(BaseSettings):
    """Resolved configuration for one ledger.

    Attributes:
        ledger_root: Directory whose ``.fundctl/`` holds the ledger.
        config_path: The ``fundctl.toml`` that was read, if any.
        caller: ``--as`` override for the acting identity.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "FUNDCTL_",
        "env_nested_delimiter": "__",
    }

    ledger_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    caller: str | None = None

    ledger: LedgerConfig = Field(default_factory=LedgerConfig)
    identity: IdentityConfig = Field(default_factory=IdentityConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @property
    def effective_caller(self) -> str:
        """``--as`` when given, otherwise ``[identity] caller``."""
        return self.caller or self.identity.caller

    @property
    def db_path(self) -> Path | None:
        """Ledger database file, or None when ``[database] path`` is ``:memory:``."""
        if self.database.in_memory:
            return None
        path = Path(self.database.path)
        return path if path.is_absolute() else self.ledger_root / path

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml_file = _toml_file.get()
        try:
            toml_source = TomlConfigSettingsSource(settings_cls, toml_file=toml_file)
        except tomllib.TOMLDecodeError as exc:
            msg = f"Invalid TOML in {toml_file}: {exc}"
            raise click.ClickException(msg) from exc
        return (init_settings, env_settings, toml_source)

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        ledger_root: Path | None = None,
        **cli_flags: Any,
    ) -> FundSettings:
        """Build settings for a CLI invocation (or a test).

        *ledger_root* skips the root search but its ``fundctl.toml`` is
        still read. Flags passed as None are dropped so they do not mask
        the environment or the TOML file.
        """
        location = locate_ledger(ledger_root, config=config_path)
        flags = {name: value for name, value in cli_flags.items() if value is not None}

        token = _toml_file.set(location.config_path)
        try:
            return cls(
                ledger_root=ledger_root or location.root,
                config_path=location.config_path,
                **flags,
            )
        finally:
            _toml_file.reset(token)
