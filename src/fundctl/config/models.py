"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, fundctl.toml only contains
overrides. A fresh ledger needs no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, field_validator

from fundctl.infrastructure.identity import BURN_IDENTITY

# --- fundctl.toml sections ---


class LedgerConfig(BaseModel):
    """[ledger] section."""

    model_config = {"frozen": True}

    creation_fee: int = 1000
    max_title_length: int = 100
    burn_identity: str = BURN_IDENTITY
    custody_identity: str = "fundctl.campaign-ledger"

    @field_validator("creation_fee", "max_title_length")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            msg = "must be a positive integer"
            raise ValueError(msg)
        return value


class IdentityConfig(BaseModel):
    """[identity] section."""

    model_config = {"frozen": True}

    caller: str = "ST1TEST"


class DatabaseConfig(BaseModel):
    """[database] section."""

    model_config = {"frozen": True}

    # Relative to the ledger root; ":memory:" keeps everything in process.
    path: str = ".fundctl/ledger.db"

    @property
    def in_memory(self) -> bool:
        return self.path == ":memory:"


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    activity_log: bool = True
    # Plugin names to block, e.g. ["activity-log-builtin"].
    disabled: tuple[str, ...] = ()

