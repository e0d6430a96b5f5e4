"""Shared pytest fixtures and test helpers for fundctl tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from fundctl.config.settings import FundSettings
from fundctl.infrastructure.clock import ManualClock
from fundctl.infrastructure.database.engine import init_database
from fundctl.infrastructure.identity import StaticIdentity
from fundctl.infrastructure.store import LedgerStore
from fundctl.infrastructure.transfers import JournalTransferService, TransferError, TransferKind

ORGANIZER = "ST1TEST"
AUTHORITY = "ST2TEST"
DONOR = "ST3DONOR"


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine() -> Iterator[Engine]:
    """Initialized in-memory SQLite engine with all tables created."""
    engine = init_database(None)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def settings(tmp_path: Path) -> FundSettings:
    """Settings for an in-memory ledger rooted at a temp directory."""
    return FundSettings.from_cli(ledger_root=tmp_path, database={"path": ":memory:"})


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(0)


@pytest.fixture
def identity() -> StaticIdentity:
    return StaticIdentity(ORGANIZER)


@pytest.fixture
def store(settings: FundSettings, clock: ManualClock, identity: StaticIdentity) -> Iterator[LedgerStore]:
    """Isolated ledger: in-memory DB, manual clock at height 0, caller ST1TEST."""
    s = LedgerStore(settings, identity=identity, clock=clock)
    try:
        yield s
    finally:
        s.close()


class RefusingTransferService(JournalTransferService):
    """Journal transfers, except that the listed kinds always fail."""

    def __init__(self, *refused: TransferKind) -> None:
        self.refused = set(refused)

    def transfer(self, conn: Any, *, kind: TransferKind, **kwargs: Any) -> int:
        if kind in self.refused:
            msg = f"{kind} transfers are refused"
            raise TransferError(msg)
        return super().transfer(conn, kind=kind, **kwargs)


@pytest.fixture
def refusing_store(
    settings: FundSettings, clock: ManualClock, identity: StaticIdentity
) -> Iterator[Callable[..., LedgerStore]]:
    """Factory for an isolated ledger whose transfers of the given kinds fail."""
    built: list[LedgerStore] = []

    def _build(*refused: TransferKind) -> LedgerStore:
        s = LedgerStore(
            settings,
            identity=identity,
            clock=clock,
            transfer_service=RefusingTransferService(*refused),
        )
        built.append(s)
        return s

    yield _build
    for s in built:
        s.close()


@pytest.fixture
def _isolated_ledger(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated on-disk ledger.

    Use via ``@pytest.mark.usefixtures("_isolated_ledger")`` on command test classes.
    """
    monkeypatch.delenv("FUNDCTL_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service test modules)
# ---------------------------------------------------------------------------


def set_authority(store: LedgerStore, identity: str = AUTHORITY) -> None:
    """Set the authority via AuthorityService, asserting success."""
    from fundctl.services.authority import AuthorityService

    result = AuthorityService(store).set_authority(identity)
    assert result.ok, result.error


def create_campaign(
    store: LedgerStore,
    title: str = "School Build",
    goal_amount: int = 10000,
    duration: int = 30,
) -> dict[str, Any]:
    """Create a campaign via CampaignService, asserting success."""
    from fundctl.services.campaign import CampaignService

    result = CampaignService(store).create_campaign(title, goal_amount, duration)
    assert result.ok, result.error
    return result.data


def donate(store: LedgerStore, campaign_id: int, amount: int) -> dict[str, Any]:
    """Donate via FundingService, asserting success."""
    from fundctl.services.funding import FundingService

    result = FundingService(store).donate(campaign_id, amount)
    assert result.ok, result.error
    return result.data


@pytest.fixture
def helpers() -> Any:
    """Expose the helper functions to test modules without importing conftest."""

    class _Helpers:
        set_authority = staticmethod(set_authority)
        create_campaign = staticmethod(create_campaign)
        donate = staticmethod(donate)

    return _Helpers


@pytest.fixture(autouse=True)
def _telemetry_off() -> Iterator[None]:
    """``-v`` invocations enable telemetry in the test process; switch it back off."""
    yield
    from fundctl.services.telemetry import disable_telemetry

    disable_telemetry()
