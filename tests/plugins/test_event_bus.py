"""Tests for EventBus: WAL-backed synchronous event dispatch."""

from __future__ import annotations

from typing import Any

import pluggy
import pytest
from sqlalchemy import select

from fundctl.infrastructure.database.schema import event_wal
from fundctl.plugins.event_bus import EventBus
from fundctl.plugins.manager import new_plugin_manager

hookimpl = pluggy.HookimplMarker("fundctl")

DONATION = {"campaign_id": 0, "donor": "ST3DONOR", "amount": 500, "total_raised": 500}


# ---------------------------------------------------------------------------
# Fake plugins for testing
# ---------------------------------------------------------------------------


class RecordingPlugin:
    """Plugin that records all hook calls."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []

    @hookimpl
    def post_authority_set(self, authority: str) -> None:
        self.calls.append(("post_authority_set", {"authority": authority}))

    @hookimpl
    def post_donate(self, campaign_id: int, donor: str, amount: int, total_raised: int) -> None:
        self.calls.append(
            (
                "post_donate",
                {
                    "campaign_id": campaign_id,
                    "donor": donor,
                    "amount": amount,
                    "total_raised": total_raised,
                },
            )
        )


class FailingPlugin:
    """Plugin that always raises on post_donate."""

    @hookimpl
    def post_donate(self, campaign_id: int, donor: str, amount: int, total_raised: int) -> None:
        msg = "Plugin exploded!"
        raise RuntimeError(msg)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def pm_with_recorder() -> tuple[pluggy.PluginManager, RecordingPlugin]:
    pm = new_plugin_manager()
    recorder = RecordingPlugin()
    pm.register(recorder, name="recorder")
    return pm, recorder


@pytest.fixture
def pm_with_failer() -> pluggy.PluginManager:
    pm = new_plugin_manager()
    pm.register(FailingPlugin(), name="failer")
    return pm


@pytest.fixture
def bus(db_engine, pm_with_recorder) -> tuple[EventBus, RecordingPlugin]:  # type: ignore[no-untyped-def]
    pm, recorder = pm_with_recorder
    return EventBus(db_engine, pm), recorder


def _row(engine, event_id: int):  # type: ignore[no-untyped-def]
    with engine.connect() as conn:
        return conn.execute(select(event_wal).where(event_wal.c.id == event_id)).fetchone()


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestEventBusWAL:
    def test_dispatch_writes_completed_row(self, bus, db_engine):  # type: ignore[no-untyped-def]
        event_bus, _ = bus
        event_id = event_bus.dispatch("post_donate", DONATION)

        row = _row(db_engine, event_id)
        assert row is not None
        assert row.hook_name == "post_donate"
        assert row.status == "completed"
        assert row.error is None
        assert row.completed is not None

    def test_payload_stored_as_json(self, bus, db_engine):  # type: ignore[no-untyped-def]
        import json

        event_bus, _ = bus
        event_id = event_bus.dispatch("post_donate", DONATION)
        assert json.loads(_row(db_engine, event_id).payload) == DONATION

    def test_hook_receives_payload(self, bus):  # type: ignore[no-untyped-def]
        event_bus, recorder = bus
        event_bus.dispatch("post_authority_set", {"authority": "ST2TEST"})
        assert recorder.calls == [("post_authority_set", {"authority": "ST2TEST"})]

    def test_event_ids_increase(self, bus):  # type: ignore[no-untyped-def]
        event_bus, _ = bus
        first = event_bus.dispatch("post_donate", DONATION)
        second = event_bus.dispatch("post_donate", DONATION)
        assert second > first


class TestEventBusFailures:
    def test_failed_hook_records_error(self, db_engine, pm_with_failer):  # type: ignore[no-untyped-def]
        event_bus = EventBus(db_engine, pm_with_failer)
        event_id = event_bus.dispatch("post_donate", DONATION)

        row = _row(db_engine, event_id)
        assert row.status == "failed"
        assert "Plugin exploded!" in row.error

    def test_failure_does_not_raise(self, db_engine, pm_with_failer):  # type: ignore[no-untyped-def]
        EventBus(db_engine, pm_with_failer).dispatch("post_donate", DONATION)

    def test_failed_events_listing(self, db_engine, pm_with_failer):  # type: ignore[no-untyped-def]
        event_bus = EventBus(db_engine, pm_with_failer)
        event_id = event_bus.dispatch("post_donate", DONATION)
        event_bus.dispatch("post_authority_set", {"authority": "ST2TEST"})

        failed = event_bus.failed_events()
        assert [f["id"] for f in failed] == [event_id]
        assert failed[0]["hook_name"] == "post_donate"


class TestEventBusNoPlugins:
    def test_dispatch_with_empty_pm_completes(self, db_engine):  # type: ignore[no-untyped-def]
        event_id = EventBus(db_engine, new_plugin_manager()).dispatch("post_donate", DONATION)
        assert _row(db_engine, event_id).status == "completed"

    def test_dispatch_unknown_hook_completes(self, db_engine):  # type: ignore[no-untyped-def]
        event_id = EventBus(db_engine, new_plugin_manager()).dispatch("nonexistent_hook", {"foo": 1})
        assert _row(db_engine, event_id).status == "completed"


class TestServiceEvents:
    """Ledger operations dispatch their events once committed."""

    def test_operations_fire_hooks(self, store, helpers) -> None:  # type: ignore[no-untyped-def]
        store.init_event_bus()
        recorder = RecordingPlugin()
        store.event_bus.plugin_manager.register(recorder, name="recorder")

        helpers.set_authority(store)
        helpers.create_campaign(store)
        helpers.donate(store, 0, 500)

        assert [name for name, _ in recorder.calls] == ["post_authority_set", "post_donate"]
        assert recorder.calls[1][1]["total_raised"] == 500

    def test_rejected_operation_fires_nothing(self, store) -> None:  # type: ignore[no-untyped-def]
        from fundctl.services.funding import FundingService

        store.init_event_bus()
        recorder = RecordingPlugin()
        store.event_bus.plugin_manager.register(recorder, name="recorder")

        assert not FundingService(store).donate(0, 10).ok
        assert recorder.calls == []

    def test_plugin_failure_is_warning(self, store, helpers) -> None:  # type: ignore[no-untyped-def]
        from fundctl.services.funding import FundingService

        store.init_event_bus()
        store.event_bus.plugin_manager.register(FailingPlugin(), name="failer")
        helpers.set_authority(store)
        helpers.create_campaign(store)

        result = FundingService(store).donate(0, 500)
        assert result.ok
        assert result.data["total_raised"] == 500
        assert len(store.event_bus.failed_events()) == 1
