"""Tests for operation telemetry on ledger services."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

import pytest
import structlog

from fundctl.infrastructure.store import LedgerStore
from fundctl.services.authority import AuthorityService
from fundctl.services.campaign import CampaignService
from fundctl.services.funding import FundingService
from fundctl.services.result import ServiceResult
from fundctl.services.telemetry import (
    Span,
    Stage,
    current_span,
    disable_telemetry,
    enable_telemetry,
    trace_span,
    traced,
)


@pytest.fixture
def tracing() -> Generator[None]:
    enable_telemetry()
    yield
    disable_telemetry()


@pytest.fixture
def campaign(store: LedgerStore, helpers: Any) -> int:
    helpers.set_authority(store)
    return int(helpers.create_campaign(store)["id"])


def _span(result: ServiceResult) -> dict[str, Any]:
    assert result.meta is not None
    return result.meta["telemetry"]


class TestSpan:
    def test_open_span_has_no_elapsed_time(self) -> None:
        assert Span(name="donate").elapsed_ms == 0.0

    def test_tag_skips_none(self) -> None:
        span = Span(name="get_donation")
        span.tag(campaign_id=0, caller=None)
        assert span.tags == {"campaign_id": 0}

    def test_to_dict_omits_empty_parts(self) -> None:
        span = Span(name="get_campaign_count")
        span.close()
        assert set(span.to_dict()) == {"name", "elapsed_ms"}

    def test_stage_names(self) -> None:
        assert [str(s) for s in Stage] == ["validate", "commit", "dispatch"]


class TestDisabled:
    def test_no_meta(self, store: LedgerStore, campaign: int) -> None:
        result = FundingService(store).donate(campaign, 10)
        assert result.ok
        assert result.meta is None

    def test_trace_span_yields_none(self) -> None:
        with trace_span(Stage.COMMIT) as span:
            assert span is None
        assert current_span() is None


@pytest.mark.usefixtures("tracing")
class TestLedgerOperations:
    def test_donation_span(self, store: LedgerStore, campaign: int) -> None:
        span = _span(FundingService(store).donate(campaign, 500))
        assert span["name"] == "donate"
        assert span["tags"] == {
            "service": "FundingService",
            "campaign_id": campaign,
            "caller": "ST1TEST",
        }
        assert [s["name"] for s in span["stages"]] == ["validate", "commit"]
        assert span["elapsed_ms"] >= 0

    def test_creation_tags_new_campaign(self, store: LedgerStore, helpers: Any) -> None:
        helpers.set_authority(store)
        span = _span(CampaignService(store).create_campaign("School Build", 10000, 30))
        assert span["tags"]["campaign_id"] == 0
        assert [s["name"] for s in span["stages"]] == ["validate", "commit", "dispatch"]

    def test_rejection_tags_error_code(self, store: LedgerStore, campaign: int) -> None:
        result = FundingService(store).withdraw_funds(campaign, 10)
        assert not result.ok
        span = _span(result)
        assert span["tags"]["code"] == "goal-not-met"
        assert [s["name"] for s in span["stages"]] == ["validate"]

    def test_unknown_campaign_tagged_with_requested_id(self, store: LedgerStore) -> None:
        span = _span(CampaignService(store).get_campaign(7))
        assert span["tags"]["campaign_id"] == 7
        assert span["tags"]["code"] == "campaign-not-found"

    def test_acting_identity_recorded(self, store: LedgerStore, identity: Any) -> None:
        with identity.acting_as("ST2TEST"):
            span = _span(AuthorityService(store).set_authority("ST2TEST"))
        assert span["tags"]["caller"] == "ST2TEST"
        assert [s["name"] for s in span["stages"]] == ["commit"]

    def test_existing_meta_kept(self) -> None:
        @traced
        def count() -> ServiceResult:
            return ServiceResult(ok=True, op="count", data={"count": 3}, meta={"source": "x"})

        meta = count().meta
        assert meta is not None
        assert meta["source"] == "x"
        assert meta["telemetry"]["name"] == "count"

    def test_non_result_returned_untouched(self) -> None:
        @traced
        def height() -> int:
            return 42

        assert height() == 42

    def test_exception_propagates_and_closes_span(self) -> None:
        @traced
        def broken() -> ServiceResult:
            with trace_span(Stage.VALIDATE):
                raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            broken()
        assert current_span() is None

    def test_logged_as_ledger_op(self, store: LedgerStore, campaign: int) -> None:
        with structlog.testing.capture_logs() as logs:
            FundingService(store).donate(campaign, 5)
        (entry,) = [e for e in logs if e["event"] == "ledger.op"]
        assert entry["op"] == "donate"
        assert entry["outcome"] == "ok"
        assert entry["campaign_id"] == campaign
        assert entry["stages"] == ["validate", "commit"]

    def test_rejection_logged(self, store: LedgerStore) -> None:
        with structlog.testing.capture_logs() as logs:
            FundingService(store).donate(3, 5)
        (entry,) = [e for e in logs if e["event"] == "ledger.op"]
        assert entry["outcome"] == "rejected"
        assert entry["code"] == "campaign-not-found"
