"""Tests for the journal transfer service."""

import pytest
from sqlalchemy import select

from fundctl.infrastructure.database.schema import transfers
from fundctl.infrastructure.transfers import JournalTransferService, TransferError, TransferKind


class TestJournalTransferService:
    def test_records_transfer(self, db_engine) -> None:  # type: ignore[no-untyped-def]
        svc = JournalTransferService()
        with db_engine.begin() as conn:
            seq = svc.transfer(
                conn,
                kind=TransferKind.DONATION,
                amount=500,
                source="ST3DONOR",
                destination="custody",
                height=4,
                campaign_id=0,
            )
            row = conn.execute(select(transfers)).one()
        assert seq == row.seq
        assert row.kind == "donation"
        assert row.amount == 500
        assert row.source == "ST3DONOR"
        assert row.destination == "custody"
        assert row.height == 4
        assert row.campaign_id == 0

    def test_sequence_increases(self, db_engine) -> None:  # type: ignore[no-untyped-def]
        svc = JournalTransferService()
        with db_engine.begin() as conn:
            first = svc.transfer(
                conn, kind=TransferKind.CREATION_FEE, amount=1, source="a", destination="b", height=0
            )
            second = svc.transfer(
                conn, kind=TransferKind.CREATION_FEE, amount=1, source="a", destination="b", height=0
            )
        assert second > first

    @pytest.mark.parametrize("amount", [0, -10])
    def test_non_positive_amount_rejected(self, db_engine, amount: int) -> None:  # type: ignore[no-untyped-def]
        with db_engine.begin() as conn, pytest.raises(TransferError, match="positive"):
            JournalTransferService().transfer(
                conn, kind=TransferKind.DONATION, amount=amount, source="a", destination="b", height=0
            )

    def test_self_transfer_recorded(self, db_engine) -> None:  # type: ignore[no-untyped-def]
        with db_engine.begin() as conn:
            JournalTransferService().transfer(
                conn, kind=TransferKind.CREATION_FEE, amount=5, source="a", destination="a", height=0
            )
            row = conn.execute(select(transfers)).one()
        assert (row.source, row.destination, row.amount) == ("a", "a", 5)
