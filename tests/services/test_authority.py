"""Tests for AuthorityService: one-time authority initialization."""

from typing import Any

import pytest

from fundctl.infrastructure.identity import BURN_IDENTITY
from fundctl.infrastructure.store import LedgerStore
from fundctl.services.authority import AuthorityService


class TestSetAuthority:
    def test_sets_once(self, store: LedgerStore) -> None:
        result = AuthorityService(store).set_authority("ST2TEST")
        assert result.ok
        assert result.op == "set_authority"
        assert result.data == {"authority": "ST2TEST", "set": True}

    def test_second_set_rejected(self, store: LedgerStore) -> None:
        svc = AuthorityService(store)
        assert svc.set_authority("ST2TEST").ok
        result = svc.set_authority("ST9OTHER")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "already-initialized"
        assert result.error.detail["code"] == 106
        assert svc.get_authority().data["authority"] == "ST2TEST"

    def test_same_identity_twice_rejected(self, store: LedgerStore) -> None:
        svc = AuthorityService(store)
        svc.set_authority("ST2TEST")
        assert not svc.set_authority("ST2TEST").ok

    @pytest.mark.parametrize("reserved", [BURN_IDENTITY, ""])
    def test_reserved_identity_rejected(self, store: LedgerStore, reserved: str) -> None:
        result = AuthorityService(store).set_authority(reserved)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "not-authorized"
        assert result.error.detail["code"] == 100
        assert AuthorityService(store).get_authority().data["authority"] is None

    def test_burn_rejection_leaves_slot_open(self, store: LedgerStore) -> None:
        svc = AuthorityService(store)
        svc.set_authority(BURN_IDENTITY)
        assert svc.set_authority("ST2TEST").ok

    def test_caller_independent(self, store: LedgerStore, identity: Any) -> None:
        with identity.acting_as("ST3DONOR"):
            assert AuthorityService(store).set_authority("ST2TEST").ok


class TestGetAuthority:
    def test_unset(self, store: LedgerStore) -> None:
        result = AuthorityService(store).get_authority()
        assert result.ok
        assert result.data == {"authority": None}

    def test_after_set(self, store: LedgerStore, helpers: Any) -> None:
        helpers.set_authority(store)
        assert AuthorityService(store).get_authority().data["authority"] == "ST2TEST"
