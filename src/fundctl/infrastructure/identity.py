"""Calling-identity providers.

The ledger asks an :class:`IdentityProvider` who is calling each
operation and which identity is the reserved burn address that may
never become the fee authority.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Protocol, runtime_checkable

BURN_IDENTITY = "SP000000000000000000002Q6VF78"


@runtime_checkable
class IdentityProvider(Protocol):
    """Source of the caller identity for ledger operations."""

    @property
    def caller(self) -> str: ...

    @property
    def burn_identity(self) -> str: ...


class StaticIdentity:
    """A fixed caller that can be switched explicitly.

    Usage::

        identity = StaticIdentity("ST1TEST")
        with identity.acting_as("ST3DONOR"):
            funding.donate(0, 500)
    """

    def __init__(self, caller: str, *, burn_identity: str = BURN_IDENTITY) -> None:
        self._caller = caller
        self._burn_identity = burn_identity

    @property
    def caller(self) -> str:
        return self._caller

    @property
    def burn_identity(self) -> str:
        return self._burn_identity

    def switch(self, caller: str) -> None:
        """Make *caller* the identity for subsequent operations."""
        self._caller = caller

    @contextmanager
    def acting_as(self, caller: str) -> Iterator[None]:
        """Temporarily act as *caller*, restoring the previous identity on exit."""
        previous = self._caller
        self._caller = caller
        try:
            yield
        finally:
            self._caller = previous
