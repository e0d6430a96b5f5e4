"""Per-operation telemetry for ledger services.

Off unless ``--verbose``; a disabled call costs one ContextVar read.
When on, each ``@traced`` service method opens an operation span named
after the ledger op and tagged with the campaign it touches, the acting
identity and, for a rejected call, the error code. ``trace_span`` opens
the validate / commit / dispatch stages beneath it.

The finished tree lands in ``ServiceResult.meta["telemetry"]`` and is
logged once as a ``ledger.op`` event.
"""

from __future__ import annotations

import functools
import inspect
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, ParamSpec, TypeVar

import structlog

from fundctl.services.result import ServiceResult

log = structlog.get_logger("fundctl.telemetry")


class Stage(StrEnum):
    VALIDATE = "validate"
    COMMIT = "commit"
    DISPATCH = "dispatch"


@dataclass
class Span:
    """One ledger operation, or one stage of it."""

    name: str
    tags: dict[str, Any] = field(default_factory=dict)
    stages: list[Span] = field(default_factory=list)
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None

    @property
    def elapsed_ms(self) -> float:
        if self.finished is None:
            return 0.0
        return (self.finished - self.started) * 1000

    def close(self) -> None:
        self.finished = time.perf_counter()

    def tag(self, **tags: Any) -> None:
        """Attach ledger context; None values are skipped."""
        self.tags.update({k: v for k, v in tags.items() if v is not None})

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "elapsed_ms": round(self.elapsed_ms, 2)}
        if self.tags:
            out["tags"] = dict(self.tags)
        if self.stages:
            out["stages"] = [s.to_dict() for s in self.stages]
        return out


_enabled: ContextVar[bool] = ContextVar("fundctl_telemetry", default=False)
_operation: ContextVar[Span | None] = ContextVar("fundctl_operation", default=None)


def enable_telemetry() -> None:
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)


def current_span() -> Span | None:
    """The innermost open span, or None when telemetry is off."""
    return _operation.get() if _enabled.get() else None


@contextmanager
def trace_span(stage: Stage | str) -> Iterator[Span | None]:
    """Time one stage of the running operation.

    Yields None outside a traced operation or while telemetry is off.
    """
    parent = current_span()
    if parent is None:
        yield None
        return

    span = Span(name=str(stage))
    parent.stages.append(span)
    token = _operation.set(span)
    try:
        yield span
    finally:
        span.close()
        _operation.reset(token)


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Wrap a service method in an operation span.

    The span picks up ``campaign_id`` from the call's arguments and
    ``caller`` from the service, then records the outcome of the
    returned :class:`ServiceResult`.
    """
    signature = inspect.signature(func)

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        call = signature.bind_partial(*args, **kwargs).arguments
        service = call.get("self")
        span = Span(name=func.__name__)
        span.tag(
            service=type(service).__name__ if service is not None else None,
            campaign_id=call.get("campaign_id"),
            caller=getattr(service, "caller", None),
        )

        token = _operation.set(span)
        try:
            result = func(*args, **kwargs)
        except Exception as exc:
            span.close()
            span.tag(raised=type(exc).__name__)
            _log_operation(span, outcome="raised")
            raise
        finally:
            _operation.reset(token)
        span.close()

        if not isinstance(result, ServiceResult):
            _log_operation(span, outcome="ok")
            return result

        if result.error is not None:
            span.tag(code=str(result.error.code))
        elif "id" in result.data:
            span.tag(campaign_id=result.data["id"])
        _log_operation(span, outcome="ok" if result.ok else "rejected")
        meta = {**(result.meta or {}), "telemetry": span.to_dict()}
        return result.model_copy(update={"meta": meta})  # type: ignore[return-value]

    return wrapper


def _log_operation(span: Span, *, outcome: str) -> None:
    log.debug(
        "ledger.op",
        op=span.name,
        outcome=outcome,
        elapsed_ms=round(span.elapsed_ms, 2),
        stages=[s.name for s in span.stages],
        **span.tags,
    )
