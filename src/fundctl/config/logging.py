"""Logging for fundctl: stdlib loggers rendered by structlog on stderr.

Services log through ``logging.getLogger(__name__)``; plugins and
telemetry log through ``structlog.get_logger``. Both end up in one
``ProcessorFormatter`` so every line carries the same fields, including
the acting identity and ledger root bound for the whole invocation.

``--verbose`` opens the ``fundctl`` loggers to DEBUG. SQLAlchemy and
pluggy stay at WARNING either way; their debug chatter is not ledger
activity.
"""

from __future__ import annotations

import logging
import logging.config
import sys
from pathlib import Path

import structlog

_QUIET_LIBRARIES = ("sqlalchemy", "pluggy")


def _pre_chain() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    caller: str | None = None,
    ledger_root: Path | None = None,
) -> None:
    """Route all fundctl logging to stderr.

    Safe to call more than once; each call replaces the root handler.

    Args:
        verbose: DEBUG for ``fundctl.*`` instead of WARNING.
        log_json: One JSON object per line instead of console text.
        caller: Identity bound into every log line as ``caller``.
        ledger_root: Ledger directory bound in as ``ledger``.
    """
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if log_json
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "ledger": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": _pre_chain(),
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        renderer,
                    ],
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": sys.stderr,
                    "formatter": "ledger",
                },
            },
            "root": {"level": "WARNING", "handlers": ["stderr"]},
            "loggers": {
                "fundctl": {"level": "DEBUG" if verbose else "WARNING"},
                **{name: {"level": "WARNING"} for name in _QUIET_LIBRARIES},
            },
        }
    )

    structlog.configure(
        processors=[*_pre_chain(), structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    structlog.contextvars.clear_contextvars()
    context = {"caller": caller, "ledger": str(ledger_root) if ledger_root else None}
    structlog.contextvars.bind_contextvars(**{k: v for k, v in context.items() if v})
