"""structlog setup for the maker process.

Every record goes through stdlib ``logging`` so third-party libraries
(web3, aiohttp) share one handler.  Key material never reaches a log line:
``redact_secrets`` masks it before rendering.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from config.settings import settings

REDACTED = "[redacted]"

_SECRET_KEYS = frozenset({"private_key", "maker_private_key", "MAKER_PRIVATE_KEY"})

# web3 providers log full request bodies at DEBUG.
_NOISY_LOGGERS = ("web3", "urllib3", "aiohttp")


def redact_secrets(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Mask any event field that may carry the maker key."""
    for key in _SECRET_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def _renderer(json_output: bool) -> structlog.types.Processor:
    if json_output:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def setup_logging(
    level: str | None = None,
    json_output: bool | None = None,
) -> None:
    """Route structlog through a single stdout handler.

    ``level`` defaults to ``LOG_LEVEL``; ``json_output`` defaults to JSON
    lines outside ``APP_ENV=dev``.  The app name is bound as context on
    every record.
    """
    if json_output is None:
        json_output = settings.APP_ENV != "dev"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_secrets,
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(json_output),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel((level or settings.LOG_LEVEL).upper())
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(app=settings.APP_NAME)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
