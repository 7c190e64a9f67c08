from __future__ import annotations

import logging
import sys

import structlog

_CONFIGURED = False
LIBRARY = "dynamo_mapper"


def _add_library(_, __, event_dict):
    event_dict.setdefault("library", LIBRARY)
    return event_dict


def configure_logging(*, level: str | int | None = None) -> None:
    """
    Configure stdlib logging + structlog to output structured JSON to stdout.

    The library never calls this itself; applications (and the test suite)
    opt in once at startup.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    if level is None:
        from ..settings import get_settings

        level = get_settings().log_level

    pre_chain = [
        structlog.stdlib.add_logger_name,
        _add_library,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=pre_chain,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            _add_library,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    _CONFIGURED = True


def is_configured() -> bool:
    return _CONFIGURED


def get_logger(name: str | None = None):
    return structlog.get_logger(name)
