"""Logging setup for the CLI and for hosts embedding the watcher.

``VERSIONLENS_LOG_LEVEL`` picks the level (default ``INFO``) and
``VERSIONLENS_LOG_FORMAT`` picks ``console`` or ``json`` rendering.
Badges go to stdout in the CLI, so every log record goes to stderr.
"""

from __future__ import annotations

import logging
import logging.config
import os

import structlog

# HTTP client libraries log every request at INFO
_QUIET_LOGGERS = ("httpx", "httpcore")

_PRE_CHAIN: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    structlog.processors.format_exc_info,
]


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=False)


def _stdlib_config(log_level: str, renderer: structlog.types.Processor) -> dict:
    loggers = {name: {"level": "WARNING"} for name in _QUIET_LOGGERS}
    loggers["versionlens"] = {"level": log_level}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "versionlens": {
                "()": structlog.stdlib.ProcessorFormatter,
                "foreign_pre_chain": _PRE_CHAIN,
                "processors": [
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    renderer,
                ],
            },
        },
        "handlers": {
            "stderr": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stderr",
                "formatter": "versionlens",
            },
        },
        "root": {"handlers": ["stderr"], "level": log_level},
        "loggers": loggers,
    }


def setup_logging(level: str | None = None, log_format: str | None = None) -> None:
    """Route structlog through stdlib logging; explicit arguments beat the environment."""
    log_level = (level or os.environ.get("VERSIONLENS_LOG_LEVEL", "INFO")).upper()
    log_format = (log_format or os.environ.get("VERSIONLENS_LOG_FORMAT", "console")).lower()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_PRE_CHAIN,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.config.dictConfig(_stdlib_config(log_level, _renderer(log_format)))
