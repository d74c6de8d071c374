"""Logging configuration for video-link-preview."""

import logging
import logging.config
import uuid
from pathlib import Path
from typing import Any

import structlog

DEFAULT_LOG_FILE = Path.home() / ".vlp" / "logs" / "enrich.log"


def setup_logging(verbose: bool = False, log_file: Path | None = None) -> None:
    """Configure structured logging.

    Diagnostics (failed lookups, skipped links) go to a rotating JSON log
    file; the console is only used when verbose is set or the file is
    unavailable.

    Args:
        verbose: If True, set log level to DEBUG and also log to the console.
        log_file: JSON log file (default: ~/.vlp/logs/enrich.log)
    """
    log_file = log_file or DEFAULT_LOG_FILE
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_logging = True
    except OSError:
        # Unwritable log directory: keep console logging only
        file_logging = False

    log_level = logging.DEBUG if verbose else logging.INFO

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    handlers: dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "plain",
            "stream": "ext://sys.stderr",
        },
    }
    if file_logging:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "json",
            "filename": str(log_file),
            "maxBytes": 5 * 1024 * 1024,  # 5 MB
            "backupCount": 3,
            "encoding": "utf-8",
        }
    # Keep normal runs quiet: structured events go to the file unless verbose
    if verbose or not file_logging:
        handler_names = list(handlers)
    else:
        handler_names = ["file"]

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "plain": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "processors": processors
                    + [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        structlog.dev.ConsoleRenderer(colors=True),
                    ],
                },
                "json": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "processors": processors
                    + [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        structlog.processors.JSONRenderer(),
                    ],
                },
            },
            "handlers": handlers,
            "loggers": {
                "": {
                    "handlers": handler_names,
                    "level": logging.WARNING,
                },
                "video_link_preview": {
                    "handlers": handler_names,
                    "level": log_level,
                    "propagate": False,
                },
                "httpx": {
                    "level": logging.DEBUG if verbose else logging.WARNING,
                },
            },
        }
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # One trace ID per run ties all lookups of a render pass together
    structlog.contextvars.bind_contextvars(trace_id=str(uuid.uuid4()))
