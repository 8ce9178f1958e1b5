"""Logging configuration built around structlog JSON logging."""

from __future__ import annotations

import logging
import logging.config
import os
from pathlib import Path

import structlog

_LOGGING_INITIALISED = False


def _default_log_dir() -> Path:
    home = os.environ.get("FEUD_CRAWLER_HOME")
    root = Path(home).expanduser() if home else Path.cwd()
    return root.resolve() / "logs"


def configure_logging(verbose: bool = False, log_dir: Path | None = None) -> structlog.BoundLogger:
    """Configure structlog + stdlib handlers and return application logger."""

    global _LOGGING_INITIALISED

    if not _LOGGING_INITIALISED:
        log_dir = log_dir or _default_log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)
        error_log = log_dir / "error.log"
        crawler_log = log_dir / "crawler.log"
        level = "DEBUG" if verbose else "INFO"
        logging.config.dictConfig(
            {
                "version": 1,
                "disable_existing_loggers": False,
                "formatters": {
                    "plain": {
                        "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                        "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s",
                    }
                },
                "handlers": {
                    "console": {
                        "class": "logging.StreamHandler",
                        "level": level,
                        "formatter": "plain",
                    },
                    "crawler_file": {
                        "class": "logging.FileHandler",
                        "level": "INFO",
                        "filename": str(crawler_log),
                        "encoding": "utf-8",
                        "formatter": "plain",
                    },
                    "error_file": {
                        "class": "logging.FileHandler",
                        "level": "ERROR",
                        "filename": str(error_log),
                        "encoding": "utf-8",
                        "formatter": "plain",
                    },
                },
                "loggers": {
                    "feud_crawler": {
                        "handlers": ["console", "crawler_file", "error_file"],
                        "level": level,
                        "propagate": False,
                    },
                },
            }
        )

        # Forward structlog events to stdlib; JSON rendering happens at handler level
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.stdlib.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        _LOGGING_INITIALISED = True
    return structlog.get_logger("feud_crawler")


__all__ = ["configure_logging"]
