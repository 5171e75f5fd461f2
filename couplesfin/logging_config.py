"""
structlog setup for couplesfin.

Library modules only ever call structlog.get_logger(__name__); the HTTP app
(or whatever program embeds the package) calls configure_logging() once.

Output:
- stdout, always
- logs/couplesfin.log when file logging is on, rotated every Monday (UTC)
  and gzipped, 12 weeks kept
- JSON lines unless stdout is an interactive terminal

Decimal values in the event are written as plain strings ("19.00"), so
amounts and rates read the same in the log as in the API.
"""
import gzip
import logging
import logging.handlers
import shutil
import sys
from decimal import Decimal
from pathlib import Path
from typing import Any, List

import structlog
from structlog.types import EventDict, Processor

from couplesfin.config import PROJECT_ROOT

LOG_FILE_NAME = "couplesfin.log"
LOG_BACKUP_WEEKS = 12


# ============================================================================
# PROCESSORS
# ============================================================================

def _level_name(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict["level"] = "WARNING" if method_name == "warn" else method_name.upper()
    return event_dict


def _amounts_as_text(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Render Decimal values as '19.00' instead of Decimal('19.00')."""
    for key, value in event_dict.items():
        if isinstance(value, Decimal):
            event_dict[key] = str(value)
    return event_dict


def _processor_chain(json_output: bool) -> List[Processor]:
    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        _level_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _amounts_as_text,
        renderer,
        ]


# ============================================================================
# HANDLERS
# ============================================================================

def _gzip_on_rotate(source: str, dest: str) -> None:
    with open(source, 'rb') as plain, gzip.open(dest, 'wb') as packed:
        shutil.copyfileobj(plain, packed)
    Path(source).unlink()


def _weekly_file_handler(level: int) -> logging.Handler:
    log_dir = PROJECT_ROOT / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.TimedRotatingFileHandler(
        filename=str(log_dir / LOG_FILE_NAME),
        when="W0",
        backupCount=LOG_BACKUP_WEEKS,
        encoding="utf-8",
        utc=True
        )
    handler.namer = lambda name: f"{name}.gz"
    handler.rotator = _gzip_on_rotate
    return handler


def _handlers(level: int, enable_file_logging: bool) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if enable_file_logging:
        handlers.append(_weekly_file_handler(level))
    for handler in handlers:
        handler.setLevel(level)
    return handlers


# ============================================================================
# ENTRY POINTS
# ============================================================================

def configure_logging(log_level: str = "INFO", enable_file_logging: bool = False, json_output: bool | None = None) -> None:
    """
    Route stdlib logging and structlog to stdout (and optionally a file).

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL; unknown names fall back to INFO
        enable_file_logging: Also write logs/couplesfin.log
        json_output: True for JSON lines, False for the colored console renderer,
            None to decide from whether stdout is a TTY
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(
        format="%(message)s",
        handlers=_handlers(level, enable_file_logging),
        level=level,
        force=True
        )

    if json_output is None:
        json_output = not sys.stdout.isatty()

    structlog.configure(
        processors=_processor_chain(json_output),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
        )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Structured logger for a module: get_logger(__name__)."""
    return structlog.get_logger(name)
