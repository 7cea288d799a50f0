"""Centralized loguru configuration for cinefetch.

Provides:
- Console sink and optional rotating file sink
- Standard logging interception (httpx, httpcore)
- A fetch_id context variable bound into every record

Example:
    >>> from cinefetch.logging_config import configure_logging, fetch_context_manager
    >>> configure_logging(level="DEBUG")
    >>> with fetch_context_manager("fetch_1"):
    ...     logger.info("This log includes fetch_1")
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

from loguru import logger

if TYPE_CHECKING:
    from cinefetch.config.schemas.logging import LoggingConfig

fetch_context: ContextVar[Optional[str]] = ContextVar("fetch_id", default=None)

CONSOLE_FORMATS = {
    "minimal": "<level>{level: <8}</level> | <level>{message}</level>",
    "default": (
        "<green>{time:HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
        "<level>{message}</level>"
    ),
    "detailed": (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        "{extra[fetch_id]:<12} | "
        "<level>{message}</level>"
    ),
}

FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
    "{level: <8} | "
    "{name}:{function}:{line} | "
    "{extra[fetch_id]} | "
    "{message}"
)

INTERCEPTED_LOGGERS = ("httpx", "httpcore")


class InterceptHandler(logging.Handler):
    """Redirect standard logging records to loguru."""

    def emit(self, record):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = sys._getframe(6), 6
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def _context_filter(record) -> bool:
    record["extra"].setdefault("fetch_id", fetch_context.get() or "none")
    return True


def configure_logging(
    level: str = "WARNING",
    log_dir: Optional[Union[str, Path]] = None,
    console_format: str = "minimal",
    file_format: str = "default",
    rotation: str = "10 MB",
    retention: str = "7 days",
    intercept_standard_logging: bool = True,
    colorize: bool = True,
    enqueue: bool = False,
) -> None:
    """Configure loguru for cinefetch.

    Args:
        level: Minimum log level
        log_dir: Directory for log files (None = no file logging)
        console_format: "minimal", "default" or "detailed"
        file_format: "default" text lines or "json" records
        rotation: When to rotate log files
        retention: How long to keep rotated files
        intercept_standard_logging: Route stdlib logging through loguru
        colorize: Colored console output
        enqueue: Log through a background queue
    """
    valid_levels = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
    level = level.upper()
    if level not in valid_levels:
        raise ValueError(f"Invalid log level: {level}. Must be one of {valid_levels}")

    logger.remove()

    logger.add(
        sys.stderr,
        level=level,
        format=CONSOLE_FORMATS.get(console_format, CONSOLE_FORMATS["minimal"]),
        colorize=colorize,
        filter=_context_filter,
        enqueue=enqueue,
    )

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / "cinefetch_{time:YYYY-MM-DD}.log"

        if file_format == "json":
            logger.add(
                log_file,
                level=level,
                rotation=rotation,
                retention=retention,
                serialize=True,
                filter=_context_filter,
                enqueue=enqueue,
            )
        else:
            logger.add(
                log_file,
                level=level,
                format=FILE_FORMAT,
                rotation=rotation,
                retention=retention,
                filter=_context_filter,
                enqueue=enqueue,
            )

    if intercept_standard_logging:
        handler = InterceptHandler()
        logging.root.handlers = [handler]
        logging.root.setLevel(level)
        for name in INTERCEPTED_LOGGERS:
            lib_logger = logging.getLogger(name)
            lib_logger.handlers = [handler]
            lib_logger.propagate = False


def configure_from_config(config: "LoggingConfig") -> None:
    """Initialize logging from a LoggingConfig object."""
    configure_logging(
        level=config.level,
        log_dir=config.get_log_path(),
        console_format=config.console_format,
        file_format=config.file_format,
        rotation=config.rotation,
        retention=config.retention,
        intercept_standard_logging=config.intercept_standard_logging,
        colorize=config.colorize,
        enqueue=config.enqueue,
    )


@contextmanager
def fetch_context_manager(fetch_id: str):
    """Bind fetch_id to every log record emitted inside the block."""
    token = fetch_context.set(fetch_id)
    try:
        yield
    finally:
        fetch_context.reset(token)


__all__ = [
    "configure_logging",
    "configure_from_config",
    "fetch_context_manager",
    "fetch_context",
    "InterceptHandler",
]
