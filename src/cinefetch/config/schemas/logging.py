"""Logging configuration schema for cinefetch."""

from pathlib import Path
from typing import Optional, Literal
from pydantic.dataclasses import dataclass
from pydantic import field_validator


@dataclass
class LoggingConfig:
    """Configuration for loguru-based logging.

    The CLI is short-lived, so the defaults favour a quiet synchronous console
    sink; file logging is opt-in through ``log_dir``.
    """

    level: str = "WARNING"
    log_dir: Optional[str] = None  # None = console only

    console_format: Literal["default", "minimal", "detailed"] = "minimal"
    file_format: Literal["default", "json"] = "default"
    colorize: bool = True

    rotation: str = "10 MB"
    retention: str = "7 days"

    # Route httpx/httpcore stdlib logging through loguru
    intercept_standard_logging: bool = True
    enqueue: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of {valid_levels}"
            )
        return v_upper

    def get_log_path(self) -> Optional[Path]:
        """Get resolved log directory path."""
        if self.log_dir:
            return Path(self.log_dir).expanduser().resolve()
        return None
