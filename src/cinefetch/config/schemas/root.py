"""Root configuration schema for cinefetch."""

from typing import Optional

from pydantic.dataclasses import dataclass
from pydantic import field_validator

from cinefetch.config.schemas.fetch import FetchConfig
from cinefetch.config.schemas.logging import LoggingConfig
from cinefetch.config.schemas.resilience import ResilienceConfig
from cinefetch.config.schemas.storage import StorageConfig


@dataclass
class CineFetchConfig:
    """Complete cinefetch configuration."""

    # Project metadata
    project: str = "cinefetch"
    version: str = "0.1.0"
    environment: str = "development"

    fetch: Optional[FetchConfig] = None
    resilience: Optional[ResilienceConfig] = None
    storage: Optional[StorageConfig] = None
    logging: Optional[LoggingConfig] = None

    def __post_init__(self):
        """Initialize nested configs with defaults if not provided."""
        if self.fetch is None:
            self.fetch = FetchConfig()
        if self.resilience is None:
            self.resilience = ResilienceConfig()
        if self.storage is None:
            self.storage = StorageConfig()
        if self.logging is None:
            self.logging = LoggingConfig()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is one of the allowed values."""
        allowed_environments = {"development", "testing", "production"}
        if v not in allowed_environments:
            raise ValueError(f"Environment must be one of {allowed_environments}, got: {v}")
        return v
