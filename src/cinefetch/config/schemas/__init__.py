"""Configuration schemas for cinefetch."""

from .fetch import FetchConfig
from .logging import LoggingConfig
from .resilience import ResilienceConfig
from .root import CineFetchConfig
from .storage import StorageConfig

__all__ = [
    "CineFetchConfig",
    "FetchConfig",
    "LoggingConfig",
    "ResilienceConfig",
    "StorageConfig",
]
