"""Configuration system for cinefetch using OmegaConf and Pydantic."""

from pathlib import Path
from typing import List, Optional

from .schemas import (
    CineFetchConfig,
    FetchConfig,
    LoggingConfig,
    ResilienceConfig,
    StorageConfig,
)
from .manager import ConfigManager


def load_config(
    config_path: Optional[str] = None,
    profile: Optional[str] = None,
    overrides: Optional[List[str]] = None,
    env_prefix: str = "CINEFETCH",
) -> CineFetchConfig:
    """
    Convenience function to load configuration.

    Examples:
        config = load_config()
        config = load_config(profile="slow_network")
        config = load_config(overrides=["fetch.cache_ttl=60"])
    """
    manager = ConfigManager()
    return manager.load_config(
        Path(config_path) if config_path else None,
        profile,
        overrides,
        env_prefix,
    )


__all__ = [
    "CineFetchConfig",
    "FetchConfig",
    "LoggingConfig",
    "ResilienceConfig",
    "StorageConfig",
    "ConfigManager",
    "load_config",
]
