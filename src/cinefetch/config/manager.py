"""Configuration manager using OmegaConf for cinefetch."""

import dataclasses
import os
from pathlib import Path
from typing import Dict, List, Optional, Union

from loguru import logger
from omegaconf import DictConfig, OmegaConf

from cinefetch.config.schemas.root import CineFetchConfig

DEFAULT_ENV_PREFIX = "CINEFETCH"


class ConfigManager:
    """Manages configuration loading and merging with OmegaConf."""

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize ConfigManager.

        Args:
            config_dir: Directory containing ``defaults/`` and ``profiles/``. Defaults to "config".
        """
        self.config_dir = Path(config_dir) if config_dir else Path("config")
        self._cache: Dict[str, DictConfig] = {}

    def load_config(
        self,
        config_path: Optional[Union[Path, str]] = None,
        profile: Optional[str] = None,
        overrides: Optional[List[str]] = None,
        env_prefix: str = DEFAULT_ENV_PREFIX,
    ) -> CineFetchConfig:
        """
        Load configuration with layered approach.

        Resolution order:
        1. Pydantic defaults
        2. YAML config (explicit path, else config/defaults/config.yaml if present)
        3. Profile overlay
        4. Runtime overrides (dotlist)
        5. Environment variables (``CINEFETCH__FETCH__API_URL=...``)
        6. Validation with Pydantic

        Raises:
            FileNotFoundError: If an explicit config file is missing
            ValueError: If a profile is missing or validation fails
        """
        logger.debug(
            f"Loading config: path={config_path}, profile={profile}, "
            f"overrides={overrides}, env_prefix={env_prefix}"
        )

        base_config = OmegaConf.create({})

        if config_path:
            config_path = Path(config_path)
            base_config = OmegaConf.merge(base_config, self._load_yaml(config_path))
            logger.debug(f"Merged YAML config from {config_path}")
        else:
            default_cfg_path = self.config_dir / "defaults" / "config.yaml"
            if default_cfg_path.exists():
                base_config = OmegaConf.merge(base_config, self._load_yaml(default_cfg_path))
                logger.debug(f"Merged default config from {default_cfg_path}")

        if profile:
            base_config = OmegaConf.merge(base_config, self._load_profile(profile))
            logger.debug(f"Applied profile: {profile}")

        if overrides:
            base_config = OmegaConf.merge(base_config, OmegaConf.from_dotlist(overrides))
            logger.debug(f"Applied overrides: {overrides}")

        env_config = self._load_env_vars(env_prefix)
        if env_config:
            base_config = OmegaConf.merge(base_config, env_config)
            logger.debug(f"Applied environment variables with prefix {env_prefix}")

        try:
            config_dict = OmegaConf.to_container(base_config, resolve=True)
            validated_config = CineFetchConfig(**(config_dict or {}))
            logger.debug("Configuration loaded and validated successfully")
            return validated_config
        except Exception as e:
            logger.error(f"Configuration validation failed: {e}")
            raise ValueError(f"Invalid configuration: {e}") from e

    def _load_yaml(self, path: Path) -> DictConfig:
        """Load YAML configuration file with caching."""
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        path_str = str(path)
        if path_str in self._cache:
            return self._cache[path_str]

        try:
            config = OmegaConf.load(path)
        except Exception as e:
            raise ValueError(f"Failed to load YAML config from {path}: {e}") from e
        self._cache[path_str] = config
        return config

    def _load_profile(self, profile_name: str) -> DictConfig:
        """Load profile configuration."""
        profile_path = self.config_dir / "profiles" / f"{profile_name}.yaml"
        if not profile_path.exists():
            raise ValueError(
                f"Profile '{profile_name}' not found. "
                f"Available profiles: {self.get_available_profiles()}"
            )
        return self._load_yaml(profile_path)

    def _load_env_vars(self, prefix: str) -> Optional[DictConfig]:
        """
        Load environment variables with the strict double-underscore prefix.

        Example mapping:
          CINEFETCH__RESILIENCE__MAX_RETRIES=5 -> resilience.max_retries=5
        """
        strict_prefix = f"{prefix}__"
        env_vars = {
            key[len(strict_prefix):].lower().replace("__", "."): value
            for key, value in os.environ.items()
            if key.startswith(strict_prefix)
        }

        if env_vars:
            logger.debug(f"Found config override env vars: {list(env_vars.keys())}")
            return OmegaConf.from_dotlist([f"{k}={v}" for k, v in env_vars.items()])
        return None

    @staticmethod
    def to_dict(config: CineFetchConfig) -> dict:
        """Plain-dict view of a validated config."""
        return dataclasses.asdict(config)

    def save_config(self, config: CineFetchConfig, path: Path) -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        OmegaConf.save(OmegaConf.create(self.to_dict(config)), path)
        logger.info(f"Configuration saved to {path}")

    def to_yaml(self, config: CineFetchConfig) -> str:
        return OmegaConf.to_yaml(OmegaConf.create(self.to_dict(config)))

    def clear_cache(self) -> None:
        """Clear the configuration cache."""
        self._cache.clear()

    def get_available_profiles(self) -> List[str]:
        """Get list of available profile names."""
        profiles_dir = self.config_dir / "profiles"
        if not profiles_dir.exists():
            return []
        return sorted(p.stem for p in profiles_dir.glob("*.yaml"))
