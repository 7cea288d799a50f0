"""Fetch configuration schema."""

from pydantic.dataclasses import dataclass
from pydantic import Field, field_validator


@dataclass
class FetchConfig:
    """Where to fetch movies from and how long a snapshot stays fresh."""

    api_url: str = "https://devsapihub.com/api-movies"
    request_timeout: float = Field(default=8.0, gt=0.0, description="Per-attempt deadline in seconds")
    cache_ttl: float = Field(default=300.0, ge=0.0, description="Seconds before a snapshot is stale")
    cache_key: str = "movies-cache"

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Validate api_url is an absolute http(s) URL."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"api_url must be an http(s) URL, got: {v}")
        return v

    @field_validator("cache_key")
    @classmethod
    def validate_cache_key(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("cache_key must not be empty")
        return v
