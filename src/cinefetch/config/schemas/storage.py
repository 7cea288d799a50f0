"""Storage configuration schema."""

from typing import Literal

from pydantic.dataclasses import dataclass
from pydantic import Field


@dataclass
class StorageConfig:
    """Where the cached snapshot lives.

    ``memory`` keeps it for the life of the process; ``file`` persists it as
    JSON under ``path`` so later runs can serve it stale.
    """

    backend: Literal["memory", "file"] = "memory"
    path: str = Field(default="~/.cache/cinefetch", description="Directory for the file backend")
