"""Outcome of a get_movies() call."""

from typing import Any, List, Optional

from pydantic import BaseModel, Field

from cinefetch.types.error_types import FetchErrorKind
from cinefetch.types.resilience_types import FetchSource


class FetchResult(BaseModel):
    """What was delivered to the collaborators by a single fetch."""

    source: FetchSource
    movies: Optional[List[Any]] = None
    error_kind: Optional[FetchErrorKind] = None
    message: Optional[str] = None
    stale: bool = False
    refresh_scheduled: bool = Field(default=False, description="Background refresh started")

    @property
    def ok(self) -> bool:
        """True when movies were delivered."""
        return self.source != FetchSource.ERROR
