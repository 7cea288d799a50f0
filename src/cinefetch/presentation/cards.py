"""Card view model built from one raw movie record."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from cinefetch.presentation.sanitize import PLACEHOLDER_IMAGE, sanitize_url


class Movie(BaseModel):
    """Lenient view of a movie record.

    Every field is optional and coerced to text; unknown fields are ignored.
    Construction never fails for a mapping, whatever its contents.
    """

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    year: Optional[str] = None
    image_url: Optional[str] = None
    genre: Optional[str] = None
    stars: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def coerce_to_text(cls, v: Any) -> Optional[str]:
        if v is None or isinstance(v, (dict, list)):
            return None
        return str(v)

    @classmethod
    def from_raw(cls, record: Any) -> "Movie":
        """Build from anything; non-mappings yield an empty movie."""
        if not isinstance(record, dict):
            return cls()
        return cls.model_validate(record)


class MovieCard(BaseModel):
    """Everything a renderer needs to draw one card. Text is NOT escaped."""

    title: str
    description: str
    image_src: str
    image_data_src: str
    image_alt: str
    footer: str
    loading: str = "lazy"


def build_card(record: Any) -> MovieCard:
    """Turn one untrusted record into a card.

    The poster starts as the placeholder image; the sanitized URL is kept in
    ``image_data_src`` for lazy loading.
    """
    movie = Movie.from_raw(record)
    title = movie.title or ""
    return MovieCard(
        title=title,
        description=movie.description or "",
        image_src=PLACEHOLDER_IMAGE,
        image_data_src=sanitize_url(movie.image_url),
        image_alt=f"poster of {title}",
        footer=f"🍿 {movie.genre or ''} · 📅 {movie.year or ''} · ⭐ {movie.stars or ''}/5",
    )
