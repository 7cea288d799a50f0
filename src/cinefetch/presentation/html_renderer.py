"""HTML rendering of the movie grid and the error panel."""

from __future__ import annotations

from typing import Any, List, Optional, Sequence

from loguru import logger

from cinefetch.presentation.base import RetryTrigger
from cinefetch.presentation.cards import build_card
from cinefetch.presentation.sanitize import escape_text


class HtmlRenderer:
    """Builds the card grid markup. Images load lazily via data-src."""

    def __init__(self) -> None:
        self.html: str = ""
        self.render_count = 0

    def render(self, movies: Sequence[Any]) -> None:
        parts: List[str] = []
        for record in movies:
            card = build_card(record)
            parts.append(
                '<article class="col-md-4">'
                '<article class="card h-100 shadow movie-card">'
                f'<img class="card-img-top" src="{escape_text(card.image_src)}" '
                f'data-src="{escape_text(card.image_data_src)}" '
                f'alt="{escape_text(card.image_alt)}" loading="{card.loading}">'
                '<section class="card-body">'
                f'<h5 class="card-title">{escape_text(card.title)}</h5>'
                f'<p class="card-text">{escape_text(card.description)}</p>'
                "</section>"
                f'<footer class="card-footer text-muted small">{escape_text(card.footer)}</footer>'
                "</article></article>"
            )
        self.html = "\n".join(parts)
        self.render_count += 1
        logger.debug(f"Rendered {len(parts)} movie cards as HTML")


class HtmlErrorPresenter:
    """Builds the alert markup and keeps the retry trigger for the button."""

    def __init__(self) -> None:
        self.html: str = ""
        self.message: Optional[str] = None
        self.retry: Optional[RetryTrigger] = None

    def show_error(self, message: str, retry: RetryTrigger) -> None:
        self.message = message
        self.retry = retry
        self.html = (
            '<section class="col-12 text-center py-5">'
            f'<div class="alert alert-danger">{escape_text(message)}</div>'
            '<button class="btn btn-primary mt-3">try again</button>'
            "</section>"
        )

    async def click_retry(self) -> Any:
        """Fire the retry trigger, as the button would."""
        if self.retry is None:
            raise RuntimeError("No error has been presented")
        return await self.retry()
