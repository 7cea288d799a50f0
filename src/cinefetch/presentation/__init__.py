"""Renderers and error presenters for fetched movies."""

from .base import Renderer, ErrorPresenter, RetryTrigger
from .sanitize import escape_text, sanitize_url, PLACEHOLDER_IMAGE
from .cards import Movie, MovieCard, build_card
from .html_renderer import HtmlRenderer, HtmlErrorPresenter
from .console import ConsoleRenderer, ConsoleErrorPresenter

__all__ = [
    "Renderer",
    "ErrorPresenter",
    "RetryTrigger",
    "escape_text",
    "sanitize_url",
    "PLACEHOLDER_IMAGE",
    "Movie",
    "MovieCard",
    "build_card",
    "HtmlRenderer",
    "HtmlErrorPresenter",
    "ConsoleRenderer",
    "ConsoleErrorPresenter",
]
