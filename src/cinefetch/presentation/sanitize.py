"""Escaping and URL validation for untrusted movie fields."""

import html
from typing import Any
from urllib.parse import urlsplit

# 300x450 grey "loading" SVG used until the real poster is lazily loaded
PLACEHOLDER_IMAGE = (
    "data:image/svg+xml;base64,PHN2ZyB3aWR0aD0iMzAwIiBoZWlnaHQ9IjQ1MCIgeG1sbnM9Imh0dHA6Ly93d3cudz"
    "Mub3JnLzIwMDAvc3ZnIj48cmVjdCB3aWR0aD0iMzAwIiBoZWlnaHQ9IjQ1MCIgZmlsbD0iI2U5ZWNlZiIvPjx0ZXh0IHg9"
    "IjUwJSIgeT0iNTAlIiBmb250LXNpemU9IjIwIiB0ZXh0LWFuY2hvcj0ibWlkZGxlIiBmaWxsPSIjYWFhIj5sb2FkaW5nPC"
    "90ZXh0Pjwvc3ZnPg=="
)

BLOCKED_URL = "#"


def escape_text(value: Any) -> str:
    """HTML-escape any value. None becomes an empty string."""
    if value is None:
        return ""
    return html.escape(str(value), quote=True)


def sanitize_url(value: Any) -> str:
    """Return value if it is an absolute https URL, otherwise '#'."""
    if not isinstance(value, str):
        return BLOCKED_URL
    candidate = value.strip()
    try:
        parts = urlsplit(candidate)
    except ValueError:
        return BLOCKED_URL
    if parts.scheme.lower() != "https" or not parts.netloc:
        return BLOCKED_URL
    return parts.geturl()
