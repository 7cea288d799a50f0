"""HTTP access to the movies API."""

from .http_client import MoviesAPIClient, DEFAULT_API_URL

__all__ = ["MoviesAPIClient", "DEFAULT_API_URL"]
