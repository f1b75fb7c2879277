"""Exceptions raised while fetching and scraping podcast pages."""
from typing import Optional


class ScraperError(Exception):
    """Base class for all scraping failures."""


class FetchError(ScraperError):
    """Raised when a page cannot be downloaded or answers with a bad status."""

    def __init__(self, url: str, status_code: Optional[int] = None, reason: str = ""):
        self.url = url
        self.status_code = status_code
        message = f"Failed to fetch {url}"
        if status_code is not None:
            message += f" (HTTP {status_code})"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ParseError(ScraperError):
    """Raised when a document cannot be read as HTML."""


class NotFoundError(ScraperError):
    """Raised when an expected element is missing from a page."""
