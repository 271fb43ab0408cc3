"""
Exception types raised by the crawler.
"""
from __future__ import annotations


class CrawlerError(Exception):
    """Base class for all crawler errors."""


class ConfigError(CrawlerError, ValueError):
    """Invalid or unknown site configuration. Raised before a crawl starts."""


class AcquisitionError(CrawlerError):
    """The renderer could not be started or could not open a page session."""


class NavigationError(CrawlerError):
    """A single page failed to load (timeout, network error, render failure)."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class LinkExtractionError(NavigationError):
    """Outbound links could not be read from a loaded page."""
