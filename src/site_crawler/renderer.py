"""
Page renderers used by the crawler.

A renderer is acquired once per crawl by the caller and hands out one
session per visited page. HttpRenderer loads pages over plain HTTP with
requests and reads anchors with BeautifulSoup; anything that satisfies the
Renderer protocol (for example a headless-browser wrapper) can replace it.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Protocol

import requests
from bs4 import BeautifulSoup, SoupStrainer

from site_crawler.errors import AcquisitionError, LinkExtractionError, NavigationError
from site_crawler.sites import BrowserConfig
from site_crawler.urls import resolve_url

logger = logging.getLogger(__name__)

# SoupStrainer to parse only <a> and <base> tags (faster link extraction)
LINK_STRAINER = SoupStrainer(["a", "base"], href=True)

HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")


class RenderSession(Protocol):
    """One open page."""

    def load(self, url: str, *, wait_until: str, timeout: int) -> None: ...

    def evaluate_links(self) -> List[str]: ...

    def close(self) -> None: ...


class Renderer(Protocol):
    def open(self) -> RenderSession: ...


def extract_links(html: str, page_url: str) -> List[str]:
    """Return every anchor href resolved to an absolute URL, in document order."""
    soup = BeautifulSoup(html, "lxml", parse_only=LINK_STRAINER)

    base_url = page_url
    base_tag = soup.find("base")
    if base_tag is not None and base_tag.get("href"):
        base_url = resolve_url(page_url, base_tag["href"].strip())

    return [
        resolve_url(base_url, a["href"].strip())
        for a in soup.find_all("a")
        if a.get("href", "").strip()
    ]


class HttpPage:
    """A render session backed by a single HTTP GET."""

    def __init__(self, session: requests.Session, config: BrowserConfig) -> None:
        self._session = session
        self._config = config
        self._response: Optional[requests.Response] = None
        self._url: Optional[str] = None
        self.closed = False

    @property
    def status_code(self) -> Optional[int]:
        return self._response.status_code if self._response is not None else None

    def load(self, url: str, *, wait_until: str = "networkidle", timeout: Optional[int] = None) -> None:
        """
        Fetch the page.

        ``timeout`` (milliseconds) bounds the whole read; connecting is bounded
        by the shorter default timeout. HTTP error statuses are not failures.
        ``wait_until`` has no meaning without a script engine and is ignored.
        """
        if self.closed:
            raise NavigationError(url, "page is closed")

        read_timeout = (timeout or self._config.navigation_timeout) / 1000
        connect_timeout = min(self._config.default_timeout / 1000, read_timeout)

        self._url = url
        self._response = None
        try:
            resp = self._session.get(url, timeout=(connect_timeout, read_timeout), allow_redirects=True)
        except requests.Timeout as e:
            raise NavigationError(url, f"timed out after {read_timeout:g}s") from e
        except requests.RequestException as e:
            raise NavigationError(url, str(e) or type(e).__name__) from e

        self._response = resp
        if resp.status_code >= 400:
            logger.debug("HTTP %s for %s", resp.status_code, url)

    def evaluate_links(self) -> List[str]:
        if self._response is None:
            raise LinkExtractionError(self._url or "<unloaded>", "no page loaded")

        content_type = (self._response.headers.get("content-type") or "").lower()
        if not any(ct in content_type for ct in HTML_CONTENT_TYPES):
            return []

        final_url = str(self._response.url or self._url)
        try:
            return extract_links(self._response.text, final_url)
        except (ValueError, TypeError) as e:
            raise LinkExtractionError(final_url, f"cannot parse document: {e}") from e

    def close(self) -> None:
        self.closed = True
        self._response = None


class HttpRenderer:
    """
    Renderer backed by a shared requests.Session.

    Use as a context manager, or call acquire()/release() explicitly:

        with HttpRenderer(BrowserConfig()) as renderer:
            results = crawl(site, renderer)
    """

    def __init__(self, config: Optional[BrowserConfig] = None, session: Optional[requests.Session] = None) -> None:
        self.config = config or BrowserConfig()
        self._provided_session = session
        self._session: Optional[requests.Session] = None

    @property
    def acquired(self) -> bool:
        return self._session is not None

    def acquire(self) -> "HttpRenderer":
        if self._session is not None:
            return self
        try:
            session = self._provided_session or requests.Session()
            session.headers["User-Agent"] = self.config.user_agent
        except (OSError, requests.RequestException) as e:
            raise AcquisitionError(f"Cannot start HTTP session: {e}") from e
        self._session = session
        logger.debug("HTTP renderer acquired (User-Agent: %s)", self.config.user_agent)
        return self

    def release(self) -> None:
        if self._session is None:
            return
        session, self._session = self._session, None
        session.close()
        logger.debug("HTTP renderer released")

    def open(self) -> HttpPage:
        if self._session is None:
            raise AcquisitionError("Renderer is not acquired; use it as a context manager")
        return HttpPage(self._session, self.config)

    def __enter__(self) -> "HttpRenderer":
        return self.acquire()

    def __exit__(self, *exc_info: object) -> None:
        self.release()
