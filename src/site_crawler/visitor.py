"""
Load one page through the renderer and collect its outbound links.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from site_crawler.errors import AcquisitionError
from site_crawler.renderer import Renderer, RenderSession
from site_crawler.sites import DEFAULT_NAVIGATION_TIMEOUT_MS

WAIT_UNTIL = "networkidle"


@dataclass(frozen=True, slots=True)
class VisitOutcome:
    url: str
    outbound_links: Tuple[str, ...]


class PageVisitor:
    """
    Drives the renderer for a single URL.

    Links are returned raw; filtering belongs to the caller. The page
    session is closed on every exit path. NavigationError from the renderer
    propagates unchanged; failing to open a session is an AcquisitionError.
    """

    def __init__(self, renderer: Renderer, navigation_timeout: int = DEFAULT_NAVIGATION_TIMEOUT_MS) -> None:
        self.renderer = renderer
        self.navigation_timeout = navigation_timeout

    def _open(self) -> RenderSession:
        try:
            return self.renderer.open()
        except AcquisitionError:
            raise
        except Exception as e:
            raise AcquisitionError(f"Cannot open page: {e}") from e

    def visit(self, url: str) -> VisitOutcome:
        page = self._open()
        try:
            page.load(url, wait_until=WAIT_UNTIL, timeout=self.navigation_timeout)
            links = page.evaluate_links()
        finally:
            page.close()
        return VisitOutcome(url=url, outbound_links=tuple(links))
