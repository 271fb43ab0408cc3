from __future__ import annotations

from typing import Dict, List, Optional, Set

import pytest

from site_crawler.errors import NavigationError


class FakePage:
    """Render session serving links from an in-memory page graph."""

    def __init__(self, renderer: "FakeRenderer") -> None:
        self.renderer = renderer
        self.url: Optional[str] = None
        self.closed = False

    def load(self, url: str, *, wait_until: str, timeout: int) -> None:
        self.renderer.loads.append(url)
        self.renderer.load_kwargs.append({"wait_until": wait_until, "timeout": timeout})
        if url in self.renderer.failing:
            raise NavigationError(url, "simulated timeout")
        if url not in self.renderer.graph:
            raise NavigationError(url, "net::ERR_NAME_NOT_RESOLVED")
        self.url = url

    def evaluate_links(self) -> List[str]:
        return list(self.renderer.graph[self.url])

    def close(self) -> None:
        self.closed = True
        self.renderer.closed += 1


class FakeRenderer:
    def __init__(self, graph: Dict[str, List[str]], failing: Optional[Set[str]] = None) -> None:
        self.graph = graph
        self.failing = failing or set()
        self.loads: List[str] = []
        self.load_kwargs: List[dict] = []
        self.opened = 0
        self.closed = 0

    def open(self) -> FakePage:
        self.opened += 1
        return FakePage(self)


@pytest.fixture
def make_renderer():
    return FakeRenderer
