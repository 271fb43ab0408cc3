"""
BFS work queue paired with the visited set for a single crawl run.
"""
from __future__ import annotations

from collections import deque
from typing import Deque, FrozenSet, NamedTuple, Optional, Set


class FrontierItem(NamedTuple):
    url: str
    depth: int


class Frontier:
    """
    FIFO queue of URLs awaiting a visit plus the set of URLs already taken.

    push() does no uniqueness check; duplicates may sit in the queue until
    they are dequeued and rejected against the visited set.

    len() describes the queue; ``url in frontier`` tests the
    visited set.
    """

    def __init__(self) -> None:
        self._queue: Deque[FrontierItem] = deque()
        self._visited: Set[str] = set()

    def push(self, url: str, depth: int) -> None:
        self._queue.append(FrontierItem(url, depth))

    def pop(self) -> Optional[FrontierItem]:
        """Remove and return the oldest item, or None when empty."""
        if not self._queue:
            return None
        return self._queue.popleft()

    def mark_visited(self, url: str) -> None:
        self._visited.add(url)

    def is_visited(self, url: str) -> bool:
        return url in self._visited

    def __contains__(self, url: object) -> bool:
        return url in self._visited

    @property
    def visited_urls(self) -> FrozenSet[str]:
        return frozenset(self._visited)

    @property
    def visited_count(self) -> int:
        return len(self._visited)

    def __len__(self) -> int:
        return len(self._queue)
