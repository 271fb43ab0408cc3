"""
Core crawling logic and data structures.
"""
from __future__ import annotations

import enum
import logging
import sys
import threading
import time
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional

from site_crawler.errors import NavigationError
from site_crawler.frontier import Frontier
from site_crawler.renderer import Renderer
from site_crawler.sites import BrowserConfig, SiteConfig
from site_crawler.urls import is_crawl_eligible, normalize_url
from site_crawler.visitor import PageVisitor

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


@dataclass(slots=True)
class CrawlResult:
    """A successfully visited page."""
    url: str
    depth: int
    timestamp: str


@dataclass(slots=True)
class CrawlStats:
    """Statistics collected during crawl for summary output."""
    pages_crawled: int = 0
    pages_failed: int = 0
    duplicates_skipped: int = 0
    depth_skipped: int = 0
    links_enqueued: int = 0
    cancelled: bool = False
    error_counts: Dict[str, int] = field(default_factory=lambda: defaultdict(int))

    def record_error(self, error: Exception) -> None:
        """Record a failed page by error type."""
        self.pages_failed += 1
        self.error_counts[type(error).__name__] += 1


class CrawlState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    DRAINING = "draining"
    DONE = "done"


def utc_now_iso() -> str:
    """Return current UTC time in ISO format."""
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def print_progress(processed: int, estimated_total: int, url: str) -> None:
    """Print real-time progress to stderr."""
    percentage = round(processed / estimated_total * 100) if estimated_total else 100
    sys.stderr.write(f"\r\033[K[{processed}/{estimated_total}] ({percentage}%) {url}")
    sys.stderr.flush()


def format_elapsed(seconds: float) -> str:
    whole = int(seconds)
    minutes, secs = divmod(whole, 60)
    return f"{minutes}m {secs}s" if minutes else f"{secs}s"


class Crawler:
    """
    Breadth-first crawler for one site.

    The renderer is owned by the caller and must already be acquired. A
    Crawler runs once; construct a new one for a fresh crawl.

    Args:
        site: What to crawl.
        renderer: Acquired renderer handing out page sessions.
        browser_config: Supplies the per-navigation timeout.
        sleep: Called with seconds for the politeness delay.
        progress: Called after each visit with
            (processed, processed + queued, url). None disables reporting.
    """

    def __init__(
        self,
        site: SiteConfig,
        renderer: Renderer,
        *,
        browser_config: Optional[BrowserConfig] = None,
        sleep: Callable[[float], None] = time.sleep,
        progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.site = site
        self.browser_config = browser_config or BrowserConfig()
        self.visitor = PageVisitor(renderer, self.browser_config.navigation_timeout)
        self.frontier = Frontier()
        self.results: List[CrawlResult] = []
        self.stats = CrawlStats()
        self.state = CrawlState.IDLE
        self._sleep = sleep
        self._progress = progress
        self._cancel = threading.Event()

    @property
    def visited_urls(self) -> List[str]:
        return sorted(self.frontier.visited_urls)

    def cancel(self) -> None:
        """Stop the crawl before the next dequeue. Safe to call from another thread."""
        self._cancel.set()

    def run(self) -> List[CrawlResult]:
        """
        Crawl until the frontier drains or the crawl is cancelled.

        Returns the results collected so far. Page failures are logged and
        skipped; only renderer acquisition errors escape.
        """
        if self.state is not CrawlState.IDLE:
            raise RuntimeError("Crawler instances run only once")

        start = time.monotonic()
        logger.info("Crawling %s", self.site.name)
        logger.info("Base URL: %s", self.site.base_url)
        logger.info("Max depth: %d", self.site.max_depth)

        self.frontier.push(normalize_url(self.site.base_url), 0)
        self.state = CrawlState.RUNNING

        try:
            while not self._cancel.is_set():
                item = self.frontier.pop()
                if item is None:
                    break
                self._process(item.url, item.depth)
        except KeyboardInterrupt:
            self.stats.cancelled = True
            logger.warning("Crawl interrupted; returning %d partial results", len(self.results))

        if self._cancel.is_set():
            self.stats.cancelled = True
            logger.warning("Crawl cancelled; returning %d partial results", len(self.results))

        self.state = CrawlState.DRAINING
        results = list(self.results)
        self.state = CrawlState.DONE

        logger.info(
            "Crawl completed: %d pages found in %s",
            len(results), format_elapsed(time.monotonic() - start),
        )
        return results

    def _process(self, url: str, depth: int) -> None:
        canonical = normalize_url(url)
        if self.frontier.is_visited(canonical):
            self.stats.duplicates_skipped += 1
            return

        if depth > self.site.max_depth:
            # Marked so later copies of the URL are dropped as duplicates.
            self.frontier.mark_visited(canonical)
            self.stats.depth_skipped += 1
            logger.debug("Depth %d exceeds max depth, skipping %s", depth, canonical)
            return

        self.frontier.mark_visited(canonical)

        try:
            outcome = self.visitor.visit(canonical)
        except NavigationError as e:
            self.stats.record_error(e)
            logger.warning("Failed to crawl %s: %s", canonical, e.reason)
        else:
            self.results.append(CrawlResult(url=canonical, depth=depth, timestamp=utc_now_iso()))
            self.stats.pages_crawled += 1
            if depth < self.site.max_depth:
                self._enqueue_links(outcome.outbound_links, depth + 1)

        if self.site.crawl_delay > 0:
            self._sleep(self.site.crawl_delay / 1000)

        if self._progress is not None:
            processed = self.frontier.visited_count
            self._progress(processed, processed + len(self.frontier), canonical)

    def _enqueue_links(self, links: Iterable[str], depth: int) -> None:
        for link in links:
            if is_crawl_eligible(link, self.site, self.frontier):
                self.frontier.push(normalize_url(link), depth)
                self.stats.links_enqueued += 1


def crawl(
    site: SiteConfig,
    renderer: Renderer,
    *,
    browser_config: Optional[BrowserConfig] = None,
    sleep: Callable[[float], None] = time.sleep,
    progress: Optional[ProgressCallback] = None,
) -> List[CrawlResult]:
    """
    Crawl a site breadth-first and return the pages that loaded.

    Args:
        site: The site to crawl.
        renderer: An acquired renderer; the caller releases it.
        browser_config: Navigation timeout source (defaults apply if None).
        sleep: Politeness delay implementation, seconds.
        progress: Optional (processed, estimated_total, url) callback.

    Returns:
        CrawlResult list in visit order.
    """
    crawler = Crawler(site, renderer, browser_config=browser_config, sleep=sleep, progress=progress)
    return crawler.run()
