"""
Same-domain web crawler that performs BFS traversal from a site's seed URL.
Depth, path allow/deny prefixes and a politeness delay bound the crawl.
"""
from site_crawler.core import crawl, Crawler, CrawlResult, CrawlStats
from site_crawler.errors import (
    AcquisitionError,
    ConfigError,
    CrawlerError,
    LinkExtractionError,
    NavigationError,
)
from site_crawler.renderer import HttpRenderer
from site_crawler.sites import BrowserConfig, SiteConfig, get_site_config

__version__ = "1.0.0"
__all__ = [
    "crawl",
    "Crawler",
    "CrawlResult",
    "CrawlStats",
    "AcquisitionError",
    "ConfigError",
    "CrawlerError",
    "LinkExtractionError",
    "NavigationError",
    "HttpRenderer",
    "BrowserConfig",
    "SiteConfig",
    "get_site_config",
]
