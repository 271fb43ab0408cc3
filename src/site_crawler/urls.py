"""
URL canonicalization and crawl policy checks.

Parsing is fail-open: a string that does not parse as an absolute URL is
passed through unchanged by ``normalize_url`` and makes every predicate
return False. ``parse_url`` is the one place that decides this.
"""
from __future__ import annotations

from typing import Container, Iterable, List, Optional, TYPE_CHECKING
from urllib.parse import ParseResult, urljoin, urlparse, urlunparse

if TYPE_CHECKING:
    from site_crawler.sites import SiteConfig


def parse_url(url: str) -> Optional[ParseResult]:
    """
    Parse an absolute URL.

    Returns None when the string is not an absolute URL (no scheme or no
    host) or when urllib rejects it (bad IPv6 literal, non-numeric port).
    """
    if not url:
        return None
    try:
        parsed = urlparse(url)
        # Accessing .port validates it; urlparse itself does not.
        parsed.port
    except ValueError:
        return None
    if not parsed.scheme or not parsed.netloc:
        return None
    return parsed


def normalize_url(url: str) -> str:
    """
    Canonicalize a URL for deduplication.

    - Strips trailing slashes from the path unless the path is "/"
    - Drops the fragment (#...)
    - Keeps scheme, host, port and querystring as given
    """
    parsed = parse_url(url)
    if parsed is None:
        return url

    path = parsed.path.rstrip("/") or "/"
    canonical = urlunparse(parsed._replace(path=path, fragment=""))
    # urlunparse drops an empty querystring; keep the bare "?".
    if not parsed.query and "?" in url.split("#", 1)[0]:
        canonical += "?"
    return canonical


def is_valid_url(url: str) -> bool:
    return parse_url(url) is not None


def is_same_domain(url_a: str, url_b: str) -> bool:
    """Check if both URLs have the same hostname (no subdomain folding)."""
    parsed_a = parse_url(url_a)
    parsed_b = parse_url(url_b)
    if parsed_a is None or parsed_b is None:
        return False
    return parsed_a.hostname == parsed_b.hostname


def is_allowed_path(url: str, allowed_prefixes: Iterable[str]) -> bool:
    """Check if URL path starts with one of the allowed prefixes (empty = all)."""
    parsed = parse_url(url)
    if parsed is None:
        return False
    prefixes = tuple(allowed_prefixes)
    if not prefixes:
        return True
    return parsed.path.startswith(prefixes)


def is_excluded_path(url: str, excluded_prefixes: Iterable[str]) -> bool:
    """Check if URL path starts with one of the excluded prefixes."""
    parsed = parse_url(url)
    if parsed is None:
        return False
    prefixes = tuple(excluded_prefixes)
    return bool(prefixes) and parsed.path.startswith(prefixes)


def is_crawl_eligible(link: str, site: "SiteConfig", visited: Container[str]) -> bool:
    """
    Decide whether a discovered link should be queued.

    Exclusion is checked after inclusion and always wins.
    """
    return (
        is_valid_url(link)
        and is_same_domain(link, site.base_url)
        and is_allowed_path(link, site.allowed_paths)
        and not is_excluded_path(link, site.excluded_paths)
        and normalize_url(link) not in visited
    )


def resolve_url(base_url: str, href: str) -> str:
    """Join a (possibly relative) href against a base URL."""
    try:
        return urljoin(base_url, href)
    except ValueError:
        return href


def get_domain(url: str) -> str:
    parsed = parse_url(url)
    return (parsed.hostname or "") if parsed else ""


def get_path_segments(url: str) -> List[str]:
    parsed = parse_url(url)
    if parsed is None:
        return []
    return [seg for seg in parsed.path.split("/") if seg]
