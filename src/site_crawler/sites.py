"""
Site and renderer configuration.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from site_crawler.errors import ConfigError
from site_crawler.urls import is_valid_url

DEFAULT_NAVIGATION_TIMEOUT_MS = 60_000
DEFAULT_TIMEOUT_MS = 30_000
DEFAULT_CRAWL_OUTPUT = "data/urls.txt"

USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


@dataclass(frozen=True, slots=True)
class BrowserConfig:
    """Renderer settings. Timeouts are in milliseconds."""
    default_timeout: int = DEFAULT_TIMEOUT_MS
    navigation_timeout: int = DEFAULT_NAVIGATION_TIMEOUT_MS
    user_agent: str = USER_AGENT

    def __post_init__(self) -> None:
        if self.default_timeout <= 0 or self.navigation_timeout <= 0:
            raise ConfigError("Timeouts must be positive milliseconds")


@dataclass(frozen=True, slots=True)
class SiteConfig:
    """
    A crawl target.

    Attributes:
        name: Registry identifier.
        base_url: Seed URL, also the domain every crawled link must share.
        max_depth: Inclusive bound on link hops from the seed.
        allowed_paths: Path prefixes to crawl; empty allows every path.
        excluded_paths: Path prefixes never crawled; overrides allowed_paths.
        crawl_delay: Pause between page visits, in milliseconds.
    """
    name: str
    base_url: str
    max_depth: int = 2
    allowed_paths: Tuple[str, ...] = ()
    excluded_paths: Tuple[str, ...] = ()
    crawl_delay: int = 0

    def __post_init__(self) -> None:
        # Lists from JSON or callers are frozen into tuples.
        object.__setattr__(self, "allowed_paths", tuple(self.allowed_paths))
        object.__setattr__(self, "excluded_paths", tuple(self.excluded_paths))

        if not self.name:
            raise ConfigError("Site name must not be empty")
        if not is_valid_url(self.base_url):
            raise ConfigError(f"Invalid base URL for site '{self.name}': {self.base_url!r}")
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int) or self.max_depth < 0:
            raise ConfigError(f"Invalid max depth for site '{self.name}': {self.max_depth!r}")
        if isinstance(self.crawl_delay, bool) or not isinstance(self.crawl_delay, (int, float)) or self.crawl_delay < 0:
            raise ConfigError(f"Invalid crawl delay for site '{self.name}': {self.crawl_delay!r}")

    def with_overrides(self, **changes: Any) -> "SiteConfig":
        """Return a copy with the given fields replaced (None values ignored)."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


SITES: Dict[str, SiteConfig] = {
    "example": SiteConfig(
        name="example",
        base_url="https://vpl-website.vercel.app/",
        max_depth=2,
        allowed_paths=("/",),
        excluded_paths=("/admin", "/login"),
        crawl_delay=1000,
    ),
}


def get_site_config(name: str, sites: Optional[Mapping[str, SiteConfig]] = None) -> SiteConfig:
    """Look up a site by name, raising ConfigError for unknown names."""
    registry = SITES if sites is None else sites
    site = registry.get(name)
    if site is None:
        available = ", ".join(sorted(registry)) or "(none)"
        raise ConfigError(f"Unknown site: {name}. Available: {available}")
    return site


def list_sites(sites: Optional[Mapping[str, SiteConfig]] = None) -> List[str]:
    return sorted(SITES if sites is None else sites)


# JSON keys accepted in site files, camelCase as well as snake_case
_FIELD_ALIASES = {
    "baseUrl": "base_url",
    "maxDepth": "max_depth",
    "allowedPaths": "allowed_paths",
    "excludedPaths": "excluded_paths",
    "crawlDelay": "crawl_delay",
}
_FIELDS = frozenset(("base_url", "max_depth", "allowed_paths", "excluded_paths", "crawl_delay"))


def _site_from_mapping(name: str, raw: Any) -> SiteConfig:
    if not isinstance(raw, dict):
        raise ConfigError(f"Site '{name}' must be a JSON object")

    kwargs: Dict[str, Any] = {}
    for key, value in raw.items():
        field_name = _FIELD_ALIASES.get(key, key)
        if field_name == "name":
            continue
        if field_name not in _FIELDS:
            raise ConfigError(f"Unknown field '{key}' for site '{name}'")
        if field_name in ("allowed_paths", "excluded_paths"):
            if not isinstance(value, list) or not all(isinstance(p, str) for p in value):
                raise ConfigError(f"'{key}' for site '{name}' must be a list of strings")
        kwargs[field_name] = value

    if "base_url" not in kwargs:
        raise ConfigError(f"Site '{name}' is missing baseUrl")
    return SiteConfig(name=name, **kwargs)


def load_sites_file(path: Path, base: Optional[Mapping[str, SiteConfig]] = None) -> Dict[str, SiteConfig]:
    """
    Load site definitions from a JSON file and merge them over a registry.

    The file holds an object mapping site names to their settings::

        {"docs": {"baseUrl": "https://docs.example.com/", "maxDepth": 1,
                  "allowedPaths": ["/guide"], "excludedPaths": [], "crawlDelay": 250}}
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read sites file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in sites file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Sites file {path} must contain a JSON object")

    merged = dict(SITES if base is None else base)
    for name, raw in data.items():
        merged[name] = _site_from_mapping(name, raw)
    return merged
