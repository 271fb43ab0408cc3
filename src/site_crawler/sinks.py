"""
Persist crawl results and read URL lists back.
"""
from __future__ import annotations

import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Union

from site_crawler.core import CrawlResult
from site_crawler.errors import ConfigError

PathLike = Union[str, Path]


class Sink(Protocol):
    def save(self, results: Sequence[CrawlResult], destination: PathLike) -> None: ...


def _write_text(destination: PathLike, text: str) -> None:
    if str(destination) == "-":
        sys.stdout.write(text)
        sys.stdout.flush()
        return
    path = Path(destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8", newline="\n")


class UrlListSink:
    """Plain text, one canonical URL per line."""

    def save(self, results: Sequence[CrawlResult], destination: PathLike) -> None:
        urls = [r.url for r in results]
        _write_text(destination, "\n".join(urls) + "\n" if urls else "")


class JsonSink:
    """JSON array of {url, depth, timestamp} objects."""

    def __init__(self, pretty: bool = False) -> None:
        self.pretty = pretty

    def save(self, results: Sequence[CrawlResult], destination: PathLike) -> None:
        payload = [asdict(r) for r in results]
        json_text = json.dumps(payload, ensure_ascii=False, indent=2 if self.pretty else None)
        _write_text(destination, json_text + "\n")


def sink_for_path(destination: PathLike, fmt: Optional[str] = None, pretty: bool = False) -> Sink:
    """Pick a sink by explicit format, else by the destination's extension."""
    if fmt is None:
        fmt = "json" if str(destination).lower().endswith(".json") else "txt"
    if fmt == "json":
        return JsonSink(pretty=pretty)
    if fmt == "txt":
        return UrlListSink()
    raise ConfigError(f"Unknown output format: {fmt}")


def load_urls(path: PathLike) -> List[str]:
    """Read a URL list, skipping blank lines and # comments."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigError(f"File not found: {path}") from e
    return [
        line.strip()
        for line in text.splitlines()
        if line.strip() and not line.strip().startswith("#")
    ]
