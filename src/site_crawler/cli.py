"""
Command-line interface for the crawler.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from site_crawler.core import Crawler, CrawlStats, print_progress
from site_crawler.errors import CrawlerError
from site_crawler.renderer import HttpRenderer
from site_crawler.sinks import sink_for_path
from site_crawler.sites import (
    DEFAULT_CRAWL_OUTPUT,
    BrowserConfig,
    get_site_config,
    list_sites,
    load_sites_file,
)

logger = logging.getLogger("site_crawler")

EXIT_INTERRUPTED = 130


def print_summary(stats: CrawlStats) -> None:
    """Print crawl summary to stderr."""
    sys.stderr.write("=" * 50 + "\n")
    sys.stderr.write("CRAWL SUMMARY\n")
    sys.stderr.write("=" * 50 + "\n\n")

    sys.stderr.write(f"Pages crawled:          {stats.pages_crawled}\n")
    sys.stderr.write(f"Pages failed:           {stats.pages_failed}\n")
    sys.stderr.write(f"Links enqueued:         {stats.links_enqueued}\n")
    sys.stderr.write(f"Duplicates skipped:     {stats.duplicates_skipped}\n")
    sys.stderr.write(f"Beyond max depth:       {stats.depth_skipped}\n\n")

    if stats.error_counts:
        sys.stderr.write("Errors by type:\n")
        for error_type, count in sorted(stats.error_counts.items()):
            sys.stderr.write(f"  {error_type}: {count}\n")
    else:
        sys.stderr.write("No errors encountered.\n")

    if stats.cancelled:
        sys.stderr.write("\nCrawl was cancelled; results are partial.\n")

    sys.stderr.write("\n")


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="site-crawler",
        description="Crawl a configured site breadth-first and save the discovered URLs.",
    )
    parser.add_argument("site", nargs="?", help="Site name from the registry (see --list-sites)")
    parser.add_argument("--max-depth", type=int, help="Override the site's maximum link depth")
    parser.add_argument(
        "--output",
        default=DEFAULT_CRAWL_OUTPUT,
        help=f"Output file path, or '-' for stdout (default: {DEFAULT_CRAWL_OUTPUT})",
    )
    parser.add_argument(
        "--format",
        choices=("txt", "json"),
        help="Output format (default: json for *.json outputs, else one URL per line)",
    )
    parser.add_argument("--sites-file", type=Path, help="JSON file with additional site definitions")
    parser.add_argument("--timeout", type=float, help="Page navigation timeout in seconds (default: 60)")
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON")
    parser.add_argument("--list-sites", action="store_true", help="List available sites and exit")
    parser.add_argument("--verbose", action="store_true", help="Show progress and summary")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the crawler CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        sites = load_sites_file(args.sites_file) if args.sites_file else None

        if args.list_sites:
            for name in list_sites(sites):
                print(name)
            return 0
        if not args.site:
            parser.error("the following arguments are required: site")

        site = get_site_config(args.site, sites).with_overrides(max_depth=args.max_depth)
        browser_config = BrowserConfig(
            navigation_timeout=int(args.timeout * 1000),
        ) if args.timeout is not None else BrowserConfig()
        sink = sink_for_path(args.output, args.format, pretty=args.pretty)

        with HttpRenderer(browser_config) as renderer:
            crawler = Crawler(
                site,
                renderer,
                browser_config=browser_config,
                progress=print_progress if args.verbose else None,
            )
            results = crawler.run()

        if args.verbose:
            sys.stderr.write("\n\n")
            print_summary(crawler.stats)

        sink.save(results, args.output)
        if args.output != "-":
            logger.info("URLs saved to: %s", args.output)
    except CrawlerError as e:
        logger.error("Crawl failed: %s", e)
        return 1

    return EXIT_INTERRUPTED if crawler.stats.cancelled else 0


if __name__ == "__main__":
    raise SystemExit(main())
