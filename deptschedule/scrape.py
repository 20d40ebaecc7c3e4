"""
Fetch a department catalog page over HTTP.

The page is expected to contain the tables understood by
deptschedule.parse.parse_catalog_html. Fetched HTML can be cached on disk
so repeated imports do not hit the department server again.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

import requests


DEFAULT_TIMEOUT = 30


def fetch_catalog_html(url: str, timeout: float = DEFAULT_TIMEOUT) -> str:
    """
    Download the catalog page. Raises requests.HTTPError on non-2xx responses.
    """
    resp = requests.get(url, timeout=timeout)
    resp.raise_for_status()
    return resp.text


def fetch_cached(url: str, cache_file: Optional[Path] = None, refresh: bool = False) -> str:
    """
    Like fetch_catalog_html, but reuse `cache_file` when present (unless `refresh`).
    """
    if cache_file is not None and cache_file.exists() and not refresh:
        print(f"SKIP  {url} (cached: {cache_file})")
        return cache_file.read_text(encoding="utf-8")

    print(f"FETCH {url}")
    html = fetch_catalog_html(url)

    if cache_file is not None:
        cache_file.parent.mkdir(parents=True, exist_ok=True)
        cache_file.write_text(html, encoding="utf-8")

    return html


# ---------------------------------------------------------------------------
# CLI entry
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="deptschedule.scrape", description="Download a department catalog page (cache HTML)")
    p.add_argument("url", type=str, help="Catalog page URL")
    p.add_argument("--cache", type=Path, required=True, help="Where to store the fetched HTML")
    p.add_argument("--refresh", action="store_true", help="Re-fetch and overwrite the cached file")
    return p


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    fetch_cached(args.url.strip(), cache_file=args.cache, refresh=args.refresh)


if __name__ == "__main__":
    main()
