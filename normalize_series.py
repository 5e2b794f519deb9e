#!/usr/bin/env python3
"""
Import a legacy series export into the configured store.

Old exports hold series as one nested object keyed by slug, sometimes
wrapped in a single-element list::

    [{"hells-paradise": {"title": "Hell's Paradise", "episodes": {...}}}]

Each entry with a title is normalised (``description`` defaults to an
empty string, ``episodes`` to an empty object, ``addedBy`` to
``"unknown"``) and stored under its slug.  Entries without a title and
slugs that already exist are skipped.

Usage:
    python normalize_series.py --source old-series.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from moviemania_api.app.core import db
from moviemania_api.app.core.errors import DuplicateRecord
from moviemania_api.app.core.logging_config import setup_logging


logger = logging.getLogger("normalize_series")


def normalize(raw: Any) -> Dict[str, Dict[str, Any]]:
    """Turn a legacy export into ``{slug: record}``."""
    first = raw[0] if isinstance(raw, list) and raw else raw
    if not isinstance(first, dict):
        return {}
    result: Dict[str, Dict[str, Any]] = {}
    for slug, value in first.items():
        if not isinstance(value, dict) or not value.get("title"):
            logger.info("Skipping %s: no title", slug)
            continue
        result[slug] = {
            "title": value["title"],
            "description": value.get("description") or "",
            "episodes": value.get("episodes") or {},
            "addedBy": value.get("addedBy") or "unknown",
        }
    return result


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Import legacy series JSON.")
    ap.add_argument("--source", required=True, help="Path to the legacy series JSON file")
    args = ap.parse_args(argv)
    setup_logging("INFO")

    source = Path(args.source)
    if not source.exists():
        print(f"[!] File not found: {source}", file=sys.stderr)
        return 1
    try:
        raw = json.loads(source.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        print(f"[!] {source} is not valid JSON: {exc}", file=sys.stderr)
        return 1

    inserted = 0
    for slug, record in normalize(raw).items():
        try:
            db.insert(db.SERIES, slug, record)
        except DuplicateRecord:
            logger.info("Skipping %s: already stored", slug)
            continue
        inserted += 1
        logger.info("Inserted %s", record["title"])
    print(f"[+] Imported {inserted} series")
    return 0


if __name__ == "__main__":
    sys.exit(main())
