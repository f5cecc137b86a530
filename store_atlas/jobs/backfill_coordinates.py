"""CLI job that geocodes and persists coordinates for stores missing them."""

import argparse
import logging
import time
from typing import Optional

from store_atlas.core.config import get_settings
from store_atlas.core.db import fetch_stores, init_pool, update_store_coordinates
from store_atlas.etl.transform import to_store_record
from store_atlas.geo.address import normalize
from store_atlas.geo.resolver import CoordinateCache, GeocodeResolver, persisted_coordinates

logger = logging.getLogger(__name__)


def run_backfill_job(*, limit: Optional[int], dry_run: bool, min_delay: float) -> int:
    """Resolve stores without coordinates; returns how many were resolved.

    Lookups run one after another and are spaced by ``min_delay`` seconds
    whenever the external service was actually called.
    """
    settings = get_settings()
    init_pool()

    persist = None if dry_run else update_store_coordinates
    resolver = GeocodeResolver.from_settings(settings, cache=CoordinateCache(), persist=persist)

    pending = []
    for row in fetch_stores():
        record = to_store_record(row)
        if persisted_coordinates(record) is not None:
            continue
        if not normalize(record):
            logger.debug("Skipping store %s without an address", record.id)
            continue
        pending.append(record)

    if limit is not None:
        pending = pending[:limit]
    logger.info("Backfilling coordinates for %d stores (dry_run=%s)", len(pending), dry_run)

    resolved = 0
    for record in pending:
        lookups_before = resolver.stats.lookups
        result = resolver.resolve_record(record)
        if result is not None:
            resolved += 1
            logger.info("Store %s -> (%.6f, %.6f)", record.id, result.latitude, result.longitude)
        else:
            logger.info("Store %s could not be geocoded", record.id)

        if resolver.stats.lookups > lookups_before and min_delay > 0:
            time.sleep(min_delay)

    logger.info(
        "Completed backfill: resolved=%d failed=%d persist_failures=%d",
        resolved,
        len(pending) - resolved,
        resolver.stats.persist_failures,
    )
    return resolved


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or greater, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Geocode stores that have no stored coordinates")
    parser.add_argument("--limit", dest="limit", type=_non_negative_int, help="Maximum number of stores to process")
    parser.add_argument("--dry-run", dest="dry_run", action="store_true", help="Resolve without writing coordinates")
    parser.add_argument(
        "--min-delay",
        dest="min_delay",
        type=float,
        default=get_settings().geocoder_min_delay,
        help="Seconds to wait after each external lookup",
    )
    return parser


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = build_parser()
    args = parser.parse_args()

    try:
        run_backfill_job(limit=args.limit, dry_run=args.dry_run, min_delay=args.min_delay)
    except RuntimeError as exc:
        logger.error("Configuration error: %s", exc)
        raise SystemExit(2) from exc
    except Exception as exc:  # noqa: BLE001
        logger.error("Backfill failed: %s", exc, exc_info=True)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
