#!/usr/bin/env python3
"""Copy feedback submissions from one storage backend to another.

Both stores are configured from the environment (DATA_FILE, REDIS_URL,
DATABASE_URL, ...); only the backend choice comes from the command line.
Records are copied verbatim, in batches, and the target is left untouched
when the source cannot be read.

Usage:
  python -m kriedko.scripts.migrate_data --from file --to sql [--batch-size 100] [--replace]
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from kriedko.app.startup import configure_startup_logging
from kriedko.core.config import Settings, StoreBackend, get_settings
from kriedko.core.exceptions import StorageError
from kriedko.modules.feedback.storage import create_store
from kriedko.modules.feedback.storage.base import Record, SubmissionStore

logger = logging.getLogger("kriedko.scripts.migrate_data")

BACKEND_CHOICES = [backend.value for backend in StoreBackend]


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Migrate feedback submissions between backends")
    parser.add_argument("--from", dest="source", required=True, choices=BACKEND_CHOICES)
    parser.add_argument("--to", dest="target", required=True, choices=BACKEND_CHOICES)
    parser.add_argument("--batch-size", type=int, default=100, help="Records written per batch")
    parser.add_argument(
        "--replace",
        action="store_true",
        help="Clear the target before copying instead of skipping ids it already has",
    )
    args = parser.parse_args(argv)
    if args.source == args.target:
        parser.error("--from and --to must name different backends")
    if args.batch_size < 1:
        parser.error("--batch-size must be at least 1")
    return args


def store_for(settings: Settings, backend: str) -> SubmissionStore:
    return create_store(settings.model_copy(update={"storage_backend": StoreBackend(backend)}))


def batches(records: List[Record], size: int):
    for start in range(0, len(records), size):
        yield records[start:start + size]


def migrate(
    source: SubmissionStore,
    target: SubmissionStore,
    batch_size: int = 100,
    replace: bool = False,
) -> int:
    """Copy every source record into target. Returns the number written."""
    records = source.load()
    logger.info(f"Read {len(records)} records from {source.backend_name}")

    if replace:
        target.clear()
        seen = set()
    else:
        seen = {r.get("id") for r in target.load()}

    # First occurrence of an id wins; later copies and ids the target has are skipped
    pending = []
    for record in records:
        if record.get("id") in seen:
            continue
        seen.add(record.get("id"))
        pending.append(record)
    skipped = len(records) - len(pending)
    if skipped:
        logger.info(f"Skipping {skipped} records whose id is already in {target.backend_name}")

    written = 0
    for batch in batches(pending, batch_size):
        target.append_many(batch)
        written += len(batch)
        logger.info(f"Copied {written}/{len(pending)} records")

    return written


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    configure_startup_logging(settings.log_level)

    source = target = None
    try:
        source = store_for(settings, args.source)
        target = store_for(settings, args.target)
        written = migrate(source, target, batch_size=args.batch_size, replace=args.replace)
    except StorageError as e:
        logger.error(f"Migration failed: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2
    finally:
        for store in (source, target):
            if store is not None:
                store.close()

    logger.info(f"Migrated {written} records from {args.source} to {args.target}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
