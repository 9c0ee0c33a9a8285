#!/usr/bin/env python3
"""
Inventory Ingestion Script
Replaces a dealer's catalog with the rows of a CSV or Excel inventory file,
exactly as an upload through the API would.

Usage:
    python -m dealerhub.scripts.ingest_inventory data/inventory.csv --user-id 7

    # Validate only, no database access
    python -m dealerhub.scripts.ingest_inventory data/inventory.xlsx --dry-run
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dealerhub.api.config import get_settings
from dealerhub.db.session import build_engine, build_session_factory, init_db
from dealerhub.ingestion import (
    FileParseError,
    IngestionPersistenceError,
    InventoryIngestionPipeline,
    UnknownActorError,
    UnsupportedFileTypeError,
    get_parser,
    partition_records,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def _report_errors(errors: List[dict], limit: int = 5) -> None:
    if not errors:
        return
    logger.warning(f"Rejected rows: {len(errors)}")
    for error in errors[:limit]:
        stock_id = error["record"].get("Stock ID") or "<no stock id>"
        fields = error.get("missingFields") or error.get("invalidFields")
        logger.warning(f"  - {stock_id}: {fields}")


def dry_run(file_path: Path, chunk_size: int) -> int:
    """Parse and validate without touching the database."""
    parser = get_parser(file_path.name, chunk_size=chunk_size)
    records = list(parser(file_path))
    entries, errors = partition_records(records)

    logger.info(f"DRY RUN: {len(records)} rows, {len(entries)} valid, {len(errors)} rejected")
    _report_errors(errors)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Run inventory ingestion from the command line."""
    parser = argparse.ArgumentParser(description="Replace a dealer's catalog from an inventory file")
    parser.add_argument("file_path", type=str, help="Path to a .csv or .xlsx inventory file")
    parser.add_argument("--user-id", type=int, help="Owner of the catalog to replace")
    parser.add_argument(
        "--chunk-size",
        type=int,
        default=None,
        help="Number of CSV rows read at once (default: CSV_CHUNK_SIZE)",
    )
    parser.add_argument(
        "--database-url", type=str, default=None, help="Override DATABASE_URL"
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="Run validation only without database writes"
    )

    args = parser.parse_args(argv)
    settings = get_settings()
    chunk_size = args.chunk_size or settings.csv_chunk_size

    file_path = Path(args.file_path)
    if not file_path.exists():
        logger.error(f"Inventory file not found: {file_path}")
        return 1

    try:
        if args.dry_run:
            return dry_run(file_path, chunk_size)

        if args.user_id is None:
            logger.error("--user-id is required unless --dry-run is given")
            return 2

        engine = build_engine(args.database_url or settings.database_url)
        if settings.db_auto_create:
            init_db(engine)
        session = build_session_factory(engine)()

        try:
            pipeline = InventoryIngestionPipeline(session, chunk_size=chunk_size)
            result = pipeline.ingest(
                args.user_id, file_path, file_path.name, remove_source=False
            )
        finally:
            session.close()
            engine.dispose()

    except (UnsupportedFileTypeError, FileParseError, UnknownActorError) as e:
        logger.error(f"Ingestion rejected: {e}")
        return 1
    except IngestionPersistenceError as e:
        logger.error(f"Ingestion failed: {e} ({e.__cause__})")
        return 1

    logger.info("=" * 60)
    logger.info("INGESTION COMPLETE")
    logger.info("=" * 60)
    logger.info(f"Total rows: {result.total_entries}")
    logger.info(f"Stored: {result.successful_entries}")
    logger.info(f"Rejected: {result.failed_entries}")
    logger.info(f"Upload history id: {result.upload_id}")
    _report_errors(result.errors)
    return 0


if __name__ == "__main__":
    sys.exit(main())
