"""
Inventory Ingestion Pipeline
Parses an uploaded inventory file, validates every row, and replaces the
uploader's whole catalog with the valid rows in a single transaction.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db.repositories import ProductRepository, UploadHistoryRepository, UserRepository
from ..models.product import CatalogEntryIngestion
from .locks import ActorLockRegistry, acquire_catalog_lock, get_actor_lock_registry
from .parsers import FileParseError, Record, get_parser
from .validator import validate_record

logger = logging.getLogger(__name__)


class UnknownActorError(LookupError):
    """Raised when the uploading user does not exist."""

    def __init__(self, actor_id: int):
        self.actor_id = actor_id
        super().__init__(f"Invalid user ID. User does not exist: {actor_id}")


class IngestionPersistenceError(RuntimeError):
    """Raised when the catalog replacement transaction fails and is rolled back."""


def partition_records(records: List[Record]) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """
    Split parsed records into projected catalog rows and reported errors.

    Rows missing required fields are reported with `missingFields`; rows whose
    numeric columns cannot be read are reported with `invalidFields`.
    """
    entries = []
    errors = []

    for record in records:
        validation = validate_record(record)
        if not validation.valid:
            errors.append({"record": record, "missingFields": validation.missing_fields})
            continue

        row, invalid_fields = CatalogEntryIngestion.project(record)
        if row is None:
            errors.append({"record": record, "missingFields": [], "invalidFields": invalid_fields})
            continue

        entries.append(row)

    if errors:
        logger.info(f"{len(errors)} of {len(records)} rows failed validation")
    return entries, errors


@dataclass
class IngestionResult:
    """Outcome of one ingestion run."""

    total_entries: int
    successful_entries: int
    failed_entries: int
    errors: List[Dict[str, Any]] = field(default_factory=list)
    upload_id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalEntries": self.total_entries,
            "successfulEntries": self.successful_entries,
            "failedEntries": self.failed_entries,
            "errors": self.errors,
        }


class InventoryIngestionPipeline:
    """
    Bulk inventory ingestion with replace semantics.

    Row-level validation failures are collected and reported; they never abort
    the run. Only an unreadable file, an unknown uploader or a failed
    transaction abort it, and in every one of those cases the catalog is left
    exactly as it was.
    """

    def __init__(
        self,
        session: Session,
        chunk_size: int = 1000,
        lock_registry: Optional[ActorLockRegistry] = None,
    ):
        """
        Initialize the ingestion pipeline.

        Args:
            session: Database session; the pipeline commits or rolls it back
            chunk_size: Number of CSV rows read at once
            lock_registry: Per-actor locks serializing runs in this process
        """
        self.session = session
        self.chunk_size = chunk_size
        self.lock_registry = lock_registry or get_actor_lock_registry()

        self.users = UserRepository(session)
        self.products = ProductRepository(session)
        self.history = UploadHistoryRepository(session)

    def ingest(
        self,
        actor_id: int,
        file_path: Union[str, Path],
        original_filename: str,
        remove_source: bool = True,
    ) -> IngestionResult:
        """
        Ingest one inventory file for an actor.

        Args:
            actor_id: Owner of the catalog being replaced
            file_path: Where the uploaded bytes were spooled
            original_filename: Name the client declared; selects the parser
            remove_source: Delete file_path when done, on success or failure

        Returns:
            IngestionResult with counts and per-row errors

        Raises:
            UnsupportedFileTypeError: extension is not .csv or .xlsx
            UnknownActorError: actor does not exist
            FileParseError: file could not be read
            IngestionPersistenceError: replacement transaction failed
        """
        file_path = Path(file_path)

        try:
            parser = get_parser(original_filename, chunk_size=self.chunk_size)

            if not self.users.exists(actor_id):
                raise UnknownActorError(actor_id)

            logger.info(f"Starting ingestion of {original_filename} for user {actor_id}")

            records = list(parser(file_path))
            entries, errors = partition_records(records)

            with self.lock_registry.hold(actor_id):
                upload_id = self._replace_catalog(
                    actor_id, entries, original_filename, len(records), len(errors)
                )

            result = IngestionResult(
                total_entries=len(records),
                successful_entries=len(entries),
                failed_entries=len(errors),
                errors=errors,
                upload_id=upload_id,
            )
            logger.info(
                f"Ingestion of {original_filename} completed: "
                f"{result.successful_entries}/{result.total_entries} rows stored, "
                f"{result.failed_entries} rejected"
            )
            return result

        finally:
            if remove_source:
                self._release(file_path)

    def _replace_catalog(
        self,
        actor_id: int,
        entries: List[Dict[str, Any]],
        original_filename: str,
        total: int,
        failed: int,
    ) -> int:
        """Delete the actor's catalog, insert the new one and audit it, atomically."""
        try:
            acquire_catalog_lock(self.session, actor_id)

            removed = self.products.delete_for_owner(actor_id)
            self.products.add_all(actor_id, entries)
            upload = self.history.record(
                file_name=original_filename,
                upload_date=datetime.now(timezone.utc).replace(tzinfo=None),
                total_entries=total,
                successful_entries=len(entries),
                errored_entries=failed,
                user_id=actor_id,
            )
            self.session.commit()

        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Catalog replacement for user {actor_id} rolled back: {e}")
            raise IngestionPersistenceError(
                f"Error processing file: catalog replacement failed for user {actor_id}"
            ) from e

        logger.info(f"Replaced {removed} catalog entries with {len(entries)} for user {actor_id}")
        return upload.id

    def _release(self, file_path: Path) -> None:
        try:
            file_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove upload {file_path}: {e}")


__all__ = [
    "FileParseError",
    "IngestionPersistenceError",
    "IngestionResult",
    "InventoryIngestionPipeline",
    "UnknownActorError",
    "partition_records",
]
