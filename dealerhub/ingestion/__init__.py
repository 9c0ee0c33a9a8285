"""
Inventory Ingestion Package
Parses, validates and stores dealer inventory uploads (CSV and Excel).
"""

from .coordinator import (
    IngestionPersistenceError,
    IngestionResult,
    InventoryIngestionPipeline,
    UnknownActorError,
    partition_records,
)
from .parsers import FileParseError, SUPPORTED_EXTENSIONS, UnsupportedFileTypeError, get_parser
from .validator import REQUIRED_FIELDS, RowValidation, validate_record

__all__ = [
    "InventoryIngestionPipeline",
    "IngestionResult",
    "IngestionPersistenceError",
    "UnknownActorError",
    "FileParseError",
    "UnsupportedFileTypeError",
    "get_parser",
    "SUPPORTED_EXTENSIONS",
    "REQUIRED_FIELDS",
    "RowValidation",
    "validate_record",
    "partition_records",
]
