"""
Inventory File Parsers
Readers for delimited text and spreadsheet uploads. Both produce the same
shape: one dict per data row, keyed by header, every value a stripped string.
"""

import logging
import zipfile
from functools import partial
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Union

import chardet
import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException

logger = logging.getLogger(__name__)

Record = Dict[str, str]
PathLike = Union[str, Path]


class UnsupportedFileTypeError(ValueError):
    """Raised when an upload's extension has no parser."""

    def __init__(self, extension: str):
        self.extension = extension
        super().__init__(f"Unsupported file format: {extension or '(none)'}")


class FileParseError(Exception):
    """Raised when an upload cannot be read as the format its extension claims."""


def detect_csv_encoding(file_path: PathLike) -> str:
    """
    Detect CSV file encoding using chardet.

    Args:
        file_path: Path to CSV file

    Returns:
        Detected encoding string
    """
    with open(file_path, "rb") as f:
        raw_data = f.read(10000)  # Read first 10KB

    result = chardet.detect(raw_data)
    encoding = result["encoding"]

    # ASCII is often a false positive for UTF-8 files
    if not encoding or encoding.lower() == "ascii":
        return "utf-8"

    logger.debug(f"Detected encoding: {encoding} (confidence: {result['confidence']:.2%})")
    return encoding


def _normalise_value(value: Any) -> str:
    if value is None:
        return ""
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    return str(value).strip()


def _normalise_records(rows: Iterable[Dict[Any, Any]]) -> Iterator[Record]:
    for row in rows:
        yield {str(key).strip(): _normalise_value(value) for key, value in row.items()}


def _read_header(file_path: PathLike, encoding: str) -> List[str]:
    header = pd.read_csv(file_path, nrows=0, dtype=str, encoding=encoding, engine="python")
    return list(header.columns)


def parse_csv(file_path: PathLike, chunk_size: int = 1000) -> Iterator[Record]:
    """
    Lazily read a CSV upload, one header-keyed dict per line.

    Cells are matched to headers by position. Cells past the last header
    (trailing delimiters, stray extra values) are dropped, so they never
    shift a row or fail the file.

    Raises:
        FileParseError: if the stream is malformed; raised while iterating
    """
    encoding = detect_csv_encoding(file_path)

    try:
        columns = _read_header(file_path, encoding)
        chunk_iterator = pd.read_csv(
            file_path,
            chunksize=chunk_size,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding=encoding,
            engine="python",
            index_col=False,
            usecols=list(range(len(columns))),
        )
        for chunk_df in chunk_iterator:
            yield from _normalise_records(chunk_df.to_dict("records"))
    except pd.errors.EmptyDataError:
        # A zero-byte upload has no header and no rows
        return
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise FileParseError(f"Could not parse CSV file: {e}") from e


def parse_xlsx(file_path: PathLike) -> List[Record]:
    """
    Read the first sheet of a workbook, one header-keyed dict per row.

    Raises:
        FileParseError: if the file is not a readable workbook
    """
    try:
        df = pd.read_excel(
            file_path,
            sheet_name=0,
            dtype=str,
            keep_default_na=False,
            engine="openpyxl",
        )
    except (ValueError, KeyError, OSError, zipfile.BadZipFile, InvalidFileException) as e:
        raise FileParseError(f"Could not parse Excel file: {e}") from e

    return list(_normalise_records(df.to_dict("records")))


_PARSERS: Dict[str, Callable[..., Iterable[Record]]] = {
    ".csv": parse_csv,
    ".xlsx": parse_xlsx,
}

SUPPORTED_EXTENSIONS = tuple(_PARSERS)


def get_parser(original_filename: str, chunk_size: int = 1000) -> Callable[[PathLike], Iterable[Record]]:
    """
    Pick the parser for an upload from its declared filename.

    Raises:
        UnsupportedFileTypeError: for anything other than .csv or .xlsx
    """
    extension = Path(original_filename or "").suffix.lower()
    if extension not in _PARSERS:
        raise UnsupportedFileTypeError(extension)
    if extension == ".csv":
        return partial(parse_csv, chunk_size=chunk_size)
    return _PARSERS[extension]
