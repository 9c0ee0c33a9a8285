"""
Catalog entry model for inventory ingestion.
Maps spreadsheet column headers onto product columns and coerces numbers.
"""

import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

DEFAULT_STOCK_ID = "DEFAULT_VALUE"

_NUMBER_PATTERN = re.compile(r"-?\d+(?:\.\d+)?")


def is_blank(value: Any) -> bool:
    """True for absent, NaN and whitespace-only values."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _extract_number(v: Any) -> Optional[float]:
    """Pull the first number out of values like "$12,500", "40 mm" or "2019.0"."""
    if v is None:
        return None
    if isinstance(v, (int, float)):
        return float(v)

    cleaned = re.sub(r"[£$€,\s]", "", str(v))
    match = _NUMBER_PATTERN.search(cleaned)
    if not match:
        raise ValueError(f"not a number: {v!r}")
    return float(match.group())


class CatalogEntryIngestion(BaseModel):
    """
    Validates one uploaded inventory row and projects it onto the products table.
    Field aliases are the column headers of the dealer inventory template.
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        extra="ignore",  # Unknown columns are dropped
    )

    stock_id: str = Field(default=DEFAULT_STOCK_ID, alias="Stock ID")
    model_no: Optional[str] = Field(None, alias="Model No")
    brand: Optional[str] = Field(None, alias="Brand")
    gender: Optional[str] = Field(None, alias="Gender")
    metal_type: Optional[str] = Field(None, alias="Metal Type")
    case_size: Optional[float] = Field(None, alias="Case Size (MM)")
    condition: Optional[str] = Field(None, alias="Condition")
    box: Optional[str] = Field(None, alias="Box")
    paper: Optional[str] = Field(None, alias="Paper")
    total_price: float = Field(0, alias="Total Price ($US)")
    launch_year: Optional[int] = Field(None, alias="Launch Year")
    image_link: Optional[str] = Field(None, alias="Image Link")
    video_link: Optional[str] = Field(None, alias="Video Link")
    location: Optional[str] = Field(None, alias="Location")
    visibility: bool = True

    @model_validator(mode="before")
    @classmethod
    def drop_blank_cells(cls, data: Any) -> Any:
        """Blank cells fall back to field defaults."""
        if isinstance(data, Mapping):
            return {key: value for key, value in data.items() if not is_blank(value)}
        return data

    @field_validator("case_size", "total_price", mode="before")
    @classmethod
    def clean_decimal(cls, v):
        return _extract_number(v)

    @field_validator("launch_year", mode="before")
    @classmethod
    def clean_year(cls, v):
        number = _extract_number(v)
        if number is None:
            return None
        if number != int(number):
            raise ValueError(f"not a year: {v!r}")
        return int(number)

    @field_validator(
        "stock_id", "model_no", "brand", "gender", "metal_type", "condition",
        "box", "paper", "image_link", "video_link", "location",
        mode="before",
    )
    @classmethod
    def convert_to_string(cls, v):
        """Spreadsheets hand back numbers for ids like Stock ID 1042."""
        if v is None:
            return None
        return str(v)

    def to_row(self) -> Dict[str, Any]:
        """Column values for a new products row (owner excluded)."""
        return self.model_dump()

    @classmethod
    def project(cls, record: Mapping[str, Any]) -> Tuple[Optional[Dict[str, Any]], List[str]]:
        """
        Project a raw record into a products row.

        Returns:
            (row, []) on success, (None, offending column headers) otherwise
        """
        try:
            return cls.model_validate(dict(record)).to_row(), []
        except ValidationError as e:
            fields = []
            for error in e.errors():
                loc = error.get("loc") or ("",)
                name = str(loc[0])
                if name not in fields:
                    fields.append(name)
            return None, fields
