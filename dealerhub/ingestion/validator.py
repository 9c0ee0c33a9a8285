"""
Row validation for inventory uploads.
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping

from ..models.product import is_blank

# Column headers every inventory row must fill, in reporting order
REQUIRED_FIELDS = (
    "Stock ID",
    "Model No",
    "Brand",
    "Gender",
    "Metal Type",
    "Case Size (MM)",
    "Condition",
    "Box",
    "Paper",
    "Total Price ($US)",
    "Launch Year",
    "Image Link",
    "Video Link",
    "Location",
)


@dataclass(frozen=True)
class RowValidation:
    valid: bool
    missing_fields: List[str] = field(default_factory=list)


def validate_record(record: Mapping[str, Any]) -> RowValidation:
    """Check a parsed row against REQUIRED_FIELDS, reporting every missing one."""
    missing = [name for name in REQUIRED_FIELDS if is_blank(record.get(name))]
    if missing:
        return RowValidation(valid=False, missing_fields=missing)
    return RowValidation(valid=True)
