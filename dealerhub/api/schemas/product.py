"""
Catalog request/response schemas.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, Field


class ProductResponse(BaseModel):
    """One catalog entry."""

    id: int
    stock_id: str
    model_no: Optional[str] = None
    brand: str
    gender: str
    metal_type: Optional[str] = None
    case_size: Optional[float] = None
    condition: str
    box: str
    paper: str
    total_price: float
    launch_year: Optional[int] = None
    image_link: Optional[str] = None
    video_link: Optional[str] = None
    location: Optional[str] = None
    visibility: bool
    user_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ProductsByUserRequest(BaseModel):
    """Request body selecting whose catalog to list."""

    user_id: int = Field(..., gt=0, validation_alias=AliasChoices("user_id", "userId"))


class VisibilityUpdateRequest(BaseModel):
    """Request schema for showing or hiding one of the caller's entries."""

    id: int = Field(..., gt=0, description="Catalog entry id")
    visibility: bool = Field(..., description="Whether other users can see the entry")


class VisibilityUpdateResponse(BaseModel):
    message: str
    product: ProductResponse


class IngestionReport(BaseModel):
    """Outcome of an inventory upload."""

    message: str
    totalEntries: int = Field(..., description="Rows read from the file")
    successfulEntries: int = Field(..., description="Rows stored as catalog entries")
    failedEntries: int = Field(..., description="Rows rejected by validation")
    errors: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="Rejected rows as {record, missingFields[, invalidFields]}",
    )
