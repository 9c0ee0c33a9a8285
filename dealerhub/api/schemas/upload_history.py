"""
Upload history schemas.
"""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field


class UploadHistoryRequest(BaseModel):
    user_id: int = Field(..., gt=0, validation_alias=AliasChoices("user_id", "userId"))


class UploadHistoryResponse(BaseModel):
    """One ingestion run, serialized with the column names clients already use."""

    id: int
    file_name: str = Field(..., serialization_alias="fileName")
    upload_date: datetime = Field(..., serialization_alias="uploadDate")
    total_entries: int = Field(..., serialization_alias="totalEntries")
    successful_entries: int = Field(..., serialization_alias="successfulEntries")
    errored_entries: int = Field(..., serialization_alias="erroredEntries")
    user_id: int

    model_config = {"from_attributes": True}
