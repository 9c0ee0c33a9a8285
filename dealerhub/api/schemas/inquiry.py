"""
Inquiry request/response schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ...db.models import InquiryStatus


class InquiryCreateRequest(BaseModel):
    """Request schema for asking about a listed product."""

    product_id: int = Field(..., gt=0)
    note: Optional[str] = Field(None, description="Message to the seller")


class InquiryNoteUpdateRequest(BaseModel):
    note: Optional[str] = None


class InquiryStatusUpdateRequest(BaseModel):
    """Seller's decision on an inquiry."""

    id: int = Field(..., gt=0, description="Inquiry id")
    status: InquiryStatus = Field(..., description="Target status")


class InquiryResponse(BaseModel):
    id: int
    create_time: Optional[datetime] = None
    product_id: int
    user_id: Optional[int] = None
    note: Optional[str] = None
    status: InquiryStatus

    model_config = {"from_attributes": True}


class InquiryEnvelope(BaseModel):
    message: str
    inquiry: InquiryResponse


class InquiryListingItem(BaseModel):
    """
    Inquiry joined with its product and a user.

    For sent inquiries the user is the inquirer; for received inquiries it is
    the product owner.
    """

    id: int
    create_time: Optional[datetime] = None
    product_id: int
    user_id: Optional[int] = None
    note: Optional[str] = None
    status: InquiryStatus

    brand: Optional[str] = None
    gender: Optional[str] = None
    total_price: Optional[float] = None
    launch_year: Optional[int] = None
    model_no: Optional[str] = None
    metal_type: Optional[str] = None
    case_size: Optional[float] = None
    condition: Optional[str] = None
    image_link: Optional[str] = None
    location: Optional[str] = None

    username: Optional[str] = None
    email: Optional[str] = None
    company_name: Optional[str] = None
    company_address: Optional[str] = None
