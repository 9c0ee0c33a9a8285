"""
Inquiry routes.
Buyers ask about listed products; sellers accept or reject.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, status

from ..dependencies import get_current_actor_id, get_inquiry_service, get_optional_actor_id
from ..schemas.inquiry import (
    InquiryCreateRequest,
    InquiryEnvelope,
    InquiryListingItem,
    InquiryNoteUpdateRequest,
    InquiryResponse,
    InquiryStatusUpdateRequest,
)
from ..schemas.user import MessageResponse
from ..services import InquiryService

router = APIRouter(prefix="/api/inquiries", tags=["Inquiries"])


@router.post("", response_model=InquiryEnvelope, status_code=status.HTTP_201_CREATED)
async def create_inquiry(
    request: InquiryCreateRequest,
    actor_id: Optional[int] = Depends(get_optional_actor_id),
    service: InquiryService = Depends(get_inquiry_service),
) -> InquiryEnvelope:
    """
    Create an inquiry on a product.

    Authentication is optional; without a valid token the inquiry is anonymous.
    """
    inquiry = service.create(request.product_id, request.note, actor_id)
    return InquiryEnvelope(
        message="Inquiry created successfully", inquiry=InquiryResponse.model_validate(inquiry)
    )


# Static paths are registered before /{inquiry_id}


@router.get("/sent", response_model=List[InquiryListingItem])
async def sent_inquiries(
    actor_id: int = Depends(get_current_actor_id),
    service: InquiryService = Depends(get_inquiry_service),
) -> List[InquiryListingItem]:
    """Inquiries the caller created, with product details."""
    return [InquiryListingItem(**row) for row in service.sent(actor_id)]


@router.get("/recive", response_model=List[InquiryListingItem])
async def received_inquiries(
    actor_id: int = Depends(get_current_actor_id),
    service: InquiryService = Depends(get_inquiry_service),
) -> List[InquiryListingItem]:
    """Inquiries other users made on the caller's products."""
    return [InquiryListingItem(**row) for row in service.received(actor_id)]


@router.post("/updatestatus", response_model=InquiryEnvelope)
async def update_inquiry_status(
    request: InquiryStatusUpdateRequest,
    actor_id: int = Depends(get_current_actor_id),
    service: InquiryService = Depends(get_inquiry_service),
) -> InquiryEnvelope:
    """Accept or reject an inquiry on one of the caller's products."""
    inquiry = service.update_status(request.id, actor_id, request.status)
    return InquiryEnvelope(
        message="Inquiry updated successfully", inquiry=InquiryResponse.model_validate(inquiry)
    )


@router.get("/product/{product_id}", response_model=List[InquiryResponse])
async def inquiries_for_product(
    product_id: int,
    actor_id: int = Depends(get_current_actor_id),
    service: InquiryService = Depends(get_inquiry_service),
) -> List[InquiryResponse]:
    """All inquiries on one of the caller's products."""
    return [
        InquiryResponse.model_validate(i) for i in service.list_for_product(product_id, actor_id)
    ]


@router.get("/{inquiry_id}", response_model=InquiryResponse)
async def get_inquiry(
    inquiry_id: int,
    actor_id: int = Depends(get_current_actor_id),
    service: InquiryService = Depends(get_inquiry_service),
) -> InquiryResponse:
    return InquiryResponse.model_validate(service.get(inquiry_id, actor_id))


@router.put("/{inquiry_id}", response_model=InquiryEnvelope)
async def update_inquiry(
    inquiry_id: int,
    request: InquiryNoteUpdateRequest,
    actor_id: int = Depends(get_current_actor_id),
    service: InquiryService = Depends(get_inquiry_service),
) -> InquiryEnvelope:
    """Edit the note of an inquiry the caller created."""
    inquiry = service.update_note(inquiry_id, actor_id, request.note)
    return InquiryEnvelope(
        message="Inquiry updated successfully", inquiry=InquiryResponse.model_validate(inquiry)
    )


@router.delete("/{inquiry_id}", response_model=MessageResponse)
async def delete_inquiry(
    inquiry_id: int,
    actor_id: int = Depends(get_current_actor_id),
    service: InquiryService = Depends(get_inquiry_service),
) -> MessageResponse:
    service.delete(inquiry_id, actor_id)
    return MessageResponse(message="Inquiry deleted successfully")
