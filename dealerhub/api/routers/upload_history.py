"""
Upload history routes.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...db.repositories import UploadHistoryRepository, UserRepository
from ..dependencies import get_current_actor_id, get_db
from ..errors import InvalidRequestError
from ..schemas.upload_history import UploadHistoryRequest, UploadHistoryResponse

router = APIRouter(prefix="/api/upload-history", tags=["Upload History"])


@router.post("/by-user", response_model=List[UploadHistoryResponse])
async def get_upload_history_by_user(
    request: UploadHistoryRequest,
    actor_id: int = Depends(get_current_actor_id),
    db: Session = Depends(get_db),
) -> List[UploadHistoryResponse]:
    """Ingestion runs of a user, newest first."""
    if not UserRepository(db).exists(request.user_id):
        raise InvalidRequestError(f"Invalid user ID. User does not exist: {request.user_id}")

    runs = UploadHistoryRepository(db).list_for_user(request.user_id)
    return [UploadHistoryResponse.model_validate(run) for run in runs]
