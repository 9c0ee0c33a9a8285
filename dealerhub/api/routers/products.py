"""
Catalog routes.
Inventory upload (full catalog replace), catalog listings and visibility.
"""

import logging
import tempfile
from pathlib import Path
from typing import List

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from ...db.repositories import ProductRepository, UserRepository
from ...ingestion import (
    FileParseError,
    IngestionPersistenceError,
    InventoryIngestionPipeline,
    SUPPORTED_EXTENSIONS,
    UnknownActorError,
    UnsupportedFileTypeError,
)
from ..config import get_settings
from ..dependencies import get_current_actor_id, get_db, get_ingestion_pipeline
from ..errors import InvalidRequestError, ResourceNotFoundError, ServerError
from ..schemas.product import (
    IngestionReport,
    ProductResponse,
    ProductsByUserRequest,
    VisibilityUpdateRequest,
    VisibilityUpdateResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["Products"])


@router.post("/upload", response_model=IngestionReport, status_code=status.HTTP_200_OK)
async def upload_products(
    file: UploadFile = File(..., description="Inventory file (.csv or .xlsx)"),
    actor_id: int = Depends(get_current_actor_id),
    pipeline: InventoryIngestionPipeline = Depends(get_ingestion_pipeline),
) -> IngestionReport:
    """
    Replace the caller's catalog with the rows of an uploaded inventory file.

    Invalid rows are reported in `errors` and skipped; every valid row becomes
    a catalog entry and all previous entries are removed.
    """
    if not file.filename:
        raise InvalidRequestError("No file uploaded.")

    suffix = Path(file.filename).suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise InvalidRequestError(
            "Unsupported file format. Please upload a CSV or Excel file.",
            details={"extension": suffix, "supported": list(SUPPORTED_EXTENSIONS)},
        )

    settings = get_settings()
    tmp_path = None

    try:
        with tempfile.NamedTemporaryFile(
            mode="wb",
            suffix=suffix,
            prefix=f"inventory_{actor_id}_",
            dir=settings.upload_tmp_dir,
            delete=False,
        ) as tmp:
            tmp_path = Path(tmp.name)
            tmp.write(await file.read())
    except OSError as e:
        logger.error(f"Failed to spool upload {file.filename}: {e}")
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
        raise ServerError("Failed to save uploaded file") from e
    finally:
        await file.close()

    try:
        # Parsing and the replace transaction block, so they run in the threadpool
        result = await run_in_threadpool(pipeline.ingest, actor_id, tmp_path, file.filename)
    except UnsupportedFileTypeError as e:
        raise InvalidRequestError(str(e)) from e
    except UnknownActorError as e:
        raise InvalidRequestError(str(e)) from e
    except FileParseError as e:
        raise InvalidRequestError(str(e)) from e
    except IngestionPersistenceError as e:
        raise ServerError(str(e)) from e

    return IngestionReport(message="File processed successfully", **result.to_dict())


@router.get("", response_model=List[ProductResponse])
async def list_own_products(
    actor_id: int = Depends(get_current_actor_id),
    db: Session = Depends(get_db),
) -> List[ProductResponse]:
    """The caller's whole catalog, hidden entries included."""
    products = ProductRepository(db).list_for_owner(actor_id)
    return [ProductResponse.model_validate(p) for p in products]


@router.post("/by-user", response_model=List[ProductResponse])
async def get_products_by_user(
    request: ProductsByUserRequest,
    actor_id: int = Depends(get_current_actor_id),
    db: Session = Depends(get_db),
) -> List[ProductResponse]:
    """
    Another user's catalog.

    Hidden entries are only listed when the caller asks for their own catalog.
    """
    if not UserRepository(db).exists(request.user_id):
        raise InvalidRequestError(f"Invalid user ID. User does not exist: {request.user_id}")

    products = ProductRepository(db).list_for_owner(
        request.user_id, visible_only=request.user_id != actor_id
    )
    return [ProductResponse.model_validate(p) for p in products]


@router.post("/updateVisibility", response_model=VisibilityUpdateResponse)
async def update_visibility(
    request: VisibilityUpdateRequest,
    actor_id: int = Depends(get_current_actor_id),
    db: Session = Depends(get_db),
) -> VisibilityUpdateResponse:
    """Show or hide one of the caller's catalog entries."""
    product = ProductRepository(db).get_owned(request.id, actor_id)
    if product is None:
        raise ResourceNotFoundError("Product", request.id)

    product.visibility = request.visibility
    db.commit()

    logger.info(f"Product {product.id} visibility set to {product.visibility} by user {actor_id}")
    return VisibilityUpdateResponse(
        message="Product visibility updated successfully",
        product=ProductResponse.model_validate(product),
    )
