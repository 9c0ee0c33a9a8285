"""
Dependency Injection
FastAPI dependencies for database sessions, authentication and services.
"""

import logging
from typing import Generator, Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from ..db.models import User
from ..db.session import get_session_factory
from ..ingestion import InventoryIngestionPipeline
from .config import APISettings, get_settings
from .errors import AuthenticationError, ForbiddenError
from .security import verify_token
from .services import InquiryService, OrderService
from .services.mailer import OTPMailer
from .services.mailer import get_mailer as _get_mailer
from .services.otp_store import RedisOTPStore
from .services.otp_store import get_otp_store as _get_otp_store

logger = logging.getLogger(__name__)


def get_db() -> Generator[Session, None, None]:
    """
    Get database session.

    Use as FastAPI dependency:
        @app.get("/endpoint")
        def endpoint(db: Session = Depends(get_db)):
            ...
    """
    SessionLocal = get_session_factory()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _extract_token(request: Request, settings: APISettings) -> Optional[str]:
    """Bearer credential from the auth cookie, else from the Authorization header."""
    token = request.cookies.get(settings.auth_cookie_name)
    if token:
        return token

    authorization = request.headers.get("Authorization")
    if authorization:
        scheme, _, credential = authorization.partition(" ")
        if scheme.lower() == "bearer" and credential.strip():
            return credential.strip()

    return None


def _actor_id_from_token(token: str) -> int:
    payload = verify_token(token)
    if not payload:
        raise ForbiddenError("Invalid token.")

    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError):
        raise ForbiddenError("Invalid token payload.")


def get_current_actor_id(request: Request) -> int:
    """
    Authenticated actor id.

    Use as FastAPI dependency to protect routes:
        @app.get("/endpoint")
        def endpoint(actor_id: int = Depends(get_current_actor_id)):
            ...

    Raises:
        AuthenticationError: 401 if no credential was sent
        ForbiddenError: 403 if the credential is invalid or expired
    """
    token = _extract_token(request, get_settings())
    if not token:
        raise AuthenticationError()
    return _actor_id_from_token(token)


def get_optional_actor_id(request: Request) -> Optional[int]:
    """
    Actor id when a valid credential is present, else None.

    Use for endpoints that work for both authenticated and anonymous users.
    """
    token = _extract_token(request, get_settings())
    if not token:
        return None

    payload = verify_token(token)
    if not payload:
        return None

    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError):
        return None


def get_current_user(
    actor_id: int = Depends(get_current_actor_id), db: Session = Depends(get_db)
) -> User:
    """Load the authenticated user; a token for a deleted user is rejected."""
    user = db.get(User, actor_id)
    if user is None:
        raise ForbiddenError("User no longer exists.")
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Only administrators (role_id == ADMIN_ROLE_ID) pass."""
    if current_user.role_id != get_settings().admin_role_id:
        raise ForbiddenError("Access denied. Admins only.")
    return current_user


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    return OrderService(db)


def get_inquiry_service(db: Session = Depends(get_db)) -> InquiryService:
    return InquiryService(db, strict_transitions=get_settings().strict_inquiry_transitions)


def get_ingestion_pipeline(db: Session = Depends(get_db)) -> InventoryIngestionPipeline:
    return InventoryIngestionPipeline(db, chunk_size=get_settings().csv_chunk_size)


def get_otp_store() -> RedisOTPStore:
    return _get_otp_store()


def get_mailer() -> OTPMailer:
    return _get_mailer()
