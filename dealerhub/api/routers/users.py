"""
Account routes.
Registration, two-step OTP sign-in, profile management and administration.
"""

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...db.models import User
from ...db.repositories import UserRepository
from ..config import get_settings
from ..dependencies import get_current_user, get_db, get_mailer, get_otp_store, require_admin
from ..errors import InvalidRequestError, ResourceNotFoundError, ServerError
from ..schemas.user import (
    ChangePasswordRequest,
    MessageResponse,
    SignInRequest,
    SignInResponse,
    SignUpRequest,
    UpdateProfileRequest,
    UserEnvelope,
    UserIdRequest,
    UserListResponse,
    UserResponse,
    VerifyOTPRequest,
    VerifyOTPResponse,
    normalise_phone,
)
from ..security import create_access_token, hash_password, verify_password
from ..services.mailer import MailDeliveryError, OTPMailer
from ..services.otp_store import OTPStoreError, RedisOTPStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


def get_cookie_settings() -> dict:
    """
    Cookie settings for the auth token.

    In production (HTTPS), use secure=True and samesite="none" for cross-origin requests.
    In development, use secure=False and samesite="lax" for localhost.
    """
    is_production = get_settings().is_production
    return {
        "httponly": True,
        "secure": is_production,
        "samesite": "none" if is_production else "lax",
        "path": "/",
    }


@router.post("/sign-up", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
async def sign_up(request: SignUpRequest, db: Session = Depends(get_db)) -> UserEnvelope:
    """Register a company account. The account starts unverified."""
    users = UserRepository(db)
    if users.find_conflicting(request.username, request.email, request.registered_legal_number):
        raise InvalidRequestError("Username, email, or phone number is already registered")

    user = User(
        username=request.username,
        email=request.email,
        password_hash=hash_password(request.password),
        company_name=request.company_name,
        company_address=request.company_address,
        registered_legal_number=request.registered_legal_number,
        plan=request.plan,
        documents=request.documents,
        company_logo=request.company_logo,
        role_id=get_settings().default_role_id,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent sign-up for the same identity
        db.rollback()
        raise InvalidRequestError("Username, email, or phone number is already registered") from e
    db.refresh(user)

    logger.info(f"User {user.id} registered ({user.username})")
    return UserEnvelope(message="User registered successfully", user=UserResponse.model_validate(user))


@router.post("/sign-in", response_model=SignInResponse)
async def sign_in(
    request: SignInRequest,
    db: Session = Depends(get_db),
    otp_store: RedisOTPStore = Depends(get_otp_store),
    mailer: OTPMailer = Depends(get_mailer),
) -> SignInResponse:
    """
    First sign-in step.

    Checks the credentials and emails a one-time code; the code is exchanged
    for a token at /verify-otp.
    """
    identifier = request.email_or_phone.strip()
    if "@" not in identifier:
        try:
            identifier = normalise_phone(identifier)
        except ValueError:
            raise InvalidRequestError("Invalid email/phone or password")

    user = UserRepository(db).find_by_email_or_phone(identifier)
    if user is None or not verify_password(request.password, user.password_hash):
        raise InvalidRequestError("Invalid email/phone or password")

    try:
        code = otp_store.issue(user.id)
        mailer.send_otp(user.email, code)
    except OTPStoreError as e:
        logger.error(f"OTP store unavailable: {e}")
        raise ServerError("Error generating OTP") from e
    except MailDeliveryError as e:
        logger.error(f"OTP email to user {user.id} failed: {e}")
        raise ServerError("Error sending email") from e

    return SignInResponse(message="OTP sent to your email. Please verify.", userId=user.id)


@router.post("/verify-otp", response_model=VerifyOTPResponse)
async def verify_otp(
    request: VerifyOTPRequest,
    response: Response,
    db: Session = Depends(get_db),
    otp_store: RedisOTPStore = Depends(get_otp_store),
) -> VerifyOTPResponse:
    """Second sign-in step: exchange the emailed code for an access token."""
    try:
        valid = otp_store.verify(request.user_id, request.otp)
    except OTPStoreError as e:
        logger.error(f"OTP store unavailable: {e}")
        raise ServerError("Error verifying OTP") from e

    if not valid:
        raise InvalidRequestError("Invalid or expired OTP")

    user = UserRepository(db).get(request.user_id)
    if user is None:
        raise ResourceNotFoundError("User", request.user_id)

    settings = get_settings()
    token = create_access_token({"sub": str(user.id), "email": user.email, "role_id": user.role_id})
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=settings.access_token_expire_minutes * 60,
        **get_cookie_settings(),
    )

    logger.info(f"User {user.id} signed in")
    return VerifyOTPResponse(
        message="Login successful", token=token, user=UserResponse.model_validate(user)
    )


@router.get("/profile", response_model=UserResponse)
async def get_profile(current_user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.model_validate(current_user)


@router.put("/profile", response_model=UserEnvelope)
async def update_profile(
    request: UpdateProfileRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserEnvelope:
    """Update the caller's contact and company details."""
    changes = request.model_dump(exclude_none=True)

    new_email = changes.get("email")
    if new_email and new_email != current_user.email:
        taken = db.query(User.id).filter(User.email == new_email, User.id != current_user.id).first()
        if taken:
            raise InvalidRequestError("Email address already registered")

    for field, value in changes.items():
        setattr(current_user, field, value)
    db.commit()
    db.refresh(current_user)

    return UserEnvelope(
        message="Profile updated successfully", user=UserResponse.model_validate(current_user)
    )


@router.put("/change-password", response_model=MessageResponse)
async def change_password(
    request: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    if not verify_password(request.old_password, current_user.password_hash):
        raise InvalidRequestError("Invalid old password")

    current_user.password_hash = hash_password(request.new_password)
    db.commit()

    logger.info(f"User {current_user.id} changed password")
    return MessageResponse(message="Password changed successfully")


@router.post("/sign-out", response_model=MessageResponse)
async def sign_out(
    response: Response,
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    """Clear the auth cookie. Bearer tokens stay valid until they expire."""
    response.delete_cookie(get_settings().auth_cookie_name, **get_cookie_settings())
    return MessageResponse(message="Sign out successful")


# Administration


@router.post("/get-all", response_model=UserListResponse)
async def get_all_users(
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> UserListResponse:
    users = UserRepository(db).list_all()
    return UserListResponse(
        message="Users fetched successfully",
        users=[UserResponse.model_validate(u) for u in users],
    )


@router.post("/update-verification-status", response_model=UserEnvelope)
async def update_verification_status(
    request: UserIdRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> UserEnvelope:
    """Mark a company as verified."""
    user = UserRepository(db).get(request.user_id)
    if user is None:
        raise ResourceNotFoundError("User", request.user_id)
    if user.is_verified:
        raise InvalidRequestError("User is already verified")

    user.is_verified = True
    db.commit()

    logger.info(f"User {user.id} verified by admin {admin.id}")
    return UserEnvelope(
        message="User verification status updated successfully",
        user=UserResponse.model_validate(user),
    )


@router.post("/delete", response_model=MessageResponse)
async def delete_user(
    request: UserIdRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Delete a user with their catalog and upload history."""
    user = UserRepository(db).get(request.user_id)
    if user is None:
        raise ResourceNotFoundError("User", request.user_id)

    db.delete(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise InvalidRequestError("User has orders and cannot be deleted") from e

    logger.info(f"User {request.user_id} deleted by admin {admin.id}")
    return MessageResponse(message="User deleted successfully")
