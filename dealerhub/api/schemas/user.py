"""
Account request/response schemas.
Pydantic models for sign-up, OTP sign-in, profile and administration.

Request fields accept both snake_case and the camelCase names older clients send.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, EmailStr, Field, field_validator

_PHONE_SEPARATORS = re.compile(r"[\s\-().]")


def normalise_phone(value: str) -> str:
    """
    Normalise a phone number to `+<digits>`.

    Accepts an optional leading `+` or `00` and common separators; requires
    8 to 15 digits (E.164 length).
    """
    raw = _PHONE_SEPARATORS.sub("", value.strip())
    if raw.startswith("00"):
        raw = "+" + raw[2:]
    digits = raw[1:] if raw.startswith("+") else raw

    if not digits.isdigit() or not 8 <= len(digits) <= 15:
        raise ValueError("Invalid phone number format")
    return "+" + digits


def _required_text(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("must not be empty")
    return v


class SignUpRequest(BaseModel):
    """Request schema for company registration."""

    username: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6, description="Password (min 6 characters)")
    company_name: str = Field(
        ..., max_length=255, validation_alias=AliasChoices("company_name", "companyName")
    )
    company_address: str = Field(
        ..., max_length=500, validation_alias=AliasChoices("company_address", "companyAddress")
    )
    registered_legal_number: str = Field(
        ...,
        description="Company phone number",
        validation_alias=AliasChoices("registered_legal_number", "registeredLegalNumber"),
    )
    plan: str = Field(..., max_length=100)
    documents: Optional[Any] = None
    company_logo: Optional[str] = Field(
        None, validation_alias=AliasChoices("company_logo", "companyLogo")
    )

    @field_validator("username", "company_name", "company_address", "plan")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return _required_text(v)

    @field_validator("registered_legal_number")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return normalise_phone(v)


class SignInRequest(BaseModel):
    """First sign-in step: credentials, answered with an emailed OTP."""

    email_or_phone: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("email_or_phone", "emailOrPhone")
    )
    password: str = Field(..., min_length=1)


class SignInResponse(BaseModel):
    message: str
    userId: int


class VerifyOTPRequest(BaseModel):
    user_id: int = Field(..., gt=0, validation_alias=AliasChoices("user_id", "userId"))
    otp: str = Field(..., min_length=1, max_length=12)

    @field_validator("otp", mode="before")
    @classmethod
    def coerce_otp(cls, v: Any) -> Any:
        # Clients sometimes send the code as a JSON number
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class UserResponse(BaseModel):
    """Safe user response schema (no password hash)."""

    id: int
    username: str
    email: str
    company_name: str
    company_address: str
    registered_legal_number: str
    plan: str
    documents: Optional[Any] = None
    company_logo: Optional[str] = None
    is_verified: bool
    role_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class VerifyOTPResponse(BaseModel):
    message: str
    token: str
    user: UserResponse


class UpdateProfileRequest(BaseModel):
    """Request schema for updating the caller's profile; omitted fields are kept."""

    email: Optional[EmailStr] = None
    company_name: Optional[str] = Field(
        None, max_length=255, validation_alias=AliasChoices("company_name", "companyName")
    )
    company_address: Optional[str] = Field(
        None, max_length=500, validation_alias=AliasChoices("company_address", "companyAddress")
    )
    company_logo: Optional[str] = Field(
        None, validation_alias=AliasChoices("company_logo", "companyLogo")
    )


class ChangePasswordRequest(BaseModel):
    old_password: str = Field(..., validation_alias=AliasChoices("old_password", "oldPassword"))
    new_password: str = Field(
        ..., min_length=6, validation_alias=AliasChoices("new_password", "newPassword")
    )


class UserIdRequest(BaseModel):
    """Admin request body naming the target user."""

    user_id: int = Field(..., gt=0, validation_alias=AliasChoices("user_id", "userId"))


class UserEnvelope(BaseModel):
    message: str
    user: UserResponse


class UserListResponse(BaseModel):
    message: str
    users: List[UserResponse]


class MessageResponse(BaseModel):
    message: str
