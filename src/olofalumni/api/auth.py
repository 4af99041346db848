"""Registration, verification, login and password reset routes."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from sqlalchemy.exc import IntegrityError

from olofalumni.api.deps import get_current_user, has_file, store_upload
from olofalumni.contracts.enums import Gender, NotificationType
from olofalumni.contracts.models import UserSelf, self_user_view
from olofalumni.core.security import (
    code_expiry,
    create_access_token,
    generate_verification_code,
    hash_password,
    verify_password,
)
from olofalumni.db.repos import UserRepo
from olofalumni.db.session import db_session
from olofalumni.events import publish_event
from olofalumni.events.constants import EVENT_USER_REGISTERED, EVENT_USER_VERIFIED
from olofalumni.services.email import (
    MailDeliveryError,
    send_password_reset_email,
    send_verification_email,
    send_welcome_email,
)
from olofalumni.services.notifications import notify_all

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

MIN_PASSWORD_LENGTH = 6
MIN_BIO_WORDS = 5
RESET_REQUESTED_MESSAGE = "If an account exists for that email, a reset code has been sent."


def _normalize_email(v: str) -> str:
    return v.strip().lower()


class RegisterRequest(BaseModel):
    """Request to register a new alumni account."""

    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    confirm_password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    gender: Gender
    year_of_completion: int = Field(ge=1950, le=2100)
    stream_clan: str = Field(min_length=1)

    model_config = {"extra": "forbid"}

    normalize_email = field_validator("email")(_normalize_email)

    @field_validator("name", "stream_clan")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @model_validator(mode="after")
    def passwords_match(self) -> "RegisterRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords don't match")
        return self


class RegisterResponse(BaseModel):
    """Response from registering."""

    message: str
    email: str
    email_sent: bool


class VerifyRequest(BaseModel):
    """Request to verify an email address."""

    email: EmailStr
    code: str = Field(min_length=6, max_length=6)

    model_config = {"extra": "forbid"}

    normalize_email = field_validator("email")(_normalize_email)


class EmailRequest(BaseModel):
    """Request carrying only an email address."""

    email: EmailStr

    model_config = {"extra": "forbid"}

    normalize_email = field_validator("email")(_normalize_email)


class LoginRequest(BaseModel):
    """Request to log in."""

    email: EmailStr
    password: str = Field(min_length=1)

    model_config = {"extra": "forbid"}

    normalize_email = field_validator("email")(_normalize_email)


class LoginResponse(BaseModel):
    """Response from logging in."""

    token: str
    user: UserSelf


class ResetPasswordRequest(BaseModel):
    """Request to set a new password with an emailed code."""

    email: EmailStr
    code: str = Field(min_length=6, max_length=6)
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    confirm_password: str = Field(min_length=MIN_PASSWORD_LENGTH)

    model_config = {"extra": "forbid"}

    normalize_email = field_validator("email")(_normalize_email)

    @model_validator(mode="after")
    def passwords_match(self) -> "ResetPasswordRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords don't match")
        return self


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


class ProfileResponse(BaseModel):
    """Acknowledgement carrying the updated user."""

    message: str
    user: UserSelf


def validate_bio(bio: str) -> str:
    """Bio must have at least five characters and five words."""
    bio = bio.strip()
    if len(bio) < 5:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Bio must be at least 5 characters",
        )
    if len(bio.split()) < MIN_BIO_WORDS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Bio must contain at least {MIN_BIO_WORDS} words",
        )
    return bio


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest) -> RegisterResponse:
    """Create an unverified account and email its verification code."""
    code = generate_verification_code()

    async with db_session() as session:
        repo = UserRepo(session)
        if await repo.get_by_email(request.email):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="User already exists",
            )

        user = await repo.create_user(
            name=request.name,
            email=request.email,
            password_hash=hash_password(request.password),
            gender=request.gender.value,
            year_of_completion=request.year_of_completion,
            stream_clan=request.stream_clan,
            verification_code=code,
            verification_expires_at=code_expiry(),
        )
        try:
            await session.commit()
        except IntegrityError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="User already exists",
            ) from e

    email_sent = True
    try:
        await send_verification_email(request.email, request.name, code)
    except MailDeliveryError as e:
        email_sent = False
        logger.error(f"Registration of {request.email} succeeded but mail failed: {e}")

    await notify_all(
        NotificationType.USER_REGISTERED,
        "New Alumni Joined",
        f"{request.name} just joined the OLOF Alumni community!",
        related_user_id=user["id"],
    )
    await publish_event(
        EVENT_USER_REGISTERED,
        actor_id=user["id"],
        entity_id=user["id"],
        payload={"year_of_completion": request.year_of_completion, "stream_clan": request.stream_clan},
    )

    return RegisterResponse(
        message="User registered successfully. Please check your email for verification code.",
        email=request.email,
        email_sent=email_sent,
    )


@router.post("/verify", response_model=MessageResponse)
async def verify(request: VerifyRequest) -> MessageResponse:
    """Confirm an email address with its verification code."""
    async with db_session() as session:
        repo = UserRepo(session)
        if not await repo.verify_user(request.email, request.code):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid verification code",
            )
        await session.commit()
        user = await repo.get_by_email(request.email)

    if user:
        try:
            await send_welcome_email(user["email"], user["name"])
        except MailDeliveryError as e:
            logger.error(f"Welcome email for {user['email']} failed: {e}")
        await publish_event(EVENT_USER_VERIFIED, actor_id=user["id"], entity_id=user["id"])

    return MessageResponse(message="Email verified successfully")


@router.post("/resend-code", response_model=MessageResponse)
async def resend_code(request: EmailRequest) -> MessageResponse:
    """Issue a fresh verification code for an unverified account."""
    code = generate_verification_code()

    async with db_session() as session:
        repo = UserRepo(session)
        user = await repo.get_by_email(request.email)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found",
            )
        if user["is_verified"]:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Account is already verified",
            )
        await repo.set_verification_code(request.email, code, code_expiry())
        await session.commit()

    try:
        await send_verification_email(user["email"], user["name"], code)
    except MailDeliveryError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Could not send verification email",
        ) from e

    return MessageResponse(message="Verification code sent")


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest) -> LoginResponse:
    """Exchange credentials for an access token."""
    async with db_session() as session:
        user = await UserRepo(session).get_by_email(request.email)

    if not user or not user["is_verified"]:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials or unverified account",
        )
    if not verify_password(request.password, user["password"]):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    token = create_access_token(user["id"], user["email"])
    return LoginResponse(token=token, user=self_user_view(user))


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(request: EmailRequest) -> MessageResponse:
    """Email a password reset code; the response never reveals whether the account exists."""
    code = generate_verification_code()

    async with db_session() as session:
        repo = UserRepo(session)
        user = await repo.get_by_email(request.email)
        if user:
            await repo.set_reset_code(request.email, code, code_expiry())
            await session.commit()

    if user:
        try:
            await send_password_reset_email(user["email"], user["name"], code)
        except MailDeliveryError as e:
            logger.error(f"Password reset email for {user['email']} failed: {e}")
    else:
        logger.info(f"Password reset requested for unknown email {request.email}")

    return MessageResponse(message=RESET_REQUESTED_MESSAGE)


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(request: ResetPasswordRequest) -> MessageResponse:
    """Set a new password using an emailed reset code."""
    async with db_session() as session:
        repo = UserRepo(session)
        if not await repo.reset_password(request.email, request.code, hash_password(request.password)):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid or expired reset code",
            )
        await session.commit()

    return MessageResponse(message="Password has been reset")


@router.post("/profile-setup", response_model=ProfileResponse)
async def profile_setup(
    bio: str = Form(...),
    hide_email: bool | None = Form(None),
    hide_phone: bool | None = Form(None),
    profile_picture: UploadFile | None = File(None),
    cover_photo: UploadFile | None = File(None),
    current_user: dict[str, Any] = Depends(get_current_user),
) -> ProfileResponse:
    """Complete the profile after first login."""
    updates: dict[str, Any] = {"bio": validate_bio(bio)}
    if hide_email is not None:
        updates["hide_email"] = hide_email
    if hide_phone is not None:
        updates["hide_phone"] = hide_phone
    if has_file(profile_picture):
        stored = await store_upload(profile_picture, images_only=True)
        updates["profile_picture"] = stored.url
    if has_file(cover_photo):
        stored = await store_upload(cover_photo, images_only=True)
        updates["cover_photo"] = stored.url

    async with db_session() as session:
        user = await UserRepo(session).update_user(current_user["id"], updates)
        await session.commit()

    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return ProfileResponse(message="Profile setup completed", user=self_user_view(user))


@router.get("/me", response_model=UserSelf)
async def me(current_user: dict[str, Any] = Depends(get_current_user)) -> UserSelf:
    """The authenticated user's own record."""
    return self_user_view(current_user)
