"""Password hashing, access tokens and one-time codes."""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from passlib.context import CryptContext

from olofalumni.settings import get_settings

_pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class AuthError(ValueError):
    """Raised when an access token cannot be trusted."""

    def __init__(self, message: str, reason: str) -> None:
        super().__init__(message)
        self.reason = reason


def hash_password(plain: str) -> str:
    """Hash a password for storage."""
    return _pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """Check a password against its stored hash."""
    try:
        return _pwd_context.verify(plain, hashed)
    except ValueError:
        # Unrecognised hash format
        return False


def create_access_token(user_id: str, email: str, now: datetime | None = None) -> str:
    """Issue a signed access token for the user."""
    settings = get_settings()
    issued_at = now or datetime.now(timezone.utc)
    claims = {
        "userId": user_id,
        "email": email,
        "iat": issued_at,
        "exp": issued_at + timedelta(days=settings.jwt_expire_days),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """Validate an access token and return its claims.

    Raises:
        AuthError: expired, tampered, or missing the ``userId`` claim
    """
    settings = get_settings()
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError as e:
        raise AuthError("Token has expired", reason="expired") from e
    except jwt.InvalidTokenError as e:
        raise AuthError(f"Invalid token: {e}", reason="invalid") from e

    if not claims.get("userId"):
        raise AuthError("Token has no userId claim", reason="invalid")
    return claims


def generate_verification_code() -> str:
    """Six-digit numeric code in 100000..999999."""
    return str(100000 + secrets.randbelow(900000))


def code_expiry(now: datetime | None = None) -> datetime:
    """Expiry timestamp for a freshly issued verification or reset code."""
    settings = get_settings()
    return (now or datetime.now(timezone.utc)) + timedelta(
        minutes=settings.verification_code_ttl_minutes
    )
