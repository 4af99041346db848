"""Core helpers: security and uploads."""

from olofalumni.core.security import (
    AuthError,
    code_expiry,
    create_access_token,
    decode_access_token,
    generate_verification_code,
    hash_password,
    verify_password,
)
from olofalumni.core.uploads import StoredFile, UploadRejected, save_upload

__all__ = [
    "AuthError",
    "code_expiry",
    "create_access_token",
    "decode_access_token",
    "generate_verification_code",
    "hash_password",
    "save_upload",
    "StoredFile",
    "UploadRejected",
    "verify_password",
]
