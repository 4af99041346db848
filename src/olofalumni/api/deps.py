"""Shared route dependencies and helpers."""

import logging
from typing import Any

from fastapi import Depends, HTTPException, UploadFile, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from olofalumni.core.security import AuthError, decode_access_token
from olofalumni.core.uploads import StoredFile, UploadRejected, save_upload
from olofalumni.db.repos import UserRepo
from olofalumni.db.session import db_session

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def user_from_token(token: str) -> dict[str, Any]:
    """Resolve an access token to its user row.

    Raises:
        AuthError: token invalid or user no longer exists
    """
    claims = decode_access_token(token)
    async with db_session() as session:
        user = await UserRepo(session).get_by_id(claims["userId"])
    if user is None:
        raise AuthError(f"User {claims['userId']} no longer exists", reason="unknown_user")
    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> dict[str, Any]:
    """Authenticate the request from its bearer token."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
        )
    try:
        return await user_from_token(credentials.credentials)
    except AuthError as e:
        if e.reason == "unknown_user":
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found",
            ) from e
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid token",
        ) from e


def has_file(upload: UploadFile | None) -> bool:
    """Whether a multipart field actually carried a file."""
    return upload is not None and bool(upload.filename)


async def store_upload(upload: UploadFile, subdir: str = "", **kwargs: Any) -> StoredFile:
    """save_upload with rejections mapped to HTTP errors."""
    try:
        return await save_upload(upload, subdir=subdir, **kwargs)
    except UploadRejected as e:
        raise HTTPException(status_code=e.status_code, detail=str(e)) from e
