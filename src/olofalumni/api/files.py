"""Serve stored uploads."""

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import FileResponse

from olofalumni.core.uploads import resolve_upload_path

router = APIRouter(tags=["uploads"])


@router.get("/uploads/{path:path}")
async def get_upload(path: str) -> FileResponse:
    """Stream a stored file; anything outside the upload root is a 404."""
    target = resolve_upload_path(path)
    if target is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    return FileResponse(target)
