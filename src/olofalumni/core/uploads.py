"""Validation and storage of uploaded files."""

import logging
import mimetypes
import re
import time
from dataclasses import dataclass
from pathlib import Path
from uuid import uuid4

from fastapi import UploadFile

from olofalumni.settings import get_settings

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = frozenset({"jpeg", "jpg", "png", "gif"})

# Acceptable content types per extension family.
_MIME_RULES: dict[str, tuple[str, ...]] = {
    "jpeg": ("image/jpeg", "image/pjpeg"),
    "jpg": ("image/jpeg", "image/pjpeg"),
    "png": ("image/png",),
    "gif": ("image/gif",),
    "mp4": ("video/mp4",),
    "mov": ("video/quicktime",),
    "avi": ("video/x-msvideo", "video/avi", "video/msvideo"),
    "pdf": ("application/pdf",),
    "doc": ("application/msword",),
    "docx": ("application/vnd.openxmlformats-officedocument.wordprocessingml.document",),
}
_GENERIC_TYPES = ("", "application/octet-stream")

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")

# Stored names are prefixed with a 13-digit timestamp; keep the whole name well under 255 bytes.
MAX_STORED_NAME_LENGTH = 200
MAX_ORIGINAL_NAME_LENGTH = 255


class UploadRejected(ValueError):
    """Raised when an uploaded file fails validation."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class StoredFile:
    """A file written under the upload root."""

    filename: str
    original_name: str
    mime_type: str
    size: int
    url: str


def upload_root() -> Path:
    """Resolved upload directory, created on first use."""
    root = Path(get_settings().upload_dir).resolve()
    root.mkdir(parents=True, exist_ok=True)
    return root


def sanitize_filename(name: str) -> str:
    """Strip directories and unsafe characters from a client-supplied name."""
    base = Path(name.replace("\\", "/")).name
    cleaned = _UNSAFE_CHARS.sub("_", base).strip("._") or "file"
    if len(cleaned) > MAX_STORED_NAME_LENGTH:
        suffix = Path(cleaned).suffix[:16]
        cleaned = cleaned[: MAX_STORED_NAME_LENGTH - len(suffix)].rstrip("._") + suffix
    return cleaned


def _extension(name: str) -> str:
    return Path(name).suffix.lower().lstrip(".")


def validate_upload(original_name: str, content_type: str | None, images_only: bool = False) -> str:
    """Check name and declared type against the whitelist.

    Returns:
        The content type to record for the file
    """
    settings = get_settings()
    ext = _extension(original_name)
    allowed = settings.get_allowed_upload_extensions()
    if images_only:
        allowed = allowed & IMAGE_EXTENSIONS

    if not ext or ext not in allowed:
        kinds = "images" if images_only else "images, videos, and documents"
        raise UploadRejected(f"Invalid file type. Only {kinds} are allowed.")

    declared = (content_type or "").split(";")[0].strip().lower()
    if declared in _GENERIC_TYPES:
        return mimetypes.guess_type(f"file.{ext}")[0] or "application/octet-stream"

    expected = _MIME_RULES.get(ext)
    if expected is not None and declared not in expected:
        raise UploadRejected(
            f"Invalid file type. Content type {declared!r} does not match .{ext} files."
        )
    return declared


async def save_upload(
    file: UploadFile,
    subdir: str = "",
    images_only: bool = False,
    keep_original_name: bool = False,
) -> StoredFile:
    """Validate ``file`` and write it under the upload root.

    Files are stored as ``<random hex>.<ext>``; with ``keep_original_name``
    they become ``<epoch ms>-<sanitised original name>`` instead.

    Raises:
        UploadRejected: bad type (400) or larger than max_upload_bytes (413)
    """
    settings = get_settings()
    original_name = file.filename or ""
    mime_type = validate_upload(original_name, file.content_type, images_only=images_only)

    data = await file.read(settings.max_upload_bytes + 1)
    if len(data) > settings.max_upload_bytes:
        raise UploadRejected(
            f"File too large. Maximum size is {settings.max_upload_bytes} bytes.",
            status_code=413,
        )

    if keep_original_name:
        filename = f"{int(time.time() * 1000)}-{sanitize_filename(original_name)}"
    else:
        filename = f"{uuid4().hex}.{_extension(original_name)}"

    target_dir = upload_root() / subdir if subdir else upload_root()
    target_dir.mkdir(parents=True, exist_ok=True)
    (target_dir / filename).write_bytes(data)

    url_path = f"{subdir}/{filename}" if subdir else filename
    logger.info("Stored upload %s (%d bytes, %s)", url_path, len(data), mime_type)
    return StoredFile(
        filename=filename,
        original_name=original_name[:MAX_ORIGINAL_NAME_LENGTH],
        mime_type=mime_type,
        size=len(data),
        url=f"/uploads/{url_path}",
    )


def resolve_upload_path(relative: str) -> Path | None:
    """Map a ``/uploads/<relative>`` path to a file, refusing anything outside the root."""
    root = upload_root()
    candidate = (root / relative).resolve()
    if candidate != root and root not in candidate.parents:
        return None
    if not candidate.is_file():
        return None
    return candidate


def remove_upload(url: str | None) -> None:
    """Delete a stored file given its ``/uploads/...`` URL; missing files are ignored."""
    if not url or not url.startswith("/uploads/"):
        return
    path = resolve_upload_path(url[len("/uploads/"):])
    if path is None:
        return
    try:
        path.unlink()
    except OSError as e:
        logger.warning("Failed to remove upload %s: %s", url, e)
