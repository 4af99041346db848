"""Tests for upload validation and storage."""

import io

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from olofalumni.core.uploads import (
    UploadRejected,
    remove_upload,
    resolve_upload_path,
    sanitize_filename,
    save_upload,
    upload_root,
    validate_upload,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def make_upload(name: str, data: bytes = PNG_BYTES, content_type: str = "image/png") -> UploadFile:
    return UploadFile(
        file=io.BytesIO(data),
        filename=name,
        headers=Headers({"content-type": content_type}),
    )


class TestValidateUpload:
    """Test the extension/MIME whitelist."""

    def test_accepts_whitelisted_types(self) -> None:
        assert validate_upload("photo.PNG", "image/png") == "image/png"
        assert validate_upload("cv.pdf", "application/pdf") == "application/pdf"

    def test_generic_type_is_guessed_from_extension(self) -> None:
        assert validate_upload("photo.jpg", "application/octet-stream") == "image/jpeg"

    def test_rejects_unknown_extension(self) -> None:
        with pytest.raises(UploadRejected):
            validate_upload("script.exe", "application/octet-stream")

    def test_rejects_mismatched_content_type(self) -> None:
        with pytest.raises(UploadRejected):
            validate_upload("photo.png", "application/pdf")

    def test_images_only(self) -> None:
        with pytest.raises(UploadRejected) as exc_info:
            validate_upload("clip.mp4", "video/mp4", images_only=True)
        assert "images" in str(exc_info.value)


def test_sanitize_filename_strips_paths() -> None:
    assert sanitize_filename("../../etc/passwd") == "passwd"
    assert sanitize_filename("C:\\Users\\me\\my photo.png") == "my_photo.png"
    assert sanitize_filename("...") == "file"


def test_sanitize_filename_truncates_long_names() -> None:
    cleaned = sanitize_filename("b" * 400 + ".jpeg")
    assert len(cleaned) == 200
    assert cleaned.endswith(".jpeg")
    assert sanitize_filename("short.png") == "short.png"


@pytest.mark.asyncio
async def test_save_upload_writes_random_name() -> None:
    stored = await save_upload(make_upload("photo.png"))
    assert stored.filename.endswith(".png")
    assert stored.url == f"/uploads/{stored.filename}"
    assert stored.size == len(PNG_BYTES)
    assert (upload_root() / stored.filename).read_bytes() == PNG_BYTES


@pytest.mark.asyncio
async def test_save_upload_keeps_original_name_in_subdir() -> None:
    stored = await save_upload(make_upload("My Trip.png"), subdir="gallery", keep_original_name=True)
    stamp, _, rest = stored.filename.partition("-")
    assert stamp.isdigit()
    assert rest == "My_Trip.png"
    assert stored.url == f"/uploads/gallery/{stored.filename}"
    assert stored.original_name == "My Trip.png"


@pytest.mark.asyncio
async def test_save_upload_rejects_oversized(monkeypatch: pytest.MonkeyPatch) -> None:
    from olofalumni.settings import get_settings

    monkeypatch.setenv("MAX_UPLOAD_BYTES", "10")
    get_settings.cache_clear()
    with pytest.raises(UploadRejected) as exc_info:
        await save_upload(make_upload("photo.png"))
    assert exc_info.value.status_code == 413


@pytest.mark.asyncio
async def test_resolve_and_remove_upload() -> None:
    stored = await save_upload(make_upload("photo.png"))
    assert resolve_upload_path(stored.filename) is not None
    assert resolve_upload_path("../outside.txt") is None
    assert resolve_upload_path("missing.png") is None

    remove_upload(stored.url)
    assert resolve_upload_path(stored.filename) is None
    remove_upload("/uploads/missing.png")
    remove_upload(None)
