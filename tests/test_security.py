"""
Tests for upload validation and storage
"""
import io
import os

import pytest
from fastapi import HTTPException, UploadFile
from starlette.datastructures import Headers

from app.core.config import settings
from app.services import media_service
from app.services.media_service import remove_files, save_upload, save_uploads, validate_filename


def make_upload(filename: str, content: bytes, content_type: str) -> UploadFile:
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


class TestPathTraversalValidation:
    """Tests for validate_filename"""

    def test_safe_filename(self):
        assert validate_filename("image.jpg") == "image.jpg"

    def test_path_components_dropped(self):
        safe_name = validate_filename("../../../etc/passwd")
        assert safe_name == "passwd"
        assert validate_filename("path/to/file.jpg") == "file.jpg"

    def test_special_characters_removed(self):
        assert validate_filename("my photo (1).png") == "myphoto1.png"

    def test_backslash_rejected(self):
        with pytest.raises(HTTPException) as exc_info:
            validate_filename("..\\..\\windows\\system32")
        assert exc_info.value.status_code == 400

    def test_empty_rejected(self):
        for name in ("", "...", "/"):
            with pytest.raises(HTTPException):
                validate_filename(name)


class TestUploadStorage:
    """Tests for save_upload and friends"""

    @pytest.mark.asyncio
    async def test_save_image(self):
        url = await save_upload(make_upload("front.PNG", b"png-bytes", "image/png"), "image")
        assert url.startswith("/uploads/image-")
        assert url.endswith(".png")
        path = os.path.join(settings.UPLOADS_DIR, os.path.basename(url))
        with open(path, "rb") as stored:
            assert stored.read() == b"png-bytes"
        remove_files([url])
        assert not os.path.exists(path)

    @pytest.mark.asyncio
    async def test_wrong_kind_rejected(self):
        with pytest.raises(HTTPException) as exc_info:
            await save_upload(make_upload("clip.mp4", b"data", "video/mp4"), "image")
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_too_large_rejected(self):
        upload = make_upload("big.png", b"x" * (settings.max_file_size_bytes + 1), "image/png")
        with pytest.raises(HTTPException) as exc_info:
            await save_upload(upload, "image")
        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == f"File too large (max {settings.MAX_FILE_SIZE_MB}MB)"

    @pytest.mark.asyncio
    async def test_save_uploads_cleans_up_on_failure(self):
        before = set(os.listdir(media_service.UPLOADS_DIR))
        uploads = [
            make_upload("a.png", b"a", "image/png"),
            make_upload("b.png", b"b", "image/png"),
            make_upload("c.txt", b"c", "text/plain"),
        ]
        with pytest.raises(HTTPException):
            await save_uploads(uploads, "image")
        assert set(os.listdir(media_service.UPLOADS_DIR)) == before

    @pytest.mark.asyncio
    async def test_save_uploads_keeps_order(self):
        uploads = [make_upload(f"{i}.jpg", str(i).encode(), "image/jpeg") for i in range(3)]
        urls = await save_uploads(uploads, "image")
        assert len(urls) == 3
        for i, url in enumerate(urls):
            with open(os.path.join(settings.UPLOADS_DIR, os.path.basename(url)), "rb") as stored:
                assert stored.read() == str(i).encode()
        remove_files(urls)

    def test_remove_missing_file_is_ignored(self):
        remove_files(["/uploads/does-not-exist.png"])
