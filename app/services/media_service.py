"""
Storage of uploaded images and videos under UPLOADS_DIR
"""
import logging
import os
import re
import uuid
from typing import Iterable, List

import aiofiles
from fastapi import HTTPException, UploadFile

from app.core.config import settings

logger = logging.getLogger(__name__)

UPLOADS_DIR = settings.UPLOADS_DIR
UPLOADS_URL_PREFIX = "/uploads"

os.makedirs(UPLOADS_DIR, exist_ok=True)

_EXTENSION_RE = re.compile(r"[^A-Za-z0-9.]")


def validate_filename(filename: str) -> str:
    """
    Reduces an uploaded filename to a safe basename.

    Path components are dropped and anything that is not alphanumeric or a
    dot is removed. Backslashes and names that end up empty are rejected.
    """
    if not filename or "\\" in filename:
        raise HTTPException(status_code=400, detail="Invalid filename")
    name = os.path.basename(filename)
    name = _EXTENSION_RE.sub("", name)
    if not name or name.strip(".") == "" or ".." in name:
        raise HTTPException(status_code=400, detail="Invalid filename")
    return name


def validate_content_type(file: UploadFile, kind: str) -> None:
    """kind is 'image' or 'video'"""
    content_type = file.content_type or ""
    if not content_type.startswith(f"{kind}/"):
        raise HTTPException(
            status_code=400,
            detail=f"Only {kind} files are allowed for this field"
        )


async def save_upload(file: UploadFile, kind: str) -> str:
    """
    Validates and writes one upload, returning its public path (/uploads/<name>)
    """
    validate_content_type(file, kind)
    safe_name = validate_filename(file.filename)
    content = await file.read()
    if len(content) > settings.max_file_size_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"File too large (max {settings.MAX_FILE_SIZE_MB}MB)"
        )

    ext = os.path.splitext(safe_name)[1].lower()
    unique_name = f"{kind}-{uuid.uuid4().hex}{ext}"
    dest = os.path.join(UPLOADS_DIR, unique_name)
    try:
        async with aiofiles.open(dest, "wb") as out:
            await out.write(content)
    except OSError as e:
        logger.error(f"Failed to write upload {unique_name}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to store uploaded file")
    return f"{UPLOADS_URL_PREFIX}/{unique_name}"


async def save_uploads(files: Iterable[UploadFile], kind: str) -> List[str]:
    """Saves files in order; on any failure the ones already written are removed"""
    saved: List[str] = []
    try:
        for file in files:
            saved.append(await save_upload(file, kind))
    except Exception:
        remove_files(saved)
        raise
    return saved


def remove_files(paths: Iterable[str]) -> None:
    for path in paths:
        name = os.path.basename(path)
        try:
            os.remove(os.path.join(UPLOADS_DIR, name))
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove upload {name}: {e}")
