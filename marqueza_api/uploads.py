# marqueza_api/uploads.py
# Single-file image uploads attached to routes as a dependency.

import logging
import mimetypes
import os
import uuid
from typing import Optional

from fastapi import Request
from starlette.datastructures import UploadFile

from . import config

logger = logging.getLogger(__name__)


class UploadError(Exception):
    """Base class for rejected uploads."""
    status_code = 400


class InvalidImageTypeError(UploadError):
    """Only image/* MIME types are accepted."""
    pass


class ImageTooLargeError(UploadError):
    """File is bigger than the 5 MB cap."""
    status_code = 413


class UploadStorageError(UploadError):
    status_code = 500


def _extension_for(upload: UploadFile) -> str:
    _, ext = os.path.splitext(upload.filename or "")
    if ext:
        return ext.lower()
    return mimetypes.guess_extension(upload.content_type or "") or ""


def check_image_type(upload: UploadFile) -> None:
    content_type = upload.content_type or ""
    if not content_type.startswith("image/"):
        raise InvalidImageTypeError("Only image files are allowed")


def save_image(upload: UploadFile, subdir: str) -> str:
    """
    Validates an uploaded image and writes it under UPLOAD_DIR/subdir.
    The MIME type is checked first, then the size cap while streaming.
    Returns:
        public URL of the stored file ("/uploads/<subdir>/<name>").
    """
    check_image_type(upload)

    max_mb = config.MAX_UPLOAD_BYTES // (1024 * 1024)
    target_dir = os.path.join(config.UPLOAD_DIR, subdir)
    os.makedirs(target_dir, exist_ok=True)
    name = f"{uuid.uuid4().hex}{_extension_for(upload)}"
    path = os.path.join(target_dir, name)

    total = 0
    try:
        with open(path, "wb") as f:
            while True:
                chunk = upload.file.read(config.CHUNK_SIZE)
                if not chunk:
                    break
                total += len(chunk)
                if total > config.MAX_UPLOAD_BYTES:
                    raise ImageTooLargeError(f"File exceeds the {max_mb}MB limit")
                f.write(chunk)
    except UploadError:
        _discard(path)
        raise
    except OSError as e:
        _discard(path)
        raise UploadStorageError(f"Could not store file: {e!s}")

    logger.info("Stored %s (%d bytes) as %s", upload.filename, total, path)
    return f"/uploads/{subdir}/{name}"


def _discard(path: str) -> None:
    if os.path.exists(path):
        try:
            os.remove(path)
        except OSError:
            logger.warning("Could not remove partial upload %s", path)


def single_image_upload(field_name: str):
    """
    Dependency factory: reads one file field from a multipart body and checks its type.
    Resolves to the UploadFile, or None when the request carries no file. Nothing
    is written to disk here; controllers call save_image once the request is accepted.
    """
    async def _dependency(request: Request) -> Optional[UploadFile]:
        content_type = request.headers.get("content-type", "")
        if not content_type.startswith("multipart/form-data"):
            return None
        form = await request.form()
        upload = form.get(field_name)
        if not isinstance(upload, UploadFile) or not upload.filename:
            return None
        check_image_type(upload)
        return upload

    return _dependency
