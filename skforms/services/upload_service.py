"""Local storage for files uploaded with form submissions."""

from __future__ import annotations

import logging
import os
import re
import time
from typing import BinaryIO

from fastapi import UploadFile

from skforms.core.config import settings

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._ ()-]+")


class UploadRejectedError(ValueError):
    """Uploaded file cannot be accepted."""


def _get_local_storage_path() -> str:
    return settings.UPLOAD_DIR


def safe_filename(filename: str) -> str:
    base = os.path.basename(filename.replace("\\", "/"))
    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", base).strip(" .")
    return cleaned or "upload"


def build_storage_name(field_name: str, filename: str, timestamp_ms: int | None = None) -> str:
    """Stored name: ``{field}-{timestamp_ms}-{original filename}``."""
    stamp = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
    return f"{safe_filename(field_name)}-{stamp}-{safe_filename(filename)}"


def _file_size(file: BinaryIO) -> int:
    file.seek(0, os.SEEK_END)
    size = file.tell()
    file.seek(0)
    return size


def store_file(storage_name: str, file: BinaryIO) -> str:
    """Write a file to the upload directory and return its public URL."""
    path = os.path.join(_get_local_storage_path(), storage_name)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        file.seek(0)
        f.write(file.read())
    return f"{settings.UPLOAD_URL_PREFIX.rstrip('/')}/{storage_name}"


def delete_file(url: str) -> None:
    """Remove a stored upload given its public URL (missing files are ignored)."""
    storage_name = url.rsplit("/", 1)[-1]
    path = os.path.join(_get_local_storage_path(), storage_name)
    if os.path.exists(path):
        os.remove(path)


def store_submission_files(files: dict[str, UploadFile]) -> dict[str, str]:
    """Store each non-empty upload; returns ``{field_name: url}``."""
    stored: dict[str, str] = {}
    for field_name, upload in files.items():
        size = _file_size(upload.file)
        if size == 0:
            continue
        if size > settings.MAX_UPLOAD_BYTES:
            for url in stored.values():
                delete_file(url)
            raise UploadRejectedError(
                f"File for {field_name!r} exceeds {settings.MAX_UPLOAD_BYTES} bytes"
            )
        storage_name = build_storage_name(field_name, upload.filename or "upload")
        stored[field_name] = store_file(storage_name, upload.file)
        logger.info("Stored submission upload for field %s (%s bytes)", field_name, size)
    return stored
