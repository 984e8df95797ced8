"""
Object storage for payment screenshots.

A bucket is a directory under STORAGE_ROOT; objects are addressed by a
relative POSIX path inside it and served read-only from
STORAGE_PUBLIC_BASE_URL (e.g. by nginx or any static file host).

Object naming follows `payment-screenshots/<user_id>_<epoch-ms>.<ext>`.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from pathlib import Path, PurePosixPath
from typing import Optional
from urllib.parse import quote

from challenge_bot.config import settings
from challenge_bot.errors import StorageError
from challenge_bot.models.entities import UploadedFile

logger = logging.getLogger(__name__)

SCREENSHOT_PREFIX = "payment-screenshots"

_MIME_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg":  "jpg",
    "image/png":  "png",
    "image/gif":  "gif",
    "image/webp": "webp",
}


def screenshot_path(
    user_id: int,
    original_name: str,
    now: Optional[datetime] = None,
    mime_type: str = "",
) -> str:
    """Build the storage path for a user's payment screenshot."""
    now = now or datetime.utcnow()
    ext = PurePosixPath(original_name).suffix.lstrip(".").lower()
    if not ext:
        ext = _MIME_EXTENSIONS.get(mime_type.lower(), "jpg")
    millis = int(now.timestamp() * 1000)
    return f"{SCREENSHOT_PREFIX}/{user_id}_{millis}.{ext}"


class ObjectStorage:
    """
    Minimal bucket-style storage on the local filesystem.

    Parameters
    ----------
    root            : base directory holding all buckets
    public_base_url : URL prefix the root directory is served under
    bucket          : bucket (sub-directory) name
    """

    def __init__(self, root: str | Path, public_base_url: str, bucket: str = "registrations") -> None:
        self._root   = Path(root)
        self._base   = public_base_url.rstrip("/")
        self._bucket = bucket

    @property
    def bucket_dir(self) -> Path:
        return self._root / self._bucket

    def _object_key(self, file_path: str) -> PurePosixPath:
        key = PurePosixPath(file_path)
        if not file_path or key.is_absolute() or ".." in key.parts:
            raise StorageError(f"Invalid object path: {file_path!r}")
        return key

    def get_public_url(self, file_path: str) -> str:
        key = self._object_key(file_path)
        return f"{self._base}/{quote(self._bucket)}/{quote(key.as_posix())}"

    async def upload(self, file_path: str, data: bytes) -> str:
        """Store `data` under `file_path` and return its public URL."""
        key = self._object_key(file_path)
        destination = self.bucket_dir.joinpath(*key.parts)
        if destination.exists():
            raise StorageError(f"Object already exists: {key.as_posix()}")

        def _write() -> None:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(data)

        try:
            await asyncio.to_thread(_write)
        except OSError as exc:
            raise StorageError(f"Could not store {key.as_posix()}: {exc}") from exc

        logger.info("Stored %s (%d bytes) in bucket %s", key.as_posix(), len(data), self._bucket)
        return self.get_public_url(file_path)

    async def upload_screenshot(
        self,
        user_id: int,
        original_name: str,
        data: bytes,
        mime_type: str = "",
    ) -> UploadedFile:
        path = screenshot_path(user_id, original_name, mime_type=mime_type)
        url = await self.upload(path, data)
        return UploadedFile(url=url, name=PurePosixPath(path).name)

    async def delete(self, file_path: str) -> None:
        """Remove the object at `file_path`; a missing object is not an error."""
        key = self._object_key(file_path)
        target = self.bucket_dir.joinpath(*key.parts)
        try:
            await asyncio.to_thread(target.unlink, missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Could not delete {key.as_posix()}: {exc}") from exc
        logger.info("Deleted %s from bucket %s", key.as_posix(), self._bucket)

    async def delete_screenshot(self, uploaded: UploadedFile) -> None:
        await self.delete(f"{SCREENSHOT_PREFIX}/{uploaded.name}")


storage = ObjectStorage(
    settings.STORAGE_ROOT,
    settings.STORAGE_PUBLIC_BASE_URL,
    settings.STORAGE_BUCKET,
)
