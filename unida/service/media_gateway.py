from __future__ import annotations

import asyncio
import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, FrozenSet, Optional, Tuple

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from unida.config import Config
from unida.exceptions import UploadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredMedia:
    url: str
    handle: str


@dataclass(frozen=True)
class MediaKind:
    content_types: FrozenSet[str]
    extensions: FrozenSet[str]
    formats: Tuple[str, ...]
    subfolder: str = ""


MEDIA_KINDS: Dict[str, MediaKind] = {
    "pdf": MediaKind(
        content_types=frozenset({"application/pdf"}),
        extensions=frozenset({".pdf"}),
        formats=("pdf",),
    ),
    "image": MediaKind(
        content_types=frozenset({"image/png", "image/jpeg", "image/gif", "image/webp"}),
        extensions=frozenset({".png", ".jpg", ".jpeg", ".gif", ".webp"}),
        formats=("png", "jpg", "jpeg", "gif", "webp"),
        subfolder="avatars",
    ),
}


def sniff(content: bytes) -> Optional[str]:
    """
    Guess the media kind from magic bytes, so a renamed text file is
    not accepted as a PDF.
    """
    if content.startswith(b"%PDF-"):
        return "pdf"
    if content.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image"
    if content.startswith(b"\xff\xd8\xff"):
        return "image"
    if content[:6] in (b"GIF87a", b"GIF89a"):
        return "image"
    if content[:4] == b"RIFF" and content[8:12] == b"WEBP":
        return "image"
    return None


class MediaGateway:
    """
    Remote object storage for uploaded files.

    ``store`` returns the durable URL plus an opaque handle; ``remove``
    takes that handle back. Both are awaitable; implementations that wrap
    blocking SDKs push the call into a worker thread.
    """

    def __init__(self, max_bytes: Optional[int] = None):
        self.max_bytes = max_bytes or Config.max_upload_bytes

    def check(self, data: bytes, filename: str, kind: str) -> MediaKind:
        media_kind = MEDIA_KINDS.get(kind)
        if media_kind is None:
            raise UploadError(f"Unknown media kind: {kind}", status_code=400)

        if not data:
            raise UploadError("Empty file", status_code=400)

        if len(data) > self.max_bytes:
            raise UploadError(
                f"File too large (max {self.max_bytes // (1024 * 1024)} MB)",
                status_code=400,
            )

        suffix = Path(filename or "").suffix.lower()
        if suffix not in media_kind.extensions or sniff(data) != kind:
            raise UploadError("Unsupported file type", status_code=400)

        return media_kind

    async def store(self, data: bytes, filename: str, kind: str) -> StoredMedia:
        raise NotImplementedError

    async def remove(self, handle: str) -> bool:
        raise NotImplementedError


class CloudinaryGateway(MediaGateway):
    """
    Cloudinary-backed gateway.

    Handles are ``"<resource_type>:<public_id>"``; Cloudinary needs the
    resource type again when destroying an asset.
    """

    def __init__(
        self,
        cloud_name: Optional[str] = None,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        folder: Optional[str] = None,
        timeout: Optional[int] = None,
        max_bytes: Optional[int] = None,
    ):
        super().__init__(max_bytes=max_bytes)
        cfg = Config.cloudinary
        self.folder = folder or cfg.folder
        self.timeout = timeout or cfg.timeout

        cloudinary.config(
            cloud_name=cloud_name or cfg.cloud_name,
            api_key=api_key or cfg.api_key,
            api_secret=api_secret or cfg.api_secret,
            secure=True,
        )

    # ---------- handles ----------

    @staticmethod
    def make_handle(resource_type: str, public_id: str) -> str:
        return f"{resource_type}:{public_id}"

    @staticmethod
    def split_handle(handle: str) -> Tuple[str, str]:
        resource_type, sep, public_id = handle.partition(":")
        if not sep or not public_id:
            # bare public ids from older records
            return "image", handle
        return resource_type, public_id

    # ---------- blocking SDK calls ----------

    def _upload(self, data: bytes, filename: str, media_kind: MediaKind) -> dict:
        folder = self.folder
        if media_kind.subfolder:
            folder = f"{folder}/{media_kind.subfolder}"

        buffer = io.BytesIO(data)
        buffer.name = filename
        return cloudinary.uploader.upload(
            buffer,
            folder=folder,
            resource_type="auto",
            allowed_formats=list(media_kind.formats),
            use_filename=True,
            unique_filename=True,
            timeout=self.timeout,
        )

    def _destroy(self, resource_type: str, public_id: str) -> dict:
        return cloudinary.uploader.destroy(
            public_id,
            resource_type=resource_type,
            invalidate=True,
            timeout=self.timeout,
        )

    # ---------- public API ----------

    async def store(self, data: bytes, filename: str, kind: str) -> StoredMedia:
        media_kind = self.check(data, filename, kind)

        try:
            result = await asyncio.to_thread(self._upload, data, filename, media_kind)
        except CloudinaryError as e:
            logger.error(f"❌ Cloudinary upload failed for {filename}: {e}")
            raise UploadError("File upload failed") from e
        except OSError as e:
            logger.error(f"❌ Media host unreachable while uploading {filename}: {e}")
            raise UploadError("File upload failed") from e

        url = result.get("secure_url") or result.get("url")
        public_id = result.get("public_id")
        if not url or not public_id:
            logger.error(f"❌ Unexpected Cloudinary response for {filename}: {result}")
            raise UploadError("File upload failed")

        handle = self.make_handle(result.get("resource_type", "image"), public_id)
        logger.info(f"✅ Stored {kind}: {filename} -> {handle}")
        return StoredMedia(url=url, handle=handle)

    async def remove(self, handle: str) -> bool:
        resource_type, public_id = self.split_handle(handle)

        try:
            result = await asyncio.to_thread(self._destroy, resource_type, public_id)
        except (CloudinaryError, OSError) as e:
            raise UploadError(f"Failed to remove {handle}") from e

        status = result.get("result")
        if status == "ok":
            logger.info(f"🗑 Removed media: {handle}")
            return True
        if status == "not found":
            logger.warning(f"⚠ Media already absent: {handle}")
            return False
        raise UploadError(f"Failed to remove {handle}: {status}")
