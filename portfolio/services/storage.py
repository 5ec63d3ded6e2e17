from __future__ import annotations

import logging
import mimetypes
import uuid
from pathlib import Path
from typing import Protocol

from portfolio.core.config import settings

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/zip",
    "text/plain",
    "image/png",
    "image/jpeg",
    "image/gif",
    "image/webp",
    "video/mp4",
    "audio/mpeg",
}


class BlobStore(Protocol):
    def upload_file(self, data: bytes, content_type: str) -> str: ...

    def delete_file(self, url: str) -> bool: ...


class LocalBlobStore:
    """
    Stores uploads under `root` with random names and serves them from
    `<base_url>/uploads/<name>`.
    """

    def __init__(self, root: str | Path, base_url: str):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def _ensure_root(self) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def upload_file(self, data: bytes, content_type: str) -> str:
        ext = mimetypes.guess_extension(content_type or "") or ""
        name = f"{uuid.uuid4().hex}{ext}"
        dest = self._ensure_root() / name
        dest.write_bytes(data)
        logger.info("stored upload %s (%d bytes)", name, len(data))
        return f"{self.base_url}/uploads/{name}"

    def delete_file(self, url: str) -> bool:
        prefix = f"{self.base_url}/uploads/"
        if not url.startswith(prefix):
            return False
        name = url[len(prefix):]
        # only bare names we generated; no path traversal
        if not name or "/" in name or "\\" in name or name.startswith("."):
            return False
        path = self.root / name
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError:
            logger.exception("could not delete %s", path)
            return False
        return True


def get_blob_store() -> BlobStore:
    return LocalBlobStore(settings.UPLOAD_DIR, settings.PUBLIC_BASE_URL)
