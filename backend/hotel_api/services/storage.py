"""Image storage behind a small interface.

Routes only see ``FileStore.save(filename, content_type, data) -> url``; the
local implementation writes under ``UPLOAD_DIR`` which the app serves at
``/uploads``.
"""
import logging
import os
import secrets
import time
from pathlib import Path
from typing import Optional, Protocol

from hotel_api.core.errors import ValidationError

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".avif"}


class FileStore(Protocol):
    def save(self, filename: str, content_type: Optional[str], data: bytes) -> str: ...


def safe_extension(filename: str) -> str:
    ext = os.path.splitext(os.path.basename(filename or ""))[1].lower()
    return ext if ext in IMAGE_EXTENSIONS else ""


class LocalFileStore:
    def __init__(self, root: str | Path, base_url: str, max_bytes: int, prefix: str = "image"):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")
        self.max_bytes = max_bytes
        self.prefix = prefix

    def validate(self, content_type: Optional[str], data: bytes) -> None:
        if not data:
            raise ValidationError("No file uploaded")
        if not (content_type or "").startswith("image/") or content_type.startswith("image/svg"):
            raise ValidationError("Only image files are allowed")
        if len(data) > self.max_bytes:
            raise ValidationError(f"File too large (max {self.max_bytes // (1024 * 1024)}MB)")

    def save(self, filename: str, content_type: Optional[str], data: bytes) -> str:
        self.validate(content_type, data)
        name = f"{self.prefix}-{int(time.time() * 1000)}-{secrets.token_hex(4)}{safe_extension(filename)}"
        self.root.mkdir(parents=True, exist_ok=True)
        (self.root / name).write_bytes(data)
        logger.info("Stored upload %s (%d bytes)", name, len(data))
        return f"{self.base_url}/uploads/{name}"
