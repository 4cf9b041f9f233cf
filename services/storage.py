"""
Local file storage for uploaded documents.
Stored files are served back under ``settings.public_base_url``; records only
ever hold the returned URL.
"""
from __future__ import annotations

import logging
import re
import uuid
from pathlib import Path

from config import settings
from services.errors import ValidationFailed
from services.validation import check_document

logger = logging.getLogger(__name__)

_SAFE_FOLDER = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def upload_root() -> Path:
    root = Path(settings.upload_dir)
    root.mkdir(parents=True, exist_ok=True)
    return root


def store_document(folder: str, filename: str, content_type: str | None, content: bytes) -> str:
    """Validate and write a document; returns its public URL."""
    if not _SAFE_FOLDER.match(folder):
        raise ValidationFailed("Invalid upload folder")
    ext = check_document(filename, content_type, len(content))
    target_dir = upload_root() / folder
    target_dir.mkdir(parents=True, exist_ok=True)
    stored_name = f"{uuid.uuid4().hex}{ext}"
    (target_dir / stored_name).write_bytes(content)
    logger.info("Stored %s (%d bytes) as %s/%s", filename, len(content), folder, stored_name)
    return f"{settings.public_base_url.rstrip('/')}/{folder}/{stored_name}"
