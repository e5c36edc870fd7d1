"""Upload validation and naming helpers for stored documents."""

from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Optional
from uuid import uuid4

from docshare.errors import ValidationFailedError

ALLOWED_EXTENSIONS = frozenset(
    {".pdf", ".doc", ".docx", ".txt", ".csv", ".xlsx", ".jpg", ".jpeg", ".png", ".gif"}
)


def file_extension(file_name: str) -> str:
    """Lower-cased extension including the dot, or "" when there is none."""
    return PurePosixPath(file_name).suffix.lower()


def validate_upload(file_name: Optional[str], size: int, max_bytes: int) -> str:
    """Check an uploaded file and return its normalized extension.

    Raises:
        ValidationFailedError: Empty file, too large, or an extension outside
            ALLOWED_EXTENSIONS.
    """
    if size <= 0:
        raise ValidationFailedError("File is empty")
    if size > max_bytes:
        raise ValidationFailedError(
            f"File size exceeds maximum allowed size of {max_bytes // (1024 * 1024)}MB"
        )
    if not file_name:
        raise ValidationFailedError("File name is required")
    extension = file_extension(file_name)
    if extension not in ALLOWED_EXTENSIONS:
        raise ValidationFailedError(
            f"File type not allowed. Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
        )
    return extension


def generate_blob_key(
    owner_id: str, extension: str, now: Optional[datetime] = None
) -> str:
    """Blob key of the form documents/<owner>/<YYYYmmdd_HHMMSS>_<hex><ext>."""
    now = now or datetime.now(timezone.utc)
    return f"documents/{owner_id}/{now:%Y%m%d_%H%M%S}_{uuid4().hex}{extension}"


def generate_shareable_link() -> str:
    return uuid4().hex


def parse_user_id_list(raw: Optional[str]) -> list[str]:
    """Split a comma-separated list of user ids, dropping blanks."""
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]
