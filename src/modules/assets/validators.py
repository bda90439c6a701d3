"""Upload validation for order images."""

from __future__ import annotations

import os

from django.conf import settings
from django.core.files.uploadedfile import UploadedFile

from modules.assets.exceptions import ImageValidationError


def validate_image_file(file: UploadedFile) -> None:
    """Reject files over the size limit or with a disallowed extension.

    Size is checked first, then the (case-insensitive) extension.
    """
    max_bytes: int = settings.IMAGE_MAX_UPLOAD_BYTES
    if file.size is not None and file.size > max_bytes:
        raise ImageValidationError(
            "FILE_TOO_LARGE",
            "File size exceeds maximum allowed size of "
            f"{max_bytes // (1024 * 1024)} MB",
        )

    allowed = tuple(settings.IMAGE_ALLOWED_EXTENSIONS)
    _, ext = os.path.splitext(file.name or "")
    if ext.lower() not in allowed:
        raise ImageValidationError(
            "INVALID_FILE_FORMAT",
            f"Only {', '.join(allowed)} files are allowed",
        )
