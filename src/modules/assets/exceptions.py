"""Image asset exceptions."""

from __future__ import annotations

from rest_framework import status

from modules.core.exceptions import DomainError, ValidationFailed


class ImageValidationError(ValidationFailed):
    """Uploaded file rejected before reaching storage.

    ``code`` is set per instance (``FILE_TOO_LARGE`` /
    ``INVALID_FILE_FORMAT``) so clients can tell the cases apart.
    """

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


class ImageUploadError(DomainError):
    code = "IMAGE_UPLOAD_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Failed to upload image"


class ImageURLError(DomainError):
    """A presigned URL could not be issued for a stored key."""

    code = "IMAGE_URL_ERROR"
    default_message = "Failed to generate image URL"
