"""Image storage service.

Orders keep only an opaque ``image_key``; this module turns uploads into
keys and keys into time-limited URLs.  ``S3ImageService`` stores objects
in S3 and issues presigned GET URLs.  ``DisabledImageService`` is used
when no bucket is configured: lookups yield nothing and uploads fail.
"""

from __future__ import annotations

import os
import time
from abc import ABC, abstractmethod
from typing import Any, Optional

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings
from django.core.files.uploadedfile import UploadedFile

from modules.assets.exceptions import ImageUploadError, ImageURLError
from modules.assets.validators import validate_image_file

logger = structlog.get_logger(__name__)

UPLOAD_PREFIX = "uploads/"


class IImageService(ABC):
    @abstractmethod
    def upload_image(self, file: UploadedFile) -> str:
        """Validate and store *file*; return its storage key."""

    @abstractmethod
    def get_image_url(self, key: Optional[str]) -> Optional[str]:
        """Time-limited URL for *key*; ``None`` for an empty key."""

    @abstractmethod
    def delete_image(self, key: Optional[str]) -> None:
        """Remove the object behind *key*; empty keys are ignored."""


class S3ImageService(IImageService):
    """Images in an S3 bucket, served through presigned URLs."""

    def __init__(
        self,
        bucket: str,
        region_name: str = "us-east-1",
        aws_access_key_id: Optional[str] = None,
        aws_secret_access_key: Optional[str] = None,
        url_ttl: int = 3600,
        client: Any = None,
    ) -> None:
        self.bucket = bucket
        self.url_ttl = url_ttl
        self._region_name = region_name
        self._aws_access_key_id = aws_access_key_id
        self._aws_secret_access_key = aws_secret_access_key
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            kwargs: dict[str, Any] = {"region_name": self._region_name}
            if self._aws_access_key_id:
                kwargs["aws_access_key_id"] = self._aws_access_key_id
            if self._aws_secret_access_key:
                kwargs["aws_secret_access_key"] = self._aws_secret_access_key
            self._client = boto3.client("s3", **kwargs)
        return self._client

    @staticmethod
    def build_key(filename: str) -> str:
        return f"{UPLOAD_PREFIX}{int(time.time())}_{os.path.basename(filename)}"

    def upload_image(self, file: UploadedFile) -> str:
        validate_image_file(file)
        key = self.build_key(file.name or "image.png")
        try:
            self._get_client().upload_fileobj(
                file,
                self.bucket,
                key,
                ExtraArgs={"ContentType": file.content_type or "image/png"},
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("image.upload_failed", key=key, error=str(exc))
            raise ImageUploadError() from exc
        logger.info("image.uploaded", key=key, size=file.size)
        return key

    def get_image_url(self, key: Optional[str]) -> Optional[str]:
        if not key:
            return None
        try:
            return self._get_client().generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=self.url_ttl,
            )
        except (BotoCoreError, ClientError) as exc:
            raise ImageURLError() from exc

    def delete_image(self, key: Optional[str]) -> None:
        if not key:
            return
        try:
            self._get_client().delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            raise ImageUploadError("Failed to delete image") from exc
        logger.info("image.deleted", key=key)


class DisabledImageService(IImageService):
    """Stand-in when no bucket is configured."""

    def upload_image(self, file: UploadedFile) -> str:
        validate_image_file(file)
        logger.warning("image.storage_not_configured")
        raise ImageUploadError("Image storage is not configured")

    def get_image_url(self, key: Optional[str]) -> Optional[str]:
        return None

    def delete_image(self, key: Optional[str]) -> None:
        return None


def get_image_service() -> IImageService:
    """Build the image service from settings."""
    if not settings.AWS_S3_BUCKET:
        return DisabledImageService()
    return S3ImageService(
        bucket=settings.AWS_S3_BUCKET,
        region_name=settings.AWS_REGION,
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None,
        url_ttl=settings.AWS_PRESIGNED_URL_TTL,
    )
