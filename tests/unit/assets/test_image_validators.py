"""Tests for image upload validation."""

from __future__ import annotations

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from modules.assets.exceptions import ImageValidationError
from modules.assets.validators import validate_image_file

pytestmark = pytest.mark.unit

PNG_HEADER = b"\x89PNG\r\n\x1a\n"


def test_png_accepted():
    validate_image_file(SimpleUploadedFile("nails.png", PNG_HEADER, "image/png"))


def test_extension_is_case_insensitive():
    validate_image_file(SimpleUploadedFile("NAILS.PNG", PNG_HEADER, "image/png"))


@pytest.mark.parametrize("name", ["nails.jpg", "nails.png.exe", "nails"])
def test_other_formats_rejected(name):
    with pytest.raises(ImageValidationError) as exc_info:
        validate_image_file(SimpleUploadedFile(name, PNG_HEADER))
    assert exc_info.value.code == "INVALID_FILE_FORMAT"
    assert exc_info.value.message == "Only .png files are allowed"
    assert exc_info.value.status_code == 400


def test_size_checked_before_extension(settings):
    settings.IMAGE_MAX_UPLOAD_BYTES = 4
    with pytest.raises(ImageValidationError) as exc_info:
        validate_image_file(SimpleUploadedFile("nails.jpg", PNG_HEADER))
    assert exc_info.value.code == "FILE_TOO_LARGE"
