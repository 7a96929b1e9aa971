import pytest

from mealmigo_site.services.documents import InvalidStoragePathError
from mealmigo_site.services.media import (
    MAX_IMAGE_BYTES,
    UploadedFile,
    UploadValidationError,
    ensure_managed_path,
    media_path,
    resolve_content_type,
    validate_upload,
)


def test_resolve_content_type_falls_back_to_extension() -> None:
    upload = UploadedFile("photo.jpg", "application/octet-stream", b"x")

    assert resolve_content_type(upload) == "image/jpeg"


def test_validate_upload_accepts_png() -> None:
    assert validate_upload(UploadedFile("a.png", "image/png", b"x")) == "image/png"


@pytest.mark.parametrize(
    ("upload", "video", "message"),
    [
        (UploadedFile("a.gif", "image/gif", b"x"), False, "Only PNG or JPEG files are allowed."),
        (
            UploadedFile("a.png", "image/png", b"x" * (MAX_IMAGE_BYTES + 1)),
            False,
            "File must be smaller than 5MB.",
        ),
        (UploadedFile("a.mov", "video/quicktime", b"x"), True, "Only MP4 videos are allowed."),
    ],
)
def test_validate_upload_rejects(upload, video, message) -> None:
    with pytest.raises(UploadValidationError, match=message):
        validate_upload(upload, video=video)


def test_media_path_is_managed_and_timestamped() -> None:
    path = media_path("hero_image")

    assert path.startswith("websiteImages/hero_image_")
    assert path.rsplit("_", 1)[1].isdigit()
    assert ensure_managed_path(path) == path


def test_ensure_managed_path_rejects_other_prefixes() -> None:
    with pytest.raises(InvalidStoragePathError):
        ensure_managed_path("")
