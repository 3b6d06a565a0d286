"""
Tests for image upload and static serving.
"""

import os
from unittest.mock import AsyncMock

import pytest

from app.main import create_app
from app.services.image_storage import ImageStorage


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + bytes(range(256))


class TestUploadEndpoint:
    """Test POST /upload and GET /images/{name}."""

    def test_upload_returns_image_url(self, client):
        response = client.post(
            "/upload", files={"image": ("x.png", PNG_BYTES, "image/png")}
        )

        assert response.status_code == 200
        assert response.json() == {"imageURL": "/images/x.png"}

    def test_uploaded_file_served_byte_identical(self, client):
        client.post("/upload", files={"image": ("x.png", PNG_BYTES, "image/png")})

        response = client.get("/images/x.png")

        assert response.status_code == 200
        assert response.content == PNG_BYTES

    def test_upload_writes_into_upload_dir(self, client, settings):
        client.post("/upload", files={"image": ("notes.jpg", b"jpeg", "image/jpeg")})

        path = os.path.join(settings.UPLOAD_DIR, "notes.jpg")
        with open(path, "rb") as f:
            assert f.read() == b"jpeg"

    def test_same_name_overwrites(self, client):
        client.post("/upload", files={"image": ("dup.png", b"first", "image/png")})
        client.post("/upload", files={"image": ("dup.png", b"second", "image/png")})

        assert client.get("/images/dup.png").content == b"second"

    def test_missing_image_field(self, client):
        """A request without the image field is a bad request."""
        response = client.post(
            "/upload", files={"file": ("x.png", PNG_BYTES, "image/png")}
        )

        assert response.status_code == 400
        assert response.text == "no such file: image"

    def test_image_sent_as_text_field(self, client):
        """An image part without a file is a bad request, not a 422."""
        response = client.post(
            "/upload",
            data={"image": "notafile"},
            files={"other": ("x.png", PNG_BYTES, "image/png")},
        )

        assert response.status_code == 400
        assert response.headers["content-type"].startswith("text/plain")

    def test_write_failure_is_internal_error(self, client, monkeypatch):
        """Filesystem errors while storing become a 500 with the raw message."""
        monkeypatch.setattr(
            ImageStorage, "save", AsyncMock(side_effect=OSError("disk full"))
        )

        response = client.post(
            "/upload", files={"image": ("x.png", PNG_BYTES, "image/png")}
        )

        assert response.status_code == 500
        assert response.text == "disk full"

    def test_upload_dir_created_with_app(self, settings):
        """The image directory exists before the app has started."""
        create_app(settings=settings)

        assert os.path.isdir(settings.UPLOAD_DIR)

    def test_unknown_image_not_found(self, client):
        assert client.get("/images/missing.png").status_code == 404


class TestImageStorage:
    """Unit tests for ImageStorage."""

    @pytest.mark.parametrize(
        "filename,expected",
        [
            ("plot.png", "plot.png"),
            ("../../etc/passwd", "passwd"),
            ("C:\\Users\\me\\scan.jpg", "scan.jpg"),
        ],
    )
    def test_clean_filename(self, filename, expected):
        assert ImageStorage.clean_filename(filename) == expected

    def test_ensure_directory_creates_missing(self, tmp_path):
        directory = tmp_path / "nested" / "images"

        ImageStorage(str(directory)).ensure_directory()

        assert directory.is_dir()
