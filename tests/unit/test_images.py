"""Unit tests for image references and data URL helpers."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from PIL import Image

from eventposter.core.errors import AttachmentReadError
from eventposter.core.images import (
    ImageFile,
    decode_image,
    export_image,
    fetch_default_logo,
    guess_mime_type,
    is_image_data_url,
    parse_data_url,
    to_data_url,
)

LOGO_URL = "https://example.com/logo.png"


class TestDataUrls:
    """Tests for data URL encoding and decoding."""

    def test_parse_data_url(self, png_bytes):
        """Test decoding a data URL back into bytes and MIME type."""
        attachment = parse_data_url(to_data_url(png_bytes, "image/png"))

        assert attachment.data == png_bytes
        assert attachment.mime_type == "image/png"

    def test_parse_rejects_plain_text(self):
        """Test that non data URLs are rejected."""
        with pytest.raises(ValueError, match="Not a base64 data URL"):
            parse_data_url("https://example.com/a.png")

    def test_parse_rejects_bad_base64(self):
        """Test that corrupt payloads are rejected."""
        with pytest.raises(ValueError, match="Invalid base64"):
            parse_data_url("data:image/png;base64,not*base64")

    def test_is_image_data_url(self, png_data_url):
        """Test the image data URL check."""
        assert is_image_data_url(png_data_url)
        assert not is_image_data_url("data:application/pdf;base64,AAAA")
        assert not is_image_data_url(None)
        assert not is_image_data_url("")

    def test_decode_image(self, png_data_url):
        """Test decoding to a PIL image for display."""
        image = decode_image(png_data_url)

        assert isinstance(image, Image.Image)
        assert image.size == (8, 8)

    def test_export_image(self, png_data_url, png_bytes, temp_dir):
        """Test writing a data URL to disk, creating parent folders."""
        path = export_image(png_data_url, temp_dir / "nested" / "poster.png")

        assert path.read_bytes() == png_bytes


class TestMimeTypes:
    """Tests for MIME type guessing."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("photo.png", "image/png"),
            ("photo.jpg", "image/jpeg"),
            ("invite.pdf", "application/pdf"),
            ("no_extension", "image/jpeg"),
        ],
    )
    def test_guess_mime_type(self, name, expected):
        """Test guessing from the file extension with a JPEG fallback."""
        assert guess_mime_type(name) == expected


class TestImageFile:
    """Tests for uploaded file references."""

    def test_from_path_caches_preview(self, png_file, png_bytes):
        """Test that the preview holds the content at upload time."""
        image = ImageFile.from_path(png_file)

        assert image.name == "upload.png"
        assert image.mime_type == "image/png"
        assert image.preview == to_data_url(png_bytes, "image/png")

    def test_read_returns_current_content(self, png_file):
        """Test that read() re-reads the file."""
        image = ImageFile.from_path(png_file)
        png_file.write_bytes(b"changed")

        assert image.read().data == b"changed"

    def test_read_missing_file_raises(self, png_file):
        """Test that a file removed after upload fails with AttachmentReadError."""
        image = ImageFile.from_path(png_file)
        png_file.unlink()

        with pytest.raises(AttachmentReadError, match="upload.png"):
            image.read()

    def test_from_path_missing_file_raises(self, temp_dir):
        """Test that a missing upload fails immediately."""
        with pytest.raises(AttachmentReadError):
            ImageFile.from_path(temp_dir / "missing.png")

    def test_from_data_url(self, png_data_url, png_bytes, temp_dir):
        """Test storing an encoded image as a file reference."""
        image = ImageFile.from_data_url(png_data_url, temp_dir / "uploads")

        assert image.path.parent == temp_dir / "uploads"
        assert image.path.suffix == ".png"
        assert image.read().data == png_bytes
        assert image.preview == png_data_url

    def test_from_invalid_data_url(self, temp_dir):
        """Test that invalid data URLs raise ValueError."""
        with pytest.raises(ValueError):
            ImageFile.from_data_url("not a data url", temp_dir)


class TestFetchDefaultLogo:
    """Tests for the default logo download."""

    def _mock_client(self, **get_kwargs):
        mock_cls = MagicMock()
        client = mock_cls.return_value.__aenter__.return_value
        client.get = AsyncMock(**get_kwargs)
        return mock_cls, client

    def test_success(self):
        """Test that the downloaded bytes become a PNG attachment."""
        response = httpx.Response(200, content=b"logo", request=httpx.Request("GET", LOGO_URL))
        mock_cls, client = self._mock_client(return_value=response)

        with patch("eventposter.core.images.httpx.AsyncClient", mock_cls):
            logo = asyncio.run(fetch_default_logo(LOGO_URL, timeout=2.0))

        assert logo.data == b"logo"
        assert logo.mime_type == "image/png"
        client.get.assert_awaited_once_with(LOGO_URL)

    def test_network_error_returns_none(self):
        """Test that connection failures never raise."""
        mock_cls, _ = self._mock_client(side_effect=httpx.ConnectError("offline"))

        with patch("eventposter.core.images.httpx.AsyncClient", mock_cls):
            assert asyncio.run(fetch_default_logo(LOGO_URL)) is None

    def test_http_error_returns_none(self):
        """Test that non-success status codes give None."""
        response = httpx.Response(404, request=httpx.Request("GET", LOGO_URL))
        mock_cls, _ = self._mock_client(return_value=response)

        with patch("eventposter.core.images.httpx.AsyncClient", mock_cls):
            assert asyncio.run(fetch_default_logo(LOGO_URL)) is None

    def test_empty_body_returns_none(self):
        """Test that an empty response is treated as a failure."""
        response = httpx.Response(200, content=b"", request=httpx.Request("GET", LOGO_URL))
        mock_cls, _ = self._mock_client(return_value=response)

        with patch("eventposter.core.images.httpx.AsyncClient", mock_cls):
            assert asyncio.run(fetch_default_logo(LOGO_URL)) is None

    def test_malformed_url_returns_none(self):
        """Test that a misconfigured logo URL never raises."""
        assert asyncio.run(fetch_default_logo("http://[::1", timeout=1.0)) is None

    def test_invalid_url_from_client_returns_none(self):
        """Test that InvalidURL raised by the client gives None."""
        mock_cls, _ = self._mock_client(side_effect=httpx.InvalidURL("Invalid port"))

        with patch("eventposter.core.images.httpx.AsyncClient", mock_cls):
            assert asyncio.run(fetch_default_logo(LOGO_URL)) is None
