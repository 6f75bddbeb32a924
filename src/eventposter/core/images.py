"""Image file references, attachments, and data URL helpers.

Uploaded files are kept as :class:`ImageFile` references (path, MIME type and
a cached preview). They are only turned into :class:`ImageAttachment` bytes
when a prompt is compiled or an adapter request is sent, so a file that
disappears between upload and submit fails that step with an
:class:`~eventposter.core.errors.AttachmentReadError`.
"""

from __future__ import annotations

import base64
import binascii
import logging
import mimetypes
import re
import uuid
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path

import httpx
from PIL import Image

from .errors import AttachmentReadError

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "image/jpeg"

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.*)$", re.DOTALL)


@dataclass(frozen=True)
class ImageAttachment:
    """Binary payload with its MIME type, ready to send to the model."""

    data: bytes = field(repr=False)
    mime_type: str = "image/png"

    def to_data_url(self) -> str:
        """Encode the attachment as a ``data:`` URL."""
        return to_data_url(self.data, self.mime_type)


@dataclass(frozen=True)
class ImageFile:
    """Reference to an uploaded image with a cached preview.

    Attributes:
        path: Location of the uploaded file on disk
        mime_type: MIME type guessed from the filename
        preview: ``data:`` URL of the file content at upload time
    """

    path: Path
    mime_type: str = DEFAULT_MIME_TYPE
    preview: str = field(default="", repr=False, compare=False)

    @property
    def name(self) -> str:
        return self.path.name

    @classmethod
    def from_path(cls, path: str | Path) -> ImageFile:
        """Create a reference from an uploaded file path and cache its preview.

        Raises:
            AttachmentReadError: If the file cannot be read
        """
        path = Path(path)
        mime_type = guess_mime_type(path)
        data = _read_bytes(path)
        return cls(path=path, mime_type=mime_type, preview=to_data_url(data, mime_type))

    @classmethod
    def from_data_url(cls, data_url: str, directory: Path) -> ImageFile:
        """Store an encoded image under *directory* and reference it.

        Raises:
            ValueError: If *data_url* is not a valid base64 data URL
        """
        attachment = parse_data_url(data_url)
        extension = mimetypes.guess_extension(attachment.mime_type) or ".bin"
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{uuid.uuid4().hex}{extension}"
        path.write_bytes(attachment.data)
        return cls(path=path, mime_type=attachment.mime_type, preview=data_url.strip())

    def read(self) -> ImageAttachment:
        """Read the current file content into an attachment.

        Raises:
            AttachmentReadError: If the file cannot be read
        """
        return ImageAttachment(data=_read_bytes(self.path), mime_type=self.mime_type)


def _read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        logger.error(f"Failed to read file {path}: {e}")
        raise AttachmentReadError(f"Failed to read file '{path.name}': {e.strerror or e}") from e


def guess_mime_type(path: str | Path) -> str:
    """Guess the MIME type of a file, falling back to JPEG."""
    mime_type, _ = mimetypes.guess_type(str(path))
    return mime_type or DEFAULT_MIME_TYPE


def to_data_url(data: bytes, mime_type: str) -> str:
    """Encode bytes as a base64 ``data:`` URL."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def is_image_data_url(value: str | None) -> bool:
    """Return True if *value* is a base64 ``data:image/...`` URL."""
    return bool(value) and value.startswith("data:image")


def parse_data_url(data_url: str) -> ImageAttachment:
    """Decode a base64 ``data:`` URL into an attachment.

    Raises:
        ValueError: If the string is not a valid base64 data URL
    """
    match = _DATA_URL_RE.match(data_url.strip())
    if not match:
        raise ValueError("Not a base64 data URL")
    try:
        data = base64.b64decode(match.group("data"), validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e
    return ImageAttachment(data=data, mime_type=match.group("mime"))


def decode_image(data_url: str) -> Image.Image:
    """Decode an image ``data:`` URL into a PIL image for display."""
    attachment = parse_data_url(data_url)
    image = Image.open(BytesIO(attachment.data))
    image.load()
    return image


def export_image(data_url: str, path: Path) -> Path:
    """Write the bytes of an image ``data:`` URL to *path*.

    Args:
        data_url: Encoded image produced by the generation endpoint
        path: Destination file (parent directories are created)

    Returns:
        The written path
    """
    attachment = parse_data_url(data_url)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(attachment.data)
    logger.info(f"Exported image to {path} ({len(attachment.data)} bytes)")
    return path


async def fetch_default_logo(url: str, timeout: float = 15.0) -> ImageAttachment | None:
    """Download the default organisation logo.

    Network errors, malformed URLs, and non-success responses are logged
    and reported as ``None`` so that prompt compilation can fall back to a
    text-only logo description.

    Args:
        url: Public logo URL
        timeout: Request timeout in seconds

    Returns:
        PNG attachment, or None if the logo could not be fetched
    """
    try:
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
            response = await client.get(url)
            response.raise_for_status()
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.warning(f"Failed to fetch default logo from {url}: {e}")
        return None

    if not response.content:
        logger.warning(f"Default logo response from {url} was empty")
        return None

    return ImageAttachment(data=response.content, mime_type="image/png")
