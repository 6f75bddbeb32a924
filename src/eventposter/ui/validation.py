"""Validation utilities for Event Poster Studio UI inputs."""

import logging
from pathlib import Path

from eventposter.core.images import guess_mime_type

logger = logging.getLogger(__name__)

DOCUMENT_MIME_TYPES = ("application/pdf", "text/plain")


class ValidationError(Exception):
    """User-friendly validation error.

    This exception is raised when user input fails validation.
    The message is intended to be displayed directly to the user.
    """

    pass


def validate_api_key(key: str | None) -> str:
    """Validate an API key typed into the UI.

    Returns:
        The key with surrounding whitespace removed

    Raises:
        ValidationError: If the key is empty
    """
    key = (key or "").strip()
    if not key:
        raise ValidationError("Please enter a Gemini API key")
    if any(ch.isspace() for ch in key):
        raise ValidationError("API key must not contain spaces")
    return key


def _validate_file(path: str | None) -> Path:
    if not path:
        raise ValidationError("No file selected")
    full_path = Path(path)
    if not full_path.exists():
        raise ValidationError(f"File not found: {full_path.name}")
    if not full_path.is_file():
        raise ValidationError(f"Path is not a file: {full_path.name}")
    return full_path


def validate_image_path(path: str | None) -> Path:
    """Validate that an uploaded file exists and looks like an image.

    Raises:
        ValidationError: If the file is missing or not an image
    """
    full_path = _validate_file(path)
    if not guess_mime_type(full_path).startswith("image/"):
        raise ValidationError(f"{full_path.name} is not an image file")
    return full_path


def validate_document_path(path: str | None) -> Path:
    """Validate an invitation document (image, PDF, or plain text).

    Raises:
        ValidationError: If the file is missing or of an unsupported type
    """
    full_path = _validate_file(path)
    mime_type = guess_mime_type(full_path)
    if not (mime_type.startswith("image/") or mime_type in DOCUMENT_MIME_TYPES):
        raise ValidationError(
            f"Unsupported file type for {full_path.name}. Use an image, PDF, or text file."
        )
    return full_path
