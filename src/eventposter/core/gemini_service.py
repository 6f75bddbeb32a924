"""Google Gemini adapter for poster generation, extraction, and background cleaning.

:class:`GeminiPosterService` is the only place that talks to the Gemini API.
It owns a ``google.genai.Client`` and exposes three async operations:

- :meth:`~GeminiPosterService.generate_poster`: compile the form and render
  the poster with the image model
- :meth:`~GeminiPosterService.extract_event_info`: read event details from
  an invitation document or image as JSON
- :meth:`~GeminiPosterService.clean_background`: strip text, logos and
  people from an uploaded design, keeping only the background

Each operation either returns a complete result or raises a single
:class:`~eventposter.core.errors.PosterError` subclass with a user-facing
message. Nothing is retried.

Usage
-----
::

    service = GeminiPosterService(api_key="AIzaSy...")
    image_url = await service.generate_poster(store.snapshot())
"""

from __future__ import annotations

import json
import logging
from typing import Any

from google import genai
from google.genai import types

from .config import PosterConfig
from .config import config as default_config
from .errors import (
    BackgroundCleanError,
    ExtractionError,
    GenerationError,
    MissingApiKeyError,
)
from .form import EventForm
from .images import ImageAttachment, fetch_default_logo, to_data_url
from .prompt_compiler import CompiledPrompt, compile_poster_prompt

logger = logging.getLogger(__name__)

EXTRACTION_PROMPT = """
Bạn là một trợ lý AI chuyên trích xuất thông tin sự kiện từ các tài liệu hoặc hình ảnh thư mời.
Hãy phân tích file đính kèm và trích xuất các thông tin sau dưới dạng JSON:

- eventName: Tên sự kiện (Tiêu đề chính).
- date: Ngày diễn ra (Định dạng DD/MM/YYYY).
- time: Giờ diễn ra (Ví dụ: 08:00 - 11:30).
- targetAudience: Đối tượng khách mời tham gia.
- isOnline: true nếu là Zoom/Google Meet/Online, false nếu là Offline.
- locationOrPlatform: Địa điểm tổ chức hoặc link Zoom/ID Zoom.
- contactName: Tên người liên hệ.
- contactPhone: Số điện thoại liên hệ.
- contactEmail: Email liên hệ.

Nếu không tìm thấy thông tin nào, hãy để chuỗi rỗng "".
Đừng tự bịa thông tin.
Trả về định dạng JSON thuần túy, không markdown.
"""

CLEAN_BACKGROUND_PROMPT = """
I provide an event poster or design.
Please recreate the **BACKGROUND ONLY** of this image.
1. Keep the abstract shapes, colors, gradients, and layout style exactly as they are.
2. REMOVE ALL TEXT, LOGOS, PEOPLE, and FOREGROUND OBJECTS.
3. The output should be a clean, high-quality background texture ready for new text to be overlaid.
"""

# JSON key from the model -> EventForm field
EXTRACTION_STRING_KEYS = {
    "eventName": "event_name",
    "date": "date",
    "time": "time",
    "targetAudience": "target_audience",
    "locationOrPlatform": "location_or_platform",
    "contactName": "contact_name",
    "contactPhone": "contact_phone",
    "contactEmail": "contact_email",
}

EXTRACTION_FAILED_MESSAGE = "Failed to extract information from file."
CLEAN_FAILED_MESSAGE = "Không thể xử lý nền ảnh. Vui lòng thử lại."


def parse_extraction(text: str | None) -> dict[str, Any]:
    """Map the model's JSON answer onto form fields.

    Every field is defaulted independently: strings fall back to ``""`` and
    ``is_online`` to ``False`` when missing or of the wrong type.

    Raises:
        ValueError: If *text* is empty or not a JSON object
    """
    if not text:
        raise ValueError("No response from AI")
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

    result: dict[str, Any] = {}
    for key, field_name in EXTRACTION_STRING_KEYS.items():
        value = data.get(key)
        result[field_name] = value if isinstance(value, str) else ""
    is_online = data.get("isOnline")
    result["is_online"] = is_online if isinstance(is_online, bool) else False
    return result


def extract_inline_image(response: Any) -> str | None:
    """Return the first inline image of a response as a data URL, if any."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    content = getattr(candidates[0], "content", None)
    for part in getattr(content, "parts", None) or []:
        inline = getattr(part, "inline_data", None)
        if inline is not None and inline.data:
            return to_data_url(inline.data, inline.mime_type or "image/png")
    return None


def to_parts(compiled: CompiledPrompt) -> list[types.Part]:
    """Convert a compiled prompt into Gemini parts, text last."""
    parts = [
        types.Part.from_bytes(data=a.data, mime_type=a.mime_type) for a in compiled.attachments
    ]
    parts.append(types.Part.from_text(text=compiled.text))
    return parts


class GeminiPosterService:
    """Async Gemini client for the poster workflows.

    Attributes:
        config: Application configuration (model names, image size, logo URL)
    """

    def __init__(
        self,
        api_key: str | None = None,
        config: PosterConfig | None = None,
        client: genai.Client | None = None,
    ) -> None:
        """Create the service.

        Args:
            api_key: Gemini API key; defaults to ``config.gemini_api_key``
            config: Configuration; defaults to the global instance
            client: Pre-built client (used by tests)

        Raises:
            MissingApiKeyError: If no client is given and no key is available
        """
        self.config = config or default_config
        if client is None:
            api_key = api_key or self.config.gemini_api_key
            if not api_key:
                raise MissingApiKeyError("A Gemini API key is required to generate posters.")
            client = genai.Client(api_key=api_key)
        self._client = client

    async def fetch_logo(self) -> ImageAttachment | None:
        """Fetch the configured default organisation logo."""
        return await fetch_default_logo(
            self.config.default_logo_url, timeout=self.config.logo_fetch_timeout
        )

    async def compile(self, form: EventForm) -> CompiledPrompt:
        return await compile_poster_prompt(form, fetch_logo=self.fetch_logo)

    async def generate_poster(self, form: EventForm) -> str:
        """Render a poster for *form*.

        Returns:
            Generated image as a ``data:`` URL

        Raises:
            AttachmentReadError: If an uploaded image cannot be read
            GenerationError: If the request fails or returns no image
        """
        compiled = await self.compile(form)

        try:
            response = await self._client.aio.models.generate_content(
                model=self.config.poster_model,
                contents=to_parts(compiled),
                config=types.GenerateContentConfig(
                    image_config=types.ImageConfig(
                        aspect_ratio=form.aspect_ratio,
                        image_size=self.config.output_image_size,
                    ),
                ),
            )
        except Exception as e:
            logger.error(f"Poster generation request failed: {e}", exc_info=True)
            raise GenerationError(f"Poster Generation Failed: {e}") from e

        image = extract_inline_image(response)
        if image is None:
            logger.error("Poster generation returned no image part")
            raise GenerationError("Poster Generation Failed: No image generated.")

        logger.info(f"Poster generated ({len(image)} bytes encoded)")
        return image

    async def extract_event_info(self, document: ImageAttachment) -> dict[str, Any]:
        """Extract event details from an invitation document or image.

        Returns:
            Form field values; missing fields are blank (or False for is_online)

        Raises:
            ExtractionError: If the request fails or the answer is not JSON
        """
        try:
            response = await self._client.aio.models.generate_content(
                model=self.config.extraction_model,
                contents=[
                    types.Part.from_bytes(data=document.data, mime_type=document.mime_type),
                    types.Part.from_text(text=EXTRACTION_PROMPT),
                ],
                config=types.GenerateContentConfig(response_mime_type="application/json"),
            )
            extracted = parse_extraction(response.text)
        except Exception as e:
            logger.error(f"Extraction failed: {e}", exc_info=True)
            raise ExtractionError(EXTRACTION_FAILED_MESSAGE) from e

        logger.info(f"Extracted event info: {sorted(k for k, v in extracted.items() if v)}")
        return extracted

    async def clean_background(self, image: ImageAttachment) -> str:
        """Recreate only the background of an uploaded design.

        Returns:
            Cleaned background as a ``data:`` URL

        Raises:
            BackgroundCleanError: If the request fails or returns no image
        """
        try:
            response = await self._client.aio.models.generate_content(
                model=self.config.background_model,
                contents=[
                    types.Part.from_bytes(data=image.data, mime_type=image.mime_type),
                    types.Part.from_text(text=CLEAN_BACKGROUND_PROMPT),
                ],
            )
        except Exception as e:
            logger.error(f"Clean background failed: {e}", exc_info=True)
            raise BackgroundCleanError(CLEAN_FAILED_MESSAGE) from e

        cleaned = extract_inline_image(response)
        if cleaned is None:
            logger.error("Clean background returned no image part")
            raise BackgroundCleanError(CLEAN_FAILED_MESSAGE)
        return cleaned

