"""Pydantic request and response models for the Event Poster API.

These models define the JSON schema for every API endpoint.  FastAPI uses
them for automatic request validation, serialisation, and OpenAPI
documentation generation.

Images travel as base64 ``data:`` URLs in both directions.

Models
------
EventFormPayload
    Payload for ``POST /api/generate`` and ``POST /api/prompt/compile``:
    the full event form, including speakers and agenda.
CompileResponse
    Compiled prompt text plus a summary of the attached images.
PosterResponse
    A generated poster as stored in the session history.
ExtractionResponse
    Event details read from an uploaded document.
BackgroundResponse
    A cleaned background image.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from eventposter.core.form import (
    MAX_SPEAKERS,
    ONLINE_LOCATION,
    THEME_TONES,
    AgendaItem,
    EventForm,
    FormStore,
    LogoSlot,
)
from eventposter.core.history import HistoryItem
from eventposter.core.images import ImageFile


class SpeakerPayload(BaseModel):
    """One speaker.

    Attributes:
        name: Full name.
        title: Job title.
        company: Organisation.
        image: Optional reference photo as a ``data:image/...`` URL.
        edit_prompt: Pose or outfit instruction for the portrait.
        remove_background: Ask the model to remove the photo background.
    """

    name: str = ""
    title: str = ""
    company: str = ""
    image: str | None = Field(
        default=None,
        description="Reference photo as a base64 data URL.",
    )
    edit_prompt: str = Field(
        default="",
        description="Pose or outfit instruction, e.g. 'wear a vest'.",
    )
    remove_background: bool = False


class AgendaItemPayload(BaseModel):
    """One agenda row."""

    time: str = ""
    activity: str = ""


class EventFormPayload(BaseModel):
    """Request body for poster generation and prompt preview.

    Field names match :class:`~eventposter.core.form.EventForm`.  Theme topics
    go through the same two-topic rule as the UI: when more than two are
    sent, the last two win.
    """

    aspect_ratio: Literal["16:9", "3:4"] = Field(
        default="16:9",
        description="Poster aspect ratio.",
    )
    event_type: str = ""
    event_name: str = ""
    date: str = ""
    time: str = ""
    target_audience: str = ""
    is_online: bool = True
    location_or_platform: str = ONLINE_LOCATION
    agenda: list[AgendaItemPayload] = Field(default_factory=list)

    theme_tone: str = Field(
        default=THEME_TONES[0],
        description="Colour palette label, or 'Tùy chỉnh' to use custom_theme_prompt.",
    )
    custom_theme_prompt: str = ""
    theme_topics: list[str] = Field(
        default_factory=lambda: ["Công nghệ"],
        description="Up to two topic labels, or 'Tùy chỉnh' to use custom_topic_prompt.",
    )
    custom_topic_prompt: str = ""

    selected_background: str | None = Field(
        default=None,
        description="Background reference image as a base64 data URL.",
    )
    use_uploaded_background: bool = False

    use_brand_logo: bool = Field(
        default=False,
        description="Use the uploaded logos instead of the default organisation logo.",
    )
    organizer_logo: str | None = None
    product_logo: str | None = None
    co_organizer_logo: str | None = None

    contact_name: str = ""
    contact_phone: str = ""
    contact_email: str = ""

    include_qr_code: bool = False
    qr_code_image: str | None = None

    speakers: list[SpeakerPayload] = Field(
        default_factory=list,
        max_length=MAX_SPEAKERS,
        description=f"At most {MAX_SPEAKERS} speakers.",
    )

    def to_form(self, upload_dir: Path) -> EventForm:
        """Build an immutable form, storing embedded images under *upload_dir*.

        Raises:
            ValueError: If an embedded image is not a valid data URL
        """

        def image(data_url: str | None) -> ImageFile | None:
            return ImageFile.from_data_url(data_url, upload_dir) if data_url else None

        store = FormStore()
        store.update(
            aspect_ratio=self.aspect_ratio,
            event_type=self.event_type,
            event_name=self.event_name,
            date=self.date,
            time=self.time,
            target_audience=self.target_audience,
            is_online=self.is_online,
            location_or_platform=self.location_or_platform,
            agenda=[AgendaItem(time=a.time, activity=a.activity) for a in self.agenda],
            theme_tone=self.theme_tone,
            custom_theme_prompt=self.custom_theme_prompt,
            custom_topic_prompt=self.custom_topic_prompt,
            selected_background=self.selected_background,
            use_uploaded_background=self.use_uploaded_background,
            use_brand_logo=self.use_brand_logo,
            contact_name=self.contact_name,
            contact_phone=self.contact_phone,
            contact_email=self.contact_email,
            include_qr_code=self.include_qr_code,
        )
        store.set_topics(self.theme_topics)

        slots: dict[LogoSlot, str | None] = {
            "organizer_logo": self.organizer_logo,
            "product_logo": self.product_logo,
            "co_organizer_logo": self.co_organizer_logo,
        }
        for slot, data_url in slots.items():
            store.set_logo(slot, image(data_url))
        store.set_qr_code(image(self.qr_code_image))

        for speaker in self.speakers:
            store.add_speaker(
                name=speaker.name,
                title=speaker.title,
                company=speaker.company,
                image=image(speaker.image),
                edit_prompt=speaker.edit_prompt,
                remove_background=speaker.remove_background,
            )
        return store.snapshot()


class CompileResponse(BaseModel):
    """Response body for ``POST /api/prompt/compile``.

    Attributes:
        prompt: The instruction text sent after the images.
        attachment_count: Number of images sent before the text.
        attachment_mime_types: MIME type of each image, in send order
            (image N in the prompt is entry N-1).
    """

    prompt: str
    attachment_count: int
    attachment_mime_types: list[str]


class PosterResponse(BaseModel):
    """A generated poster."""

    id: str
    image: str = Field(..., description="Poster as a base64 data URL.")
    created_at: int = Field(..., description="Creation time in epoch milliseconds.")

    @classmethod
    def from_item(cls, item: HistoryItem) -> PosterResponse:
        return cls(id=item.id, image=item.image, created_at=item.created_at)


class HistoryResponse(BaseModel):
    """Response body for ``GET /api/history`` (newest first)."""

    items: list[PosterResponse]
    total: int


class ExtractionResponse(BaseModel):
    """Event details read from a document.

    Missing values come back as empty strings; ``is_online`` defaults to False.
    """

    event_name: str = ""
    date: str = ""
    time: str = ""
    target_audience: str = ""
    is_online: bool = False
    location_or_platform: str = ""
    contact_name: str = ""
    contact_phone: str = ""
    contact_email: str = ""


class BackgroundResponse(BaseModel):
    """Response body for ``POST /api/background/clean``."""

    image: str = Field(..., description="Cleaned background as a base64 data URL.")
