"""Poster prompt compilation.

Turns an :class:`~eventposter.core.form.EventForm` snapshot into the
ordered attachments and the single instruction text sent to the image model.

Image Numbering
---------------
The model sees the attachments in order and the instruction text refers to
them as "Image 1", "Image 2", ... . :class:`PromptBuilder` hands out those
numbers from :meth:`PromptBuilder.attach`, so a section can only mention an
image number after it has actually attached the image. Sections that are
skipped never consume a number.

Attachment order::

    [background] [organizer] [product] [co-organizer] | [default logo] [QR] [speaker 1..3]

The instruction text always comes last in :attr:`CompiledPrompt.parts`.

Usage
-----
::

    compiled = await compile_poster_prompt(
        store.snapshot(),
        fetch_logo=lambda: fetch_default_logo(config.default_logo_url),
    )
    compiled.attachments  # [ImageAttachment, ...]
    compiled.text         # instruction text
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from .errors import AttachmentReadError
from .form import EventForm, Speaker
from .images import ImageAttachment, is_image_data_url, parse_data_url

logger = logging.getLogger(__name__)

LogoFetcher = Callable[[], Awaitable[ImageAttachment | None]]

TOPIC_JOINER = " combined with "


@dataclass(frozen=True)
class CompiledPrompt:
    """Result of compiling a form: attachments plus instruction text."""

    attachments: tuple[ImageAttachment, ...]
    text: str

    @property
    def parts(self) -> list[ImageAttachment | str]:
        """Attachments in order, followed by the instruction text."""
        return [*self.attachments, self.text]


class PromptBuilder:
    """Accumulates attachments and text fragments for one prompt."""

    def __init__(self) -> None:
        self._attachments: list[ImageAttachment] = []
        self._fragments: list[str] = []

    @property
    def image_count(self) -> int:
        return len(self._attachments)

    def attach(self, attachment: ImageAttachment) -> int:
        """Append an attachment and return its 1-based image number."""
        self._attachments.append(attachment)
        return len(self._attachments)

    def append_text(self, fragment: str) -> None:
        self._fragments.append(fragment)

    def build(self) -> CompiledPrompt:
        return CompiledPrompt(attachments=tuple(self._attachments), text="".join(self._fragments))


def effective_topics(form: EventForm) -> str:
    """Topic text for the prompt; the custom topic replaces the presets."""
    if form.uses_custom_topic():
        return form.custom_topic_prompt
    return TOPIC_JOINER.join(form.theme_topics)


def _header(form: EventForm) -> str:
    orientation = "Landscape (16:9)" if form.aspect_ratio == "16:9" else "Portrait (3:4)"
    custom_palette = f" ({form.custom_theme_prompt})" if form.custom_theme_prompt else ""
    return (
        "Create a high-quality, professional event invitation poster for MISA (Vietnam).\n"
        "\n"
        "**Format & Size:**\n"
        f"- Aspect Ratio: {orientation}.\n"
        "- Output Resolution: High Quality.\n"
        "\n"
        "**Design Style & Theme:**\n"
        f"- **Color Palette:** {form.theme_tone}{custom_palette}.\n"
        f"- **Topic/Theme:** {effective_topics(form)}.\n"
        "- **Vibe:** Professional, Modern, Corporate, Reliable.\n"
    )


def _add_background(builder: PromptBuilder, form: EventForm) -> None:
    if not (form.use_uploaded_background and form.selected_background):
        return
    if not is_image_data_url(form.selected_background):
        raise AttachmentReadError("Selected background is not a valid image")
    try:
        attachment = parse_data_url(form.selected_background)
    except ValueError as e:
        raise AttachmentReadError("Selected background is not a valid image") from e
    n = builder.attach(attachment)
    builder.append_text(
        "\n**BACKGROUND INSTRUCTION:**\n"
        f"- Use the provided image (Image {n}) as the **STRICT BACKGROUND REFERENCE**.\n"
        "- Keep the background patterns, colors, and layout structure of this reference image.\n"
        "- Place the new text and content on top of this background style.\n"
    )


def _content(form: EventForm) -> str:
    event_format = "TRỰC TUYẾN (ZOOM ONLINE)" if form.is_online else "OFFLINE"
    return (
        "\n**Content to Render (Must be legible and accurate):**\n"
        "\n"
        f'- **Event Type:** "{form.event_type}".\n'
        "  - **Placement:** Positioned DIRECTLY ABOVE the Event Title, and BELOW the top Logo.\n"
        "  - **Alignment:** Centered.\n"
        "  - **Style:** Normal font weight, standard size, elegant (NOT bold, NOT highlighted).\n"
        "\n"
        f'- **Event Title:** "{form.event_name}".\n'
        "  - **Visual Importance:** This must be the **MOST PROMINENT** element on the poster.\n"
        "  - **Typography:** Use **massive, bold, 3D or creative display fonts**.\n"
        "  - **Effects:** Apply professional text effects appropriate for the theme "
        "(e.g., Metallic Gold, Neon Glow, Drop Shadows, Gradient Fill).\n"
        '  - **Instruction:** Make the title visually "pop" off the background.\n'
        "\n"
        f"- **Time & Date:** {form.time} | {form.date}.\n"
        f"- **Format:** {event_format}."
    )


def _agenda(form: EventForm) -> str:
    if not form.agenda:
        return ""
    lines = [
        '\n\n**PROGRAM AGENDA (Section Title: "CHƯƠNG TRÌNH"):**',
        '- Render a section titled "CHƯƠNG TRÌNH" (or "AGENDA").',
        "- Layout: Use a 2-column list layout.",
        "  - **Left Column:** Time slots (Align: Left).",
        "  - **Right Column:** Activities (Align: Left, starts immediately after time).",
        "  - **Text Alignment:** The text content for activities should be **JUSTIFIED** "
        "(aligned to both left and right edges if multi-line).",
        "- Content to render (Note: Make the Activity content **BOLD**):",
    ]
    lines.extend(f"  - {item.time} : **{item.activity}**" for item in form.agenda)
    return "\n".join(lines) + "\n"


def _audience_and_contact(form: EventForm) -> str:
    return (
        "\n"
        f"- **Đối tượng tham gia:** {form.target_audience}.\n"
        "- **Contact Section:** Bottom area. "
        f'"Liên hệ: {form.contact_name} - {form.contact_phone} - {form.contact_email}".\n'
        "  - **Style:** LARGE, BOLD, highly readable text.\n"
        "  - If contact details are empty, leave a Wide, Spacious area with large placeholder lines.\n"
        "\n"
        "**Logos & Branding Placement Instructions:**\n"
    )


async def _add_branding(builder: PromptBuilder, form: EventForm, fetch_logo: LogoFetcher) -> None:
    if form.use_brand_logo:
        if not form.has_brand_logos():
            builder.append_text(
                "\n**BRANDING:**\n- Place any provided text logos at the top.\n"
            )
            return

        builder.append_text(
            "I have provided logo images. You must strictly follow these rules:\n"
            "1. **CRITICAL:** Do NOT redesign, recolor, or alter the text inside the provided "
            "logos. Use them exactly as provided.\n"
            "2. If a logo is **negative/white**: Place it DIRECTLY on the poster background.\n"
            "3. If a logo is **positive/colored**: Place it on a clean "
            "**WHITE RECTANGULAR BLOCK**.\n"
        )
        logos = (
            (form.organizer_logo, "Organizer Logo", "Đơn vị tổ chức"),
            (form.product_logo, "Partner Product Logo", "Sản phẩm đồng hành"),
            (form.co_organizer_logo, "Co-Organizer Logo", "Đơn vị phối hợp"),
        )
        for image, label, caption in logos:
            if image is None:
                continue
            n = builder.attach(image.read())
            builder.append_text(
                f'\n- **{label}**: See Image {n}. Add the small text "{caption}" ABOVE this logo.'
            )
        return

    default_logo = await fetch_logo()
    if default_logo is not None:
        n = builder.attach(default_logo)
        builder.append_text(
            "\n\n**DEFAULT BRANDING:**\n"
            f"- No custom logos provided. Use the MISA Logo (See Image {n}).\n"
            "- Place this logo at the **TOP CENTER** of the design.\n"
            "- Place it on a clean **WHITE RECTANGULAR BLOCK** to ensure visibility against "
            "any background color.\n"
        )
    else:
        logger.info("Default logo unavailable, using text-only branding")
        builder.append_text(
            "\n\n**DEFAULT BRANDING:**\n"
            '- Place the "MISA" logo at the top center.\n'
            '- Text: "MISA" (Bold, Black) with Slogan "Tin cậy - Tiện ích - Tận tình".\n'
            "- Place on a white block.\n"
        )


def _add_qr_code(builder: PromptBuilder, form: EventForm) -> None:
    if not form.include_qr_code:
        builder.append_text("\n\n**QR Code:**\n- Do NOT include any QR code or QR code placeholder.")
    elif form.qr_code_image is not None:
        n = builder.attach(form.qr_code_image.read())
        builder.append_text(
            f"\n\n**QR Code:**\n- See Image {n}. Place this QR code clearly at the bottom or "
            'corner. Include the text "Đăng ký ngay" immediately below the QR code.'
        )
    else:
        builder.append_text(
            "\n\n**QR Code:**\n- Create a clean white square placeholder box for a QR Code. "
            'Include the text "Đăng ký ngay" immediately below this placeholder.'
        )


def _add_speaker(builder: PromptBuilder, number: int, speaker: Speaker) -> None:
    text = f'\n- Speaker {number}: Name "{speaker.name}", Title "{speaker.title}"'
    text += f', Company "{speaker.company}".' if speaker.company else "."

    if speaker.image is None:
        text += " (No reference image provided, generate a generic professional avatar)."
        builder.append_text(text)
        return

    n = builder.attach(speaker.image.read())
    text += f" [See Image {n} for Speaker {number} reference]."
    if speaker.edit_prompt:
        text += (
            " EDIT INSTRUCTION: Strictly preserve face/identity. "
            f"Modify attire/pose to: {speaker.edit_prompt}."
        )
    else:
        text += " Preserve the face and identity of this speaker exactly."
    if speaker.remove_background:
        text += " Remove background, integrate seamlessly."
    builder.append_text(text)


async def compile_poster_prompt(form: EventForm, *, fetch_logo: LogoFetcher) -> CompiledPrompt:
    """Compile a form snapshot into attachments and instruction text.

    Args:
        form: Snapshot to compile
        fetch_logo: Coroutine factory returning the default organisation logo,
            or None when it is unavailable. Only awaited when custom branding
            is off.

    Returns:
        CompiledPrompt with attachments in reference order

    Raises:
        AttachmentReadError: If the selected background, an uploaded logo, the
            QR code, or a speaker image cannot be read
    """
    builder = PromptBuilder()

    builder.append_text(_header(form))
    _add_background(builder, form)
    builder.append_text(_content(form))

    # Location is only rendered for offline events
    if not form.is_online:
        builder.append_text(f"\n- **Location:** {form.location_or_platform}.")

    builder.append_text(_agenda(form))
    builder.append_text(_audience_and_contact(form))
    await _add_branding(builder, form, fetch_logo)
    _add_qr_code(builder, form)

    builder.append_text(
        "\n\n**Speakers:**\nInclude the following speakers. High-quality integration.\n"
    )
    for number, speaker in enumerate(form.speakers, start=1):
        _add_speaker(builder, number, speaker)

    compiled = builder.build()
    logger.info(
        f"Compiled poster prompt: {len(compiled.attachments)} attachment(s), "
        f"{len(compiled.text)} characters"
    )
    return compiled
