"""Form editing handlers: event info, theme, agenda, speakers, logos, and QR code."""

import logging
from collections.abc import Callable
from typing import Any

import gradio as gr

from eventposter.core.errors import AttachmentReadError
from eventposter.core.form import CUSTOM_OPTION, EventForm
from eventposter.core.images import ImageFile

from ..models import ASPECT_RATIOS, EVENT_FORMATS, SPEAKER_SLOTS, UIState
from ..validation import ValidationError, validate_image_path

logger = logging.getLogger(__name__)


def update_form_field(field: str, value: Any, state: UIState) -> UIState:
    """Set a single scalar form field."""
    state.form.update(**{field: value})
    return state


def make_field_handler(field: str) -> Callable[[Any, UIState], UIState]:
    """Build a Gradio change handler bound to one form field."""

    def handler(value: Any, state: UIState) -> UIState:
        return update_form_field(field, value, state)

    handler.__name__ = f"update_{field}"
    return handler


def set_aspect_ratio(label: str, state: UIState) -> UIState:
    state.form.update(aspect_ratio=ASPECT_RATIOS.get(label, "16:9"))
    return state


def set_event_format(label: str, state: UIState) -> tuple[dict, UIState]:
    """Switch between online and offline format.

    Returns:
        Tuple of (location_update, updated_state); the location box is only
        shown for offline events
    """
    is_online = EVENT_FORMATS.get(label, True)
    form = state.form.set_online(is_online)
    return gr.update(value=form.location_or_platform, visible=not is_online), state


def set_theme_tone(tone: str, state: UIState) -> tuple[dict, UIState]:
    """Select a colour palette; the custom prompt box shows for the custom option."""
    state.form.update(theme_tone=tone)
    return gr.update(visible=tone == CUSTOM_OPTION), state


def set_theme_topics(selected: list[str] | None, state: UIState) -> tuple[dict, dict, UIState]:
    """Apply a checkbox selection, keeping at most two topics.

    Returns:
        Tuple of (topics_update, custom_topic_visibility, updated_state)
    """
    form = state.form.set_topics(selected or [])
    return (
        gr.update(value=list(form.theme_topics)),
        gr.update(visible=form.uses_custom_topic()),
        state,
    )


def update_agenda(rows: list[list[str]] | None, state: UIState) -> UIState:
    """Replace the agenda from the table rows (time, activity)."""
    cleaned = []
    for row in rows or []:
        cells = [str(cell) if cell is not None else "" for cell in list(row)[:2]]
        cells += [""] * (2 - len(cells))
        cleaned.append((cells[0], cells[1]))
    state.form.replace_agenda(cleaned)
    return state


def agenda_rows(form: EventForm) -> list[list[str]]:
    return [[item.time, item.activity] for item in form.agenda]


# ----------------------------------------------------------------------------
# Speakers
# ----------------------------------------------------------------------------


def speaker_slot_updates(form: EventForm) -> list[dict]:
    """Updates for every speaker slot component plus the counter.

    For each slot: (group, name, title, company, image, edit_prompt,
    remove_background). The list ends with the counter markdown and the add
    button.
    """
    updates = []
    for slot in range(SPEAKER_SLOTS):
        if slot < len(form.speakers):
            speaker = form.speakers[slot]
            updates.extend(
                [
                    gr.update(visible=True),
                    gr.update(value=speaker.name),
                    gr.update(value=speaker.title),
                    gr.update(value=speaker.company),
                    gr.update(value=str(speaker.image.path) if speaker.image else None),
                    gr.update(value=speaker.edit_prompt),
                    gr.update(value=speaker.remove_background),
                ]
            )
        else:
            updates.extend([gr.update(visible=False)] + [gr.update()] * 6)

    count = len(form.speakers)
    updates.append(gr.update(value=f"**Diễn giả ({count}/{SPEAKER_SLOTS})**"))
    updates.append(gr.update(interactive=count < SPEAKER_SLOTS))
    return updates


def add_speaker(state: UIState) -> list:
    """Add a speaker slot; a no-op once three speakers exist."""
    form = state.form.add_speaker()
    return [*speaker_slot_updates(form), state]


def remove_speaker(slot: int, state: UIState) -> list:
    form = state.form.snapshot()
    if slot < len(form.speakers):
        form = state.form.remove_speaker(form.speakers[slot].id)
    return [*speaker_slot_updates(form), state]


def update_speaker_field(slot: int, field: str, value: Any, state: UIState) -> UIState:
    """Set one field of the speaker shown in *slot*."""
    speakers = state.form.snapshot().speakers
    if slot >= len(speakers):
        logger.debug(f"Ignoring update for empty speaker slot {slot}")
        return state
    state.form.update_speaker(speakers[slot].id, **{field: value})
    return state


def _load_image(path: str | None) -> ImageFile | None:
    if not path:
        return None
    return ImageFile.from_path(validate_image_path(path))


def _image_error(e: Exception) -> str:
    logger.warning(f"Image upload rejected: {e}")
    return f"❌ **Invalid Image**\n\n{e}"


def set_speaker_image(slot: int, path: str | None, state: UIState) -> tuple[str, UIState]:
    """Attach (or clear) the reference photo of a speaker.

    Returns:
        Tuple of (status_message, updated_state)
    """
    try:
        image = _load_image(path)
    except (ValidationError, AttachmentReadError) as e:
        return _image_error(e), state
    state = update_speaker_field(slot, "image", image, state)
    return "", state


# ----------------------------------------------------------------------------
# Logos and QR code
# ----------------------------------------------------------------------------


def set_brand_logo_mode(use_brand_logo: bool, state: UIState) -> tuple[dict, UIState]:
    """Toggle custom logos; the upload group is only shown when enabled."""
    state.form.update(use_brand_logo=bool(use_brand_logo))
    return gr.update(visible=bool(use_brand_logo)), state


def set_logo(slot: str, path: str | None, state: UIState) -> tuple[str, UIState]:
    try:
        image = _load_image(path)
    except (ValidationError, AttachmentReadError) as e:
        return _image_error(e), state
    state.form.set_logo(slot, image)
    return "", state


def set_qr_code_mode(include: bool, state: UIState) -> tuple[dict, UIState]:
    state.form.update(include_qr_code=bool(include))
    return gr.update(visible=bool(include)), state


def set_qr_code(path: str | None, state: UIState) -> tuple[str, UIState]:
    try:
        image = _load_image(path)
    except (ValidationError, AttachmentReadError) as e:
        return _image_error(e), state
    state.form.set_qr_code(image)
    return "", state
