"""Template library handlers: preset backgrounds, uploads, and AI cleaning."""

import logging

import gradio as gr

from eventposter.core.errors import PosterError
from eventposter.core.images import ImageFile, decode_image
from eventposter.core.templates import PRESETS, preset_data_url, render_swatch

from ..models import UIState
from ..state import initialize_ui_state
from ..validation import ValidationError, validate_image_path

logger = logging.getLogger(__name__)


def preset_gallery_items() -> list:
    """Gallery items (swatch, name) for the preset backgrounds."""
    return [(render_swatch(preset), preset.name) for preset in PRESETS]


def select_preset(evt: gr.SelectData, state: UIState) -> tuple:
    """Use a preset swatch as the poster background.

    Returns:
        Tuple of (background_preview, use_background_checkbox, status_message, updated_state)
    """
    if evt.index is None or not 0 <= evt.index < len(PRESETS):
        return gr.update(), gr.update(), "", state

    preset = PRESETS[evt.index]
    form = state.form.select_background(preset_data_url(preset.id))
    logger.info(f"Selected background preset {preset.id}")
    return (
        decode_image(form.selected_background),
        gr.update(value=True),
        f"✅ Background: **{preset.name}**",
        state,
    )


def upload_background(path: str | None, state: UIState) -> tuple:
    """Use an uploaded image as-is as the poster background.

    Returns:
        Tuple of (background_preview, use_background_checkbox, status_message, updated_state)
    """
    try:
        image = ImageFile.from_path(validate_image_path(path))
    except (ValidationError, PosterError) as e:
        logger.warning(f"Background upload rejected: {e}")
        return gr.update(), gr.update(), f"❌ **Invalid Image**\n\n{e}", state

    state.form.select_background(image.preview)
    return str(image.path), gr.update(value=True), f"✅ Background: **{image.name}**", state


async def clean_background(path: str | None, state: UIState) -> tuple:
    """Remove text, logos, and people from an uploaded design and use the result.

    Returns:
        Tuple of (background_preview, use_background_checkbox, status_message, updated_state)
    """
    try:
        image = ImageFile.from_path(validate_image_path(path))
        state = initialize_ui_state(state)
        cleaned = await state.service.clean_background(image.read())
    except (ValidationError, PosterError) as e:
        logger.warning(f"Background cleaning failed: {e}")
        return gr.update(), gr.update(), f"❌ Lỗi khi xử lý nền: {e}", state

    state.form.select_background(cleaned)
    return decode_image(cleaned), gr.update(value=True), "✅ Background cleaned by AI", state


def clear_background(state: UIState) -> tuple:
    """Stop using a custom background.

    Returns:
        Tuple of (background_preview, use_background_checkbox, status_message, updated_state)
    """
    state.form.select_background(None)
    return None, gr.update(value=False), "Background cleared", state


def set_use_background(use_background: bool, state: UIState) -> tuple[dict, UIState]:
    """Toggle whether the selected background is sent as a reference image."""
    form = state.form.snapshot()
    enabled = bool(use_background) and form.selected_background is not None
    state.form.update(use_uploaded_background=enabled)
    return gr.update(value=enabled), state
