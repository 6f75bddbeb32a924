"""Poster generation and API key handlers."""

import logging

import gradio as gr

from eventposter.core.config import config
from eventposter.core.errors import GenerationInProgressError, PosterError
from eventposter.core.images import decode_image

from ..models import UIState
from ..state import initialize_ui_state, set_session_api_key
from ..validation import ValidationError, validate_api_key
from .history import history_gallery_items

logger = logging.getLogger(__name__)


def submit_api_key(key: str, state: UIState) -> tuple[str, dict, UIState]:
    """Store the API key typed by the user for this session.

    Returns:
        Tuple of (status_message, key_group_visibility, updated_state)
    """
    try:
        key = validate_api_key(key)
    except ValidationError as e:
        return f"❌ **Validation Error**\n\n{e}", gr.update(visible=True), state

    state = set_session_api_key(state, key)
    return "✅ API key saved for this session.", gr.update(visible=False), state


def lock_generate_button() -> dict:
    """Disable the generate button while a request is running."""
    return gr.update(interactive=False, value="Đang tạo poster...")


def unlock_generate_button() -> dict:
    return gr.update(interactive=True, value="Tạo Poster")


async def generate_poster(state: UIState) -> tuple:
    """Generate a poster from the current form.

    On failure the previously shown poster and the history stay as they
    were and a single error message is shown.

    Returns:
        Tuple of (image_update, status_message, history_items, updated_state)
    """
    session = state.session
    try:
        state = initialize_ui_state(state)
        item = await session.generate(state.service, state.form.snapshot())

    except GenerationInProgressError as e:
        logger.warning(f"Generation rejected: {e}")
        return gr.update(), f"⏳ {e}", history_gallery_items(session), state

    except PosterError as e:
        logger.warning(f"Generation failed: {e}")
        error_msg = f"❌ **Generation Failed**\n\n{e}"
        return gr.update(), error_msg, history_gallery_items(session), state

    except Exception as e:
        logger.error(f"Error generating poster: {e}", exc_info=True)
        error_msg = (
            f"❌ **Error**\n\nAn unexpected error occurred. "
            f"Check logs for details.\n\n`{str(e)}`"
        )
        return gr.update(), error_msg, history_gallery_items(session), state

    form = state.form.snapshot()
    info = f"""
✅ **Poster Generated!**

**Event:** {form.event_name or "(untitled)"}
**Aspect Ratio:** {form.aspect_ratio}
**Model:** {config.poster_model} ({config.output_image_size})
**Speakers:** {len(form.speakers)}
**History:** {len(session.history)} poster(s) this session
    """
    return decode_image(item.image), info.strip(), history_gallery_items(session), state


def download_current_poster(state: UIState) -> tuple[str | None, str]:
    """Save the current poster for download.

    Returns:
        Tuple of (file_path, status_message)
    """
    path = state.session.export_current(config.outputs_dir, config.brand_name)
    if path is None:
        return None, "❌ No poster generated yet."
    return str(path), f"✅ Saved {path.name}"
