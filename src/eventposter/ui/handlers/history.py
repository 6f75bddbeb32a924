"""History tab handlers."""

import logging
from datetime import datetime

import gradio as gr
from PIL import Image

from eventposter.core.config import config
from eventposter.core.images import decode_image
from eventposter.core.session import GenerationSession

from ..models import UIState

logger = logging.getLogger(__name__)


def format_timestamp(created_at: int) -> str:
    return datetime.fromtimestamp(created_at / 1000).strftime("%d/%m/%Y %H:%M:%S")


def history_gallery_items(session: GenerationSession) -> list[tuple[Image.Image, str]]:
    """Gallery items (image, caption) for the history, newest first."""
    return [
        (decode_image(item.image), format_timestamp(item.created_at)) for item in session.history
    ]


def refresh_history(state: UIState) -> tuple[list, str]:
    """Reload the history gallery.

    Returns:
        Tuple of (gallery_items, info_message)
    """
    count = len(state.session.history)
    if count == 0:
        return [], "*Chưa có hình ảnh nào được tạo*"
    return history_gallery_items(state.session), f"**{count}** poster(s) in this session"


def select_history_item(evt: gr.SelectData, state: UIState) -> tuple:
    """Show a history entry and prepare its download.

    Returns:
        Tuple of (poster_image, download_path, info_message, updated_state)
    """
    items = state.session.history.items
    if evt.index is None or not 0 <= evt.index < len(items):
        return gr.update(), None, "", state

    item = items[evt.index]
    state.session.select(item.id)
    path = state.session.history.export(item, config.outputs_dir, config.brand_name)
    logger.info(f"Selected history item {item.id}")
    info = f"**Created:** {format_timestamp(item.created_at)}\n\n**File:** {path.name}"
    return decode_image(item.image), str(path), info, state
