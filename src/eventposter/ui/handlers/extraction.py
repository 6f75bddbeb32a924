"""Auto mode: upload an invitation document and extract event details."""

import logging

import gradio as gr

from eventposter.core.errors import PosterError
from eventposter.core.images import ImageFile

from ..models import EVENT_FORMATS, INPUT_MODES, UIState
from ..state import initialize_ui_state
from ..validation import ValidationError, validate_document_path

logger = logging.getLogger(__name__)

EXTRACTION_FAILED_ALERT = "Không thể trích xuất thông tin. Vui lòng thử lại hoặc nhập thủ công."

_FORMAT_LABELS = {is_online: label for label, is_online in EVENT_FORMATS.items()}


def upload_document(path: str | None, state: UIState) -> tuple[dict, str, dict, UIState]:
    """Keep the uploaded document for extraction without extracting yet.

    Returns:
        Tuple of (image_preview_update, status_message, extract_button_update, updated_state)
    """
    state.extracted = False

    if not path:
        state.form.update(uploaded_file=None)
        return gr.update(value=None, visible=False), "", gr.update(interactive=False), state

    try:
        document = ImageFile.from_path(validate_document_path(path))
    except (ValidationError, PosterError) as e:
        logger.warning(f"Document upload rejected: {e}")
        return (
            gr.update(value=None, visible=False),
            f"❌ **Invalid File**\n\n{e}",
            gr.update(interactive=False),
            state,
        )

    state.form.update(uploaded_file=document)
    is_image = document.mime_type.startswith("image/")
    preview = gr.update(value=str(document.path) if is_image else None, visible=is_image)
    return preview, f"📄 **{document.name}** ready for extraction", gr.update(interactive=True), state


async def extract_event_info(state: UIState) -> list:
    """Extract event details from the uploaded document and fill the form.

    On failure the form is left unchanged so the user can retry or type the
    details in.

    Returns:
        List of updates: event_name, date, time, target_audience, event_format,
        location, contact_name, contact_phone, contact_email, info_group,
        status_message, then the updated state
    """
    unchanged = [gr.update()] * 9

    document = state.form.snapshot().uploaded_file
    if document is None:
        return [*unchanged, gr.update(), "❌ Please upload a file first.", state]

    try:
        state = initialize_ui_state(state)
        extracted = await state.service.extract_event_info(document.read())
    except PosterError as e:
        logger.warning(f"Extraction failed: {e}")
        return [*unchanged, gr.update(), f"❌ {EXTRACTION_FAILED_ALERT}\n\n`{e}`", state]

    form = state.form.apply_extraction(extracted)
    state.extracted = True

    return [
        gr.update(value=form.event_name),
        gr.update(value=form.date),
        gr.update(value=form.time),
        gr.update(value=form.target_audience),
        gr.update(value=_FORMAT_LABELS[form.is_online]),
        gr.update(value=form.location_or_platform, visible=not form.is_online),
        gr.update(value=form.contact_name),
        gr.update(value=form.contact_phone),
        gr.update(value=form.contact_email),
        gr.update(visible=True),
        "✅ **Extraction complete.** Please review the details below.",
        state,
    ]


def set_input_mode(label: str, state: UIState) -> tuple[dict, dict, UIState]:
    """Switch between manual entry and document extraction.

    In auto mode the event details stay hidden until an extraction has
    filled them in.

    Returns:
        Tuple of (upload_group_visibility, info_group_visibility, updated_state)
    """
    auto = INPUT_MODES.get(label, False)
    show_info = not auto or state.extracted
    return gr.update(visible=auto), gr.update(visible=show_info), state
