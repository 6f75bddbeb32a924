"""UI event handlers organized by feature area.

This package provides handlers for all Gradio UI events, organized into logical modules:
- form: Event details, theme, agenda, speakers, logos, and QR code
- generation: API key entry, poster generation, and download
- extraction: Document upload and event detail extraction
- templates: Background presets, uploads, and AI cleaning
- history: Session history browsing
"""

from .extraction import (
    extract_event_info,
    set_input_mode,
    upload_document,
)
from .form import (
    add_speaker,
    agenda_rows,
    make_field_handler,
    remove_speaker,
    set_aspect_ratio,
    set_brand_logo_mode,
    set_event_format,
    set_logo,
    set_qr_code,
    set_qr_code_mode,
    set_speaker_image,
    set_theme_tone,
    set_theme_topics,
    speaker_slot_updates,
    update_agenda,
    update_form_field,
    update_speaker_field,
)
from .generation import (
    download_current_poster,
    generate_poster,
    lock_generate_button,
    submit_api_key,
    unlock_generate_button,
)
from .history import (
    history_gallery_items,
    refresh_history,
    select_history_item,
)
from .templates import (
    clean_background,
    clear_background,
    preset_gallery_items,
    select_preset,
    set_use_background,
    upload_background,
)

__all__ = [
    # Form handlers
    "add_speaker",
    "agenda_rows",
    "make_field_handler",
    "remove_speaker",
    "set_aspect_ratio",
    "set_brand_logo_mode",
    "set_event_format",
    "set_logo",
    "set_qr_code",
    "set_qr_code_mode",
    "set_speaker_image",
    "set_theme_tone",
    "set_theme_topics",
    "speaker_slot_updates",
    "update_agenda",
    "update_form_field",
    "update_speaker_field",
    # Generation handlers
    "download_current_poster",
    "generate_poster",
    "lock_generate_button",
    "submit_api_key",
    "unlock_generate_button",
    # Extraction handlers
    "extract_event_info",
    "set_input_mode",
    "upload_document",
    # Template handlers
    "clean_background",
    "clear_background",
    "preset_gallery_items",
    "select_preset",
    "set_use_background",
    "upload_background",
    # History handlers
    "history_gallery_items",
    "refresh_history",
    "select_history_item",
]
