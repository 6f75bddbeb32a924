"""Data models and constants for the Event Poster Studio UI."""

import logging
from dataclasses import dataclass, field
from typing import Any

from eventposter.core.form import MAX_SPEAKERS, FormStore
from eventposter.core.session import GenerationSession

logger = logging.getLogger(__name__)


@dataclass
class UIState:
    """Session state for the Gradio UI.

    Each browser session gets its own UIState instance, so the form, the
    current poster and the history are never shared between users.

    Attributes
    ----------
    form : FormStore
        Owner of the current EventForm snapshot
    session : GenerationSession
        Generation lifecycle, current poster, and history
    service : Any | None
        GeminiPosterService instance (created lazily)
    api_key : str | None
        Key entered in the UI when none is configured
    extracted : bool
        Whether event details have been extracted from the uploaded document
    """

    form: FormStore = field(default_factory=FormStore)
    session: GenerationSession = field(default_factory=GenerationSession)
    service: Any | None = None  # GeminiPosterService instance
    api_key: str | None = None
    extracted: bool = False

    def is_initialized(self) -> bool:
        """Check if the Gemini service has been created."""
        return self.service is not None

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"UIState(initialized={self.is_initialized()}, "
            f"speakers={len(self.form.form.speakers)}, "
            f"history={len(self.session.history)})"
        )


ASPECT_RATIOS = {
    "Ngang 16:9": "16:9",
    "Dọc 3:4": "3:4",
}

EVENT_FORMATS = {
    "Trực tuyến (Online)": True,
    "Trực tiếp (Offline)": False,
}

# Value: whether the event details come from an uploaded document
INPUT_MODES = {
    "Thủ công": False,
    "Tự động (từ tài liệu)": True,
}

LOGO_LABELS = {
    "organizer_logo": "Đơn vị tổ chức",
    "product_logo": "Sản phẩm đồng hành",
    "co_organizer_logo": "Đơn vị phối hợp",
}

AGENDA_HEADERS = ["Thời gian", "Nội dung"]

SPEAKER_SLOTS = MAX_SPEAKERS
