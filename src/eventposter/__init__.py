"""Event Poster Studio - AI event invitation posters from a simple form."""

__version__ = "0.1.0"

from eventposter.core.config import PosterConfig, config
from eventposter.core.form import EventForm, FormStore
from eventposter.core.gemini_service import GeminiPosterService

__all__ = [
    "EventForm",
    "FormStore",
    "GeminiPosterService",
    "PosterConfig",
    "config",
]
