"""Core functionality for poster generation.

This module provides the core components for Event Poster Studio:

- **FormStore / EventForm**: Immutable form snapshots and their update operations
- **compile_poster_prompt**: Form snapshot -> ordered attachments + instruction text
- **GeminiPosterService**: Poster generation, event extraction, background cleaning
- **GenerationSession**: Generation lifecycle, current poster, and history
- **PosterConfig / config**: Configuration management using Pydantic Settings

Architecture Overview
---------------------
1. **Configuration Layer** (config.py):
   - Environment-based configuration using Pydantic Settings
   - All settings prefixed with EVENTPOSTER_ in .env files

2. **Form Layer** (form.py, images.py):
   - EventForm, Speaker, AgendaItem snapshots
   - ImageFile references to uploads, ImageAttachment bytes

3. **Prompt Layer** (prompt_compiler.py, templates.py):
   - PromptBuilder numbers attachments as they are added
   - Preset background swatches rendered with Pillow

4. **Service Layer** (gemini_service.py, session.py, history.py):
   - Async Gemini calls via google-genai
   - One in-flight generation per session, in-memory history

Usage Example
-------------
    from eventposter.core import FormStore, GeminiPosterService, GenerationSession

    store = FormStore()
    store.update(event_name="Hội thảo AI 2025", date="20/11/2025")
    store.add_speaker(name="Nguyễn Văn A", title="CTO")

    session = GenerationSession()
    item = await session.generate(GeminiPosterService(), store.snapshot())
"""

from eventposter.core.config import PosterConfig, config
from eventposter.core.errors import (
    AttachmentReadError,
    BackgroundCleanError,
    ExtractionError,
    GenerationError,
    GenerationInProgressError,
    MissingApiKeyError,
    PosterError,
)
from eventposter.core.form import AgendaItem, EventForm, FormStore, Speaker
from eventposter.core.gemini_service import GeminiPosterService
from eventposter.core.history import HistoryItem, PosterHistory
from eventposter.core.images import ImageAttachment, ImageFile
from eventposter.core.prompt_compiler import CompiledPrompt, PromptBuilder, compile_poster_prompt
from eventposter.core.session import GenerationSession, GenerationStatus

__all__ = [
    "AgendaItem",
    "AttachmentReadError",
    "BackgroundCleanError",
    "CompiledPrompt",
    "EventForm",
    "ExtractionError",
    "FormStore",
    "GeminiPosterService",
    "GenerationError",
    "GenerationInProgressError",
    "GenerationSession",
    "GenerationStatus",
    "HistoryItem",
    "ImageAttachment",
    "ImageFile",
    "MissingApiKeyError",
    "PosterConfig",
    "PosterError",
    "PosterHistory",
    "PromptBuilder",
    "Speaker",
    "compile_poster_prompt",
    "config",
]
