"""Event Poster Studio: FastAPI Application.

This module is the single entry point for the web application.  It defines
the FastAPI ``app`` instance, the JSON API routes, mounts the Gradio UI, and
provides the ``main()`` CLI function that launches the uvicorn server.

Architecture
------------
- **Configuration** comes from :data:`~eventposter.core.config.config`
  (environment variables and ``.env``) and is exposed read-only via
  ``GET /api/config``.
- **Gemini calls** go through a single
  :class:`~eventposter.core.gemini_service.GeminiPosterService` created at
  startup when an API key is configured.
- **History** lives in memory in a
  :class:`~eventposter.core.session.GenerationSession` on ``app.state``;
  nothing is persisted between restarts.
- **The browser UI** is the Gradio app, mounted at ``/ui``.

Endpoints
---------
========  ============================  ====================================
Method    Path                          Purpose
========  ============================  ====================================
GET       ``/``                         Redirect to the Gradio UI
GET       ``/api/config``               Models, choices, limits
POST      ``/api/prompt/compile``       Preview the compiled prompt
POST      ``/api/generate``             Generate a poster
GET       ``/api/history``              Posters generated since startup
POST      ``/api/extract``              Extract event details from a file
POST      ``/api/background/clean``     Strip text and people from a design
========  ============================  ====================================

Usage
-----
CLI (installed entry point)::

    eventposter

Direct invocation::

    python -m eventposter.api.main
"""

from __future__ import annotations

import logging
import tempfile
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager
from pathlib import Path
from typing import get_args

import gradio as gr
from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from fastapi.responses import RedirectResponse

from eventposter import __version__
from eventposter.api.models import (
    BackgroundResponse,
    CompileResponse,
    EventFormPayload,
    ExtractionResponse,
    HistoryResponse,
    PosterResponse,
)
from eventposter.core.config import config
from eventposter.core.errors import (
    AttachmentReadError,
    GenerationInProgressError,
    MissingApiKeyError,
    PosterError,
)
from eventposter.core.form import (
    AspectRatio,
    MAX_SPEAKERS,
    MAX_TOPICS,
    THEME_TONES,
    THEME_TOPICS,
    EventForm,
)
from eventposter.core.gemini_service import GeminiPosterService
from eventposter.core.images import ImageAttachment, fetch_default_logo, guess_mime_type
from eventposter.core.prompt_compiler import compile_poster_prompt
from eventposter.core.session import GenerationSession
from eventposter.core.templates import PRESETS
from eventposter.ui.app import create_ui

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Resolve paths from the global configuration instance.
# ---------------------------------------------------------------------------
UPLOADS_DIR: Path = config.outputs_dir / "uploads"

DOCUMENT_MIME_TYPES = ("application/pdf", "text/plain")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup and shutdown lifecycle.

    On startup:
        Creates the generation session and, when an API key is configured,
        the Gemini service.  Without a key the API still serves
        configuration and prompt previews; Gemini-backed routes answer 503.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to the application for the duration of its lifetime.
    """
    app.state.session = GenerationSession()
    try:
        app.state.service = GeminiPosterService(config=config)
        logger.info("GeminiPosterService initialised.")
    except MissingApiKeyError:
        app.state.service = None
        logger.warning("No Gemini API key configured; generation routes are disabled.")

    yield

    logger.info(f"Shutting down with {len(app.state.session.history)} poster(s) in history.")


app = FastAPI(
    title="Event Poster Studio",
    description="Event poster generation with Google Gemini.",
    version=__version__,
    lifespan=lifespan,
)


# ---------------------------------------------------------------------------
# Request helpers.
# ---------------------------------------------------------------------------


def _get_service(request: Request) -> GeminiPosterService:
    """Return the Gemini service or fail with 503 when no key is configured."""
    service = getattr(request.app.state, "service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Gemini API key is not configured")
    return service


@contextmanager
def _request_form(payload: EventFormPayload) -> Iterator[EventForm]:
    """Build the form with its embedded images in a per-request directory.

    The directory and every image written to it are removed when the
    request is done, whether it succeeded or not.

    Raises:
        HTTPException: 400 for invalid embedded images.
    """
    UPLOADS_DIR.mkdir(parents=True, exist_ok=True)
    upload_dir = tempfile.TemporaryDirectory(prefix="request-", dir=UPLOADS_DIR)
    try:
        try:
            form = payload.to_form(Path(upload_dir.name))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"Invalid image: {e}") from e
        yield form
    finally:
        upload_dir.cleanup()


async def _read_upload(file: UploadFile, allowed: tuple[str, ...] = ()) -> ImageAttachment:
    """Read an uploaded file into an attachment.

    Args:
        file: Multipart upload.
        allowed: Extra MIME types accepted besides ``image/*``.

    Raises:
        HTTPException: 400 for empty files or unsupported types.
    """
    mime_type = file.content_type or guess_mime_type(file.filename or "")
    if not (mime_type.startswith("image/") or mime_type in allowed):
        raise HTTPException(status_code=400, detail=f"Unsupported file type: {mime_type}")
    data = await file.read()
    if not data:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    return ImageAttachment(data=data, mime_type=mime_type)


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@app.get("/", include_in_schema=False)
async def index() -> RedirectResponse:
    """Redirect the bare root to the Gradio UI."""
    return RedirectResponse(url="/ui")


@app.get("/api/config")
async def get_config(request: Request) -> dict:
    """Return the choices and limits the form uses.

    Returns:
        Dictionary with ``version``, model names, output size, the
        choice lists for aspect ratio, theme tone, and topics, the speaker and
        topic limits, the preset background names, and whether a Gemini key
        is configured.
    """
    return {
        "version": __version__,
        "brand_name": config.brand_name,
        "poster_model": config.poster_model,
        "extraction_model": config.extraction_model,
        "background_model": config.background_model,
        "output_image_size": config.output_image_size,
        "aspect_ratios": list(get_args(AspectRatio)),
        "theme_tones": THEME_TONES,
        "theme_topics": THEME_TOPICS,
        "max_speakers": MAX_SPEAKERS,
        "max_topics": MAX_TOPICS,
        "background_presets": [{"id": p.id, "name": p.name} for p in PRESETS],
        "gemini_configured": getattr(request.app.state, "service", None) is not None,
    }


@app.post("/api/prompt/compile")
async def compile_prompt(payload: EventFormPayload) -> CompileResponse:
    """Preview the compiled prompt without generating a poster.

    Uses the default logo fetcher, so the preview matches what generation
    would send.

    Raises:
        HTTPException: 400 for invalid embedded images.
    """

    async def fetch_logo() -> ImageAttachment | None:
        return await fetch_default_logo(config.default_logo_url, timeout=config.logo_fetch_timeout)

    with _request_form(payload) as form:
        try:
            compiled = await compile_poster_prompt(form, fetch_logo=fetch_logo)
        except AttachmentReadError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

    return CompileResponse(
        prompt=compiled.text,
        attachment_count=len(compiled.attachments),
        attachment_mime_types=[a.mime_type for a in compiled.attachments],
    )


@app.post("/api/generate")
async def generate(payload: EventFormPayload, request: Request) -> PosterResponse:
    """Generate a poster and prepend it to the history.

    Raises:
        HTTPException: 400 for invalid input, 409 while another generation
            is running, 502 when Gemini fails, 503 without an API key.
    """
    service = _get_service(request)
    session: GenerationSession = request.app.state.session

    with _request_form(payload) as form:
        try:
            item = await session.generate(service, form)
        except GenerationInProgressError as e:
            raise HTTPException(status_code=409, detail=str(e)) from e
        except AttachmentReadError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        except PosterError as e:
            raise HTTPException(status_code=502, detail=str(e)) from e

    return PosterResponse.from_item(item)


@app.get("/api/history")
async def get_history(request: Request) -> HistoryResponse:
    """Return every poster generated since startup, newest first."""
    session: GenerationSession = request.app.state.session
    items = [PosterResponse.from_item(item) for item in session.history]
    return HistoryResponse(items=items, total=len(items))


@app.post("/api/extract")
async def extract(request: Request, file: UploadFile = File(...)) -> ExtractionResponse:
    """Extract event details from an invitation image, PDF, or text file.

    Raises:
        HTTPException: 400 for unsupported files, 502 when extraction
            fails, 503 without an API key.
    """
    service = _get_service(request)
    document = await _read_upload(file, allowed=DOCUMENT_MIME_TYPES)
    try:
        extracted = await service.extract_event_info(document)
    except PosterError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    return ExtractionResponse(**extracted)


@app.post("/api/background/clean")
async def clean_background(request: Request, file: UploadFile = File(...)) -> BackgroundResponse:
    """Recreate only the background of an uploaded design.

    Raises:
        HTTPException: 400 for non-image files, 502 when cleaning fails,
            503 without an API key.
    """
    service = _get_service(request)
    image = await _read_upload(file)
    try:
        cleaned = await service.clean_background(image)
    except PosterError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    return BackgroundResponse(image=cleaned)


# Mount the Gradio UI last so the API routes take precedence.
app = gr.mount_gradio_app(app, create_ui(), path="/ui")


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host and port from :data:`~eventposter.core.config.config` (which
    loads from ``EVENTPOSTER_SERVER_HOST`` and ``EVENTPOSTER_SERVER_PORT``
    environment variables).  Defaults to ``0.0.0.0:7860``.

    This function is registered as the ``eventposter`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    uvicorn.run(
        "eventposter.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
