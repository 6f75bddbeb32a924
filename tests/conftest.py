"""Shared pytest fixtures for Event Poster Studio tests."""

import shutil
import tempfile
from io import BytesIO
from pathlib import Path
from types import SimpleNamespace
from typing import Generator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from PIL import Image

from eventposter.core.config import PosterConfig
from eventposter.core.form import FormStore
from eventposter.core.gemini_service import GeminiPosterService
from eventposter.core.images import ImageAttachment, ImageFile, to_data_url
from eventposter.ui.models import UIState


def _png_bytes(color=(0, 102, 204), size=(8, 8)) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> PosterConfig:
    """Create a test configuration writing into a temporary directory.

    Args:
        temp_dir: Temporary directory from fixture

    Returns:
        PosterConfig instance for testing
    """
    return PosterConfig(
        _env_file=None,
        gemini_api_key="test-key",
        outputs_dir=temp_dir / "outputs",
        default_logo_url="https://example.com/logo.png",
        logo_fetch_timeout=1.0,
    )


@pytest.fixture
def png_bytes() -> bytes:
    """Bytes of a small valid PNG image."""
    return _png_bytes()


@pytest.fixture
def png_data_url(png_bytes: bytes) -> str:
    return to_data_url(png_bytes, "image/png")


@pytest.fixture
def png_attachment(png_bytes: bytes) -> ImageAttachment:
    return ImageAttachment(data=png_bytes, mime_type="image/png")


@pytest.fixture
def png_file(temp_dir: Path, png_bytes: bytes) -> Path:
    """A PNG image written to disk (like a Gradio upload)."""
    path = temp_dir / "upload.png"
    path.write_bytes(png_bytes)
    return path


@pytest.fixture
def make_image_file(temp_dir: Path):
    """Factory creating uploaded ImageFile references with distinct content.

    Usage:
        logo = make_image_file("logo.png", color=(255, 0, 0))
    """

    def factory(name: str = "image.png", color=(0, 102, 204)) -> ImageFile:
        path = temp_dir / name
        path.write_bytes(_png_bytes(color))
        return ImageFile.from_path(path)

    return factory


@pytest.fixture
def form_store() -> FormStore:
    return FormStore()


@pytest.fixture
def ui_state() -> UIState:
    return UIState()


@pytest.fixture
def image_response():
    """Factory for fake Gemini responses with one inline image part."""

    def factory(data: bytes, mime_type: str = "image/png"):
        part = SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type=mime_type))
        return SimpleNamespace(
            candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))],
            text=None,
        )

    return factory


@pytest.fixture
def mock_client() -> MagicMock:
    """Gemini client double; ``client.aio.models.generate_content`` is an AsyncMock."""
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock()
    return client


@pytest.fixture
def service(mock_client: MagicMock, test_config: PosterConfig) -> GeminiPosterService:
    """Service wired to the mock client and test configuration."""
    return GeminiPosterService(config=test_config, client=mock_client)


@pytest.fixture
def mock_service() -> MagicMock:
    """Service double with async Gemini operations."""
    mock = MagicMock(spec=GeminiPosterService)
    mock.generate_poster = AsyncMock()
    mock.extract_event_info = AsyncMock()
    mock.clean_background = AsyncMock()
    return mock


@pytest.fixture
def test_client(test_config: PosterConfig, mock_service: MagicMock):
    """FastAPI TestClient with the Gemini service mocked out.

    The lifespan runs on entry, so ``app.state.session`` starts empty for
    every test and ``app.state.service`` is ``mock_service``.
    """
    from fastapi.testclient import TestClient

    from eventposter.api.main import app

    with (
        patch("eventposter.api.main.config", test_config),
        patch("eventposter.api.main.UPLOADS_DIR", test_config.outputs_dir / "uploads"),
        patch("eventposter.api.main.GeminiPosterService", return_value=mock_service),
        TestClient(app) as client,
    ):
        yield client
