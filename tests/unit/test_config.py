"""Tests for eventposter.core.config: configuration management.

Tests cover:
- Default values for the Gemini, branding, and server settings.
- Environment variable overrides via the EVENTPOSTER_ prefix.
- The GEMINI_API_KEY fallback variable.
- Automatic outputs directory creation on initialisation.
- Pydantic validation constraints (port range, image size literal).
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from eventposter.core.config import PosterConfig


@pytest.fixture
def clean_env(monkeypatch):
    """Remove any API key variables from the environment."""
    for name in ("EVENTPOSTER_GEMINI_API_KEY", "GEMINI_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestConfigDefaults:
    """Verify that PosterConfig provides the documented defaults."""

    def test_model_defaults(self, temp_dir: Path, clean_env):
        """Default models match the generation, extraction, and cleaning workflows."""
        cfg = PosterConfig(outputs_dir=temp_dir, _env_file=None)

        assert cfg.poster_model == "gemini-3-pro-image-preview"
        assert cfg.extraction_model == "gemini-2.5-flash"
        assert cfg.background_model == "gemini-2.5-flash-image"
        assert cfg.output_image_size == "2K"

    def test_no_key_by_default(self, temp_dir: Path, clean_env):
        """Without environment variables no API key is configured."""
        cfg = PosterConfig(outputs_dir=temp_dir, _env_file=None)

        assert cfg.gemini_api_key is None

    def test_branding_defaults(self, test_config: PosterConfig):
        """Brand name defaults to MISA."""
        assert test_config.brand_name == "MISA"

    def test_default_server_port(self, temp_dir: Path, monkeypatch):
        """Default server port should be 7860."""
        monkeypatch.delenv("EVENTPOSTER_SERVER_PORT", raising=False)
        cfg = PosterConfig(outputs_dir=temp_dir, _env_file=None)

        assert cfg.server_port == 7860
        assert cfg.gradio_share is False


class TestEnvironmentOverrides:
    """Verify that environment variables override defaults."""

    def test_prefixed_variables(self, temp_dir: Path, clean_env):
        """EVENTPOSTER_* variables are picked up."""
        clean_env.setenv("EVENTPOSTER_OUTPUT_IMAGE_SIZE", "4K")
        clean_env.setenv("EVENTPOSTER_BRAND_NAME", "ACME")

        cfg = PosterConfig(outputs_dir=temp_dir, _env_file=None)

        assert cfg.output_image_size == "4K"
        assert cfg.brand_name == "ACME"

    def test_prefixed_api_key(self, temp_dir: Path, clean_env):
        """EVENTPOSTER_GEMINI_API_KEY sets the key."""
        clean_env.setenv("EVENTPOSTER_GEMINI_API_KEY", "prefixed")

        cfg = PosterConfig(outputs_dir=temp_dir, _env_file=None)

        assert cfg.gemini_api_key == "prefixed"

    def test_plain_api_key(self, temp_dir: Path, clean_env):
        """GEMINI_API_KEY is accepted as well."""
        clean_env.setenv("GEMINI_API_KEY", "plain")

        cfg = PosterConfig(outputs_dir=temp_dir, _env_file=None)

        assert cfg.gemini_api_key == "plain"


class TestDirectories:
    """Verify directory handling."""

    def test_outputs_dir_created(self, temp_dir: Path):
        """The outputs directory is created on initialisation."""
        outputs = temp_dir / "nested" / "outputs"

        PosterConfig(outputs_dir=outputs, _env_file=None)

        assert outputs.is_dir()


class TestValidation:
    """Verify Pydantic validation constraints."""

    def test_port_range(self, temp_dir: Path):
        """Ports below 1024 are rejected."""
        with pytest.raises(ValidationError):
            PosterConfig(outputs_dir=temp_dir, server_port=80, _env_file=None)

    def test_image_size_literal(self, temp_dir: Path):
        """Only 1K, 2K, and 4K are valid sizes."""
        with pytest.raises(ValidationError):
            PosterConfig(outputs_dir=temp_dir, output_image_size="8K", _env_file=None)

    def test_logo_timeout_positive(self, temp_dir: Path):
        """The logo fetch timeout must be positive."""
        with pytest.raises(ValidationError):
            PosterConfig(outputs_dir=temp_dir, logo_fetch_timeout=0, _env_file=None)
