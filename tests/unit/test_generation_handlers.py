"""Unit tests for API key, generation, download, and history handlers."""

import asyncio
import base64
from io import BytesIO
from unittest.mock import AsyncMock, Mock, patch

from PIL import Image

from eventposter.core.errors import GenerationError, MissingApiKeyError
from eventposter.ui.handlers.generation import (
    download_current_poster,
    generate_poster,
    lock_generate_button,
    submit_api_key,
    unlock_generate_button,
)
from eventposter.ui.handlers.history import (
    format_timestamp,
    refresh_history,
    select_history_item,
)


def state_with_service(ui_state, *results):
    service = Mock()
    service.generate_poster = AsyncMock(side_effect=list(results))
    ui_state.service = service
    return ui_state


class TestApiKeyHandler:
    """Tests for submit_api_key."""

    def test_valid_key_hides_box(self, ui_state):
        """Test that a valid key is stored and the key box hidden."""
        status, update, state = submit_api_key("  AIzaKey ", ui_state)

        assert "✅" in status
        assert update["visible"] is False
        assert state.api_key == "AIzaKey"

    def test_empty_key_shows_error(self, ui_state):
        """Test that an empty key keeps the box visible."""
        status, update, state = submit_api_key("", ui_state)

        assert "Validation Error" in status
        assert update["visible"] is True
        assert state.api_key is None


class TestGenerateButton:
    """Tests for the generate button lock."""

    def test_lock_and_unlock(self):
        """Test that the button is disabled during generation."""
        assert lock_generate_button()["interactive"] is False
        unlocked = unlock_generate_button()
        assert unlocked["interactive"] is True
        assert unlocked["value"] == "Tạo Poster"


class TestGeneratePoster:
    """Tests for the generate_poster handler."""

    def test_success(self, ui_state, png_data_url):
        """Test that a generated poster is shown and added to history."""
        state = state_with_service(ui_state, png_data_url)
        state.form.update(event_name="AI Day")

        image, status, history, state = asyncio.run(generate_poster(state))

        assert isinstance(image, Image.Image)
        assert "Poster Generated" in status
        assert "AI Day" in status
        assert len(history) == 1
        assert state.session.generated_image == png_data_url

    def test_failure_keeps_previous_poster(self, ui_state, png_data_url):
        """Test that a failure shows one error and keeps the current poster."""
        state = state_with_service(
            ui_state, png_data_url, GenerationError("Poster Generation Failed: boom")
        )
        asyncio.run(generate_poster(state))

        image, status, history, state = asyncio.run(generate_poster(state))

        assert image == {"__type__": "update"}
        assert status.count("❌") == 1
        assert "Poster Generation Failed: boom" in status
        assert len(history) == 1
        assert state.session.generated_image == png_data_url

    def test_missing_key(self, ui_state):
        """Test that a missing API key is reported as a generation failure."""
        with patch("eventposter.ui.handlers.generation.initialize_ui_state") as mock_init:
            mock_init.side_effect = MissingApiKeyError("A Gemini API key is required")

            _, status, history, _ = asyncio.run(generate_poster(ui_state))

        assert "API key is required" in status
        assert history == []

    def test_unexpected_error(self, ui_state):
        """Test that unexpected exceptions are reported, not raised."""
        state = state_with_service(ui_state, RuntimeError("kaboom"))

        _, status, _, state = asyncio.run(generate_poster(state))

        assert "unexpected error" in status
        assert "kaboom" in status
        assert not state.session.is_generating


class TestDownload:
    """Tests for downloading the current poster."""

    def test_nothing_to_download(self, ui_state):
        """Test the message when no poster exists yet."""
        path, status = download_current_poster(ui_state)

        assert path is None
        assert "No poster" in status

    def test_download(self, ui_state, png_data_url, test_config):
        """Test that the poster is written under the brand filename."""
        state = state_with_service(ui_state, png_data_url)
        asyncio.run(generate_poster(state))

        with patch("eventposter.ui.handlers.generation.config", test_config):
            path, status = download_current_poster(state)

        assert path.endswith("MISA-Event-Poster.png")
        assert "✅" in status


class TestHistoryHandlers:
    """Tests for the history tab."""

    def test_empty_history(self, ui_state):
        """Test the placeholder text for an empty history."""
        items, info = refresh_history(ui_state)

        assert items == []
        assert info == "*Chưa có hình ảnh nào được tạo*"

    def test_refresh_lists_newest_first(self, ui_state):
        """Test that gallery items follow the history order."""
        first = "data:image/png;base64," + _png_b64((255, 0, 0))
        second = "data:image/png;base64," + _png_b64((0, 255, 0))
        state = state_with_service(ui_state, first, second)
        asyncio.run(generate_poster(state))
        asyncio.run(generate_poster(state))

        items, info = refresh_history(state)

        assert len(items) == 2
        assert items[0][0].getpixel((0, 0)) == (0, 255, 0)
        assert "**2**" in info

    def test_select_history_item(self, ui_state, png_data_url, test_config):
        """Test that selecting an entry shows it and exports it for download."""
        state = state_with_service(ui_state, png_data_url)
        asyncio.run(generate_poster(state))
        item = state.session.history.items[0]

        with patch("eventposter.ui.handlers.history.config", test_config):
            image, path, info, state = select_history_item(Mock(index=0), state)

        assert isinstance(image, Image.Image)
        assert path.endswith(item.download_name("MISA"))
        assert format_timestamp(item.created_at) in info

    def test_select_out_of_range(self, ui_state):
        """Test that a stale selection is ignored."""
        image, path, info, _ = select_history_item(Mock(index=3), ui_state)

        assert path is None
        assert info == ""


def _png_b64(color) -> str:
    buffer = BytesIO()
    Image.new("RGB", (4, 4), color).save(buffer, format="PNG")
    return base64.b64encode(buffer.getvalue()).decode("ascii")
