"""Unit tests for the generation session and poster history."""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from eventposter.core.errors import GenerationError, GenerationInProgressError
from eventposter.core.form import EventForm
from eventposter.core.history import HistoryItem, PosterHistory
from eventposter.core.session import GenerationSession, GenerationStatus


def make_generator(*results):
    generator = Mock()
    generator.generate_poster = AsyncMock(side_effect=list(results))
    return generator


class TestGenerationSession:
    """Tests for the generation lifecycle."""

    def test_initial_state(self):
        """Test that a new session is idle with nothing generated."""
        session = GenerationSession()

        assert session.status is GenerationStatus.IDLE
        assert session.generated_image is None
        assert len(session.history) == 0

    def test_success_stores_image_and_history(self, png_data_url):
        """Test that a successful generation updates the image and history."""
        session = GenerationSession()

        item = asyncio.run(session.generate(make_generator(png_data_url), EventForm()))

        assert session.generated_image == png_data_url
        assert session.history.items == [item]
        assert session.status is GenerationStatus.IDLE

    def test_newest_first(self):
        """Test that history entries are prepended."""
        session = GenerationSession()
        generator = make_generator("data:image/png;base64,AA==", "data:image/png;base64,AQ==")

        first = asyncio.run(session.generate(generator, EventForm()))
        second = asyncio.run(session.generate(generator, EventForm()))

        assert [i.id for i in session.history] == [second.id, first.id]

    def test_failure_leaves_state_untouched(self, png_data_url):
        """Test that a failed generation keeps the previous image and history."""
        session = GenerationSession()
        asyncio.run(session.generate(make_generator(png_data_url), EventForm()))
        history_before = session.history.items

        with pytest.raises(GenerationError):
            asyncio.run(
                session.generate(make_generator(GenerationError("boom")), EventForm())
            )

        assert session.generated_image == png_data_url
        assert session.history.items == history_before
        assert session.status is GenerationStatus.IDLE

    def test_busy_guard(self):
        """Test that a second generation while one is running is rejected."""
        session = GenerationSession()
        started = asyncio.Event()
        release = asyncio.Event()

        async def slow_generate(form):
            started.set()
            await release.wait()
            return "data:image/png;base64,AA=="

        generator = Mock()
        generator.generate_poster = slow_generate

        async def scenario():
            first = asyncio.create_task(session.generate(generator, EventForm()))
            await started.wait()
            assert session.is_generating
            with pytest.raises(GenerationInProgressError):
                await session.generate(generator, EventForm())
            release.set()
            return await first

        item = asyncio.run(scenario())

        assert session.history.items == [item]
        assert not session.is_generating

    def test_select_history_item(self):
        """Test that selecting a history entry makes it the current poster."""
        session = GenerationSession()
        generator = make_generator("data:image/png;base64,AA==", "data:image/png;base64,AQ==")
        first = asyncio.run(session.generate(generator, EventForm()))
        asyncio.run(session.generate(generator, EventForm()))

        assert session.select(first.id) == first.image
        assert session.generated_image == first.image

    def test_export_current(self, png_data_url, png_bytes, temp_dir):
        """Test the download filename of the current poster."""
        session = GenerationSession()
        assert session.export_current(temp_dir, "MISA") is None

        asyncio.run(session.generate(make_generator(png_data_url), EventForm()))
        path = session.export_current(temp_dir, "MISA")

        assert path.name == "MISA-Event-Poster.png"
        assert path.read_bytes() == png_bytes


class TestPosterHistory:
    """Tests for the history container."""

    def test_get_unknown_raises(self):
        """Test that looking up a missing id raises KeyError."""
        with pytest.raises(KeyError):
            PosterHistory().get("missing")

    def test_items_is_a_copy(self):
        """Test that callers cannot mutate the history through items."""
        history = PosterHistory()
        history.add("data:image/png;base64,AA==")

        history.items.clear()

        assert len(history) == 1

    def test_download_name(self):
        """Test that history downloads embed the creation timestamp."""
        item = HistoryItem(image="data:image/png;base64,AA==", created_at=1700000000000)

        assert item.download_name("MISA") == "MISA-History-1700000000000.png"

    def test_export(self, png_data_url, temp_dir):
        """Test exporting a history entry under its download name."""
        history = PosterHistory()
        item = history.add(png_data_url)

        path = history.export(item, temp_dir, "MISA")

        assert path == temp_dir / item.download_name("MISA")
        assert path.exists()
