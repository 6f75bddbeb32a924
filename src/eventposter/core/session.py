"""Generation lifecycle for one user session.

State machine::

    IDLE -> GENERATING -> IDLE   (success: image stored, history updated)
                       -> IDLE   (failure: error re-raised, nothing changed)

Only one generation may be in flight per session. A second request made
while one is running is rejected with
:class:`~eventposter.core.errors.GenerationInProgressError` instead of
being queued or racing the first one.
"""

from __future__ import annotations

import enum
import logging
from pathlib import Path
from typing import Protocol

from .errors import GenerationInProgressError
from .form import EventForm
from .history import HistoryItem, PosterHistory
from .images import export_image

logger = logging.getLogger(__name__)


class PosterGenerator(Protocol):
    async def generate_poster(self, form: EventForm) -> str: ...


class GenerationStatus(enum.Enum):
    IDLE = "idle"
    GENERATING = "generating"


class GenerationSession:
    """Current poster, history, and busy guard for a session.

    Attributes:
        generated_image: Most recent successful poster (data URL), or None
        history: Posters generated in this session, newest first
        status: Current lifecycle state
    """

    def __init__(self) -> None:
        self.generated_image: str | None = None
        self.history = PosterHistory()
        self.status = GenerationStatus.IDLE

    @property
    def is_generating(self) -> bool:
        return self.status is GenerationStatus.GENERATING

    async def generate(self, generator: PosterGenerator, form: EventForm) -> HistoryItem:
        """Generate a poster for *form* and record it.

        Args:
            generator: Service that renders the poster
            form: Snapshot to render

        Returns:
            The new history entry

        Raises:
            GenerationInProgressError: If a generation is already running
            PosterError: Whatever the generator raised; the current image and
                history are left untouched
        """
        if self.is_generating:
            raise GenerationInProgressError(
                "A poster is already being generated. Please wait for it to finish."
            )

        self.status = GenerationStatus.GENERATING
        logger.info("Generation started")
        try:
            image = await generator.generate_poster(form)
        finally:
            self.status = GenerationStatus.IDLE

        self.generated_image = image
        item = self.history.add(image)
        logger.info(f"Generation finished: {item.id}")
        return item

    def select(self, item_id: str) -> str:
        """Show a history entry as the current poster."""
        self.generated_image = self.history.get(item_id).image
        return self.generated_image

    def export_current(self, directory: Path, brand: str) -> Path | None:
        """Write the current poster to ``{brand}-Event-Poster.png``."""
        if self.generated_image is None:
            return None
        return export_image(self.generated_image, directory / f"{brand}-Event-Poster.png")
