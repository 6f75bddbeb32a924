"""In-memory history of generated posters.

The history lives only as long as the session: it is append-only,
newest-first, and unbounded. Entries can be exported to disk on request
with a filename that embeds their creation timestamp.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from .form import new_id
from .images import export_image

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class HistoryItem:
    """A poster produced during this session."""

    image: str = field(repr=False)  # data URL
    id: str = field(default_factory=new_id)
    created_at: int = field(default_factory=now_ms)  # milliseconds since epoch

    def download_name(self, brand: str) -> str:
        return f"{brand}-History-{self.created_at}.png"


class PosterHistory:
    """Newest-first list of generated posters."""

    def __init__(self) -> None:
        self._items: list[HistoryItem] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[HistoryItem]:
        return iter(self._items)

    @property
    def items(self) -> list[HistoryItem]:
        return list(self._items)

    def add(self, image: str) -> HistoryItem:
        """Record a newly generated image at the front of the history."""
        item = HistoryItem(image=image)
        self._items.insert(0, item)
        logger.info(f"Added history item {item.id} ({len(self._items)} total)")
        return item

    def get(self, item_id: str) -> HistoryItem:
        """Look up an entry by id.

        Raises:
            KeyError: If no entry has that id
        """
        for item in self._items:
            if item.id == item_id:
                return item
        raise KeyError(item_id)

    def export(self, item: HistoryItem, directory: Path, brand: str) -> Path:
        """Write *item* to ``directory`` using its download filename."""
        return export_image(item.image, directory / item.download_name(brand))
