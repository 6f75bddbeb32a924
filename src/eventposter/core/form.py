"""Event form data model and state container.

The form is an immutable :class:`EventForm` snapshot. :class:`FormStore`
owns the current snapshot and replaces it on every change, so a snapshot
handed to the prompt compiler never changes underneath it.

All mutations go through :meth:`FormStore.update`; the higher-level
operations (topic toggling, speaker and agenda editing, logo slots) compute
the new field values and then call ``update``.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, fields, replace
from typing import Any, Literal

from .images import ImageFile

logger = logging.getLogger(__name__)

AspectRatio = Literal["16:9", "3:4"]
LogoSlot = Literal["organizer_logo", "product_logo", "co_organizer_logo"]

MAX_SPEAKERS = 3
MAX_TOPICS = 2

ONLINE_LOCATION = "Zoom Online"
CUSTOM_OPTION = "Tùy chỉnh"

THEME_TONES = [
    "Xanh công nghệ (MISA Blue)",
    "Đen huyền bí (Black & Gold)",
    "Xanh Navy - Trắng (Corporate)",
    "Đỏ - Trắng - Đen (Energetic)",
    "Xanh - Trắng - Đen (Modern)",
    CUSTOM_OPTION,
]

THEME_TOPICS = [
    "Tài chính - Kế toán",
    "Công nghệ",
    "AI",
    "Bán hàng",
    "Marketing",
    "Nhân sự",
    "Điều hành",
    "Sản xuất",
    CUSTOM_OPTION,
]

LOGO_SLOTS: tuple[LogoSlot, ...] = ("organizer_logo", "product_logo", "co_organizer_logo")

# Fields that an extraction result may overwrite
EXTRACTION_FIELDS = (
    "event_name",
    "date",
    "time",
    "target_audience",
    "is_online",
    "location_or_platform",
    "contact_name",
    "contact_phone",
    "contact_email",
)


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Speaker:
    """A speaker shown on the poster."""

    id: str = field(default_factory=new_id)
    name: str = ""
    title: str = ""
    company: str = ""
    image: ImageFile | None = None
    edit_prompt: str = ""  # e.g. "wear a vest", "arms crossed"
    remove_background: bool = False


@dataclass(frozen=True)
class AgendaItem:
    """One row of the program agenda."""

    id: str = field(default_factory=new_id)
    time: str = ""
    activity: str = ""


@dataclass(frozen=True)
class EventForm:
    """Snapshot of everything the user entered for one poster."""

    # General
    aspect_ratio: AspectRatio = "16:9"

    # Document kept for extraction
    uploaded_file: ImageFile | None = None

    # Event info
    event_type: str = ""
    event_name: str = ""
    date: str = ""
    time: str = ""
    target_audience: str = ""
    is_online: bool = True
    location_or_platform: str = ONLINE_LOCATION

    agenda: tuple[AgendaItem, ...] = ()

    # Visuals
    theme_tone: str = THEME_TONES[0]
    custom_theme_prompt: str = ""
    theme_topics: tuple[str, ...] = ("Công nghệ",)
    custom_topic_prompt: str = ""

    # Background/template (data URL)
    selected_background: str | None = None
    use_uploaded_background: bool = False

    # Logos (use_brand_logo=False means the default organisation logo)
    use_brand_logo: bool = False
    organizer_logo: ImageFile | None = None
    product_logo: ImageFile | None = None
    co_organizer_logo: ImageFile | None = None

    # Contact
    contact_name: str = ""
    contact_phone: str = ""
    contact_email: str = ""

    # QR code
    include_qr_code: bool = False
    qr_code_image: ImageFile | None = None

    speakers: tuple[Speaker, ...] = ()

    def has_brand_logos(self) -> bool:
        return any(getattr(self, slot) is not None for slot in LOGO_SLOTS)

    def uses_custom_topic(self) -> bool:
        return CUSTOM_OPTION in self.theme_topics


_FORM_FIELDS = frozenset(f.name for f in fields(EventForm))
_SPEAKER_FIELDS = frozenset(f.name for f in fields(Speaker)) - {"id"}
_AGENDA_FIELDS = frozenset(f.name for f in fields(AgendaItem)) - {"id"}


def _check_fields(changes: Mapping[str, Any], allowed: frozenset[str], kind: str) -> None:
    unknown = sorted(set(changes) - allowed)
    if unknown:
        raise ValueError(f"Unknown {kind} field(s): {', '.join(unknown)}")


def _as_tuple(value: Any) -> Any:
    return tuple(value) if isinstance(value, list) else value


class FormStore:
    """Owner of the current :class:`EventForm` snapshot.

    Every operation replaces the snapshot with a new one and returns it.
    """

    def __init__(self, form: EventForm | None = None):
        self._form = form or EventForm()

    @property
    def form(self) -> EventForm:
        return self._form

    def snapshot(self) -> EventForm:
        """Return the current immutable snapshot."""
        return self._form

    def update(self, **changes: Any) -> EventForm:
        """Merge *changes* into the current snapshot.

        Matching fields are replaced, all others are preserved. Lists are
        stored as tuples so the snapshot stays immutable.

        Raises:
            ValueError: If a change names a field EventForm does not have
        """
        _check_fields(changes, _FORM_FIELDS, "form")
        changes = {key: _as_tuple(value) for key, value in changes.items()}
        self._form = replace(self._form, **changes)
        return self._form

    def reset(self) -> EventForm:
        self._form = EventForm()
        return self._form

    # -- Theme ----------------------------------------------------------------

    def toggle_topic(self, topic: str) -> EventForm:
        """Select or deselect a theme topic.

        Selecting a topic while two are already selected evicts the oldest
        selection first.
        """
        topics = list(self._form.theme_topics)
        if topic in topics:
            topics.remove(topic)
        else:
            if len(topics) >= MAX_TOPICS:
                evicted = topics.pop(0)
                logger.debug(f"Topic limit reached, evicting '{evicted}'")
            topics.append(topic)
        return self.update(theme_topics=topics)

    def set_topics(self, selected: Iterable[str]) -> EventForm:
        """Apply a full selection (as reported by a checkbox group).

        Topics missing from *selected* are toggled off, new ones are toggled
        on in the given order, so the two-topic eviction rule still applies.
        """
        selected = list(dict.fromkeys(selected))
        for topic in [t for t in self._form.theme_topics if t not in selected]:
            self.toggle_topic(topic)
        for topic in selected:
            if topic not in self._form.theme_topics:
                self.toggle_topic(topic)
        return self._form

    # -- Event format -----------------------------------------------------------

    def set_online(self, is_online: bool) -> EventForm:
        """Switch between online and offline format.

        Going online resets the location to the default platform, going
        offline clears it so the user enters an address.
        """
        return self.update(
            is_online=is_online,
            location_or_platform=ONLINE_LOCATION if is_online else "",
        )

    # -- Speakers ---------------------------------------------------------------

    def add_speaker(self, **values: Any) -> EventForm:
        """Append an empty speaker; does nothing when the list is full."""
        if len(self._form.speakers) >= MAX_SPEAKERS:
            logger.info(f"Speaker limit ({MAX_SPEAKERS}) reached, not adding")
            return self._form
        _check_fields(values, _SPEAKER_FIELDS, "speaker")
        return self.update(speakers=self._form.speakers + (Speaker(**values),))

    def update_speaker(self, speaker_id: str, **changes: Any) -> EventForm:
        _check_fields(changes, _SPEAKER_FIELDS, "speaker")
        speakers = tuple(
            replace(s, **changes) if s.id == speaker_id else s for s in self._form.speakers
        )
        return self.update(speakers=speakers)

    def remove_speaker(self, speaker_id: str) -> EventForm:
        return self.update(speakers=tuple(s for s in self._form.speakers if s.id != speaker_id))

    # -- Agenda -----------------------------------------------------------------

    def add_agenda_item(self, time: str = "", activity: str = "") -> EventForm:
        return self.update(agenda=self._form.agenda + (AgendaItem(time=time, activity=activity),))

    def update_agenda_item(self, item_id: str, **changes: Any) -> EventForm:
        _check_fields(changes, _AGENDA_FIELDS, "agenda")
        agenda = tuple(
            replace(item, **changes) if item.id == item_id else item
            for item in self._form.agenda
        )
        return self.update(agenda=agenda)

    def remove_agenda_item(self, item_id: str) -> EventForm:
        return self.update(agenda=tuple(i for i in self._form.agenda if i.id != item_id))

    def replace_agenda(self, rows: Iterable[tuple[str, str]]) -> EventForm:
        """Replace the agenda from (time, activity) rows, keeping ids by position.

        Rows where both cells are blank are dropped.
        """
        existing = self._form.agenda
        agenda = []
        for time, activity in rows:
            time, activity = (time or "").strip(), (activity or "").strip()
            if not time and not activity:
                continue
            if len(agenda) < len(existing):
                agenda.append(replace(existing[len(agenda)], time=time, activity=activity))
            else:
                agenda.append(AgendaItem(time=time, activity=activity))
        return self.update(agenda=agenda)

    # -- Images -----------------------------------------------------------------

    def set_logo(self, slot: LogoSlot, image: ImageFile | None) -> EventForm:
        if slot not in LOGO_SLOTS:
            raise ValueError(f"Unknown logo slot: {slot}")
        return self.update(**{slot: image})

    def set_qr_code(self, image: ImageFile | None) -> EventForm:
        return self.update(qr_code_image=image)

    def select_background(self, data_url: str | None) -> EventForm:
        """Use *data_url* as the background reference (None clears it)."""
        return self.update(
            selected_background=data_url,
            use_uploaded_background=data_url is not None,
        )

    # -- Extraction -------------------------------------------------------------

    def apply_extraction(self, extracted: Mapping[str, Any]) -> EventForm:
        """Merge fields returned by the extraction adapter."""
        changes = {key: value for key, value in extracted.items() if key in EXTRACTION_FIELDS}
        logger.info(f"Applying {len(changes)} extracted field(s)")
        return self.update(**changes)
