"""Preset background templates.

The template library offers a handful of flat pastel backgrounds that can be
used as the background reference for a poster. They are rendered with Pillow
on demand as small PNG swatches; the model only needs the colour and texture
cue, not a full-size image.
"""

from __future__ import annotations

import colorsys
from dataclasses import dataclass
from functools import lru_cache
from io import BytesIO

from PIL import Image

from .images import to_data_url

SWATCH_SIZE = 100
PRESET_COUNT = 8


@dataclass(frozen=True)
class BackgroundPreset:
    """A named flat-colour background."""

    id: str
    name: str
    hue: int
    saturation: int = 70
    lightness: int = 90

    @property
    def css_color(self) -> str:
        return f"hsl({self.hue}, {self.saturation}%, {self.lightness}%)"

    @property
    def rgb(self) -> tuple[int, int, int]:
        r, g, b = colorsys.hls_to_rgb(self.hue / 360, self.lightness / 100, self.saturation / 100)
        return round(r * 255), round(g * 255), round(b * 255)


PRESETS = [
    BackgroundPreset(id=f"template-{i}", name=f"Mẫu {i + 1}", hue=(i * 45) % 360)
    for i in range(PRESET_COUNT)
]


def get_preset(preset_id: str) -> BackgroundPreset:
    """Look up a preset by id.

    Raises:
        KeyError: If the id is unknown
    """
    for preset in PRESETS:
        if preset.id == preset_id:
            return preset
    raise KeyError(preset_id)


def render_swatch(preset: BackgroundPreset, size: int = SWATCH_SIZE) -> Image.Image:
    return Image.new("RGB", (size, size), preset.rgb)


@lru_cache(maxsize=PRESET_COUNT)
def preset_data_url(preset_id: str) -> str:
    """PNG ``data:`` URL of a preset swatch, suitable as a background reference."""
    buffer = BytesIO()
    render_swatch(get_preset(preset_id)).save(buffer, format="PNG")
    return to_data_url(buffer.getvalue(), "image/png")
