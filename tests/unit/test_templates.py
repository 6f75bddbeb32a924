"""Unit tests for preset background templates."""

import pytest

from eventposter.core.images import decode_image, is_image_data_url
from eventposter.core.templates import (
    PRESETS,
    SWATCH_SIZE,
    get_preset,
    preset_data_url,
    render_swatch,
)


class TestPresets:
    """Tests for the preset list."""

    def test_eight_presets_with_hue_steps(self):
        """Test the preset ids, names, and hues."""
        assert len(PRESETS) == 8
        assert PRESETS[0].id == "template-0"
        assert PRESETS[0].name == "Mẫu 1"
        assert [p.hue for p in PRESETS] == [0, 45, 90, 135, 180, 225, 270, 315]

    def test_css_color(self):
        """Test the HSL colour string."""
        assert get_preset("template-2").css_color == "hsl(90, 70%, 90%)"

    def test_unknown_preset(self):
        """Test that unknown ids raise KeyError."""
        with pytest.raises(KeyError):
            get_preset("template-99")


class TestRendering:
    """Tests for swatch rendering."""

    def test_render_swatch(self):
        """Test that a swatch is a solid square of the preset colour."""
        preset = PRESETS[0]

        image = render_swatch(preset)

        assert image.size == (SWATCH_SIZE, SWATCH_SIZE)
        assert image.getpixel((50, 50)) == preset.rgb

    def test_preset_data_url(self):
        """Test that the data URL decodes to the swatch."""
        data_url = preset_data_url("template-4")

        assert is_image_data_url(data_url)
        assert decode_image(data_url).getpixel((0, 0)) == get_preset("template-4").rgb
