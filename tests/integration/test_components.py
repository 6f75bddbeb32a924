"""Integration tests for UI components."""

from unittest.mock import patch

import gradio as gr

from eventposter.core.form import MAX_SPEAKERS
from eventposter.ui.app import create_ui
from eventposter.ui.components import LogoUI, SpeakerUI, speaker_field_handler
from eventposter.ui.models import LOGO_LABELS


class TestSpeakerUI:
    """Integration tests for SpeakerUI component."""

    def test_speaker_ui_creation(self):
        """Test that SpeakerUI can be created."""
        with (
            patch("gradio.Group"),
            patch("gradio.Markdown"),
            patch("gradio.Row"),
            patch("gradio.Column"),
            patch("gradio.Image"),
            patch("gradio.Checkbox"),
            patch("gradio.Textbox"),
            patch("gradio.Button"),
        ):
            speaker = SpeakerUI(1)

            assert speaker.slot == 1
            assert speaker.name is not None
            assert speaker.remove_btn is not None

    def test_get_update_components(self):
        """Test that the update components match the slot update layout."""
        with gr.Blocks():
            speaker = SpeakerUI(0)

        components = speaker.get_update_components()

        # group, name, title, company, image, edit_prompt, remove_background
        assert len(components) == 7
        assert components[0] is speaker.group
        assert components[-1] is speaker.remove_background

    def test_get_text_fields(self):
        """Test that text fields are keyed by speaker field name."""
        with gr.Blocks():
            speaker = SpeakerUI(0)

        fields = speaker.get_text_fields()

        assert set(fields) == {"name", "title", "company", "edit_prompt"}
        assert fields["company"] is speaker.company


class TestLogoUI:
    """Integration tests for LogoUI component."""

    def test_logo_label(self):
        """Test that each logo slot is labelled."""
        with gr.Blocks():
            logo = LogoUI("product_logo")

        assert logo.image.label == LOGO_LABELS["product_logo"]


class TestSpeakerFieldHandler:
    """Tests for the per-slot speaker handler factory."""

    def test_handler_updates_slot(self, ui_state):
        """Test that the built handler writes to the right speaker."""
        ui_state.form.add_speaker()
        ui_state.form.add_speaker()
        handler = speaker_field_handler(1, "title")

        handler("CTO", ui_state)

        speakers = ui_state.form.snapshot().speakers
        assert speakers[0].title == ""
        assert speakers[1].title == "CTO"
        assert handler.__name__ == "update_speaker_1_title"


class TestCreateUI:
    """Integration tests for the full interface."""

    def test_create_ui(self):
        """Test that the whole interface builds."""
        app = create_ui()

        assert isinstance(app, gr.Blocks)

    def test_speaker_slots_built(self):
        """Test that every speaker slot exists in the layout."""
        app = create_ui()

        labels = [
            block.value
            for block in app.blocks.values()
            if isinstance(block, gr.Markdown) and str(block.value).startswith("**Diễn giả ")
        ]
        assert len([label for label in labels if "/" not in label]) == MAX_SPEAKERS
