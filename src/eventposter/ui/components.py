"""Reusable UI components for the Event Poster Studio Gradio interface."""

import gradio as gr

from .handlers import update_speaker_field
from .models import LOGO_LABELS


class SpeakerUI:
    """Reusable UI component for one speaker slot.

    The form shows up to three speakers. Every slot is built once and hidden
    until a speaker occupies it, so adding or removing a speaker only
    changes visibility and values.

    Each slot has:
    - Name, title, and company
    - Reference photo upload
    - Edit prompt (pose / outfit instructions)
    - Remove-background checkbox
    - Remove button
    """

    def __init__(self, slot: int):
        """Initialize a speaker slot.

        Args:
            slot: Zero-based slot index
        """
        self.slot = slot

        with gr.Group(visible=False) as self.group:
            gr.Markdown(f"**Diễn giả {slot + 1}**")
            with gr.Row():
                with gr.Column(scale=1, min_width=160):
                    self.image = gr.Image(
                        label="Ảnh chân dung",
                        type="filepath",
                        sources=["upload"],
                        height=160,
                    )
                    self.remove_background = gr.Checkbox(
                        label="Tách nền",
                        value=False,
                        info="Remove the photo background",
                    )
                with gr.Column(scale=2):
                    self.name = gr.Textbox(label="Họ tên", placeholder="Nguyễn Văn A")
                    self.title = gr.Textbox(label="Chức danh", placeholder="Giám đốc")
                    self.company = gr.Textbox(label="Đơn vị", placeholder="Công ty ABC")
                    self.edit_prompt = gr.Textbox(
                        label="Chỉnh sửa ảnh",
                        placeholder="VD: mặc vest, khoanh tay...",
                        lines=1,
                    )
                    self.remove_btn = gr.Button("Xóa diễn giả", size="sm", variant="stop")

    def get_update_components(self) -> list[gr.components.Component]:
        """Return components in the order produced by speaker_slot_updates.

        Returns:
            List of (group, name, title, company, image, edit_prompt, remove_background)
        """
        return [
            self.group,
            self.name,
            self.title,
            self.company,
            self.image,
            self.edit_prompt,
            self.remove_background,
        ]

    def get_text_fields(self) -> dict[str, gr.components.Component]:
        """Return the free-text inputs keyed by speaker field name."""
        return {
            "name": self.name,
            "title": self.title,
            "company": self.company,
            "edit_prompt": self.edit_prompt,
        }


class LogoUI:
    """Upload box for one brand logo slot (organizer, product, co-organizer)."""

    def __init__(self, slot: str):
        self.slot = slot
        self.image = gr.Image(
            label=LOGO_LABELS[slot],
            type="filepath",
            sources=["upload"],
            height=120,
        )


def speaker_field_handler(slot: int, field: str):
    """Build a handler that writes one field of the speaker in *slot*."""

    def handler(value, state):
        return update_speaker_field(slot, field, value, state)

    handler.__name__ = f"update_speaker_{slot}_{field}"
    return handler
