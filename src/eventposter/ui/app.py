"""Gradio UI for Event Poster Studio."""

import logging

import gradio as gr

from eventposter.core.config import config
from eventposter.core.form import LOGO_SLOTS, MAX_SPEAKERS, THEME_TONES, THEME_TOPICS, EventForm

from .components import LogoUI, SpeakerUI, speaker_field_handler
from .handlers import (
    add_speaker,
    clean_background,
    clear_background,
    download_current_poster,
    extract_event_info,
    generate_poster,
    lock_generate_button,
    make_field_handler,
    preset_gallery_items,
    refresh_history,
    remove_speaker,
    select_history_item,
    select_preset,
    set_aspect_ratio,
    set_brand_logo_mode,
    set_event_format,
    set_input_mode,
    set_logo,
    set_qr_code,
    set_qr_code_mode,
    set_speaker_image,
    set_theme_tone,
    set_theme_topics,
    set_use_background,
    submit_api_key,
    unlock_generate_button,
    update_agenda,
    upload_background,
    upload_document,
)
from .models import AGENDA_HEADERS, ASPECT_RATIOS, EVENT_FORMATS, INPUT_MODES, UIState

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

_DEFAULTS = EventForm()


def create_ui() -> gr.Blocks:
    """Create the Gradio UI.

    Returns:
        Gradio Blocks app
    """
    app = gr.Blocks(title=f"{config.brand_name} Event Poster Studio")

    with app:
        # Session state - one instance per user
        ui_state = gr.State(UIState())

        gr.Markdown(
            f"""
            # {config.brand_name} Event Poster Studio
            ### Event posters generated with Google Gemini
            """
        )

        with gr.Group(visible=not config.gemini_api_key) as key_group:
            with gr.Row():
                api_key_input = gr.Textbox(
                    label="Gemini API Key",
                    type="password",
                    placeholder="AIzaSy...",
                    scale=4,
                )
                api_key_btn = gr.Button("Lưu", scale=1)
            key_status = gr.Markdown("")

        api_key_btn.click(
            fn=submit_api_key,
            inputs=[api_key_input, ui_state],
            outputs=[key_status, key_group, ui_state],
        )

        with gr.Tabs():
            with gr.Tab("Thông tin sự kiện", id="form_tab"):
                poster = create_form_tab(ui_state)

            with gr.Tab("Thư viện giao diện", id="library_tab"):
                create_library_tab(ui_state)

            with gr.Tab("Lịch sử", id="history_tab") as history_tab:
                history = create_history_tab(ui_state)

        # Generation updates the history gallery on the other tab
        poster["generate_btn"].click(
            fn=lock_generate_button,
            outputs=[poster["generate_btn"]],
        ).then(
            fn=generate_poster,
            inputs=[ui_state],
            outputs=[poster["image"], poster["status"], history["gallery"], ui_state],
        ).then(
            fn=unlock_generate_button,
            outputs=[poster["generate_btn"]],
        )

        history_tab.select(
            fn=refresh_history,
            inputs=[ui_state],
            outputs=[history["gallery"], history["info"]],
        )

    return app


def create_form_tab(ui_state):
    """Create the event form tab.

    Args:
        ui_state: UI state component

    Returns:
        Dictionary of poster output components for cross-tab event handling
    """
    with gr.Row():
        with gr.Column(scale=3):
            aspect_ratio = gr.Radio(
                label="Tỉ lệ khung hình",
                choices=list(ASPECT_RATIOS.keys()),
                value="Ngang 16:9",
            )
            input_mode = gr.Radio(
                label="Chế độ nhập",
                choices=list(INPUT_MODES.keys()),
                value="Thủ công",
            )

            # Auto mode: document upload and extraction
            with gr.Group(visible=False) as upload_group:
                document = gr.File(
                    label="Thư mời / tài liệu sự kiện",
                    file_types=["image", ".pdf", ".txt"],
                    type="filepath",
                )
                document_preview = gr.Image(
                    label="Preview", type="filepath", interactive=False, visible=False
                )
                extract_btn = gr.Button("Trích xuất thông tin", interactive=False)
                extract_status = gr.Markdown("")

            with gr.Column(visible=True) as info_group:
                gr.Markdown("### Thông tin sự kiện")
                event_type = gr.Textbox(label="Loại sự kiện", placeholder="Hội thảo, Webinar...")
                event_name = gr.Textbox(label="Tên sự kiện")
                with gr.Row():
                    date = gr.Textbox(label="Ngày", placeholder="20/11/2025")
                    time = gr.Textbox(label="Giờ", placeholder="09:00 - 11:30")
                target_audience = gr.Textbox(label="Đối tượng tham dự")
                event_format = gr.Radio(
                    label="Hình thức",
                    choices=list(EVENT_FORMATS.keys()),
                    value="Trực tuyến (Online)",
                )
                location = gr.Textbox(
                    label="Địa điểm",
                    value=_DEFAULTS.location_or_platform,
                    visible=not _DEFAULTS.is_online,
                )

                gr.Markdown("### Chương trình")
                agenda = gr.Dataframe(
                    headers=AGENDA_HEADERS,
                    datatype=["str", "str"],
                    col_count=(2, "fixed"),
                    row_count=(1, "dynamic"),
                    type="array",
                    interactive=True,
                )

                gr.Markdown("### Liên hệ")
                with gr.Row():
                    contact_name = gr.Textbox(label="Người liên hệ")
                    contact_phone = gr.Textbox(label="Số điện thoại")
                    contact_email = gr.Textbox(label="Email")

            gr.Markdown("### Giao diện")
            theme_tone = gr.Dropdown(
                label="Tông màu", choices=THEME_TONES, value=_DEFAULTS.theme_tone
            )
            custom_theme = gr.Textbox(
                label="Tông màu tùy chỉnh",
                placeholder="VD: Xanh lá - Vàng pastel",
                visible=False,
            )
            theme_topics = gr.CheckboxGroup(
                label="Chủ đề (tối đa 2)",
                choices=THEME_TOPICS,
                value=list(_DEFAULTS.theme_topics),
            )
            custom_topic = gr.Textbox(
                label="Chủ đề tùy chỉnh",
                placeholder="VD: Du lịch, Bất động sản...",
                visible=False,
            )

            gr.Markdown("### Logo")
            use_brand_logo = gr.Checkbox(
                label="Dùng logo riêng",
                value=False,
                info=f"Unchecked: the default {config.brand_name} logo is used",
            )
            with gr.Row(visible=False) as logo_group:
                logos = [LogoUI(slot) for slot in LOGO_SLOTS]
            include_qr = gr.Checkbox(label="Chèn mã QR", value=False)
            qr_code = gr.Image(label="Mã QR", type="filepath", sources=["upload"], visible=False)
            image_status = gr.Markdown("")

            speaker_counter = gr.Markdown(f"**Diễn giả (0/{MAX_SPEAKERS})**")
            speakers = [SpeakerUI(slot) for slot in range(MAX_SPEAKERS)]
            add_speaker_btn = gr.Button("+ Thêm diễn giả", size="sm")

        with gr.Column(scale=2):
            gr.Markdown("### Poster")
            generate_btn = gr.Button("Tạo Poster", variant="primary", size="lg")
            poster_status = gr.Markdown("")
            poster_image = gr.Image(label="Poster", type="pil", interactive=False, height=520)
            with gr.Row():
                download_btn = gr.Button("Tải xuống", size="sm")
            download_file = gr.File(label="Download", interactive=False)

    # Event handlers for the form

    aspect_ratio.input(fn=set_aspect_ratio, inputs=[aspect_ratio, ui_state], outputs=[ui_state])

    input_mode.input(
        fn=set_input_mode,
        inputs=[input_mode, ui_state],
        outputs=[upload_group, info_group, ui_state],
    )

    document.upload(
        fn=upload_document,
        inputs=[document, ui_state],
        outputs=[document_preview, extract_status, extract_btn, ui_state],
    )
    document.clear(
        fn=upload_document,
        inputs=[document, ui_state],
        outputs=[document_preview, extract_status, extract_btn, ui_state],
    )
    extract_btn.click(
        fn=extract_event_info,
        inputs=[ui_state],
        outputs=[
            event_name,
            date,
            time,
            target_audience,
            event_format,
            location,
            contact_name,
            contact_phone,
            contact_email,
            info_group,
            extract_status,
            ui_state,
        ],
    )

    # Plain text fields map one-to-one onto form fields
    text_fields = {
        "event_type": event_type,
        "event_name": event_name,
        "date": date,
        "time": time,
        "target_audience": target_audience,
        "location_or_platform": location,
        "contact_name": contact_name,
        "contact_phone": contact_phone,
        "contact_email": contact_email,
        "custom_theme_prompt": custom_theme,
        "custom_topic_prompt": custom_topic,
    }
    for field_name, component in text_fields.items():
        component.input(
            fn=make_field_handler(field_name),
            inputs=[component, ui_state],
            outputs=[ui_state],
        )

    event_format.input(
        fn=set_event_format,
        inputs=[event_format, ui_state],
        outputs=[location, ui_state],
    )
    agenda.input(fn=update_agenda, inputs=[agenda, ui_state], outputs=[ui_state])

    theme_tone.input(
        fn=set_theme_tone,
        inputs=[theme_tone, ui_state],
        outputs=[custom_theme, ui_state],
    )
    theme_topics.input(
        fn=set_theme_topics,
        inputs=[theme_topics, ui_state],
        outputs=[theme_topics, custom_topic, ui_state],
    )

    use_brand_logo.input(
        fn=set_brand_logo_mode,
        inputs=[use_brand_logo, ui_state],
        outputs=[logo_group, ui_state],
    )
    for logo in logos:
        for event in (logo.image.upload, logo.image.clear):
            event(
                fn=lambda path, state, slot=logo.slot: set_logo(slot, path, state),
                inputs=[logo.image, ui_state],
                outputs=[image_status, ui_state],
            )

    include_qr.input(
        fn=set_qr_code_mode,
        inputs=[include_qr, ui_state],
        outputs=[qr_code, ui_state],
    )
    for event in (qr_code.upload, qr_code.clear):
        event(fn=set_qr_code, inputs=[qr_code, ui_state], outputs=[image_status, ui_state])

    # Speakers: every slot is refreshed when the list changes
    speaker_outputs = [c for speaker in speakers for c in speaker.get_update_components()]
    speaker_outputs += [speaker_counter, add_speaker_btn, ui_state]

    add_speaker_btn.click(fn=add_speaker, inputs=[ui_state], outputs=speaker_outputs)

    for speaker in speakers:
        speaker.remove_btn.click(
            fn=lambda state, slot=speaker.slot: remove_speaker(slot, state),
            inputs=[ui_state],
            outputs=speaker_outputs,
        )
        for field_name, component in speaker.get_text_fields().items():
            component.input(
                fn=speaker_field_handler(speaker.slot, field_name),
                inputs=[component, ui_state],
                outputs=[ui_state],
            )
        speaker.remove_background.input(
            fn=speaker_field_handler(speaker.slot, "remove_background"),
            inputs=[speaker.remove_background, ui_state],
            outputs=[ui_state],
        )
        for event in (speaker.image.upload, speaker.image.clear):
            event(
                fn=lambda path, state, slot=speaker.slot: set_speaker_image(slot, path, state),
                inputs=[speaker.image, ui_state],
                outputs=[image_status, ui_state],
            )

    download_btn.click(
        fn=download_current_poster,
        inputs=[ui_state],
        outputs=[download_file, poster_status],
    )

    return {
        "generate_btn": generate_btn,
        "image": poster_image,
        "status": poster_status,
    }


def create_library_tab(ui_state):
    """Create the template library tab.

    Args:
        ui_state: UI state component
    """
    gr.Markdown("### Mẫu nền có sẵn")
    presets = gr.Gallery(
        label="Presets",
        value=preset_gallery_items(),
        columns=8,
        height=160,
        object_fit="cover",
        allow_preview=False,
    )

    with gr.Row():
        with gr.Column(scale=1):
            gr.Markdown("### Tải lên thiết kế")
            design_upload = gr.Image(label="Thiết kế mẫu", type="filepath", sources=["upload"])
            with gr.Row():
                use_as_is_btn = gr.Button("Dùng làm nền", size="sm")
                clean_btn = gr.Button("AI làm sạch nền", size="sm", variant="primary")

        with gr.Column(scale=1):
            gr.Markdown("### Nền đang dùng")
            background_preview = gr.Image(label="Background", interactive=False, height=300)
            use_background = gr.Checkbox(label="Dùng nền này cho poster", value=False)
            clear_btn = gr.Button("Bỏ nền", size="sm")
            library_status = gr.Markdown("")

    background_outputs = [background_preview, use_background, library_status, ui_state]

    presets.select(fn=select_preset, inputs=[ui_state], outputs=background_outputs)
    use_as_is_btn.click(
        fn=upload_background,
        inputs=[design_upload, ui_state],
        outputs=background_outputs,
    )
    clean_btn.click(
        fn=lambda: gr.update(interactive=False, value="Đang xử lý..."),
        outputs=[clean_btn],
    ).then(
        fn=clean_background,
        inputs=[design_upload, ui_state],
        outputs=background_outputs,
    ).then(
        fn=lambda: gr.update(interactive=True, value="AI làm sạch nền"),
        outputs=[clean_btn],
    )
    use_background.input(
        fn=set_use_background,
        inputs=[use_background, ui_state],
        outputs=[use_background, ui_state],
    )
    clear_btn.click(fn=clear_background, inputs=[ui_state], outputs=background_outputs)


def create_history_tab(ui_state):
    """Create the history tab.

    Args:
        ui_state: UI state component

    Returns:
        Dictionary of history components for cross-tab event handling
    """
    gr.Markdown("### Lịch sử poster")

    with gr.Row():
        with gr.Column(scale=2):
            gallery = gr.Gallery(
                label="History",
                columns=3,
                height=600,
                object_fit="contain",
                allow_preview=False,
            )
            refresh_btn = gr.Button("Refresh", size="sm")

        with gr.Column(scale=1):
            selected_image = gr.Image(label="Selected Poster", interactive=False, height=400)
            history_file = gr.File(label="Download", interactive=False)
            history_info = gr.Markdown("*Chưa có hình ảnh nào được tạo*")

    gallery.select(
        fn=select_history_item,
        inputs=[ui_state],
        outputs=[selected_image, history_file, history_info, ui_state],
    )
    refresh_btn.click(fn=refresh_history, inputs=[ui_state], outputs=[gallery, history_info])

    return {"gallery": gallery, "info": history_info}


def main():
    """Main entry point for the standalone UI."""
    logger.info("Starting Event Poster Studio UI...")
    logger.info(f"Configuration: {config.model_dump(exclude={'gemini_api_key'})}")

    app = create_ui()

    logger.info(f"Launching Gradio UI on {config.server_host}:{config.server_port}")

    app.launch(
        server_name=config.server_host,
        server_port=config.server_port,
        share=config.gradio_share,
        show_error=True,
        inbrowser=False,
    )


if __name__ == "__main__":
    main()
