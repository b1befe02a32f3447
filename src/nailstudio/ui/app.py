"""Gradio UI for Nail Studio."""

import logging
from functools import partial

import gradio as gr

from nailstudio.core.config import config

from .components import (
    CUSTOM_CSS,
    ConfirmationDialogUI,
    DetailViewerUI,
    build_design_cards,
    download_trigger_js,
)
from .handlers import gallery as gallery_handlers
from .handlers import generator as generator_handlers
from .models import SORT_ORDER_CHOICES, AppContext, ViewerTab
from .state import cleanup_app_context, create_app_context, new_gallery_state, new_generator_state

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _bind(fn, *args):
    """Partially apply ``fn`` while keeping its name for Gradio's API listing."""
    bound = partial(fn, *args)
    bound.__name__ = fn.__name__
    return bound


def create_ui(ctx: AppContext | None = None) -> tuple[gr.Blocks, str]:
    """Create the Gradio UI.

    Args:
        ctx: Shared client and config (default: built from the global config)

    Returns:
        Tuple of (Gradio Blocks app, custom CSS string)
    """
    ctx = ctx or create_app_context()

    app = gr.Blocks(title="AI Nails Generator")

    with app:
        gr.Markdown(
            """
            # 💅 AI Nails Generator
            ### Visualiza las uñas que te imagines
            *For Isabela ♥*
            """
        )

        with gr.Tabs():
            with gr.Tab("✨ Generador", id="generator_tab"):
                create_generator_tab(ctx)

            with gr.Tab("🖼️ Galería", id="gallery_tab") as gallery_tab:
                gallery_components = create_gallery_tab(ctx)

                # The gallery fetches a fresh listing every time it is shown
                gallery_tab.select(
                    fn=_bind(gallery_handlers.begin_load, ctx),
                    inputs=[gallery_components["state"]],
                    outputs=gallery_components["outputs"],
                ).then(
                    fn=_bind(gallery_handlers.load_designs, ctx),
                    inputs=[gallery_components["state"]],
                    outputs=gallery_components["outputs"],
                )

    return app, CUSTOM_CSS


def create_generator_tab(ctx: AppContext) -> dict:
    """Create the generator tab UI.

    Args:
        ctx: Shared client and config

    Returns:
        Dictionary of generator components for event handling
    """
    generator_state = gr.State(new_generator_state())

    with gr.Group():
        prompt_input = gr.Textbox(
            label="Descripción",
            placeholder="Describe cómo quieres tus uñas...",
            lines=5,
        )
        generate_btn = gr.Button("✨ Generar Diseño", variant="primary")
    error_display = gr.Markdown(visible=False)

    with gr.Column(visible=False) as result_group:
        result_prompt = gr.Markdown()
        result_image = gr.HTML()
        with gr.Row():
            delete_btn = gr.Button("🗑️ Eliminar", size="sm", variant="stop")
            download_btn = gr.Button("⬇️ Descargar", size="sm")
        download_file = gr.File(
            label="Descarga", visible=False, interactive=False, elem_id="generator-download-file"
        )
        download_link = gr.HTML(visible=False, elem_id="generator-download-link")
    download_token = gr.Textbox(value="", show_label=False, elem_classes=["hidden-control"])

    dialog = ConfirmationDialogUI("generator")

    outputs = [
        generator_state,
        generate_btn,
        error_display,
        result_group,
        result_prompt,
        result_image,
        delete_btn,
        download_btn,
        dialog.group,
    ]

    # Generate: validate and disable the button, then call the service
    generate_btn.click(
        fn=generator_handlers.submit_prompt,
        inputs=[prompt_input, generator_state],
        outputs=outputs,
    ).then(
        fn=_bind(generator_handlers.run_generation, ctx),
        inputs=[generator_state],
        outputs=outputs,
    )

    # Delete goes through the confirmation dialog
    delete_btn.click(
        fn=generator_handlers.request_delete,
        inputs=[generator_state],
        outputs=outputs,
    )
    for dismiss_btn in dialog.get_dismiss_buttons():
        dismiss_btn.click(
            fn=generator_handlers.cancel_delete,
            inputs=[generator_state],
            outputs=outputs,
        )
    dialog.confirm_btn.click(
        fn=generator_handlers.confirm_delete,
        inputs=[generator_state],
        outputs=outputs,
    ).then(
        fn=_bind(generator_handlers.run_delete, ctx),
        inputs=[generator_state],
        outputs=outputs,
    )

    # Download
    download_btn.click(
        fn=generator_handlers.begin_download,
        inputs=[generator_state],
        outputs=outputs,
    ).then(
        fn=_bind(generator_handlers.run_download, ctx),
        inputs=[generator_state],
        outputs=outputs + [download_file, download_link, download_token],
    )
    # A new token means a new file; the browser saves it
    download_token.change(fn=None, js=download_trigger_js("generator"))

    return {
        "state": generator_state,
        "prompt_input": prompt_input,
        "download_token": download_token,
        "outputs": outputs,
    }


def create_gallery_tab(ctx: AppContext) -> dict:
    """Create the gallery tab UI.

    Args:
        ctx: Shared client and config

    Returns:
        Dictionary of gallery components for event handling
    """
    gallery_state = gr.State(new_gallery_state(ctx.config))

    sort_selector = gr.Radio(
        label="Orden",
        choices=SORT_ORDER_CHOICES,
        value=ctx.config.default_sort_order,
    )

    status_display = gr.Markdown(visible=False)
    retry_btn = gr.Button("🔄 Intentar de nuevo", visible=False)
    notice_display = gr.Markdown(visible=False)

    download_file = gr.File(
        label="Descarga", visible=False, interactive=False, elem_id="gallery-download-file"
    )
    download_link = gr.HTML(visible=False, elem_id="gallery-download-link")
    download_token = gr.Textbox(value="", show_label=False, elem_classes=["hidden-control"])

    # Hidden plumbing: revision redraws the cards, action_box carries card clicks
    revision = gr.Number(value=0, interactive=False, show_label=False, elem_classes=["hidden-control"])
    action_box = gr.Textbox(value="", show_label=False, elem_classes=["hidden-control"])

    @gr.render(inputs=[gallery_state], triggers=[revision.change])
    def draw_cards(state):
        build_design_cards(state, ctx.config.placeholder_image_url, action_box)

    viewer = DetailViewerUI()
    dialog = ConfirmationDialogUI("gallery")

    outputs = [
        gallery_state,
        revision,
        status_display,
        retry_btn,
        notice_display,
        *viewer.get_output_components(),
        dialog.group,
    ]
    download_outputs = outputs + [download_file, download_link, download_token]

    # Retry after an error, or refresh an empty gallery
    retry_btn.click(
        fn=_bind(gallery_handlers.begin_load, ctx),
        inputs=[gallery_state],
        outputs=outputs,
    ).then(
        fn=_bind(gallery_handlers.load_designs, ctx),
        inputs=[gallery_state],
        outputs=outputs,
    )

    # Sort order toggle
    sort_selector.change(
        fn=_bind(gallery_handlers.change_sort_order, ctx),
        inputs=[sort_selector, gallery_state],
        outputs=outputs,
    ).then(
        fn=_bind(gallery_handlers.load_designs, ctx),
        inputs=[gallery_state],
        outputs=outputs,
    )

    # Card and viewer actions; downloads of different designs run side by side
    action_box.change(
        fn=_bind(gallery_handlers.dispatch_action, ctx),
        inputs=[action_box, gallery_state],
        outputs=outputs,
        concurrency_limit=None,
    ).then(
        fn=_bind(gallery_handlers.run_pending_download, ctx),
        inputs=[gallery_state],
        outputs=download_outputs,
        concurrency_limit=None,
    )
    download_token.change(fn=None, js=download_trigger_js("gallery"))

    viewer.download_btn.click(
        fn=_bind(gallery_handlers.viewer_command, "download"),
        inputs=[gallery_state],
        outputs=[action_box],
    )
    viewer.delete_btn.click(
        fn=_bind(gallery_handlers.viewer_command, "delete"),
        inputs=[gallery_state],
        outputs=[action_box],
    )
    viewer.image_tab_btn.click(
        fn=_bind(gallery_handlers.select_viewer_tab, ctx, ViewerTab.IMAGE.value),
        inputs=[gallery_state],
        outputs=outputs,
    )
    viewer.details_tab_btn.click(
        fn=_bind(gallery_handlers.select_viewer_tab, ctx, ViewerTab.DETAILS.value),
        inputs=[gallery_state],
        outputs=outputs,
    )
    viewer.close_btn.click(
        fn=_bind(gallery_handlers.close_viewer, ctx),
        inputs=[gallery_state],
        outputs=outputs,
    )
    viewer.backdrop.click(
        fn=_bind(gallery_handlers.click_viewer_backdrop, ctx),
        inputs=[gallery_state],
        outputs=outputs,
    )

    # Delete confirmation
    for dismiss_btn in dialog.get_dismiss_buttons():
        dismiss_btn.click(
            fn=_bind(gallery_handlers.cancel_delete, ctx),
            inputs=[gallery_state],
            outputs=outputs,
        )
    dialog.confirm_btn.click(
        fn=_bind(gallery_handlers.confirm_delete, ctx),
        inputs=[gallery_state],
        outputs=outputs,
    ).then(
        fn=_bind(gallery_handlers.run_pending_delete, ctx),
        inputs=[gallery_state],
        outputs=outputs,
    )

    return {
        "state": gallery_state,
        "sort_selector": sort_selector,
        "action_box": action_box,
        "download_token": download_token,
        "outputs": outputs,
    }


def main():
    """Main entry point for the application."""
    logger.info("Starting Nail Studio...")
    logger.info(f"Configuration: {config.masked_dump()}")

    ctx = create_app_context(config)
    app, custom_css = create_ui(ctx)

    logger.info(f"Launching Gradio UI on {config.gradio_server_name}:{config.gradio_server_port}")

    try:
        app.launch(
            server_name=config.gradio_server_name,
            server_port=config.gradio_server_port,
            share=config.gradio_share,
            show_error=True,
            inbrowser=False,
            css=custom_css,
            allowed_paths=[str(config.downloads_dir.resolve())],
        )
    finally:
        cleanup_app_context(ctx)


if __name__ == "__main__":
    main()
