"""Reusable UI components for the Nail Studio Gradio interface."""

import gradio as gr

from .formatting import format_card_caption, render_design_image
from .handlers.gallery import make_action_command
from .models import DELETE_DIALOG_MESSAGE, DELETE_DIALOG_TITLE, GalleryState, GalleryStatus

CUSTOM_CSS = """
.modal-overlay {
    position: fixed !important;
    inset: 0;
    z-index: 1000;
    display: flex;
    align-items: center;
    justify-content: center;
    padding: 16px;
}
.modal-backdrop {
    position: absolute !important;
    inset: 0;
    min-width: 0 !important;
    border: none !important;
    border-radius: 0 !important;
    background: rgba(0, 0, 0, 0.7) !important;
    box-shadow: none !important;
}
.modal-card {
    position: relative;
    z-index: 1;
    background: var(--background-fill-primary);
    border-radius: 12px;
    max-height: 90vh;
    overflow-y: auto;
    padding: 16px;
}
.confirm-card { max-width: 28rem; width: 100%; }
.viewer-card { max-width: 64rem; width: 100%; }
.viewer-image { max-width: 100%; max-height: 70vh; object-fit: contain; border-radius: 8px; }
.card-image { width: 100%; aspect-ratio: 1 / 1; object-fit: cover; border-radius: 8px; }
.design-image { width: 100%; height: auto; border-radius: 8px; }
.nail-card { border-radius: 12px; box-shadow: 0 4px 12px rgba(0, 0, 0, 0.08); padding: 8px; }
.hidden-control { display: none !important; }
@media (max-width: 767px) {
    .panel-hidden-mobile { display: none !important; }
}
@media (min-width: 768px) {
    .viewer-tabs { display: none !important; }
}
"""


class ConfirmationDialogUI:
    """Yes/no modal gating a destructive action.

    The component is presentation only: which id is pending lives in the
    owning view's :class:`~nailstudio.ui.models.ConfirmationDialogState`.
    """

    def __init__(
        self,
        name: str,
        title: str = DELETE_DIALOG_TITLE,
        message: str = DELETE_DIALOG_MESSAGE,
        confirm_label: str = "Eliminar",
        cancel_label: str = "Cancelar",
    ):
        """Initialize a confirmation dialog.

        Args:
            name: Prefix for element ids (e.g. "generator", "gallery")
            title: Heading text
            message: Question shown to the user
            confirm_label: Label of the confirm button
            cancel_label: Label of the cancel button
        """
        self.name = name

        with gr.Column(
            visible=False, elem_id=f"{name}-confirm", elem_classes=["modal-overlay"]
        ) as self.group:
            self.backdrop = gr.Button("", elem_classes=["modal-backdrop"])
            with gr.Column(elem_classes=["modal-card", "confirm-card"]):
                self.title = gr.Markdown(f"### {title}")
                self.message = gr.Markdown(message)
                with gr.Row():
                    self.cancel_btn = gr.Button(cancel_label, variant="secondary")
                    self.confirm_btn = gr.Button(confirm_label, variant="stop")

    def get_dismiss_buttons(self) -> list[gr.Button]:
        """Controls that close the dialog without confirming."""
        return [self.cancel_btn, self.backdrop]


class DetailViewerUI:
    """Full-screen viewer for one gallery design.

    Two panels (image and details) sit side by side on wide screens.  On
    narrow screens the tab buttons pick one; the other carries the
    ``panel-hidden-mobile`` class.  The backdrop is a separate button behind
    the content card, so only clicks outside the card reach it.
    """

    def __init__(self):
        with gr.Column(
            visible=False, elem_id="detail-viewer", elem_classes=["modal-overlay"]
        ) as self.group:
            self.backdrop = gr.Button("", elem_classes=["modal-backdrop"])
            with gr.Column(elem_classes=["modal-card", "viewer-card"]):
                with gr.Row(elem_classes=["viewer-tabs"]):
                    self.image_tab_btn = gr.Button("Imagen", variant="primary", size="sm")
                    self.details_tab_btn = gr.Button("Detalles", variant="secondary", size="sm")

                with gr.Row():
                    self.download_btn = gr.Button("⬇️ Descargar", size="sm")
                    self.delete_btn = gr.Button("🗑️ Eliminar", size="sm", variant="stop")
                    self.close_btn = gr.Button("✕ Cerrar", size="sm")

                with gr.Row():
                    with gr.Column(elem_classes=["viewer-panel"]) as self.image_panel:
                        self.image = gr.HTML()
                    with gr.Column(
                        elem_classes=["viewer-panel", "panel-hidden-mobile"]
                    ) as self.details_panel:
                        self.details = gr.Markdown()

    def get_output_components(self) -> list:
        """Components updated by ``render_viewer``, in its order."""
        return [
            self.group,
            self.image,
            self.details,
            self.image_panel,
            self.details_panel,
            self.image_tab_btn,
            self.details_tab_btn,
            self.download_btn,
            self.delete_btn,
        ]


def download_trigger_js(prefix: str) -> str:
    """Browser-side handler that saves the newest download for one tab.

    Clicks the data-URL fallback anchor when present, otherwise the link the
    file component renders. The short delay lets the new value paint first.
    """
    link = f"#{prefix}-download-link a.download-fallback"
    file = f"#{prefix}-download-file a[href]"
    return (
        "() => { setTimeout(() => { "
        f"const a = document.querySelector('{link}') || document.querySelector('{file}'); "
        "if (a) a.click(); "
        "}, 100); }"
    )


def _emit(action: str, design_id: str):
    """Build a zero-argument click handler that emits one card command."""

    def emit() -> str:
        return make_action_command(action, design_id)

    return emit


def build_design_cards(
    state: GalleryState, placeholder_url: str, action_box: gr.Textbox, columns: int = 2
) -> None:
    """Draw the gallery grid inside a ``gr.render`` block.

    Each card writes a command into ``action_box``; the box's change event
    does the actual work, so a card being redrawn never interrupts it.

    Args:
        state: Gallery state to draw
        placeholder_url: Image shown when a preview fails to load
        action_box: Hidden textbox receiving card commands
        columns: Cards per row
    """
    if state.status != GalleryStatus.LOADED:
        return

    designs = state.designs
    for start in range(0, len(designs), columns):
        with gr.Row(equal_height=True):
            for design in designs[start : start + columns]:
                downloading = design.id in state.downloading
                deleting = design.id in state.deleting

                with gr.Column(elem_classes=["nail-card"], min_width=240):
                    gr.HTML(
                        render_design_image(
                            design.image_url, design.prompt, placeholder_url, css_class="card-image"
                        )
                    )
                    gr.Markdown(format_card_caption(design.prompt, design.created_at))
                    with gr.Row():
                        view_btn = gr.Button("🔍 Ver", size="sm")
                        download_btn = gr.Button(
                            "⏳" if downloading else "⬇️ Descargar",
                            size="sm",
                            interactive=not downloading,
                        )
                        delete_btn = gr.Button(
                            "⏳" if deleting else "🗑️ Eliminar",
                            size="sm",
                            variant="stop",
                            interactive=not deleting,
                        )

                view_btn.click(fn=_emit("view", design.id), outputs=[action_box])
                download_btn.click(fn=_emit("download", design.id), outputs=[action_box])
                delete_btn.click(fn=_emit("delete", design.id), outputs=[action_box])
