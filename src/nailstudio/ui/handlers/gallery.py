"""Gallery tab handlers: listing, sort order, per-item actions and the viewer."""

import logging
import time

import gradio as gr

from nailstudio.api.client import SORT_ORDERS, ServiceError

from ..formatting import format_design_details, format_error, render_design_image
from ..models import (
    DELETE_ERROR,
    DOWNLOAD_ERROR,
    EMPTY_GALLERY_MESSAGE,
    GALLERY_ACTIONS,
    LOAD_ERROR_PREFIX,
    AppContext,
    GalleryState,
    GalleryStatus,
    ViewerTab,
    describe_error,
)
from .download import download_design, render_download

logger = logging.getLogger(__name__)


# ============================================================================
# Rendering
# ============================================================================


def render_viewer(state: GalleryState, placeholder_url: str) -> tuple[dict, ...]:
    """Map the detail viewer onto its components.

    Returns:
        Tuple of (group, image, details, image_panel, details_panel,
        image_tab_button, details_tab_button, download_button, delete_button)
    """
    viewer = state.viewer
    design = viewer.design

    if design is None:
        return (
            gr.update(visible=False),
            gr.update(value=""),
            gr.update(value=""),
            gr.update(),
            gr.update(),
            gr.update(),
            gr.update(),
            gr.update(),
            gr.update(),
        )

    # Mobile shows only the active panel; CSS ignores the class on wide screens
    shown = viewer.visible_panels(narrow=True)
    image_classes = ["viewer-panel"]
    details_classes = ["viewer-panel"]
    if ViewerTab.IMAGE not in shown:
        image_classes.append("panel-hidden-mobile")
    if ViewerTab.DETAILS not in shown:
        details_classes.append("panel-hidden-mobile")

    downloading = design.id in state.downloading
    deleting = design.id in state.deleting

    return (
        gr.update(visible=True),
        gr.update(
            value=render_design_image(
                design.image_url, design.prompt, placeholder_url, css_class="viewer-image"
            )
        ),
        gr.update(value=format_design_details(design.prompt, design.created_at)),
        gr.update(elem_classes=image_classes),
        gr.update(elem_classes=details_classes),
        gr.update(variant="primary" if viewer.active_tab == ViewerTab.IMAGE else "secondary"),
        gr.update(variant="primary" if viewer.active_tab == ViewerTab.DETAILS else "secondary"),
        gr.update(
            interactive=not downloading,
            value="⏳ Descargando..." if downloading else "⬇️ Descargar",
        ),
        gr.update(
            interactive=not deleting,
            value="⏳ Eliminando..." if deleting else "🗑️ Eliminar",
        ),
    )


def render_gallery(state: GalleryState, placeholder_url: str) -> tuple[dict, ...]:
    """Map the Gallery state onto its components.

    The card grid itself is drawn by ``gr.render`` whenever ``revision``
    changes, so it is not part of this tuple.

    Returns:
        Tuple of (revision, status, retry_button, notice, *viewer_updates,
        dialog_group) updates
    """
    if state.status == GalleryStatus.LOADING:
        status_text = "⏳ Cargando diseños..."
    elif state.status == GalleryStatus.ERROR:
        status_text = format_error(state.error)
    elif state.status == GalleryStatus.EMPTY:
        status_text = EMPTY_GALLERY_MESSAGE
    else:
        status_text = ""

    retry_visible = state.status in (GalleryStatus.ERROR, GalleryStatus.EMPTY)
    retry_label = "🔄 Intentar de nuevo" if state.status == GalleryStatus.ERROR else "🔄 Actualizar"

    return (
        gr.update(value=state.revision),
        gr.update(value=status_text, visible=bool(status_text)),
        gr.update(visible=retry_visible, value=retry_label),
        gr.update(value=format_error(state.notice), visible=bool(state.notice)),
        *render_viewer(state, placeholder_url),
        gr.update(visible=state.dialog.is_open()),
    )


def _outputs(ctx: AppContext, state: GalleryState) -> tuple:
    state.touch()
    return (state, *render_gallery(state, ctx.config.placeholder_image_url))


# ============================================================================
# Listing
# ============================================================================


def begin_load(ctx: AppContext, state: GalleryState) -> tuple:
    """Enter LOADING before a listing request (mount, retry, sort change).

    Returns:
        Tuple of (updated_state, *component_updates)
    """
    state.status = GalleryStatus.LOADING
    state.error = ""
    state.notice = ""
    return _outputs(ctx, state)


def load_designs(ctx: AppContext, state: GalleryState) -> tuple:
    """Fetch the listing and replace the local list with it.

    The service's order is kept as-is; nothing is merged with the previous
    listing.

    Returns:
        Tuple of (updated_state, *component_updates)
    """
    try:
        designs = ctx.client.list_designs(state.sort_order)
    except ServiceError as e:
        logger.error(f"Gallery error: {e}")
        state.status = GalleryStatus.ERROR
        state.error = f"{LOAD_ERROR_PREFIX}: {describe_error(e)}"
    except Exception as e:
        logger.error(f"Error loading gallery: {e}", exc_info=True)
        state.status = GalleryStatus.ERROR
        state.error = f"{LOAD_ERROR_PREFIX}: {describe_error(e)}"
    else:
        state.replace_designs(designs)
        logger.info(f"Gallery loaded: {len(designs)} designs (sort={state.sort_order})")

    return _outputs(ctx, state)


def change_sort_order(ctx: AppContext, sort_order: str, state: GalleryState) -> tuple:
    """Switch between newest-first and oldest-first, then reload.

    Args:
        ctx: App context
        sort_order: "desc" or "asc"
        state: Gallery state

    Returns:
        Tuple of (updated_state, *component_updates)
    """
    if sort_order not in SORT_ORDERS:
        logger.warning(f"Ignoring unknown sort order: {sort_order!r}")
        return _outputs(ctx, state)

    state.sort_order = sort_order
    return begin_load(ctx, state)


# ============================================================================
# Per-item actions
# ============================================================================


def make_action_command(action: str, design_id: str) -> str:
    """Encode a card action for the hidden action box.

    A nanosecond stamp makes every click a new value, so clicking the same
    button twice still fires the box's change event.
    """
    return f"{action}:{design_id}:{time.time_ns()}"


def parse_action_command(command: str | None) -> tuple[str, str] | None:
    """Decode :func:`make_action_command` output.

    Returns:
        Tuple of (action, design_id), or None for empty/unknown commands
    """
    if not command:
        return None
    head, _, _stamp = command.rpartition(":")
    action, _, design_id = head.partition(":")
    if action not in GALLERY_ACTIONS or not design_id:
        return None
    return action, design_id


def viewer_command(action: str, state: GalleryState) -> str | dict:
    """Command for an action taken from inside the detail viewer."""
    if state.viewer.design is None:
        return gr.update()
    return make_action_command(action, state.viewer.design.id)


def dispatch_action(ctx: AppContext, command: str, state: GalleryState) -> tuple:
    """Apply a card or viewer action.

    - ``view`` opens the detail viewer
    - ``delete`` opens the confirmation dialog for that id
    - ``download`` flags the id and queues it for :func:`run_pending_download`

    A download for an id that is already downloading is ignored.

    Returns:
        Tuple of (updated_state, *component_updates)
    """
    parsed = parse_action_command(command)
    if parsed is None:
        return _outputs(ctx, state)

    action, design_id = parsed

    if action == "view":
        design = state.find(design_id)
        if design is not None:
            state.viewer.open(design)

    elif action == "delete":
        if design_id not in state.deleting:
            state.dialog.open(design_id)

    elif action == "download":
        if design_id in state.downloading:
            logger.debug(f"Download already running for {design_id}")
        else:
            state.notice = ""
            state.downloading.add(design_id)
            state.pending_downloads.append(design_id)

    return _outputs(ctx, state)


def run_pending_download(ctx: AppContext, state: GalleryState) -> tuple:
    """Perform the oldest queued download.

    The id's flag is cleared whatever happens; a failure only sets the
    notice, leaving the listing alone.

    Returns:
        Tuple of (updated_state, *component_updates, file_update, link_update, token_update)
    """
    if not state.pending_downloads:
        return (*_outputs(ctx, state), *render_download(None))

    design_id = state.pending_downloads.pop(0)
    artifact = None
    try:
        artifact = download_design(ctx, design_id)
    except Exception as e:
        if not isinstance(e, ServiceError):
            logger.error(f"Error downloading design {design_id}: {e}", exc_info=True)
        state.notice = DOWNLOAD_ERROR
    finally:
        state.downloading.discard(design_id)

    return (*_outputs(ctx, state), *render_download(artifact))


def cancel_delete(ctx: AppContext, state: GalleryState) -> tuple:
    """Close the confirmation dialog without deleting anything."""
    state.dialog.cancel()
    return _outputs(ctx, state)


def confirm_delete(ctx: AppContext, state: GalleryState) -> tuple:
    """Close the dialog and queue its target for :func:`run_pending_delete`."""

    def queue_delete(target_id: str) -> None:
        state.notice = ""
        state.deleting.add(target_id)
        state.pending_deletes.append(target_id)

    state.dialog.confirm(queue_delete)
    return _outputs(ctx, state)


def run_pending_delete(ctx: AppContext, state: GalleryState) -> tuple:
    """Delete the oldest confirmed design.

    On success the design leaves the listing (closing the viewer if it was
    open on it).  On failure the listing is untouched and a notice is shown.

    Returns:
        Tuple of (updated_state, *component_updates)
    """
    if not state.pending_deletes:
        return _outputs(ctx, state)

    design_id = state.pending_deletes.pop(0)
    try:
        ctx.client.delete(design_id)
    except Exception as e:
        if not isinstance(e, ServiceError):
            logger.error(f"Error deleting design {design_id}: {e}", exc_info=True)
        state.notice = DELETE_ERROR
    else:
        state.remove_design(design_id)
        logger.info(f"Removed design {design_id} from gallery")
    finally:
        state.deleting.discard(design_id)

    return _outputs(ctx, state)


# ============================================================================
# Detail viewer
# ============================================================================


def select_viewer_tab(ctx: AppContext, tab: str, state: GalleryState) -> tuple:
    """Switch the viewer's mobile panel ("image" or "details")."""
    state.viewer.select_tab(tab)
    return _outputs(ctx, state)


def close_viewer(ctx: AppContext, state: GalleryState) -> tuple:
    """Close the viewer via its close button."""
    state.viewer.close()
    return _outputs(ctx, state)


def click_viewer_backdrop(ctx: AppContext, state: GalleryState) -> tuple:
    """Close the viewer after a click outside its content."""
    state.viewer.handle_click("backdrop")
    return _outputs(ctx, state)
