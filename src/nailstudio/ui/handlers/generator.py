"""Generator tab handlers: create, delete and download a single design.

Every handler returns ``(state, *render_generator(state))`` so all of them
share one output list in the Blocks wiring.  Long calls are split in two
steps chained with ``.then()``: a quick step that moves the state into its
busy status (disabling the control) and a second step that talks to the
remote service.
"""

import logging

import gradio as gr

from nailstudio.api.client import RequestError, ServiceError

from ..formatting import format_error, format_prompt_markdown, render_design_image
from ..models import (
    DELETE_ERROR,
    DOWNLOAD_ERROR,
    GENERATE_ERROR,
    AppContext,
    GeneratorState,
    GeneratorStatus,
)
from ..state import new_generator_state
from ..validation import ValidationError, validate_prompt
from .download import download_design, render_download

logger = logging.getLogger(__name__)


def render_generator(state: GeneratorState) -> tuple[dict, ...]:
    """Map the Generator state onto its components.

    Returns:
        Tuple of (generate_button, error, result_group, result_prompt,
        result_image, delete_button, download_button, dialog_group) updates
    """
    generating = state.status == GeneratorStatus.GENERATING
    deleting = state.status == GeneratorStatus.DELETING
    downloading = state.status == GeneratorStatus.DOWNLOADING
    design = state.design

    return (
        gr.update(
            interactive=not generating,
            value="⏳ Generando..." if generating else "✨ Generar Diseño",
        ),
        gr.update(value=format_error(state.error), visible=bool(state.error)),
        gr.update(visible=design is not None),
        gr.update(value=format_prompt_markdown(design.prompt) if design else ""),
        gr.update(value=render_design_image(design.url, "AI Generated") if design else ""),
        gr.update(
            interactive=not state.is_busy(),
            value="⏳ Eliminando..." if deleting else "🗑️ Eliminar",
        ),
        gr.update(
            interactive=not state.is_busy(),
            value="⏳ Descargando..." if downloading else "⬇️ Descargar",
        ),
        gr.update(visible=state.dialog.is_open()),
    )


def submit_prompt(prompt: str, state: GeneratorState | None) -> tuple:
    """Validate the prompt and move to GENERATING.

    An empty prompt only sets the validation message; nothing else changes
    and no request is made.

    Args:
        prompt: Text from the prompt box
        state: Generator state

    Returns:
        Tuple of (updated_state, *component_updates)
    """
    state = state or new_generator_state()

    if state.status == GeneratorStatus.GENERATING:
        logger.debug("Generation already running, ignoring submit")
        return (state, *render_generator(state))

    try:
        validate_prompt(prompt)
    except ValidationError as e:
        logger.warning(f"Validation error: {e}")
        state.error = str(e)
        return (state, *render_generator(state))

    state.prompt = prompt
    state.status = GeneratorStatus.GENERATING
    state.error = ""
    return (state, *render_generator(state))


def run_generation(ctx: AppContext, state: GeneratorState) -> tuple:
    """Call the service for the prompt submitted by :func:`submit_prompt`.

    A new design replaces whatever was held before.  On failure the design is
    cleared and the prompt stays in the box for another try.

    Returns:
        Tuple of (updated_state, *component_updates)
    """
    if state.status != GeneratorStatus.GENERATING:
        return (state, *render_generator(state))

    try:
        design = ctx.client.create(state.prompt)

    except ValidationError as e:
        state.status = GeneratorStatus.FAILED
        state.error = str(e)
        state.design = None

    except RequestError as e:
        logger.warning(f"Generation rejected: {e}")
        state.status = GeneratorStatus.FAILED
        state.error = e.detail or GENERATE_ERROR
        state.design = None

    except ServiceError as e:
        logger.warning(f"Generation failed: {e}")
        state.status = GeneratorStatus.FAILED
        state.error = GENERATE_ERROR
        state.design = None

    except Exception as e:
        logger.error(f"Error generating design: {e}", exc_info=True)
        state.status = GeneratorStatus.FAILED
        state.error = GENERATE_ERROR
        state.design = None

    else:
        logger.info(f"Generated design {design.id}")
        state.status = GeneratorStatus.READY
        state.design = design
        state.error = ""

    return (state, *render_generator(state))


def request_delete(state: GeneratorState) -> tuple:
    """Open the confirmation dialog for the held design."""
    if state.design is not None and not state.is_busy():
        state.dialog.open(state.design.id)
    return (state, *render_generator(state))


def cancel_delete(state: GeneratorState) -> tuple:
    """Close the confirmation dialog without deleting anything."""
    state.dialog.cancel()
    return (state, *render_generator(state))


def confirm_delete(state: GeneratorState) -> tuple:
    """Close the dialog and mark its target for deletion."""

    def mark_deleting(target_id: str) -> None:
        state.deleting_id = target_id
        state.status = GeneratorStatus.DELETING
        state.error = ""

    state.dialog.confirm(mark_deleting)
    return (state, *render_generator(state))


def run_delete(ctx: AppContext, state: GeneratorState) -> tuple:
    """Delete the design confirmed by :func:`confirm_delete`.

    On success the held design is cleared (back to IDLE).  On failure the
    design stays on screen with an error message.

    Returns:
        Tuple of (updated_state, *component_updates)
    """
    target_id = state.deleting_id
    if target_id is None:
        return (state, *render_generator(state))
    state.deleting_id = None

    try:
        ctx.client.delete(target_id)
    except Exception as e:
        if not isinstance(e, ServiceError):
            logger.error(f"Error deleting design {target_id}: {e}", exc_info=True)
        state.error = DELETE_ERROR
        state.status = GeneratorStatus.READY if state.design else GeneratorStatus.IDLE
        return (state, *render_generator(state))

    if state.design is not None and state.design.id == target_id:
        state.design = None
    state.status = GeneratorStatus.READY if state.design else GeneratorStatus.IDLE
    return (state, *render_generator(state))


def begin_download(state: GeneratorState) -> tuple:
    """Move to DOWNLOADING if a design is ready."""
    if state.design is not None and state.status == GeneratorStatus.READY:
        state.status = GeneratorStatus.DOWNLOADING
        state.error = ""
    return (state, *render_generator(state))


def run_download(ctx: AppContext, state: GeneratorState) -> tuple:
    """Fetch and convert the held design, always returning to READY.

    Returns:
        Tuple of (updated_state, *component_updates, file_update, link_update, token_update)
    """
    if state.status != GeneratorStatus.DOWNLOADING or state.design is None:
        return (state, *render_generator(state), *render_download(None))

    artifact = None
    try:
        artifact = download_design(ctx, state.design.id)
    except Exception as e:
        if not isinstance(e, ServiceError):
            logger.error(f"Error downloading design {state.design.id}: {e}", exc_info=True)
        state.error = DOWNLOAD_ERROR
    finally:
        state.status = GeneratorStatus.READY

    return (state, *render_generator(state), *render_download(artifact))
