"""Download helpers shared by the Generator and Gallery handlers."""

import logging
import time

import gradio as gr

from nailstudio.core.conversion import DownloadArtifact, prepare_download

from ..formatting import render_download_link
from ..models import AppContext

logger = logging.getLogger(__name__)


def download_design(ctx: AppContext, design_id: str) -> DownloadArtifact:
    """Fetch a design's full image and prepare it for the browser.

    Args:
        ctx: App context (client and config)
        design_id: Design to download

    Returns:
        File-backed artifact, or a data-URL artifact if conversion failed

    Raises:
        ServiceError: If the payload could not be fetched
    """
    payload = ctx.client.fetch_download_payload(design_id)
    return prepare_download(
        design_id,
        payload,
        ctx.config.downloads_dir,
        cleanup_delay=ctx.config.download_cleanup_delay,
    )


def render_download(artifact: DownloadArtifact | None) -> tuple[dict, dict, dict]:
    """Updates for the (file, fallback link, trigger token) download outputs.

    The token only changes when there is something new to save, and its
    change event clicks the freshly rendered link in the browser.

    Args:
        artifact: Prepared download, or None to leave all outputs untouched

    Returns:
        Tuple of (file_update, link_update, token_update)
    """
    if artifact is None:
        return gr.update(), gr.update(), gr.update()

    token = gr.update(value=str(time.time_ns()))

    if artifact.is_fallback:
        return (
            gr.update(value=None, visible=False),
            gr.update(value=render_download_link(artifact), visible=True),
            token,
        )

    return (
        gr.update(value=str(artifact.path), visible=True),
        gr.update(value="", visible=False),
        token,
    )
