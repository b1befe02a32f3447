"""State management utilities for Nail Studio UI.

This module builds the shared :class:`AppContext` (remote service client plus
configuration) and the fresh per-session view states.
"""

import logging

import httpx

from nailstudio.api.client import NailDesignClient
from nailstudio.core.config import NailStudioConfig, config

from .models import AppContext, GalleryState, GeneratorState

logger = logging.getLogger(__name__)


def create_app_context(
    cfg: NailStudioConfig | None = None, transport: httpx.BaseTransport | None = None
) -> AppContext:
    """Create the context shared by every handler.

    Args:
        cfg: Configuration to use (default: global config)
        transport: Optional httpx transport for the client (tests)

    Returns:
        AppContext with an open client
    """
    cfg = cfg or config
    logger.info(f"Creating remote service client for {cfg.api_base_url}")
    client = NailDesignClient.from_config(cfg, transport=transport)
    return AppContext(client=client, config=cfg)


def new_generator_state() -> GeneratorState:
    """Initial Generator tab state."""
    return GeneratorState()


def new_gallery_state(cfg: NailStudioConfig | None = None) -> GalleryState:
    """Initial Gallery tab state, using the configured default sort order."""
    cfg = cfg or config
    return GalleryState(sort_order=cfg.default_sort_order)


def cleanup_app_context(ctx: AppContext) -> None:
    """Release the client's connections.

    Args:
        ctx: Context to clean up
    """
    logger.info("Closing remote service client")
    try:
        ctx.client.close()
    except Exception as e:
        logger.error(f"Error closing client: {e}", exc_info=True)
