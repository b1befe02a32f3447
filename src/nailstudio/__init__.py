"""Nail Studio - prompt-to-nail-design front-end for a remote image webhook."""

__version__ = "0.1.0"

from nailstudio.api.client import NailDesignClient
from nailstudio.core.config import NailStudioConfig, config

__all__ = [
    "NailDesignClient",
    "NailStudioConfig",
    "config",
]
