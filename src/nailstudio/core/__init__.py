"""Core functionality for Nail Studio.

- **NailStudioConfig**: Configuration management using Pydantic Settings
- **config**: Global configuration instance (loads from environment variables)
- **conversion**: Base64 download payloads to files (with data-URL fallback)
- **validation**: Prompt checks shared by the API client and the UI
"""

from nailstudio.core.config import NailStudioConfig, config
from nailstudio.core.conversion import ConversionError, DownloadArtifact, prepare_download
from nailstudio.core.validation import ValidationError, validate_prompt

__all__ = [
    "ConversionError",
    "DownloadArtifact",
    "NailStudioConfig",
    "ValidationError",
    "config",
    "prepare_download",
    "validate_prompt",
]
