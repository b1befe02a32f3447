"""Configuration management for Nail Studio.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the NAILSTUDIO_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (NAILSTUDIO_* prefix)
2. .env file in the project root
3. Default values defined in NailStudioConfig

Example .env file:
    NAILSTUDIO_API_BASE_URL=https://api.neoglow.net/webhook/isabela/
    NAILSTUDIO_API_KEY=my-key
    NAILSTUDIO_REQUEST_TIMEOUT=30
    NAILSTUDIO_DOWNLOADS_DIR=downloads

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
The UI layer reads it once when building the app; handlers receive the
remote service client as a parameter instead of reaching for globals.

Usage Example
-------------
    from nailstudio.core.config import config

    print(config.api_base_url)
    print(config.downloads_dir)

Remote Service Constraints
--------------------------
- Every request carries the static key in an ``apikey`` header
- The service does not paginate; ``fetch-nails`` returns every design
- Timeouts are the transport's (httpx defaults to 5 seconds)
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_BASE_URL = "https://api.neoglow.net/webhook/isabela/"
DEFAULT_API_KEY = "O2WJWuNAH4VamJIy"
DEFAULT_PLACEHOLDER_IMAGE_URL = "https://via.placeholder.com/400x400?text=Image+Not+Available"


class NailStudioConfig(BaseSettings):
    """Main configuration for Nail Studio.

    Values are loaded from environment variables with the NAILSTUDIO_ prefix,
    with fallback to defaults defined here.

    Attributes
    ----------
    Remote Service:
        api_base_url : str
            Base URL of the nail design webhook (always ends with "/")
        api_key : str
            Static key sent in the ``apikey`` header of every request
        request_timeout : float
            Transport timeout in seconds

    Gallery:
        default_sort_order : Literal["asc", "desc"]
            Order requested on first load (desc = newest first)
        placeholder_image_url : str
            Image shown when a design's preview URL cannot be loaded

    Downloads:
        downloads_dir : Path
            Directory converted images are written to before being served
        download_cleanup_delay : float
            Seconds to wait before removing a served download file

    UI Settings:
        gradio_server_name : str
            Server bind address (0.0.0.0 for local network)
        gradio_server_port : int
            Server port (1024-65535)
        gradio_share : bool
            Create public gradio.live link (keep False for local-only)

    Examples
    --------
        >>> custom_config = NailStudioConfig(
        ...     api_base_url="http://localhost:5678/webhook/isabela",
        ...     request_timeout=30,
        ... )
        >>> custom_config.api_base_url
        'http://localhost:5678/webhook/isabela/'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="NAILSTUDIO_",
        case_sensitive=False,
    )

    # Remote service settings
    api_base_url: str = Field(
        default=DEFAULT_API_BASE_URL,
        description="Base URL of the nail design webhook",
    )
    api_key: str = Field(
        default=DEFAULT_API_KEY,
        description="Static key sent in the apikey header",
    )
    request_timeout: float = Field(
        default=5.0,
        description="Transport timeout in seconds",
        gt=0,
    )

    # Gallery settings
    default_sort_order: Literal["asc", "desc"] = Field(
        default="desc",
        description="Sort order requested when the gallery first loads",
    )
    placeholder_image_url: str = Field(
        default=DEFAULT_PLACEHOLDER_IMAGE_URL,
        description="Image shown when a preview URL is unreachable",
    )

    # Downloads
    downloads_dir: Path = Field(
        default=Path("downloads"),
        description="Directory for converted download files",
    )
    download_cleanup_delay: float = Field(
        default=60.0,
        description="Seconds before a served download file is removed",
        ge=0,
    )

    # UI settings
    gradio_server_name: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    gradio_server_port: int = Field(
        default=7860,
        description="Server port",
        ge=1024,
        le=65535,
    )
    gradio_share: bool = Field(
        default=False,
        description="Create public gradio.live link (keep False for local-only)",
    )

    @field_validator("api_base_url")
    @classmethod
    def _ensure_trailing_slash(cls, value: str) -> str:
        # Endpoint paths are joined onto the base, so it must end with "/"
        return value if value.endswith("/") else value + "/"

    def __init__(self, **kwargs):
        """Initialize configuration and create the downloads directory.

        Args:
            **kwargs: Configuration overrides (typically from environment variables)
        """
        super().__init__(**kwargs)

        self.downloads_dir.mkdir(parents=True, exist_ok=True)

    def masked_dump(self) -> dict:
        """Return the configuration as a dict with the API key hidden.

        Used for startup logging so the key never lands in log files.
        """
        data = self.model_dump()
        if data.get("api_key"):
            data["api_key"] = "****"
        return data


# Global configuration instance
# Created at import time; loads values from environment variables
# (NAILSTUDIO_* prefix) and the .env file.
config = NailStudioConfig()
