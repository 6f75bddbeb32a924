"""Configuration management for Event Poster Studio.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the EVENTPOSTER_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (EVENTPOSTER_* prefix, plus GEMINI_API_KEY)
2. .env file in the project root
3. Default values defined in PosterConfig

Example .env file:
    EVENTPOSTER_GEMINI_API_KEY=AIzaSy...
    EVENTPOSTER_POSTER_MODEL=gemini-3-pro-image-preview
    EVENTPOSTER_OUTPUT_IMAGE_SIZE=2K
    EVENTPOSTER_OUTPUTS_DIR=outputs

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
This ensures a single source of truth for all configuration values across
the application.

Usage Example
-------------
    from eventposter.core.config import config

    print(config.poster_model)
    print(config.outputs_dir)

API Key Handling
----------------
The Gemini API key is optional at startup. When it is missing the UI asks
the user for a key and keeps it in the session state only; it is never
written back to disk.
"""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PosterConfig(BaseSettings):
    """Main configuration for Event Poster Studio.

    Attributes
    ----------
    Gemini Settings:
        gemini_api_key : str | None
            API key for Google Gemini (EVENTPOSTER_GEMINI_API_KEY or GEMINI_API_KEY)
        poster_model : str
            Image model used to render the poster
        extraction_model : str
            Text model used to extract event details from documents
        background_model : str
            Image model used to clean uploaded backgrounds
        output_image_size : Literal["1K", "2K", "4K"]
            Requested output quality tier for posters

    Branding:
        brand_name : str
            Organisation name used in download filenames
        default_logo_url : str
            Public URL of the default organisation logo
        logo_fetch_timeout : float
            Timeout in seconds for the default logo download

    Paths:
        outputs_dir : Path
            Directory where downloaded posters are written

    Server Settings:
        server_host : str
            Bind address for uvicorn
        server_port : int
            Port for uvicorn (1024-65535)
        gradio_share : bool
            Create public gradio.live link (keep False for local-only)

    Examples
    --------
        >>> custom_config = PosterConfig(
        ...     gemini_api_key="test-key",
        ...     output_image_size="1K",
        ... )
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EVENTPOSTER_",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Gemini settings
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "gemini_api_key", "EVENTPOSTER_GEMINI_API_KEY", "GEMINI_API_KEY"
        ),
        description="Google Gemini API key (asked for in the UI when missing)",
    )
    poster_model: str = Field(
        default="gemini-3-pro-image-preview",
        description="Gemini image model used for poster generation",
    )
    extraction_model: str = Field(
        default="gemini-2.5-flash",
        description="Gemini model used for event information extraction",
    )
    background_model: str = Field(
        default="gemini-2.5-flash-image",
        description="Gemini image model used to clean uploaded backgrounds",
    )
    output_image_size: Literal["1K", "2K", "4K"] = Field(
        default="2K",
        description="Requested poster quality tier",
    )

    # Branding
    brand_name: str = Field(
        default="MISA",
        description="Organisation name used in download filenames",
    )
    default_logo_url: str = Field(
        default=(
            "https://upload.wikimedia.org/wikipedia/commons/thumb/c/c2/"
            "MISA_logo.svg/2560px-MISA_logo.svg.png"
        ),
        description="Default organisation logo fetched when no custom branding is used",
    )
    logo_fetch_timeout: float = Field(
        default=15.0,
        description="Timeout in seconds for the default logo download",
        gt=0,
    )

    # Paths
    outputs_dir: Path = Field(
        default=Path("outputs"),
        description="Directory to save downloaded posters",
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    server_port: int = Field(
        default=7860,
        description="Server port",
        ge=1024,
        le=65535,
    )
    gradio_share: bool = Field(
        default=False,
        description="Create public gradio.live link (keep False for local-only)",
    )

    def __init__(self, **kwargs):
        """Initialize configuration and create the outputs directory.

        Args:
            **kwargs: Configuration overrides (typically from environment variables)
        """
        super().__init__(**kwargs)

        self.outputs_dir.mkdir(parents=True, exist_ok=True)


# Global configuration instance
# Loads values from environment variables (EVENTPOSTER_* prefix) and .env file.
config = PosterConfig()
