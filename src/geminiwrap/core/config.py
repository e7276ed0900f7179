"""Configuration management for the Gemini Wrapper.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the GEMINI_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (GEMINI_* prefix)
2. .env file in the project root
3. Default values defined in GeminiWrapConfig

Example .env file:
    GEMINI_API_KEY=your-key
    GEMINI_CHAT_MODEL=gemini-2.5-flash
    GEMINI_SERVER_PORT=3000
    GEMINI_IMAGES_DIR=public/images

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
This ensures a single source of truth for all configuration values across
the application.

Usage Example
-------------
    from geminiwrap.core.config import config

    print(config.chat_model)
    print(config.images_dir)

Directory Management
--------------------
The configuration creates the public and image output directories on
initialization.  The API serves the public tree at ``/``; generated images
saved by the ``image-save`` preset land in the images directory and are served
under ``/images``.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_HITAM_PROMPT = (
    "Apply a dark, low-key filter to the whole image, deepening shadows and "
    "darkening every tone, while keeping the composition, the character, their "
    "pose and every detail exactly as in the original."
)


class GeminiWrapConfig(BaseSettings):
    """Main configuration for the Gemini Wrapper.

    Values are loaded from environment variables with the GEMINI_ prefix,
    with fallback to defaults defined here.

    Attributes
    ----------
    Model Settings:
        api_key : str
            Gemini API key (``GEMINI_API_KEY``)
        chat_model : str
            Default model for the chat preset
        image_model : str
            Default model for every image-producing preset
        hitam_prompt : str
            Fixed instruction sent by the hitam preset

    Remote Media:
        fetch_timeout : float
            Timeout in seconds for fetching media referenced by URL

    Paths:
        public_dir : Path
            Root of the public assets tree, served at ``/``
        images_dir : Path
            Directory generated images are written to

    Server Settings:
        server_host : str
            Bind address for uvicorn
        server_port : int
            Port for uvicorn (1024-65535)
        log_level : str
            Root logging level used by the CLI entry point

    Examples
    --------
        >>> custom_config = GeminiWrapConfig(
        ...     chat_model="gemini-2.5-pro",
        ...     images_dir="/tmp/images",
        ... )
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GEMINI_",
        case_sensitive=False,
    )

    api_key: str = Field(
        default="",
        description="Gemini API key",
    )

    chat_model: str = Field(
        default="gemini-2.5-flash",
        description="Default model for chat requests",
    )
    image_model: str = Field(
        default="gemini-2.5-flash-image-preview",
        description="Default model for image-producing presets",
    )
    hitam_prompt: str = Field(
        default=DEFAULT_HITAM_PROMPT,
        description="Fixed instruction used by the hitam preset",
    )

    fetch_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for remote media downloads",
        gt=0,
    )

    # Paths
    public_dir: Path = Field(
        default=Path("public"),
        description="Root directory for public assets",
    )
    images_dir: Path = Field(
        default=Path("public") / "images",
        description="Directory to save generated images",
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address",
    )
    server_port: int = Field(
        default=3000,
        description="Server port",
        ge=1024,
        le=65535,
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level for the server process",
    )

    def __init__(self, **kwargs):
        """Initialize configuration and create the public and image directories.

        Args:
            **kwargs: Configuration overrides (typically from environment variables)

        Note:
            Directory creation uses parents=True and exist_ok=True, so this is
            safe to call multiple times.
        """
        super().__init__(**kwargs)

        self.public_dir.mkdir(parents=True, exist_ok=True)
        self.images_dir.mkdir(parents=True, exist_ok=True)


# Global configuration instance
# Loads values from environment variables (GEMINI_* prefix) and .env file.
config = GeminiWrapConfig()
