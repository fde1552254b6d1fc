"""Configuration management for Mediabrew.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the MEDIABREW_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (MEDIABREW_* prefix)
2. .env file in the project root
3. Default values defined in MediabrewConfig

Example .env file:
    MEDIABREW_STORAGE_DIR=storage
    MEDIABREW_EXPORTS_DIR=/mnt/share/exports
    MEDIABREW_SERVER_PORT=3000
    MEDIABREW_EXPORT_TIMEOUT=30
    MEDIABREW_LOG_LEVEL=DEBUG

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
This ensures a single source of truth for all configuration values across
the application.

Usage Example
-------------
    from mediabrew.core.config import config

    print(config.storage_dir)
    print(config.media_db)

Directory Management
--------------------
The configuration automatically creates required directories on initialization:
- storage_dir: Generated media files (served under ``/media/``)
- data_dir: ``media.json`` metadata and ``config.json`` export definitions
- exports_dir: Base directory for relative ``folderTemplate`` destinations
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MediabrewConfig(BaseSettings):
    """Main configuration for Mediabrew.

    Values are loaded from environment variables with the MEDIABREW_ prefix,
    with fallback to defaults defined here.  All Path fields are created if
    they don't exist.

    Attributes
    ----------
    Paths:
        storage_dir : Path
            Directory holding generated media files
        data_dir : Path
            Directory holding ``media.json`` and ``config.json``
        exports_dir : Path
            Base directory that relative export folders resolve against

    Export Settings:
        export_timeout : float
            Timeout in seconds for HTTP export delivery

    Server Settings:
        server_host : str
            Server bind address
        server_port : int
            Server port (1024-65535)
        log_level : Literal["DEBUG", "INFO", "WARNING", "ERROR"]
            Root log level applied by the CLI entry point

    Examples
    --------
        >>> custom_config = MediabrewConfig(
        ...     storage_dir="/tmp/storage",
        ...     export_timeout=5,
        ... )
        >>> custom_config.media_db.name
        'media.json'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="MEDIABREW_",
        case_sensitive=False,
    )

    # Paths
    storage_dir: Path = Field(
        default=Path("storage"),
        description="Directory holding generated media files",
    )
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding media.json and config.json",
    )
    exports_dir: Path = Field(
        default=Path("exports"),
        description="Base directory for relative export folder templates",
    )

    # Export delivery
    export_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for HTTP export delivery",
        gt=0,
        le=600,
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    server_port: int = Field(
        default=3000,
        description="Server port",
        ge=1024,
        le=65535,
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root log level for the server process",
    )

    def __init__(self, **kwargs):
        """Initialize configuration and create required directories.

        Args:
            **kwargs: Configuration overrides (typically from environment variables)
        """
        super().__init__(**kwargs)

        self.storage_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.exports_dir.mkdir(parents=True, exist_ok=True)

    @property
    def media_db(self) -> Path:
        """Path to the ``media.json`` metadata file."""
        return self.data_dir / "media.json"

    @property
    def app_config_file(self) -> Path:
        """Path to the ``config.json`` file holding export definitions."""
        return self.data_dir / "config.json"


# Global configuration instance
# Loads values from environment variables (MEDIABREW_* prefix) and .env file.
config = MediabrewConfig()
