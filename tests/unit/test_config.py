"""Tests for mediabrew.core.config — configuration management.

Tests cover:
- Default values for the export and server settings.
- Environment variable overrides via the MEDIABREW_ prefix.
- Automatic directory creation on initialisation.
- Derived paths for media.json and config.json.
- Pydantic validation constraints (port range, timeout, log level).
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from mediabrew.core.config import MediabrewConfig


def make_config(temp_dir: Path, **overrides) -> MediabrewConfig:
    """Build a config rooted in *temp_dir*, ignoring any .env file."""
    return MediabrewConfig(
        _env_file=None,
        storage_dir=temp_dir / "storage",
        data_dir=temp_dir / "data",
        exports_dir=temp_dir / "exports",
        **overrides,
    )


class TestConfigDefaults:
    """Verify that MediabrewConfig provides sensible defaults."""

    def test_default_server_settings(self, monkeypatch, temp_dir: Path):
        """Server defaults to 0.0.0.0:3000."""
        monkeypatch.delenv("MEDIABREW_SERVER_PORT", raising=False)
        monkeypatch.delenv("MEDIABREW_SERVER_HOST", raising=False)
        cfg = make_config(temp_dir)
        assert cfg.server_host == "0.0.0.0"
        assert cfg.server_port == 3000

    def test_default_export_timeout(self, monkeypatch, temp_dir: Path):
        """Export delivery times out after 30 seconds by default."""
        monkeypatch.delenv("MEDIABREW_EXPORT_TIMEOUT", raising=False)
        assert make_config(temp_dir).export_timeout == 30.0

    def test_default_log_level(self, monkeypatch, temp_dir: Path):
        """Log level defaults to INFO."""
        monkeypatch.delenv("MEDIABREW_LOG_LEVEL", raising=False)
        assert make_config(temp_dir).log_level == "INFO"

    def test_fixture_overrides(self, test_config: MediabrewConfig):
        """The shared fixture shortens the export timeout."""
        assert test_config.export_timeout == 5


class TestConfigEnvironment:
    """Verify MEDIABREW_ environment overrides."""

    def test_env_overrides_port(self, monkeypatch, temp_dir: Path):
        """MEDIABREW_SERVER_PORT sets the server port."""
        monkeypatch.setenv("MEDIABREW_SERVER_PORT", "8080")
        assert make_config(temp_dir).server_port == 8080

    def test_env_overrides_log_level(self, monkeypatch, temp_dir: Path):
        """MEDIABREW_LOG_LEVEL sets the log level."""
        monkeypatch.setenv("MEDIABREW_LOG_LEVEL", "DEBUG")
        assert make_config(temp_dir).log_level == "DEBUG"


class TestConfigDirectoryCreation:
    """Verify that MediabrewConfig creates required directories."""

    def test_directories_created(self, test_config: MediabrewConfig):
        """All configured directories exist after initialisation."""
        for directory in (test_config.storage_dir, test_config.data_dir, test_config.exports_dir):
            assert directory.exists()
            assert directory.is_dir()

    def test_creates_nested_directories(self, temp_dir: Path):
        """Deeply nested directories are created via parents=True."""
        cfg = MediabrewConfig(
            _env_file=None,
            storage_dir=temp_dir / "a" / "b" / "storage",
            data_dir=temp_dir / "a" / "b" / "data",
            exports_dir=temp_dir / "a" / "b" / "exports",
        )
        assert cfg.storage_dir.exists()
        assert cfg.data_dir.exists()
        assert cfg.exports_dir.exists()


class TestConfigPaths:
    """Verify derived file paths."""

    def test_media_db_path(self, test_config: MediabrewConfig):
        """media.json lives in the data directory."""
        assert test_config.media_db == test_config.data_dir / "media.json"

    def test_app_config_file_path(self, test_config: MediabrewConfig):
        """config.json lives in the data directory."""
        assert test_config.app_config_file == test_config.data_dir / "config.json"

    def test_paths_are_path_objects(self, test_config: MediabrewConfig):
        """Path fields are pathlib.Path instances."""
        assert isinstance(test_config.storage_dir, Path)
        assert isinstance(test_config.exports_dir, Path)


class TestConfigValidation:
    """Verify Pydantic validation constraints on config fields."""

    @pytest.mark.parametrize("port", [80, 70000])
    def test_invalid_port(self, temp_dir: Path, port: int):
        """Ports outside 1024-65535 are rejected."""
        with pytest.raises(ValidationError):
            make_config(temp_dir, server_port=port)

    @pytest.mark.parametrize("timeout", [0, -1, 601])
    def test_invalid_export_timeout(self, temp_dir: Path, timeout: float):
        """Timeouts must be positive and at most ten minutes."""
        with pytest.raises(ValidationError):
            make_config(temp_dir, export_timeout=timeout)

    def test_invalid_log_level(self, temp_dir: Path):
        """Unknown log levels are rejected."""
        with pytest.raises(ValidationError):
            make_config(temp_dir, log_level="VERBOSE")
