"""Shared pytest fixtures for Mediabrew tests."""

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest

# Keep the import-time global config away from the working directory.
_SESSION_ROOT = Path(tempfile.mkdtemp(prefix="mediabrew-tests-"))
for _name in ("STORAGE_DIR", "DATA_DIR", "EXPORTS_DIR"):
    os.environ.setdefault(f"MEDIABREW_{_name}", str(_SESSION_ROOT / _name.lower()))

from mediabrew.core.config import MediabrewConfig  # noqa: E402


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> MediabrewConfig:
    """Create a test configuration with temporary directories.

    Args:
        temp_dir: Temporary directory from fixture

    Returns:
        MediabrewConfig instance for testing
    """
    return MediabrewConfig(
        _env_file=None,
        storage_dir=temp_dir / "storage",
        data_dir=temp_dir / "data",
        exports_dir=temp_dir / "exports",
        export_timeout=5,
    )


@pytest.fixture
def sample_media() -> dict:
    """A stored image item as the gallery persists it."""
    return {
        "uid": 17,
        "type": "image",
        "name": "Misty Forest Shrine",
        "workflow": "Flux Dev",
        "seed": 1234,
        "tags": ["misty", "forest"],
        "imageUrl": "/media/image_17.png",
        "imageFormat": "png",
        "description": "An old shrine in the fog",
        "orientation": "landscape",
    }


@pytest.fixture
def storage_dir(temp_dir: Path, sample_media: dict) -> Path:
    """Storage directory holding the sample media file."""
    storage = temp_dir / "storage"
    storage.mkdir(exist_ok=True)
    (storage / "image_17.png").write_bytes(b"\x89PNG fake image bytes")
    return storage


@pytest.fixture
def sample_exports() -> list[dict]:
    """Export definitions as they appear in ``config.json``."""
    return [
        {
            "id": "local-copy",
            "name": "Copy to folder",
            "types": ["image", "audio"],
            "exportType": "save",
            "folderTemplate": "{{workflow|split-by-spaces|kebabcase|lowercase}}",
            "filenameTemplate": "{{name|split-by-spaces|snakecase}}_{{seed}}",
        },
        {
            "id": "cms-upload",
            "name": "Upload to CMS",
            "types": ["image"],
            "exportType": "post",
            "endpoint": "https://cms.example.test/upload",
            "filenameTemplate": "{{title|split-by-spaces|kebabcase|lowercase}}",
            "prepareDataTasks": [
                {"from": "name", "to": "title"},
                {"from": "image_0", "to": "file"},
                {"template": "{{tags|join-by-spaces}}", "to": "keywords"},
            ],
            "sendProperties": ["title", "file", "keywords"],
        },
        {
            "id": "audio-only",
            "name": "Audio archive",
            "types": ["audio"],
            "exportType": "save",
            "folderTemplate": "audio",
            "filenameTemplate": "{{uid}}",
        },
    ]


@pytest.fixture
def test_client(temp_dir: Path, storage_dir: Path, sample_media: dict, sample_exports, monkeypatch):
    """FastAPI TestClient wired to temporary storage and data files.

    The media store holds ``sample_media`` and ``config.json`` holds
    ``sample_exports``.  Post exports go through
    ``app.state.http_transport``, which tests may replace with an
    ``httpx.MockTransport``.
    """
    from fastapi.testclient import TestClient

    import mediabrew.api.main as api_main

    data_dir = temp_dir / "data"
    exports_dir = temp_dir / "exports"
    data_dir.mkdir(exist_ok=True)
    exports_dir.mkdir(exist_ok=True)

    media_db = data_dir / "media.json"
    app_config_file = data_dir / "config.json"
    media_db.write_text(json.dumps([sample_media]), encoding="utf-8")
    app_config_file.write_text(json.dumps({"exports": sample_exports}), encoding="utf-8")

    monkeypatch.setattr(api_main, "STORAGE_DIR", storage_dir)
    monkeypatch.setattr(api_main, "DATA_DIR", data_dir)
    monkeypatch.setattr(api_main, "EXPORTS_DIR", exports_dir)
    monkeypatch.setattr(api_main, "MEDIA_DB", media_db)
    monkeypatch.setattr(api_main, "APP_CONFIG_FILE", app_config_file)

    with TestClient(api_main.app) as client:
        yield client
