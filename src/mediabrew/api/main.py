"""Mediabrew - FastAPI Application.

This module is the single entry point for the web application.  It defines
the FastAPI ``app`` instance, all REST API routes, and the ``main()`` CLI
function that launches the uvicorn server.

Architecture
------------
- **Configuration** is loaded from ``config.json`` in the data directory.
  Its ``exports`` list defines the available export destinations.
- **Media metadata** lives in ``media.json``.  Media files live in the
  storage directory and are referenced as ``/media/<file>``.
- **Templates and conditions** can be previewed through the API, so the
  front end's builders can show live results.

Endpoints
---------
========  ============================  ====================================
Method    Path                          Purpose
========  ============================  ====================================
GET       ``/api/health``               Liveness and version
GET       ``/api/exports``              Exports, optionally filtered by type
POST      ``/api/export``               Run an export for a media item
GET       ``/api/media/{uid}``          Single media entry
POST      ``/api/template/render``      Render a template preview
POST      ``/api/condition/evaluate``   Evaluate a condition preview
========  ============================  ====================================

Usage
-----
CLI (installed entry point)::

    mediabrew

Direct invocation::

    python -m mediabrew.api.main
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from mediabrew import __version__
from mediabrew.api.media_store import find_media_by_uid, load_media_entries
from mediabrew.api.models import ConditionEvaluateRequest, ExportRequest, TemplateRenderRequest
from mediabrew.conditions import evaluate_condition
from mediabrew.core.config import config
from mediabrew.exports import ExportConfig, ExportError, list_exports, run_export
from mediabrew.templates import extract_placeholders, render_template

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Resolve paths from the global configuration instance.
# ---------------------------------------------------------------------------
STORAGE_DIR: Path = config.storage_dir
DATA_DIR: Path = config.data_dir
EXPORTS_DIR: Path = config.exports_dir
MEDIA_DB: Path = config.media_db
APP_CONFIG_FILE: Path = config.app_config_file


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup and shutdown.

    ``app.state.http_transport`` is the httpx transport used by post
    exports.  ``None`` selects the default network transport.  Tests swap
    in an ``httpx.MockTransport``.
    """
    app.state.http_transport = None
    logger.info(f"Mediabrew API started (storage: {STORAGE_DIR}, data: {DATA_DIR}).")

    yield

    logger.info("Mediabrew API shut down.")


app = FastAPI(
    title="Mediabrew",
    description="Template rendering, condition evaluation and media export API.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _load_json(path: Path, default):
    """Load a JSON file from disk, returning *default* on any failure."""
    if path.exists():
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError):
            return default
    return default


def _load_export_configs() -> list[ExportConfig]:
    """Load the configured exports, skipping invalid definitions."""
    app_config = _load_json(APP_CONFIG_FILE, {})
    raw_exports = app_config.get("exports", []) if isinstance(app_config, dict) else []

    exports: list[ExportConfig] = []
    for raw in raw_exports:
        try:
            exports.append(ExportConfig.model_validate(raw))
        except ValidationError as e:
            logger.warning(f"Skipping invalid export definition: {e}")
    return exports


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@app.get("/api/health")
async def health() -> dict:
    """Return service status and version."""
    return {"status": "ok", "version": __version__}


@app.get("/api/exports")
async def get_exports(type: str | None = None) -> list[dict]:
    """List configured exports.

    Args:
        type: Optional media type (``image``, ``audio``, ``video``).  Only
            exports supporting it are returned.

    Returns:
        List of ``{id, name, types}`` dictionaries.
    """
    return [summary.model_dump() for summary in list_exports(_load_export_configs(), type)]


@app.post("/api/export")
async def export_media(req: ExportRequest) -> dict:
    """Run a configured export for a stored media item.

    Args:
        req: Validated :class:`ExportRequest` payload.

    Returns:
        Dictionary with ``success`` and, depending on the export type,
        ``path`` or ``response``.

    Raises:
        HTTPException: 400 for a missing field or unknown export type, 404
            for an unknown export or media item, 500 if delivery fails.
    """
    if not req.export_id:
        raise HTTPException(status_code=400, detail="Missing required field: exportId")
    if req.media_id is None:
        raise HTTPException(status_code=400, detail="Missing required field: mediaId")

    export = next((e for e in _load_export_configs() if e.id == req.export_id), None)
    if export is None:
        raise HTTPException(
            status_code=404,
            detail=f"Export configuration not found: {req.export_id}",
        )

    media = find_media_by_uid(load_media_entries(MEDIA_DB), req.media_id)
    if media is None:
        raise HTTPException(status_code=404, detail=f"Media not found with id: {req.media_id}")

    logger.info(f"Export request: exportId={req.export_id!r}, mediaId={req.media_id}")

    try:
        result = run_export(
            export,
            media,
            STORAGE_DIR,
            base_dir=EXPORTS_DIR,
            timeout=config.export_timeout,
            transport=app.state.http_transport,
        )
    except ExportError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    if not result.success:
        logger.error(f"Export failed: {req.export_id}: {result.error}")
        raise HTTPException(status_code=500, detail=result.error or "Export failed")

    logger.info(f"Export successful: {req.export_id}")
    return result.model_dump(exclude_none=True)


@app.get("/api/media/{uid}")
async def get_media(uid: int) -> dict:
    """Return a single media entry by uid.

    Raises:
        HTTPException: 404 if the media item is not found.
    """
    media = find_media_by_uid(load_media_entries(MEDIA_DB), uid)
    if media is None:
        raise HTTPException(status_code=404, detail="Media not found")
    return media


@app.post("/api/template/render")
async def render_template_preview(req: TemplateRenderRequest) -> dict:
    """Render a template against sample data.

    Returns:
        Dictionary with the rendered ``result`` and the template's
        ``placeholders`` as ``{path, pipes}`` dictionaries.
    """
    placeholders = [
        {"path": placeholder.path, "pipes": list(placeholder.pipes)}
        for placeholder in extract_placeholders(req.template)
    ]
    return {"result": render_template(req.template, req.data), "placeholders": placeholders}


@app.post("/api/condition/evaluate")
async def evaluate_condition_preview(req: ConditionEvaluateRequest) -> dict:
    """Evaluate a condition tree against named data sources.

    Malformed conditions evaluate to ``false``.
    """
    return {"result": evaluate_condition(req.condition, req.data)}


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host, port and log level from :data:`~mediabrew.core.config.config`
    (``MEDIABREW_SERVER_HOST``, ``MEDIABREW_SERVER_PORT`` and
    ``MEDIABREW_LOG_LEVEL``).

    This function is registered as the ``mediabrew`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        "mediabrew.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
