"""Pydantic models for export configuration and results.

Export definitions live in the ``exports`` list of ``config.json`` and use
the front end's camelCase keys:

    {
        "id": "share-folder",
        "name": "Copy to share",
        "types": ["image"],
        "exportType": "save",
        "folderTemplate": "/mnt/share/{{workflow|lowercase}}",
        "filenameTemplate": "{{name|split-by-spaces|kebabcase}}_{{seed}}"
    }
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from mediabrew.tasks.models import TaskConfig


class ExportConfig(BaseModel):
    """One configured export destination.

    Attributes:
        id: Unique identifier referenced by ``POST /api/export``.
        name: Label shown in the export menu.
        types: Media types (``image``, ``audio``, ``video``) this export offers.
        export_type: ``"save"`` (folder copy) or ``"post"`` (HTTP upload).
        folder_template: Destination folder template (save exports).
        filename_template: Base filename template (extension is appended).
        endpoint: Target URL (post exports).
        prepare_data_tasks: Tasks shaping the payload before a post.
        send_properties: Whitelist of payload fields to send.  ``None`` sends
            everything.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., description="Export identifier.")
    name: str = Field(default="", description="Display name.")
    types: list[str] = Field(default_factory=list, description="Supported media types.")
    export_type: str = Field(..., alias="exportType", description="'save' or 'post'.")
    folder_template: str = Field(
        default="",
        alias="folderTemplate",
        description="Destination folder template (save exports).",
    )
    filename_template: str = Field(
        default="",
        alias="filenameTemplate",
        description="Filename template without extension.",
    )
    endpoint: str | None = Field(default=None, description="Target URL (post exports).")
    prepare_data_tasks: list[TaskConfig] = Field(
        default_factory=list,
        alias="prepareDataTasks",
        description="Payload preparation tasks (post exports).",
    )
    send_properties: list[str] | None = Field(
        default=None,
        alias="sendProperties",
        description="Payload field whitelist (post exports).",
    )


class ExportSummary(BaseModel):
    """Public view of an export returned by ``GET /api/exports``."""

    id: str
    name: str
    types: list[str]


class ExportResult(BaseModel):
    """Outcome of delivering one media item.

    Attributes:
        success: Whether the export completed (2xx for posts).
        path: Destination file path (save exports).
        response: Parsed JSON or raw text response body (post exports).
        status_code: HTTP status code (post exports).
        error: Failure message when ``success`` is ``False``.
    """

    success: bool
    path: str | None = None
    response: Any = None
    status_code: int | None = None
    error: str | None = None
