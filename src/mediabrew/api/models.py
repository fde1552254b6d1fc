"""Pydantic request models for the Mediabrew API.

Models
------
ExportRequest
    Payload for ``POST /api/export``.  Uses the front end's camelCase keys.
TemplateRenderRequest
    Payload for ``POST /api/template/render``.
ConditionEvaluateRequest
    Payload for ``POST /api/condition/evaluate``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ExportRequest(BaseModel):
    """Request body for the ``POST /api/export`` endpoint.

    Both fields are optional at the schema level so that the route can answer
    a missing field with a plain 400 instead of a validation error.

    Attributes:
        export_id: Identifier of a configured export (JSON key ``exportId``).
        media_id: ``uid`` of the stored media item (JSON key ``mediaId``).
    """

    model_config = ConfigDict(populate_by_name=True)

    export_id: str | None = Field(
        default=None,
        alias="exportId",
        description="Configured export identifier.",
    )
    media_id: int | None = Field(
        default=None,
        alias="mediaId",
        description="Media item uid.",
    )


class TemplateRenderRequest(BaseModel):
    """Request body for ``POST /api/template/render``.

    Attributes:
        template: Template text with ``{{path|pipe}}`` placeholders.
        data: Data context the placeholders resolve against.
    """

    template: str = Field(..., description="Template to render.")
    data: dict[str, Any] = Field(default_factory=dict, description="Template data context.")


class ConditionEvaluateRequest(BaseModel):
    """Request body for ``POST /api/condition/evaluate``.

    Attributes:
        condition: Persisted AND/OR condition JSON, or ``None``.
        data: Mapping of source name to data object.
    """

    condition: Any = Field(default=None, description="Condition tree JSON.")
    data: dict[str, Any] = Field(default_factory=dict, description="Named data sources.")
