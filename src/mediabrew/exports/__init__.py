"""Export delivery: folder copies and HTTP uploads of stored media."""

from .models import ExportConfig, ExportResult, ExportSummary
from .service import (
    ExportError,
    get_media_extension,
    handle_post_export,
    handle_save_export,
    list_exports,
    prepare_post_payload,
    resolve_media_path,
    run_export,
)
from .transport import ExportFile, send_export_request

__all__ = [
    "ExportConfig",
    "ExportError",
    "ExportFile",
    "ExportResult",
    "ExportSummary",
    "get_media_extension",
    "handle_post_export",
    "handle_save_export",
    "list_exports",
    "prepare_post_payload",
    "resolve_media_path",
    "run_export",
    "send_export_request",
]
