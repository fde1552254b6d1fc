"""Export delivery for stored media items.

Two export types are supported:

- **save**: copy the media file into a folder.  Both the folder and the
  filename are rendered from templates over the item's metadata.
- **post**: shape the metadata with preparation tasks, attach the media
  file, and upload the result to an HTTP endpoint as multipart form data.

Expected failures come back as an unsuccessful
:class:`~mediabrew.exports.models.ExportResult` rather than an exception:
a missing source file, a file-system error, or an unreachable endpoint.  An
unknown export type is a configuration error and raises
:class:`ExportError`.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterable
from pathlib import Path, PurePosixPath
from typing import Any

import httpx

from mediabrew.conditions import evaluate_condition
from mediabrew.templates import has_placeholders, render_template
from mediabrew.tasks.pipeline import condition_sources

from .models import ExportConfig, ExportResult, ExportSummary
from .transport import DEFAULT_TIMEOUT, ExportFile, send_export_request

logger = logging.getLogger(__name__)

MEDIA_URL_PREFIX = "/media/"

# prepareDataTasks "from" values that attach the media file itself
MEDIA_FILE_REFERENCES = ("image_0", "audio_0")
FILE_PLACEHOLDER = "[FILE]"


class ExportError(Exception):
    """Raised for export configuration errors (e.g. unknown export type)."""


def resolve_media_path(media: dict[str, Any], storage_dir: Path) -> Path | None:
    """Resolve the on-disk file behind a media item's URL.

    Args:
        media: Media metadata with ``imageUrl`` or ``audioUrl``.
        storage_dir: Directory served under ``/media/``.

    Returns:
        Absolute media path, or ``None`` if the item has no media URL.
    """
    media_url = media.get("imageUrl") or media.get("audioUrl")
    if not media_url:
        return None

    filename = str(media_url)
    if filename.startswith(MEDIA_URL_PREFIX):
        filename = filename[len(MEDIA_URL_PREFIX) :]
    return storage_dir / filename


def get_media_extension(media: dict[str, Any]) -> str:
    """Pick the file extension (with leading dot) for a media item.

    Explicit ``imageFormat``/``audioFormat`` wins.  If neither is set, the
    URL suffix is used, and ``.png`` is the default.
    """
    if media.get("imageFormat"):
        return f".{media['imageFormat']}"
    if media.get("audioFormat"):
        return f".{media['audioFormat']}"

    media_url = media.get("imageUrl") or media.get("audioUrl")
    if media_url:
        suffix = PurePosixPath(str(media_url)).suffix
        if suffix:
            return suffix

    return ".png"


def list_exports(exports: Iterable[ExportConfig], media_type: str | None = None) -> list[ExportSummary]:
    """Summarize exports for the client, optionally filtered by media type."""
    return [
        ExportSummary(id=export.id, name=export.name, types=export.types)
        for export in exports
        if not media_type or media_type in export.types
    ]


def _render_name(template: str, media: dict[str, Any]) -> str:
    """Render a folder or filename template.  Literal names are used as-is."""
    if not has_placeholders(template):
        return template
    return render_template(template, media)


def handle_save_export(
    export: ExportConfig,
    media: dict[str, Any],
    storage_dir: Path,
    base_dir: Path | None = None,
) -> ExportResult:
    """Copy a media file into a templated folder under a templated filename.

    Args:
        export: Save export configuration.
        media: Media metadata (template data context).
        storage_dir: Directory holding the source media.
        base_dir: Directory relative destination folders resolve against.

    Returns:
        :class:`ExportResult` with the destination ``path`` on success.
    """
    source_path = resolve_media_path(media, storage_dir)
    if source_path is None or not source_path.exists():
        return ExportResult(success=False, error="Source file not found")

    dest_folder = Path(_render_name(export.folder_template, media))
    if base_dir is not None and not dest_folder.is_absolute():
        dest_folder = base_dir / dest_folder

    filename = _render_name(export.filename_template, media) + get_media_extension(media)
    dest_path = dest_folder / filename

    try:
        dest_folder.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source_path, dest_path)
    except OSError as e:
        logger.error(f"Error in save export '{export.id}': {e}", exc_info=True)
        return ExportResult(success=False, error=str(e))

    logger.info(f"Export saved: {dest_path}")
    return ExportResult(success=True, path=str(dest_path))


def prepare_post_payload(
    export: ExportConfig,
    media: dict[str, Any],
    storage_dir: Path,
) -> tuple[dict[str, Any], list[ExportFile]]:
    """Build the payload and file list for a post export.

    Preparation tasks run against a copy of the media data.  A ``from`` of
    ``image_0``/``audio_0`` attaches the media file under the task's ``to``
    field.  Any other ``from`` copies a field, and ``template`` renders a
    template.  The filename is rendered after preparation, so it can use
    prepared fields.  Then the payload is filtered to ``sendProperties``.

    Returns:
        Tuple of ``(payload, files)``.
    """
    payload = dict(media)
    files: list[ExportFile] = []

    for task in export.prepare_data_tasks:
        if task.condition is not None and not evaluate_condition(
            task.condition, condition_sources(payload)
        ):
            logger.info(f"Skipping export preparation task '{task.label}' due to unmet condition")
            continue

        if task.from_ in MEDIA_FILE_REFERENCES:
            source_path = resolve_media_path(media, storage_dir)
            if source_path is not None and source_path.exists():
                files.append(ExportFile(field_name=task.to, path=source_path))
                payload[task.to] = FILE_PLACEHOLDER
        elif task.from_ is not None:
            if task.from_ in payload:
                payload[task.to] = payload[task.from_]
        elif task.template is not None:
            payload[task.to] = render_template(task.template, media)
        elif "value" in task.model_fields_set:
            payload[task.to] = task.value

    filename = render_template(export.filename_template, payload) + get_media_extension(media)
    for file in files:
        file.filename = filename
        payload[file.field_name] = filename

    if export.send_properties is not None:
        payload = {key: payload[key] for key in export.send_properties if key in payload}

    return payload, files


def handle_post_export(
    export: ExportConfig,
    media: dict[str, Any],
    storage_dir: Path,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    transport: httpx.BaseTransport | None = None,
) -> ExportResult:
    """Upload a media item and its prepared metadata to an HTTP endpoint.

    Args:
        export: Post export configuration.
        media: Media metadata.
        storage_dir: Directory holding the source media.
        timeout: HTTP timeout in seconds.
        transport: Optional httpx transport override.

    Returns:
        :class:`ExportResult` from the endpoint.
    """
    if not export.endpoint:
        return ExportResult(success=False, error=f"Export '{export.id}' has no endpoint")

    payload, files = prepare_post_payload(export, media, storage_dir)
    logger.debug(
        f"Export payload for {export.endpoint}: fields={sorted(payload)}, "
        f"files={[file.field_name for file in files]}"
    )

    result = send_export_request(
        export.endpoint, payload, files, timeout=timeout, transport=transport
    )
    if result.success:
        logger.info(f"Export posted to: {export.endpoint}")
    return result


def run_export(
    export: ExportConfig,
    media: dict[str, Any],
    storage_dir: Path,
    *,
    base_dir: Path | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    transport: httpx.BaseTransport | None = None,
) -> ExportResult:
    """Dispatch an export by its ``exportType``.

    Raises:
        ExportError: If the export type is not ``save`` or ``post``.
    """
    if export.export_type == "save":
        return handle_save_export(export, media, storage_dir, base_dir=base_dir)
    if export.export_type == "post":
        return handle_post_export(
            export, media, storage_dir, timeout=timeout, transport=transport
        )
    raise ExportError(f"Unknown export type: {export.export_type}")
