"""HTTP delivery for post exports.

Sends the prepared payload as multipart form data with a sync httpx client.
Transport failures never raise.  They come back as an unsuccessful
:class:`~mediabrew.exports.models.ExportResult`, so the route handler can
report them.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx

from mediabrew.core.values import to_text

from .models import ExportResult

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


@dataclass
class ExportFile:
    """A media file attached to a post export.

    Attributes:
        field_name: Form field the file is uploaded under.
        path: Local file to upload.
        filename: Filename announced to the endpoint.
    """

    field_name: str
    path: Path
    filename: str | None = None


def encode_form_value(value: Any) -> str:
    """Encode a payload value as a form field string.

    Objects, lists and ``None`` are sent as JSON.  Everything else uses its
    plain text form.
    """
    if value is None or isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, ensure_ascii=False)
    return to_text(value)


def send_export_request(
    endpoint: str,
    data: Mapping[str, Any],
    files: Sequence[ExportFile] = (),
    *,
    timeout: float = DEFAULT_TIMEOUT,
    transport: httpx.BaseTransport | None = None,
) -> ExportResult:
    """POST a payload and its files to an export endpoint.

    Args:
        endpoint: Absolute http(s) URL.
        data: Payload fields.  Fields that carry a file are not sent twice.
        files: Files to upload.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport (tests use ``httpx.MockTransport``).

    Returns:
        :class:`ExportResult`.  ``success`` reflects a 2xx status.
        ``response`` holds the JSON body, or the raw text if the body is
        not JSON.
    """
    try:
        uploads = {
            file.field_name: (
                file.filename or file.path.name,
                file.path.read_bytes(),
                "application/octet-stream",
            )
            for file in files
        }
        # Plain fields are filename-less parts, so the body is multipart even without a file.
        parts = [
            (key, uploads.pop(key) if key in uploads else (None, encode_form_value(value)))
            for key, value in data.items()
        ]
        parts.extend(uploads.items())
        with httpx.Client(timeout=timeout, transport=transport) as client:
            resp = client.post(endpoint, files=parts)
    except (httpx.HTTPError, httpx.InvalidURL, OSError) as e:
        logger.error(f"Export request to {endpoint} failed: {e}")
        return ExportResult(success=False, error=str(e))

    try:
        body: Any = resp.json()
    except ValueError:
        body = resp.text

    success = 200 <= resp.status_code < 300
    if not success:
        logger.warning(f"Export endpoint {endpoint} returned {resp.status_code}")
    return ExportResult(
        success=success,
        response=body,
        status_code=resp.status_code,
        error=None if success else f"Endpoint returned status {resp.status_code}",
    )
