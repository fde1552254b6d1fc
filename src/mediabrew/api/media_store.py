"""Media metadata storage helpers for the Mediabrew API.

Stored media items live in a single ``media.json`` file as a list of
metadata dicts.  Each item is identified by an integer ``uid`` and points at
its file through ``imageUrl`` or ``audioUrl`` (``/media/<file>``).

The file may be edited by hand, so loading is forgiving.  If the file is
missing or invalid, the store is empty.  Entries without an integer ``uid``
are dropped, and the cleaned list is written back.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def load_media_entries(media_db: Path) -> list[dict]:
    """Load media metadata, dropping entries that cannot be addressed.

    Args:
        media_db: Path to ``media.json``.

    Returns:
        List of media entry dictionaries in persisted order.
    """
    if not media_db.exists():
        return []

    try:
        with open(media_db, encoding="utf-8") as handle:
            raw_entries = json.load(handle)
    except (OSError, ValueError) as e:
        logger.warning(f"Could not read media store {media_db}: {e}")
        return []

    if not isinstance(raw_entries, list):
        return []

    cleaned_entries = [
        entry
        for entry in raw_entries
        if isinstance(entry, dict)
        and isinstance(entry.get("uid"), int)
        and not isinstance(entry.get("uid"), bool)
    ]

    if cleaned_entries != raw_entries:
        logger.info(f"Dropped {len(raw_entries) - len(cleaned_entries)} invalid media entries")
        save_media_entries(media_db, cleaned_entries)

    return cleaned_entries


def save_media_entries(media_db: Path, entries: list[dict]) -> None:
    """Persist the media metadata list to disk."""
    with open(media_db, "w", encoding="utf-8") as handle:
        json.dump(entries, handle, indent=2)


def find_media_by_uid(entries: list[dict], uid: int) -> dict | None:
    """Return the entry with the given ``uid``, or ``None``."""
    return next((entry for entry in entries if entry.get("uid") == uid), None)
