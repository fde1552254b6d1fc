"""Unit tests for the file-backed media store helpers."""

from __future__ import annotations

import json

from mediabrew.api.media_store import find_media_by_uid, load_media_entries, save_media_entries


def test_load_media_entries_missing_file_returns_empty(temp_dir):
    """A missing media.json behaves like an empty store."""
    assert load_media_entries(temp_dir / "media.json") == []


def test_load_media_entries_invalid_json_returns_empty(temp_dir):
    """Corrupt JSON is treated as an empty store."""
    media_db = temp_dir / "media.json"
    media_db.write_text("{not json", encoding="utf-8")
    assert load_media_entries(media_db) == []


def test_load_media_entries_drops_entries_without_uid(temp_dir):
    """Entries without an integer uid are pruned and the file rewritten."""
    media_db = temp_dir / "media.json"
    entries = [
        {"uid": 1, "name": "keep"},
        {"name": "no uid"},
        {"uid": "2", "name": "string uid"},
        {"uid": True, "name": "bool uid"},
        "not an object",
        {"uid": 3, "name": "keep too"},
    ]
    media_db.write_text(json.dumps(entries), encoding="utf-8")

    loaded = load_media_entries(media_db)

    assert [entry["uid"] for entry in loaded] == [1, 3]
    assert json.loads(media_db.read_text(encoding="utf-8")) == loaded


def test_load_media_entries_leaves_clean_file_untouched(temp_dir):
    """A store with only valid entries is not rewritten."""
    media_db = temp_dir / "media.json"
    media_db.write_text('[{"uid": 1}]', encoding="utf-8")

    assert load_media_entries(media_db) == [{"uid": 1}]
    assert media_db.read_text(encoding="utf-8") == '[{"uid": 1}]'


def test_save_and_find(temp_dir):
    """Saved entries can be reloaded and looked up by uid."""
    media_db = temp_dir / "media.json"
    save_media_entries(media_db, [{"uid": 5, "name": "five"}, {"uid": 6, "name": "six"}])

    entries = load_media_entries(media_db)

    assert find_media_by_uid(entries, 6) == {"uid": 6, "name": "six"}
    assert find_media_by_uid(entries, 7) is None
