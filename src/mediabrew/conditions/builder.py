"""Helpers for authoring conditions.

These produce the same JSON the workflow editor's condition builder
persists.  Free-text values are coerced here, at authoring time.  The
evaluator then compares stored values strictly, without re-parsing them.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from mediabrew.core.values import coerce_to_comparable

from .parser import CHECK_KEYS, GROUP_KEYS


def make_leaf(
    field: str,
    raw_value: Any,
    *,
    source: str = "data",
    check: str = "equals",
) -> dict[str, Any]:
    """Build one leaf condition from builder input.

    Args:
        field: Field path inside ``source``.
        raw_value: Value as typed by the user.  Strings are coerced with
            :func:`~mediabrew.core.values.coerce_to_comparable`.
        source: Data source name.
        check: ``"equals"`` or ``"isNot"``.

    Returns:
        Leaf condition JSON.

    Raises:
        ValueError: If ``check`` is not a supported comparison.
    """
    if check not in CHECK_KEYS:
        raise ValueError(f"Unsupported check type: {check}")
    return {"where": {source: field}, check: {"value": coerce_to_comparable(raw_value)}}


def build_condition(mode: str, items: Iterable[dict[str, Any]]) -> dict[str, Any] | None:
    """Wrap leaf conditions in an ``and``/``or`` group.

    Args:
        mode: ``"and"`` (all of) or ``"or"`` (one of).
        items: Leaf conditions, usually from :func:`make_leaf`.

    Returns:
        Group JSON, or ``None`` if there are no items.  Removing the last
        condition clears the task's condition entirely.

    Raises:
        ValueError: If ``mode`` is not ``"and"`` or ``"or"``.
    """
    if mode not in GROUP_KEYS:
        raise ValueError(f"Unsupported condition mode: {mode}")
    conditions = list(items)
    if not conditions:
        return None
    return {mode: conditions}
