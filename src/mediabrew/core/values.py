"""Value helpers shared by the template engine and the condition evaluator.

Media metadata arrives as loosely-typed JSON, originally produced by a
browser front end.  The helpers in this module give that data one consistent
set of rules:

- :func:`resolve_path` walks a dotted path through nested mappings, lists and
  objects without ever raising.
- :func:`to_text` renders a value the way the front end displays it, so
  ``True`` becomes ``"true"`` and ``42.0`` becomes ``"42"``.
- :func:`strict_equals` compares values with the front end's strict-equality
  rules.  Booleans never equal numbers, and ``5`` equals ``5.0``.
- :func:`coerce_to_comparable` turns free text typed into the condition
  builder into a boolean, a number or a string.

A path that cannot be resolved yields the :data:`MISSING` sentinel rather
than ``None``.  This keeps "no such field" apart from "field explicitly set
to null".
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

# Plain decimal literals only: no hex, no underscores, no "Infinity".
_NUMBER_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INTEGER_PATTERN = re.compile(r"[+-]?\d+")


class _Missing:
    """Sentinel type for a path that does not resolve to a value."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def resolve_path(obj: Any, dot_path: str) -> Any:
    """Resolve a dot-separated path against a nested value.

    Each segment indexes into the current value.  Mappings are looked up by
    key, lists and tuples by a non-negative integer segment, and other
    objects by public attribute.  Resolution stops at the first missing key
    or ``None`` intermediate.

    Args:
        obj: Root value to navigate (usually a metadata dict).
        dot_path: Path such as ``"workflow.name"`` or ``"tags.0"``.

    Returns:
        The resolved value, or :data:`MISSING` if any segment is absent.
        A present ``None`` leaf is returned as ``None``.
    """
    if obj is None or not isinstance(dot_path, str):
        return MISSING

    current = obj
    for key in dot_path.split("."):
        if current is None:
            return MISSING

        if isinstance(current, Mapping):
            if key not in current:
                return MISSING
            current = current[key]
        elif isinstance(current, (list, tuple)):
            if not _INTEGER_PATTERN.fullmatch(key) or key.startswith(("+", "-")):
                return MISSING
            index = int(key)
            if index >= len(current):
                return MISSING
            current = current[index]
        elif isinstance(current, (str, int, float, bool)):
            return MISSING
        else:
            if not key or key.startswith("_"):
                return MISSING
            current = getattr(current, key, MISSING)
            if current is MISSING:
                return MISSING

    return current


def to_text(value: Any) -> str:
    """Render a value as text, matching the front end's default string form.

    Args:
        value: Any JSON-like value.

    Returns:
        ``""`` for ``None`` or :data:`MISSING`, ``"true"``/``"false"`` for
        booleans, integral floats without a trailing ``.0``, comma-joined
        lists, and compact JSON for mappings.
    """
    if value is None or value is MISSING:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return _float_text(value)
    if isinstance(value, (list, tuple)):
        return ",".join(to_text(item) for item in value)
    if isinstance(value, Mapping):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)
    return str(value)


def _float_text(value: float) -> str:
    # Exponent form only below 1e-6 or from 1e21 up, with no zero padding.
    text = repr(value)
    if "e" not in text:
        return text
    mantissa, exponent = text.split("e")
    power = int(exponent)
    if -7 < power < 21:
        return format(Decimal(text), "f")
    return f"{mantissa}e{'+' if power > 0 else '-'}{abs(power)}"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def strict_equals(left: Any, right: Any) -> bool:
    """Compare two values with strict-equality semantics.

    The rules are the front end's ``===``, so the result is the same whether
    a condition is checked in the browser or on the server:

    - :data:`MISSING` only equals :data:`MISSING`
    - booleans only equal booleans (``True`` is not ``1``)
    - numbers compare numerically (``5 == 5.0``; ``NaN`` equals nothing)
    - strings compare exactly, with no trimming or case folding
    - ``None`` only equals ``None``
    - containers compare by identity

    Args:
        left: Resolved value from the data context.
        right: Expected literal from the condition.

    Returns:
        ``True`` if the values are strictly equal.
    """
    if left is MISSING or right is MISSING:
        return left is right
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if _is_number(left) and _is_number(right):
        return left == right
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    return left is right


def coerce_to_comparable(raw: Any) -> bool | int | float | str:
    """Convert free-text condition input into a typed comparison value.

    Used at condition-authoring time.  The exact strings ``"true"`` and
    ``"false"`` become booleans.  A string whose trimmed form is a decimal
    number becomes an ``int`` or a ``float``.  Anything else is returned
    unchanged, including blank strings.

    Args:
        raw: Text as typed into the condition builder.  Values that are
            not strings pass through untouched.

    Returns:
        The coerced value.

    Examples:
        >>> coerce_to_comparable("true")
        True
        >>> coerce_to_comparable(" 42 ")
        42
        >>> coerce_to_comparable("1.5")
        1.5
        >>> coerce_to_comparable("portrait")
        'portrait'
    """
    if not isinstance(raw, str):
        return raw
    if raw == "true":
        return True
    if raw == "false":
        return False

    stripped = raw.strip()
    if not stripped:
        return raw
    if _INTEGER_PATTERN.fullmatch(stripped):
        return int(stripped)
    if _NUMBER_PATTERN.fullmatch(stripped):
        return float(stripped)
    return raw
