"""Condition tree node types.

Persisted conditions are plain JSON.  A node is an ``and`` group, an ``or``
group, or a leaf comparison:

    {"and": [
        {"where": {"data": "imageFormat"}, "equals": {"value": "png"}},
        {"or": [
            {"where": {"data": "seed"}, "equals": {"value": 42}},
            {"where": {"data": "inpaint"}, "isNot": {"value": true}}
        ]}
    ]}

:func:`mediabrew.conditions.parser.parse_condition` turns that JSON into
these frozen dataclasses once, so evaluation can dispatch on type instead of
probing dict keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


class ConditionParseError(ValueError):
    """Raised when persisted condition JSON does not have a valid shape."""


@dataclass(frozen=True)
class AndNode:
    """True iff every child is true.  With no children it is true."""

    children: tuple[ConditionNode, ...] = ()


@dataclass(frozen=True)
class OrNode:
    """True iff at least one child is true.  With no children it is false."""

    children: tuple[ConditionNode, ...] = ()


@dataclass(frozen=True)
class LeafNode:
    """Compare one field of a named data source against a literal.

    Attributes:
        source: Top-level key of the data context (e.g. ``"data"``).
        field_path: Dot-separated path inside that source.
        expected: Literal the resolved value must strictly equal.
        negated: ``True`` for ``isNot`` leaves, which match on inequality.
    """

    source: str
    field_path: str
    expected: Any = None
    negated: bool = False


@dataclass(frozen=True)
class MalformedNode:
    """Placeholder for JSON that failed validation during lenient parsing.

    Always evaluates to ``False``, so a broken condition skips its task.
    """

    reason: str


ConditionNode = Union[AndNode, OrNode, LeafNode, MalformedNode]
