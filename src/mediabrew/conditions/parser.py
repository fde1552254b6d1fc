"""Parse persisted condition JSON into node objects, and dump it back."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .nodes import AndNode, ConditionNode, ConditionParseError, LeafNode, MalformedNode, OrNode

GROUP_KEYS = ("and", "or")
CHECK_KEYS = ("equals", "isNot")
NODE_TYPES = (AndNode, OrNode, LeafNode, MalformedNode)


def parse_condition(raw: Any, *, strict: bool = True) -> ConditionNode | None:
    """Parse a persisted condition into a node tree.

    A bare leaf at the top level, with no ``and``/``or`` wrapper, is
    normalized to ``{"and": [leaf]}``.  This matches how the condition
    builder reloads older configs.

    Args:
        raw: Condition JSON, an already-parsed node, or ``None``.
        strict: If ``True``, a malformed node raises
            :class:`ConditionParseError`.  If ``False``, it becomes a
            :class:`MalformedNode`, which evaluates to ``False``, and the
            rest of the tree is kept.

    Returns:
        The root node, or ``None`` if there is no condition.

    Raises:
        ConditionParseError: On a malformed shape (strict mode only).
    """
    if raw is None:
        return None
    if isinstance(raw, NODE_TYPES):
        return raw

    node = _parse_node(raw, strict=strict, location="condition")
    if isinstance(node, LeafNode):
        return AndNode(children=(node,))
    return node


def _fail(reason: str, *, strict: bool) -> MalformedNode:
    if strict:
        raise ConditionParseError(reason)
    return MalformedNode(reason=reason)


def _parse_node(raw: Any, *, strict: bool, location: str) -> ConditionNode:
    if isinstance(raw, NODE_TYPES):
        return raw
    if not isinstance(raw, Mapping):
        return _fail(f"{location}: expected an object, got {type(raw).__name__}", strict=strict)

    groups = [key for key in GROUP_KEYS if key in raw]
    if len(groups) > 1:
        return _fail(f"{location}: cannot combine 'and' and 'or' in one node", strict=strict)

    if groups:
        key = groups[0]
        children_raw = raw[key]
        if not isinstance(children_raw, (list, tuple)):
            return _fail(f"{location}.{key}: expected a list", strict=strict)
        children = tuple(
            _parse_node(child, strict=strict, location=f"{location}.{key}[{index}]")
            for index, child in enumerate(children_raw)
        )
        return AndNode(children=children) if key == "and" else OrNode(children=children)

    return _parse_leaf(raw, strict=strict, location=location)


def _parse_leaf(raw: Mapping, *, strict: bool, location: str) -> ConditionNode:
    where = raw.get("where")
    if not isinstance(where, Mapping) or len(where) != 1:
        return _fail(f"{location}: 'where' must be an object with exactly one key", strict=strict)

    ((source, field_path),) = where.items()
    if not isinstance(source, str) or not isinstance(field_path, str):
        return _fail(f"{location}: 'where' must map a source name to a field path", strict=strict)

    checks = [key for key in CHECK_KEYS if key in raw]
    if len(checks) != 1:
        return _fail(f"{location}: expected exactly one of 'equals' or 'isNot'", strict=strict)

    check = raw[checks[0]]
    if not isinstance(check, Mapping) or "value" not in check:
        return _fail(f"{location}.{checks[0]}: expected an object with a 'value' key", strict=strict)

    return LeafNode(
        source=source,
        field_path=field_path,
        expected=check["value"],
        negated=checks[0] == "isNot",
    )


def dump_condition(node: ConditionNode | None) -> dict[str, Any] | None:
    """Serialize a node tree back to its persisted JSON shape.

    Args:
        node: Root node or ``None``.

    Returns:
        JSON-compatible dict, or ``None``.

    Raises:
        ConditionParseError: If the tree contains a :class:`MalformedNode`.
    """
    if node is None:
        return None
    if isinstance(node, AndNode):
        return {"and": [dump_condition(child) for child in node.children]}
    if isinstance(node, OrNode):
        return {"or": [dump_condition(child) for child in node.children]}
    if isinstance(node, LeafNode):
        check = "isNot" if node.negated else "equals"
        return {"where": {node.source: node.field_path}, check: {"value": node.expected}}
    raise ConditionParseError(f"Cannot serialize malformed condition: {node.reason}")
