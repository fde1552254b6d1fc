"""Condition evaluation.

Decides whether a task runs for a media item.  Evaluation is stateless and
never raises.  A missing condition means "always run", and a malformed one
fails closed.
"""

import logging
from collections.abc import Mapping
from typing import Any

from mediabrew.core.values import MISSING, resolve_path, strict_equals

from .nodes import AndNode, ConditionNode, LeafNode, MalformedNode, OrNode
from .parser import parse_condition

logger = logging.getLogger(__name__)


def evaluate_condition(node: Any, data: Any) -> bool:
    """Evaluate a condition against a data context.

    Args:
        node: A parsed :data:`ConditionNode`, raw persisted condition JSON,
            or ``None``.
        data: Mapping of source name to source object, e.g.
            ``{"data": generation_data}``.

    Returns:
        ``True`` if the condition holds.  A ``None`` condition is ``True``.
        Any failure while parsing or evaluating is logged and gives ``False``.
    """
    try:
        root = parse_condition(node, strict=False)
        if root is None:
            return True
        return _evaluate(root, data)
    except Exception as e:
        logger.warning(f"Condition evaluation failed, treating as false: {e}")
        return False


def _evaluate(node: ConditionNode, data: Any) -> bool:
    if isinstance(node, AndNode):
        return all(_evaluate(child, data) for child in node.children)
    if isinstance(node, OrNode):
        return any(_evaluate(child, data) for child in node.children)
    if isinstance(node, LeafNode):
        return _evaluate_leaf(node, data)
    if isinstance(node, MalformedNode):
        logger.warning(f"Malformed condition evaluates to false: {node.reason}")
    return False


def _evaluate_leaf(node: LeafNode, data: Any) -> bool:
    source = data.get(node.source, MISSING) if isinstance(data, Mapping) else MISSING
    actual = MISSING if source is MISSING else resolve_path(source, node.field_path)

    matched = strict_equals(actual, node.expected)
    return not matched if node.negated else matched
