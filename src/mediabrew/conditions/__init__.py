"""AND/OR condition trees that gate workflow tasks."""

from .builder import build_condition, make_leaf
from .evaluator import evaluate_condition
from .nodes import AndNode, ConditionNode, ConditionParseError, LeafNode, MalformedNode, OrNode
from .parser import dump_condition, parse_condition

__all__ = [
    "AndNode",
    "ConditionNode",
    "ConditionParseError",
    "LeafNode",
    "MalformedNode",
    "OrNode",
    "build_condition",
    "dump_condition",
    "evaluate_condition",
    "make_leaf",
    "parse_condition",
]
