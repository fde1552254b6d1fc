"""Template engine for export filenames and template tasks."""

from .engine import evaluate_placeholder, render_template
from .parser import Placeholder, extract_placeholders, has_placeholders, parse_placeholder
from .pipes import PIPES, apply_pipe, register_pipe

__all__ = [
    "PIPES",
    "Placeholder",
    "apply_pipe",
    "evaluate_placeholder",
    "extract_placeholders",
    "has_placeholders",
    "parse_placeholder",
    "register_pipe",
    "render_template",
]
