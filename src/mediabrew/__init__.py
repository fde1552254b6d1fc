"""Mediabrew - template, condition and export toolkit for media generation."""

__version__ = "0.1.0"

from mediabrew.conditions import evaluate_condition
from mediabrew.templates import render_template

__all__ = [
    "__version__",
    "evaluate_condition",
    "render_template",
]
