"""Core building blocks shared across Mediabrew.

- **MediabrewConfig / config**: environment-based settings (Pydantic Settings,
  ``MEDIABREW_`` prefix)
- **values**: path resolution, text rendering, strict equality and
  condition-value coercion shared by the template engine and the condition
  evaluator

The value helpers have no dependencies and import nothing from the rest of
the package.  Importing :mod:`mediabrew.core.config` creates the configured
directories, so that module is only imported by the layers that touch disk.
"""

from mediabrew.core.values import (
    MISSING,
    coerce_to_comparable,
    resolve_path,
    strict_equals,
    to_text,
)

__all__ = [
    "MISSING",
    "coerce_to_comparable",
    "resolve_path",
    "strict_equals",
    "to_text",
]
