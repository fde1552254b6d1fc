"""Template pipe implementations.

A pipe transforms the value of a placeholder, either a string or a list of
strings.  Every pipe is total.  An input shape it does not handle is returned
unchanged, so a chain such as ``{{prompt|snakecase}}`` on a plain string
simply yields the string.

Joining pipes (``snakecase``, ``kebabcase``, ``camelcase``, ``titlecase``,
``join-by-spaces``) turn a list into a string.  Joining does not change case
unless the pipe's name says so: ``snakecase`` on ``["Hello", "World"]`` is
``"Hello_World"``.
"""

import logging
from collections.abc import Callable
from typing import Any

from mediabrew.core.values import to_text

logger = logging.getLogger(__name__)

Pipe = Callable[[Any], Any]


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:].lower()


def pipe_split_by_spaces(value: Any) -> Any:
    """Split a string on runs of whitespace, dropping empty pieces."""
    if isinstance(value, str):
        return value.split()
    return value


def pipe_snakecase(value: Any) -> Any:
    """Join a list with underscores."""
    if isinstance(value, list):
        return "_".join(to_text(item) for item in value)
    return value


def pipe_kebabcase(value: Any) -> Any:
    """Join a list with hyphens."""
    if isinstance(value, list):
        return "-".join(to_text(item) for item in value)
    return value


def pipe_camelcase(value: Any) -> Any:
    """Join a list as camelCase.

    The first element is lowercased.  Each later element is capitalized and
    the rest of its letters lowercased.
    """
    if isinstance(value, list):
        return "".join(
            to_text(item).lower() if index == 0 else _capitalize(to_text(item))
            for index, item in enumerate(value)
        )
    return value


def pipe_titlecase(value: Any) -> Any:
    """Join a list as space-separated Title Case words."""
    if isinstance(value, list):
        return " ".join(_capitalize(to_text(item)) for item in value)
    return value


def pipe_join_by_spaces(value: Any) -> Any:
    """Join a list with single spaces."""
    if isinstance(value, list):
        return " ".join(to_text(item) for item in value)
    return value


def pipe_lowercase(value: Any) -> Any:
    """Lowercase a string, or each string element of a list."""
    if isinstance(value, list):
        return [item.lower() if isinstance(item, str) else item for item in value]
    if isinstance(value, str):
        return value.lower()
    return value


def pipe_uppercase(value: Any) -> Any:
    """Uppercase a string, or each string element of a list."""
    if isinstance(value, list):
        return [item.upper() if isinstance(item, str) else item for item in value]
    if isinstance(value, str):
        return value.upper()
    return value


# Registry of available pipes
PIPES: dict[str, Pipe] = {
    "split-by-spaces": pipe_split_by_spaces,
    "snakecase": pipe_snakecase,
    "camelcase": pipe_camelcase,
    "kebabcase": pipe_kebabcase,
    "titlecase": pipe_titlecase,
    "join-by-spaces": pipe_join_by_spaces,
    "lowercase": pipe_lowercase,
    "uppercase": pipe_uppercase,
}


def register_pipe(name: str, pipe: Pipe) -> None:
    """Register (or replace) a named pipe.

    Args:
        name: Identifier used after ``|`` in a placeholder.
        pipe: Callable taking and returning a string-or-list value.
    """
    PIPES[name] = pipe
    logger.debug(f"Registered template pipe: {name}")


def apply_pipe(value: Any, pipe_name: str) -> Any:
    """Apply a single named pipe to a value.

    Unknown pipe names leave the value unchanged and log a warning.  A
    registered pipe that raises is treated the same way, so rendering never
    fails because of a pipe.

    Args:
        value: Current string or list value.
        pipe_name: Name of the pipe to apply.

    Returns:
        The transformed value.
    """
    pipe = PIPES.get(pipe_name)
    if pipe is None:
        logger.warning(f"Unknown pipe: {pipe_name}")
        return value

    try:
        return pipe(value)
    except Exception as e:
        logger.warning(f"Pipe '{pipe_name}' failed, passing value through: {e}")
        return value
