"""Template parsing utilities."""

import re
from dataclasses import dataclass

# Body is everything between "{{" and the next "}}"; braces are not balanced.
PLACEHOLDER_PATTERN = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)


@dataclass(frozen=True)
class Placeholder:
    """A parsed ``{{path|pipe|pipe}}`` placeholder.

    Attributes:
        path: Dot-separated lookup path (may be empty).
        pipes: Pipe names in application order.
    """

    path: str
    pipes: tuple[str, ...] = ()


def parse_placeholder(body: str) -> Placeholder:
    """Split a placeholder body into its path and pipe chain.

    Args:
        body: Text between ``{{`` and ``}}``.

    Returns:
        Placeholder with whitespace-trimmed path and pipe names.
    """
    parts = [part.strip() for part in body.split("|")]
    return Placeholder(path=parts[0], pipes=tuple(parts[1:]))


def has_placeholders(text: str) -> bool:
    """Check if text contains any ``{{ }}`` placeholders.

    Args:
        text: Text to check

    Returns:
        True if at least one placeholder is found
    """
    return bool(PLACEHOLDER_PATTERN.search(text))


def extract_placeholders(text: str) -> list[Placeholder]:
    """Extract every placeholder in a template, in order of appearance.

    Args:
        text: Template text.  Non-string input yields an empty list.

    Returns:
        List of parsed placeholders.
    """
    if not isinstance(text, str):
        return []
    return [parse_placeholder(match.group(1)) for match in PLACEHOLDER_PATTERN.finditer(text)]
