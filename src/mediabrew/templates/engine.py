"""Template rendering.

Fills ``{{path|pipe|pipe}}`` placeholders from a media item's metadata.
Export filenames and folders are computed this way, and so are template
tasks in workflow pipelines.

Rendering is total.  A missing field renders as an empty string, an unknown
pipe is skipped, and an unmatched ``{{`` stays as literal text.
"""

from typing import Any

from mediabrew.core.values import MISSING, resolve_path, to_text

from .parser import PLACEHOLDER_PATTERN, Placeholder, parse_placeholder
from .pipes import apply_pipe


def evaluate_placeholder(placeholder: Placeholder, data: Any) -> str:
    """Resolve one placeholder against a data context.

    Args:
        placeholder: Parsed placeholder.
        data: Data context (usually a media metadata dict).

    Returns:
        Final substituted text.
    """
    value = resolve_path(data, placeholder.path) if placeholder.path else MISSING

    if value is MISSING or value is None:
        value = ""
    elif isinstance(value, tuple):
        value = list(value)
    elif not isinstance(value, (str, list)):
        value = to_text(value)

    for pipe_name in placeholder.pipes:
        value = apply_pipe(value, pipe_name)

    # Lists left over after the pipe chain are concatenated with no separator
    if isinstance(value, list):
        return "".join(to_text(item) for item in value)
    return to_text(value)


def render_template(template: Any, data: Any) -> Any:
    """Substitute every placeholder in a template string.

    Args:
        template: Template such as ``"{{workflow|lowercase}}_{{seed}}"``.
            Anything other than a non-empty string is returned as-is.
        data: Data context the placeholder paths are resolved against.

    Returns:
        The rendered string.  Text outside placeholders is kept verbatim.

    Examples:
        >>> render_template("{{a.b}}", {"a": {"b": "x"}})
        'x'
        >>> render_template("{{tags|camelcase}}", {"tags": ["Hello", "World"]})
        'helloWorld'
    """
    if not isinstance(template, str) or not template:
        return template

    return PLACEHOLDER_PATTERN.sub(
        lambda match: evaluate_placeholder(parse_placeholder(match.group(1)), data),
        template,
    )
