"""Tests for mediabrew.templates — the ``{{path|pipe}}`` template engine.

Tests cover:
- Placeholder parsing and extraction.
- Path resolution and empty output for missing fields.
- Every built-in pipe, including pass-through of unhandled shapes.
- The no-separator join of lists left after the pipe chain.
- Unknown pipe warnings and pipe registration.
"""

from __future__ import annotations

import logging

import pytest

from mediabrew.templates import (
    PIPES,
    Placeholder,
    apply_pipe,
    extract_placeholders,
    has_placeholders,
    parse_placeholder,
    register_pipe,
    render_template,
)


class TestParsePlaceholder:
    """Test placeholder body parsing."""

    def test_path_and_pipes_are_trimmed(self):
        """Segments are split on '|' and stripped."""
        assert parse_placeholder(" name | split-by-spaces |kebabcase ") == Placeholder(
            path="name", pipes=("split-by-spaces", "kebabcase")
        )

    def test_path_only(self):
        """A body without pipes has an empty pipe chain."""
        assert parse_placeholder("a.b") == Placeholder(path="a.b")

    def test_extract_placeholders_in_order(self):
        """All placeholders are returned in order of appearance."""
        found = extract_placeholders("{{workflow|lowercase}}/{{seed}}")
        assert [p.path for p in found] == ["workflow", "seed"]
        assert found[0].pipes == ("lowercase",)

    def test_extract_from_non_string(self):
        """Non-string templates contain no placeholders."""
        assert extract_placeholders(None) == []

    def test_has_placeholders(self):
        """Detects at least one complete placeholder."""
        assert has_placeholders("x {{a}} y")
        assert not has_placeholders("x {{a y")


class TestRenderBasics:
    """Test render_template substitution."""

    @pytest.mark.parametrize(
        "template",
        ["", "plain text", "braces { } and }} alone", "C:\\media\\out.png"],
    )
    def test_text_without_placeholders_is_unchanged(self, template):
        """Templates without placeholders render to themselves."""
        assert render_template(template, {"a": 1}) == template

    def test_nested_path(self):
        """Dotted paths walk nested objects."""
        assert render_template("{{a.b}}", {"a": {"b": "x"}}) == "x"

    def test_missing_paths_render_empty(self):
        """Missing intermediate or leaf keys give an empty string."""
        assert render_template("{{a.b}}", {"a": {}}) == ""
        assert render_template("{{a.b}}", {}) == ""

    def test_null_value_renders_empty(self):
        """An explicit null renders as an empty string."""
        assert render_template("[{{a}}]", {"a": None}) == "[]"

    def test_empty_path_renders_empty(self):
        """'{{}}' resolves to an empty string."""
        assert render_template("a{{}}b", {"": "x"}) == "ab"

    def test_numbers_and_booleans(self):
        """Numeric and boolean leaves render in text form."""
        assert render_template("{{n}}", {"n": 42}) == "42"
        assert render_template("{{flag}}", {"flag": True}) == "true"
        assert render_template("{{ratio}}", {"ratio": 1.5}) == "1.5"

    def test_list_without_pipes_joins_without_separator(self):
        """Lists left after the chain are concatenated."""
        assert render_template("{{tags}}", {"tags": ["a", "b", "c"]}) == "abc"

    def test_surrounding_text_is_kept(self):
        """Text outside placeholders passes through verbatim."""
        data = {"workflow": "Flux", "seed": 7}
        assert render_template("out/{{workflow}}-{{seed}}.png", data) == "out/Flux-7.png"

    def test_unmatched_braces_stay_literal(self):
        """An unterminated placeholder is left as literal text."""
        assert render_template("{{a}} and {{b", {"a": "x"}) == "x and {{b"

    def test_non_string_template_returned_as_is(self):
        """Anything that is not a string is returned unchanged."""
        assert render_template(None, {}) is None
        assert render_template(5, {}) == 5

    def test_data_is_not_mutated(self):
        """Rendering never changes the data context."""
        data = {"tags": ["Hello", "World"]}
        render_template("{{tags|lowercase|snakecase}}", data)
        assert data == {"tags": ["Hello", "World"]}


class TestPipes:
    """Test each built-in pipe through render_template."""

    def test_snakecase_keeps_case(self):
        """snakecase joins raw elements with underscores."""
        assert render_template("{{tags|snakecase}}", {"tags": ["Hello", "World"]}) == "Hello_World"

    def test_camelcase(self):
        """First element lowercased, the rest capitalized."""
        assert render_template("{{tags|camelcase}}", {"tags": ["Hello", "World"]}) == "helloWorld"
        assert render_template("{{tags|camelcase}}", {"tags": ["MY", "bIG", "day"]}) == "myBigDay"

    def test_titlecase(self):
        """Elements capitalized and joined by spaces."""
        assert render_template("{{tags|titlecase}}", {"tags": ["hello", "world"]}) == "Hello World"

    def test_kebabcase(self):
        """Elements joined with hyphens."""
        assert render_template("{{tags|kebabcase}}", {"tags": ["a", "b"]}) == "a-b"

    def test_split_then_join(self):
        """split-by-spaces turns a sentence into a list for joining pipes."""
        data = {"name": "  Misty   Forest Shrine "}
        assert render_template("{{name|split-by-spaces|kebabcase|lowercase}}", data) == (
            "misty-forest-shrine"
        )
        assert render_template("{{name|split-by-spaces|join-by-spaces}}", data) == (
            "Misty Forest Shrine"
        )

    def test_split_without_join_concatenates(self):
        """A split list with no joining pipe collapses without separators."""
        assert render_template("{{name|split-by-spaces}}", {"name": "a b c"}) == "abc"

    def test_lowercase_and_uppercase_map_over_lists(self):
        """Case pipes apply to each list element."""
        assert render_template("{{tags|uppercase|snakecase}}", {"tags": ["a", "b"]}) == "A_B"
        assert render_template("{{tags|lowercase|kebabcase}}", {"tags": ["A", "B"]}) == "a-b"

    def test_lowercase_is_idempotent(self):
        """Applying lowercase twice equals applying it once."""
        data = {"s": "ABC"}
        assert render_template("{{s|lowercase|lowercase}}", data) == render_template(
            "{{s|lowercase}}", data
        )

    def test_joining_pipes_pass_strings_through(self):
        """Joining pipes leave plain strings unchanged."""
        assert render_template("{{s|snakecase}}", {"s": "Hello World"}) == "Hello World"

    def test_numbers_are_stringified_before_pipes(self):
        """Numbers become text before the chain runs."""
        assert render_template("{{seed|split-by-spaces|snakecase}}", {"seed": 42}) == "42"

    def test_case_pipes_pass_non_strings_through(self):
        """Direct pipe calls return unhandled shapes unchanged."""
        assert apply_pipe(5, "lowercase") == 5
        assert apply_pipe({"a": 1}, "kebabcase") == {"a": 1}


class TestPipeRegistry:
    """Test unknown pipes and pipe registration."""

    def test_unknown_pipe_passes_through_with_warning(self, caplog):
        """An unknown pipe name logs a warning and keeps the value."""
        with caplog.at_level(logging.WARNING, logger="mediabrew.templates.pipes"):
            result = render_template("{{name|reverse}}", {"name": "abc"})

        assert result == "abc"
        assert "Unknown pipe: reverse" in caplog.text

    def test_registered_pipe_is_used(self, monkeypatch):
        """register_pipe adds a new entry to the pipe table."""
        monkeypatch.setitem(PIPES, "reverse", PIPES["lowercase"])
        register_pipe("reverse", lambda value: value[::-1] if isinstance(value, str) else value)

        assert render_template("{{name|reverse}}", {"name": "abc"}) == "cba"

    def test_raising_pipe_passes_through(self, monkeypatch, caplog):
        """A pipe that raises leaves the value unchanged."""

        def broken(value):
            raise RuntimeError("boom")

        monkeypatch.setitem(PIPES, "broken", broken)
        with caplog.at_level(logging.WARNING, logger="mediabrew.templates.pipes"):
            assert render_template("{{name|broken}}", {"name": "abc"}) == "abc"
        assert "boom" in caplog.text
