"""Tests for {{variable}} substitution."""

from volt.variables import (
    find_variables,
    has_variables,
    preview_substitution,
    substitute,
    substitute_batch,
    substitute_headers,
)


# --- substitute ---


def test_substitute_leaves_unknown_tokens_untouched():
    result = substitute("https://{{host}}/{{path}}", {"host": "api.example.com"})
    assert result == "https://api.example.com/{{path}}"
    assert has_variables(result) is True


def test_substitute_trims_identifier():
    assert substitute("{{ host }}:{{port}}", {"host": "h", "port": "80"}) == "h:80"


def test_substitute_keeps_unresolved_token_bytes():
    text = "a {{  spaced  }} b"
    assert substitute(text, {"other": "x"}) == text


def test_substitute_is_idempotent_when_fully_resolved():
    variables = {"a": "1", "b": "2"}
    once = substitute("{{a}}-{{b}}-{{a}}", variables)
    assert once == "1-2-1"
    assert substitute(once, variables) == once


def test_substitute_staged_resolution():
    staged = substitute("{{env}}/{{token}}", {"env": "prod"})
    assert substitute(staged, {"token": "t"}) == "prod/t"


def test_substitute_empty_inputs():
    assert substitute("", {"a": "1"}) == ""
    assert substitute("{{a}}", {}) == "{{a}}"
    assert substitute("plain", {"a": "1"}) == "plain"


def test_substitute_value_with_braces_is_not_rescanned():
    assert substitute("{{a}}", {"a": "{{b}}", "b": "x"}) == "{{b}}"


# --- batch and headers ---


def test_substitute_batch_preserves_order():
    assert substitute_batch(["{{a}}", "x", "{{b}}"], {"a": "1", "b": "2"}) == ["1", "x", "2"]


def test_substitute_headers_names_and_values():
    headers = {"X-{{kind}}": "{{value}}", "Accept": "application/json"}
    result = substitute_headers(headers, {"kind": "Trace", "value": "abc"})
    assert result == {"X-Trace": "abc", "Accept": "application/json"}


def test_substitute_headers_collision_last_wins():
    headers = {"{{h}}": "first", "X-Key": "second"}
    assert substitute_headers(headers, {"h": "X-Key"}) == {"X-Key": "second"}


# --- discovery ---


def test_find_variables_unique_in_order():
    assert find_variables("{{b}} {{a}} {{ b }} {{c}}") == ["b", "a", "c"]
    assert find_variables("none") == []


def test_has_variables():
    assert has_variables("x {{y}}")
    assert not has_variables("x {y}")
    assert not has_variables("")


def test_preview_substitution():
    preview = preview_substitution("{{a}}/{{b}}", {"a": "1"})
    assert preview.original == "{{a}}/{{b}}"
    assert preview.substituted == "1/{{b}}"
    assert preview.has_unresolved is True
