"""
Template variable substitution.

Replaces ``{{name}}`` placeholders in request text with values from a
variable map. Placeholders whose name is not in the map are left exactly
as written so that substitution can run in stages (environment first,
chain variables second) and so that repeated passes are idempotent.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Mapping

logger = logging.getLogger(__name__)

# Regex for template placeholders: {{name}}, whitespace inside is trimmed
TEMPLATE_PATTERN = re.compile(r"\{\{([^}]+)\}\}")

VariableMap = Mapping[str, str]


@dataclass(frozen=True)
class SubstitutionPreview:
    """Result of a dry-run substitution, for showing resolved URLs."""
    original: str
    substituted: str
    has_unresolved: bool


def substitute(text: str, variables: VariableMap) -> str:
    """
    Replace every known ``{{name}}`` placeholder in ``text``.

    Args:
        text: Template text
        variables: Variable name to value mapping

    Returns:
        The text with known placeholders replaced; unknown ones untouched

    Example:
        >>> substitute("https://{{host}}/{{path}}", {"host": "api.example.com"})
        'https://api.example.com/{{path}}'
    """
    if not text or "{{" not in text or not variables:
        return text

    def replace(match: re.Match[str]) -> str:
        name = match.group(1).strip()
        if name in variables:
            return str(variables[name])
        return match.group(0)

    return TEMPLATE_PATTERN.sub(replace, text)


def substitute_batch(texts: list[str], variables: VariableMap) -> list[str]:
    """Substitute each text in order."""
    return [substitute(text, variables) for text in texts]


def substitute_headers(headers: Mapping[str, str], variables: VariableMap) -> dict[str, str]:
    """
    Substitute both header names and values.

    If two names collapse to the same name after substitution, the one
    applied last wins.
    """
    result: dict[str, str] = {}
    for name, value in headers.items():
        result[substitute(name, variables)] = substitute(value, variables)
    return result


def find_variables(text: str) -> list[str]:
    """Unique placeholder names in ``text``, in order of first appearance."""
    if not text or "{{" not in text:
        return []

    names: list[str] = []
    for match in TEMPLATE_PATTERN.finditer(text):
        name = match.group(1).strip()
        if name not in names:
            names.append(name)
    return names


def has_variables(text: str) -> bool:
    """Return True if ``text`` contains at least one placeholder."""
    if not text:
        return False
    return TEMPLATE_PATTERN.search(text) is not None


def preview_substitution(text: str, variables: VariableMap) -> SubstitutionPreview:
    """Substitute ``text`` and report whether any placeholder is left over."""
    substituted = substitute(text, variables)
    unresolved = has_variables(substituted)
    if unresolved:
        logger.debug(f"Unresolved variables in {text!r}: {find_variables(substituted)}")
    return SubstitutionPreview(
        original=text,
        substituted=substituted,
        has_unresolved=unresolved,
    )
