"""
Variable Substitution

This package resolves {{name}} placeholders in URLs, headers and bodies
against a variable map (environment variables merged with chain
variables by the caller).

Usage:
    from volt.variables import substitute, find_variables, has_variables

    url = substitute("https://{{host}}/users/{{id}}", {"host": "api.example.com"})
    # 'https://api.example.com/users/{{id}}'

    find_variables(url)   # ['id']
    has_variables(url)    # True
"""

from .substitution import (
    TEMPLATE_PATTERN,
    SubstitutionPreview,
    VariableMap,
    find_variables,
    has_variables,
    preview_substitution,
    substitute,
    substitute_batch,
    substitute_headers,
)

__all__ = [
    "TEMPLATE_PATTERN",
    "SubstitutionPreview",
    "VariableMap",
    "find_variables",
    "has_variables",
    "preview_substitution",
    "substitute",
    "substitute_batch",
    "substitute_headers",
]
