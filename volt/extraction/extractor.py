"""
Value extraction from responses.

Pulls one value out of a response (JSON path, header, regex, status or
full body) and wraps it as a chain variable. Extraction failures are
reported as ``NOT_FOUND``, never as exceptions.
"""

from __future__ import annotations

import logging
import re

from ..json_path import NOT_FOUND, Found, Resolution, parse_json, resolve, stringify_value
from ..response import ResponseData
from .models import ChainVariable, ExtractionConfig, ExtractionType

logger = logging.getLogger(__name__)

EXTRACTION_FAILED_MESSAGE = "Could not extract value"


def extract_json_value(body: str, path: str) -> Resolution:
    """Value at ``path`` in the JSON body, as text."""
    try:
        document = parse_json(body)
    except ValueError:
        return NOT_FOUND

    resolution = resolve(document, path)
    if isinstance(resolution, Found):
        return Found(stringify_value(resolution.value))
    return NOT_FOUND


def extract_header_value(response: ResponseData, name: str) -> Resolution:
    value = response.header(name)
    if value is None:
        return NOT_FOUND
    return Found(value)


def extract_regex_value(text: str, pattern: str) -> Resolution:
    """
    First capture group of ``pattern`` in ``text``, or the whole match if
    the pattern has no group (or the group did not participate).
    """
    try:
        compiled = re.compile(pattern)
    except (re.error, OverflowError):
        logger.debug(f"Invalid extraction pattern: {pattern!r}")
        return NOT_FOUND

    match = compiled.search(text)
    if match is None:
        return NOT_FOUND
    if compiled.groups and match.group(1) is not None:
        return Found(match.group(1))
    return Found(match.group(0))


def extract(config: ExtractionConfig, response: ResponseData) -> Resolution:
    """
    Extract a value according to ``config``.

    Args:
        config: Extraction rule
        response: The response to read from

    Returns:
        ``Found(text)`` on success, otherwise ``NOT_FOUND``

    Example:
        >>> extract(
        ...     ExtractionConfig(ExtractionType.REGEX, 'token":"([^"]+)'),
        ...     ResponseData(status_code=200, body='{"token":"abc123"}'),
        ... )
        Found(value='abc123')
    """
    if config.type == ExtractionType.JSON:
        return extract_json_value(response.body, config.path)
    elif config.type == ExtractionType.HEADER:
        return extract_header_value(response, config.path)
    elif config.type == ExtractionType.REGEX:
        return extract_regex_value(response.body, config.path)
    elif config.type == ExtractionType.STATUS:
        return Found(str(response.status_code))
    else:  # body
        return Found(response.body)


def describe_source(config: ExtractionConfig) -> str:
    """Human-readable provenance for a chain variable."""
    if config.type == ExtractionType.JSON:
        return f"JSON: {config.path}"
    elif config.type == ExtractionType.HEADER:
        return f"Header: {config.path}"
    elif config.type == ExtractionType.REGEX:
        return f"Regex: {config.path}"
    elif config.type == ExtractionType.STATUS:
        return "Status Code"
    return "Full Body"


def create_chain_variable(
    config: ExtractionConfig, response: ResponseData
) -> ChainVariable | None:
    """
    Extract a value and wrap it as a chain variable.

    Returns None when nothing could be extracted; callers report
    ``EXTRACTION_FAILED_MESSAGE`` in that case.

    Raises:
        ValueError: If ``config.variable_name`` is blank
    """
    name = config.variable_name.strip()
    if not name:
        raise ValueError("Extraction requires a variable name")

    resolution = extract(config, response)
    if not isinstance(resolution, Found):
        logger.debug(f"{EXTRACTION_FAILED_MESSAGE} for {name!r} ({describe_source(config)})")
        return None

    return ChainVariable(
        name=name,
        value=resolution.value,
        source=describe_source(config),
    )
