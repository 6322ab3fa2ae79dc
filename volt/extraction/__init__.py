"""
Value Extraction and Chain Variables

This package captures values from responses so later requests can
reference them as {{name}} placeholders.

Extraction types:
    - json: value at a JSON path (non-strings serialized as JSON)
    - header: case-insensitive header value
    - regex: first capture group, or the whole match
    - status: status code as text
    - body: the full body

Usage:
    from volt.extraction import ExtractionConfig, ChainVariableStore, create_chain_variable

    store = ChainVariableStore()
    config = ExtractionConfig(type="json", path="data.token", variable_name="token")

    variable = create_chain_variable(config, response)
    if variable is None:
        print("Could not extract value")
    else:
        store.add(variable)
"""

# Models
from .models import ChainVariable, ExtractionConfig, ExtractionType, new_chain_id

# Extractor
from .extractor import (
    EXTRACTION_FAILED_MESSAGE,
    create_chain_variable,
    describe_source,
    extract,
    extract_header_value,
    extract_json_value,
    extract_regex_value,
)

# Store
from .store import ChainVariableStore

__all__ = [
    # Models
    "ChainVariable",
    "ExtractionConfig",
    "ExtractionType",
    "new_chain_id",
    # Extractor
    "EXTRACTION_FAILED_MESSAGE",
    "create_chain_variable",
    "describe_source",
    "extract",
    "extract_header_value",
    "extract_json_value",
    "extract_regex_value",
    # Store
    "ChainVariableStore",
]
