"""
Extraction rule and chain variable models.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ExtractionType(str, Enum):
    """Where in the response a value is taken from."""
    JSON = "json"
    HEADER = "header"
    REGEX = "regex"
    STATUS = "status"
    BODY = "body"


@dataclass(frozen=True)
class ExtractionConfig:
    """
    A rule for capturing a value from a response.

    Attributes:
        type: Extraction source
        path: JSON path, header name or regex pattern (ignored for
            status/body)
        variable_name: Name the captured value is stored under
    """
    type: ExtractionType
    path: str = ""
    variable_name: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", ExtractionType(self.type))


def new_chain_id() -> str:
    return uuid.uuid4().hex[:9]


@dataclass(frozen=True)
class ChainVariable:
    """
    A value captured from a response for use in later requests.

    Chain variables are keyed by ``name``; ``id`` only identifies the
    entry for removal.
    """
    name: str
    value: str
    source: str
    id: str = field(default_factory=new_chain_id)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "value": self.value,
            "source": self.source,
            "createdAt": int(self.created_at.timestamp() * 1000),
        }
