"""
Response snapshot consumed by assertions and extraction.

``ResponseData`` is produced once per completed request and never
mutated afterwards. Header lookups go through a case-insensitive
multidict, the same structure aiohttp exposes on its responses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from multidict import CIMultiDict, CIMultiDictProxy

Headers = CIMultiDictProxy


def freeze_headers(headers: Mapping[str, str] | None = None) -> CIMultiDictProxy[str]:
    """Build a read-only, case-insensitive view over ``headers``."""
    if isinstance(headers, CIMultiDictProxy):
        return headers
    return CIMultiDictProxy(CIMultiDict(headers or {}))


@dataclass(frozen=True)
class ResponseData:
    """
    Immutable snapshot of a completed HTTP response.

    Attributes:
        status_code: HTTP status code
        status_text: Reason phrase
        headers: Case-insensitive header view
        body: Decoded body text
        timing_ms: Total request time in whole milliseconds
    """
    status_code: int
    status_text: str = ""
    headers: CIMultiDictProxy[str] = field(default_factory=freeze_headers)
    body: str = ""
    timing_ms: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", freeze_headers(self.headers))

    def header(self, name: str) -> str | None:
        """Value of the first header called ``name`` (any case), or None."""
        return self.headers.get(name)

    def has_header(self, name: str) -> bool:
        return name in self.headers

    def to_dict(self) -> dict[str, Any]:
        """Convert to the application's camelCase record."""
        return {
            "statusCode": self.status_code,
            "statusText": self.status_text,
            "headers": {name: value for name, value in self.headers.items()},
            "body": self.body,
            "timingMs": self.timing_ms,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ResponseData:
        """Build from the application's camelCase record."""
        return cls(
            status_code=int(data.get("statusCode", 0)),
            status_text=data.get("statusText", ""),
            headers=data.get("headers") or {},
            body=data.get("body", ""),
            timing_ms=int(data.get("timingMs", 0)),
        )
