"""
Transport layer models.

This module defines the outgoing request structure and the error raised
when a request cannot produce a response at all.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..suite.models import AuthConfig, HTTPMethod


class TransportErrorKind(str, Enum):
    """Why a request produced no response."""
    CONNECTION = "connection"
    TIMEOUT = "timeout"
    HTTP = "http"
    NOT_CONNECTED = "not_connected"


class TransportError(Exception):
    """
    A request failed before a response was received.

    HTTP error statuses are not transport errors: a 500 is a response
    and is judged by the request's assertions.
    """

    def __init__(self, kind: TransportErrorKind, message: str, url: str = ""):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.url = url

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "message": self.message, "url": self.url}


@dataclass
class HTTPRequest:
    """A fully substituted request, ready to send."""
    url: str
    method: HTTPMethod = HTTPMethod.GET
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""
    auth: AuthConfig | None = None
    timeout_ms: int = 30000
    follow_redirects: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "method": self.method.value,
            "url": self.url,
            "headers": dict(self.headers),
            "body": self.body,
            "timeout_ms": self.timeout_ms,
            "follow_redirects": self.follow_redirects,
        }
