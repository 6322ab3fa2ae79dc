"""
Typed data structures for check suites.

This module contains all enums and dataclasses that represent
the internal typed structure of a parsed suite file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..assertions import Assertion
from ..extraction import ExtractionConfig


# ─────────────────────────────────────────────────────────────────────────────
# Enums
# ─────────────────────────────────────────────────────────────────────────────

class HTTPMethod(str, Enum):
    """Request methods a suite may use."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


class AuthType(str, Enum):
    """Supported authentication types."""
    BEARER = "bearer"
    API_KEY = "api_key"
    BASIC = "basic"


class EngineName(str, Enum):
    """Which execution tier evaluates assertions."""
    REFERENCE = "reference"
    ACCELERATED = "accelerated"


# ─────────────────────────────────────────────────────────────────────────────
# Auth Configuration
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class AuthConfig:
    """
    Authentication configuration for a request.

    Supports three auth types:
    - bearer: Uses Authorization: Bearer <token> header
    - api_key: Uses a custom header with the API key
    - basic: Uses Authorization: Basic <base64(user:pass)> header

    All string fields may contain {{variable}} placeholders.
    """
    type: AuthType
    # For bearer auth
    token: str | None = None
    # For api_key auth
    header: str = "X-API-Key"
    key: str | None = None
    # For basic auth
    username: str | None = None
    password: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type.value}
        if self.type == AuthType.BEARER:
            data["token"] = self.token
        elif self.type == AuthType.API_KEY:
            data["key"] = self.key
            data["header"] = self.header
        else:
            data["username"] = self.username
            data["password"] = self.password
        return data


# ─────────────────────────────────────────────────────────────────────────────
# Defaults & Requests
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class Defaults:
    """Default settings for request execution."""
    timeout_ms: int = 30000
    follow_redirects: bool = True
    engine: EngineName = EngineName.REFERENCE

    def to_dict(self) -> dict[str, Any]:
        return {
            "timeout_ms": self.timeout_ms,
            "follow_redirects": self.follow_redirects,
            "engine": self.engine.value,
        }


@dataclass
class RequestSpec:
    """One request of a suite, with its checks and extraction rules."""
    id: str
    url: str
    method: HTTPMethod = HTTPMethod.GET
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""
    auth: AuthConfig | None = None
    assertions: list[Assertion] = field(default_factory=list)
    extract: list[ExtractionConfig] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "method": self.method.value,
            "url": self.url,
            "headers": dict(self.headers),
            "body": self.body,
            "auth": self.auth.to_dict() if self.auth else None,
            "assertions": [a.to_dict() for a in self.assertions],
            "extract": [
                {"type": e.type.value, "path": e.path, "variable": e.variable_name}
                for e in self.extract
            ],
        }


# ─────────────────────────────────────────────────────────────────────────────
# Suite
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class Suite:
    """Fully parsed and validated suite."""
    version: int
    name: str
    env: dict[str, str] = field(default_factory=dict)
    defaults: Defaults = field(default_factory=Defaults)
    requests: list[RequestSpec] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "name": self.name,
            "env": dict(self.env),
            "defaults": self.defaults.to_dict(),
            "requests": [r.to_dict() for r in self.requests],
        }
