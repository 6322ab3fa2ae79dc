"""
HTTP Transport

Produces the ``ResponseData`` snapshots the assertion and extraction
engines consume.

Usage:
    from volt.transport import HTTPTransport, HTTPRequest, TransportError

    async with HTTPTransport() as transport:
        try:
            response = await transport.send(HTTPRequest(url="https://api.example.com/users"))
        except TransportError as e:
            print(f"{e.kind.value}: {e}")
"""

# Transport
from .http import HTTPTransport, apply_auth_headers

# Models
from .models import HTTPRequest, TransportError, TransportErrorKind

__all__ = [
    # Transport
    "HTTPTransport",
    "apply_auth_headers",
    # Models
    "HTTPRequest",
    "TransportError",
    "TransportErrorKind",
]
