"""
HTTP transport.

Sends one ``HTTPRequest`` over an aiohttp ``ClientSession`` and returns
the completed response as an immutable ``ResponseData`` snapshot.
"""

from __future__ import annotations

import asyncio
import base64
import logging
import time

import aiohttp

from ..response import ResponseData
from ..suite.models import AuthConfig, AuthType
from .models import HTTPRequest, TransportError, TransportErrorKind

logger = logging.getLogger(__name__)

AUTHORIZATION = "Authorization"
DEFAULT_API_KEY_HEADER = "X-API-Key"


def apply_auth_headers(headers: dict[str, str], auth: AuthConfig | None) -> None:
    """Apply authentication headers based on auth config."""
    if auth is None:
        return

    if auth.type == AuthType.BEARER:
        if auth.token:
            headers[AUTHORIZATION] = f"Bearer {auth.token}"
            logger.debug("Applied bearer auth header")

    elif auth.type == AuthType.API_KEY:
        header_name = auth.header or DEFAULT_API_KEY_HEADER
        if auth.key:
            headers[header_name] = auth.key
            logger.debug(f"Applied API key auth header: {header_name}")

    elif auth.type == AuthType.BASIC:
        if auth.username and auth.password:
            credentials = base64.b64encode(
                f"{auth.username}:{auth.password}".encode()
            ).decode("ascii")
            headers[AUTHORIZATION] = f"Basic {credentials}"
            logger.debug("Applied basic auth header")


class HTTPTransport:
    """
    aiohttp-backed request sender.

    Example:
        async with HTTPTransport() as transport:
            response = await transport.send(HTTPRequest(url="https://example.com"))
            print(response.status_code, response.timing_ms)
    """

    def __init__(self, session: aiohttp.ClientSession | None = None):
        self._session = session
        self._owns_session = session is None

    @property
    def is_connected(self) -> bool:
        return self._session is not None and not self._session.closed

    async def connect(self) -> None:
        """Create the HTTP session."""
        if self._session is None:
            self._session = aiohttp.ClientSession()
            self._owns_session = True

    async def disconnect(self) -> None:
        """Close the HTTP session if this transport created it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    async def send(self, request: HTTPRequest) -> ResponseData:
        """
        Send a request and snapshot the response.

        Args:
            request: The request to send

        Returns:
            ResponseData with status, headers, decoded body and timing

        Raises:
            TransportError: If no response was received
        """
        if not self.is_connected:
            raise TransportError(
                TransportErrorKind.NOT_CONNECTED,
                "Transport not connected. Call connect() first.",
                request.url,
            )

        headers = dict(request.headers)
        apply_auth_headers(headers, request.auth)
        timeout = aiohttp.ClientTimeout(total=request.timeout_ms / 1000) if request.timeout_ms else None
        method = request.method.value

        logger.debug(f"{method} {request.url}")
        started = time.perf_counter()
        try:
            async with self._session.request(
                method,
                request.url,
                headers=headers,
                data=request.body.encode("utf-8") if request.body else None,
                timeout=timeout,
                allow_redirects=request.follow_redirects,
            ) as resp:
                body = await resp.text(errors="replace")
                timing_ms = int((time.perf_counter() - started) * 1000)
                logger.debug(f"{method} {request.url} -> {resp.status} in {timing_ms}ms")
                return ResponseData(
                    status_code=resp.status,
                    status_text=resp.reason or "",
                    headers=resp.headers,
                    body=body,
                    timing_ms=timing_ms,
                )

        except asyncio.TimeoutError:
            raise TransportError(
                TransportErrorKind.TIMEOUT,
                f"Request timed out after {request.timeout_ms}ms",
                request.url,
            ) from None
        except aiohttp.ClientConnectorError as e:
            raise TransportError(
                TransportErrorKind.CONNECTION,
                f"Connection failed: {e}",
                request.url,
            ) from e
        except aiohttp.ClientError as e:
            raise TransportError(
                TransportErrorKind.HTTP,
                f"HTTP error: {e}",
                request.url,
            ) from e

    async def __aenter__(self) -> HTTPTransport:
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()

    def __repr__(self) -> str:
        status = "connected" if self.is_connected else "disconnected"
        return f"HTTPTransport(status={status})"
