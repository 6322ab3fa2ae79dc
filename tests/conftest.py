"""Pytest configuration and fixtures."""

import asyncio
import json
import logging
import threading
from contextlib import asynccontextmanager

import pytest
from aiohttp import web

from volt.response import ResponseData


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Reset the volt logger after each test so CLI --debug runs don't leak handlers."""
    yield

    logger = logging.getLogger("volt")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# ---------------------------------------------------------------------------
# Response helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def json_response():
    """Build a ResponseData whose body is the JSON encoding of ``payload``."""

    def _make(payload, status_code=200, headers=None, timing_ms=42):
        return ResponseData(
            status_code=status_code,
            status_text="OK",
            headers=headers or {"Content-Type": "application/json"},
            body=json.dumps(payload),
            timing_ms=timing_ms,
        )

    return _make


# ---------------------------------------------------------------------------
# In-process HTTP server
# ---------------------------------------------------------------------------


async def _get_user(request: web.Request) -> web.Response:
    user_id = request.match_info["user_id"]
    return web.json_response(
        {"data": {"id": int(user_id), "name": "john", "roles": ["admin", "dev"]}},
        headers={"X-Request-Id": f"req-{user_id}"},
    )


async def _login(request: web.Request) -> web.Response:
    payload = json.loads(await request.text() or "{}")
    if payload.get("username") != "alice":
        return web.json_response({"error": "bad credentials"}, status=401)
    return web.json_response({"token": "abc123"})


async def _me(request: web.Request) -> web.Response:
    if request.headers.get("Authorization") != "Bearer abc123":
        return web.json_response({"error": "unauthorized"}, status=401)
    return web.json_response({"user": "alice"})


async def _echo(request: web.Request) -> web.Response:
    return web.json_response(
        {
            "method": request.method,
            "headers": dict(request.headers),
            "body": await request.text(),
        }
    )


async def _slow(request: web.Request) -> web.Response:
    await asyncio.sleep(2)
    return web.Response(text="late")


async def _redirect(request: web.Request) -> web.Response:
    raise web.HTTPFound("/users/1")


def build_app() -> web.Application:
    app = web.Application()
    app.router.add_get("/users/{user_id}", _get_user)
    app.router.add_post("/login", _login)
    app.router.add_get("/me", _me)
    app.router.add_route("*", "/echo", _echo)
    app.router.add_get("/slow", _slow)
    app.router.add_get("/redirect", _redirect)
    return app


@asynccontextmanager
async def serve_app(app: web.Application):
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", 0)
    await site.start()
    host, port = runner.addresses[0][:2]
    try:
        yield f"http://{host}:{port}"
    finally:
        await runner.cleanup()


@pytest.fixture
def serve():
    """Async context manager factory: ``async with serve() as base_url``."""
    return lambda: serve_app(build_app())


@pytest.fixture
def live_server():
    """Serve the test app from a background loop for code that calls asyncio.run itself."""
    loop = asyncio.new_event_loop()
    thread = threading.Thread(target=loop.run_forever, daemon=True)
    thread.start()

    context = serve_app(build_app())
    base_url = asyncio.run_coroutine_threadsafe(context.__aenter__(), loop).result(timeout=10)
    try:
        yield base_url
    finally:
        asyncio.run_coroutine_threadsafe(
            context.__aexit__(None, None, None), loop
        ).result(timeout=10)
        loop.call_soon_threadsafe(loop.stop)
        thread.join(timeout=5)
        loop.close()
