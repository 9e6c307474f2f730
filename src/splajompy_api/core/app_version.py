"""Client app version propagation and version gates.

The mobile client sends its version in the ``X-App-Version`` header. The
middleware below stores it in a context variable for the lifetime of the
request so that services (and the tasks they spawn) can read it without
threading it through every call.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar

from packaging.version import InvalidVersion, Version
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Receive, Scope, Send

logger = logging.getLogger(__name__)

APP_VERSION_HEADER = "X-App-Version"
UNKNOWN_VERSION = "unknown"

app_version_var: ContextVar[str] = ContextVar("app_version", default=UNKNOWN_VERSION)


def current_app_version() -> str:
    """Return the version declared by the calling client, or ``"unknown"``."""
    return app_version_var.get()


def parse_app_version(raw: str | None) -> Version | None:
    """Parse a client version string, returning None when it is unusable."""
    if not raw or raw == UNKNOWN_VERSION:
        return None
    try:
        return Version(raw.strip())
    except InvalidVersion:
        logger.debug("Unparseable client version %r", raw)
        return None


def is_version_at_least(raw: str | None, minimum: str) -> bool:
    """Return True if ``raw`` parses and is ``>= minimum``.

    Missing and unparseable versions never satisfy a gate.
    """
    parsed = parse_app_version(raw)
    if parsed is None:
        return False
    return parsed >= Version(minimum)


class AppVersionMiddleware:
    """Pure ASGI middleware publishing the client version to ``app_version_var``."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        version = Headers(scope=scope).get(APP_VERSION_HEADER) or UNKNOWN_VERSION
        token = app_version_var.set(version)
        try:
            await self.app(scope, receive, send)
        finally:
            app_version_var.reset(token)
