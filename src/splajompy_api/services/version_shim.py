"""Degrade responses for clients that predate a feature."""

from __future__ import annotations

from splajompy_api.core.app_version import is_version_at_least

POLL_UPDATE_NOTICE = "This post contains a poll. Update the app to vote!"


def supports_polls(app_version: str | None, minimum: str) -> bool:
    """Return True if the client can render polls."""
    return is_version_at_least(app_version, minimum)


def with_poll_notice(text: str) -> str:
    """Append the update notice to ``text``; an empty text becomes the notice."""
    if not text:
        return POLL_UPDATE_NOTICE
    return f"{text}\n\n{POLL_UPDATE_NOTICE}"


def render_post_text(text: str, *, has_poll: bool, app_version: str | None, minimum: str) -> str:
    """Return the text to send to the client.

    Only the response changes; stored text is never touched.
    """
    if has_poll and not supports_polls(app_version, minimum):
        return with_poll_notice(text)
    return text
