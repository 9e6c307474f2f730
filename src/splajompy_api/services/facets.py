"""Mention facet extraction for posts, comments and notification messages."""

from __future__ import annotations

import re

from splajompy_api.repositories.protocols import UserRepository
from splajompy_api.schemas import Facet

MENTION_PATTERN = re.compile(r"@(\w+)")


async def generate_facets(users: UserRepository, text: str) -> list[Facet]:
    """Return a mention facet for each ``@username`` that names an existing user.

    Offsets are character positions covering the ``@`` and the username.
    """
    facets: list[Facet] = []
    resolved: dict[str, int | None] = {}
    for match in MENTION_PATTERN.finditer(text):
        username = match.group(1).lower()
        if username not in resolved:
            user = await users.get_user_by_username(username)
            resolved[username] = user.user_id if user is not None else None
        user_id = resolved[username]
        if user_id is None:
            continue
        facets.append(
            Facet(
                type="mention",
                user_id=user_id,
                index_start=match.start(),
                index_end=match.end(),
            )
        )
    return facets
