# src/splajompy_api/scripts/issue_token.py
"""
Development helper that prints a bearer token for an existing user.

Usage:
  python -m splajompy_api.scripts.issue_token --username alice
  python -m splajompy_api.scripts.issue_token --user-id 3
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from splajompy_api.core.security import create_access_token
from splajompy_api.db.session import SessionLocal, engine
from splajompy_api.repositories import SqlUserRepository
from splajompy_api.schemas import PublicUser


async def _find_user(user_id: int | None, username: str | None) -> PublicUser | None:
    users = SqlUserRepository(SessionLocal)
    try:
        if user_id is not None:
            return await users.get_user_by_id(user_id)
        assert username is not None
        return await users.get_user_by_username(username)
    finally:
        await engine.dispose()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Issue a JWT access token for a user")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--user-id", type=int, help="Numeric user id")
    target.add_argument("--username", help="Username (case-insensitive)")
    args = parser.parse_args(argv)

    user = asyncio.run(_find_user(args.user_id, args.username))
    if user is None:
        print("User not found", file=sys.stderr)
        return 1

    print(create_access_token(user.user_id))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
