#!/usr/bin/env python3
"""Create a CMS user (use it to bootstrap the first admin)."""

from __future__ import annotations

import asyncio
from getpass import getpass

from blogdesk.auth.exceptions import (
    AuthServiceConflictException,
    AuthServiceValidationException,
)
from blogdesk.auth.service import AuthService
from blogdesk.core.db import database_manager


async def _create(email: str, name: str, password: str, role: str) -> int:
    svc = AuthService.create()
    await database_manager.initialize()
    try:
        async with database_manager.session() as session:
            user = await svc.register(
                session, email=email, password=password, name=name, role=role
            )
            return user.id
    finally:
        await database_manager.shutdown()


def main() -> None:
    email = input("Email: ").strip()
    name = input("Name: ").strip()
    role = input("Role [author/editor/admin]: ").strip().lower() or "author"

    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")

    try:
        user_id = asyncio.run(_create(email, name, pw1, role))
    except AuthServiceValidationException as exc:
        raise SystemExit("\n".join(exc.errors)) from exc
    except AuthServiceConflictException as exc:
        raise SystemExit(exc.details or exc.message) from exc
    print(f"OK -> user {user_id} ({email}, {role})")


if __name__ == "__main__":
    main()
