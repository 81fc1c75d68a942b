#!/usr/bin/env python3
"""Delete expired sessions. Safe to run from cron; expiry is enforced on read anyway."""

from __future__ import annotations

import asyncio

from blogdesk.auth.service import AuthService
from blogdesk.core.db import database_manager


async def _purge() -> int:
    svc = AuthService.create()
    await database_manager.initialize()
    try:
        async with database_manager.session() as session:
            return await svc.purge_expired_sessions(session)
    finally:
        await database_manager.shutdown()


def main() -> None:
    print(f"OK -> purged {asyncio.run(_purge())} session(s)")


if __name__ == "__main__":
    main()
