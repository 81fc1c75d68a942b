from __future__ import annotations

from blogdesk.health import repository


async def get_health_payload() -> dict:
    db_ok, db_detail = await repository.check_db()
    # Sessions live in the database, so nothing authenticated works without it.
    return {
        "status": "ok" if db_ok else "error",
        "db": {"ok": db_ok, "detail": db_detail},
    }
