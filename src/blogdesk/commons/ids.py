from __future__ import annotations

from uuid import UUID

from uuid6 import uuid7  # type: ignore[import-not-found]


def uuid7_uuid() -> UUID:
    """Generate a UUIDv7 (project-wide standard for non-user row ids)."""
    return uuid7()
