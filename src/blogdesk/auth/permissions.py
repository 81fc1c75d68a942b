from __future__ import annotations

from typing import Any

AUTHOR_ACTIONS = frozenset({"create", "read", "update"})
EDITOR_ACTIONS = AUTHOR_ACTIONS | {"publish", "delete"}
ADMIN_ACTIONS = EDITOR_ACTIONS | {"manage_users"}

ROLE_PERMISSIONS: dict[str, frozenset[str]] = {
    "author": AUTHOR_ACTIONS,
    "editor": EDITOR_ACTIONS,
    "admin": ADMIN_ACTIONS,
}


def permissions_for(role: str | None) -> frozenset[str]:
    return ROLE_PERMISSIONS.get((role or "").strip().lower(), frozenset())


def has_permission(user: Any, action: str) -> bool:
    # Unknown roles and actions are simply not granted.
    return action in permissions_for(getattr(user, "role", None))
