from __future__ import annotations

import datetime as dt
from dataclasses import dataclass

import sqlalchemy as sa  # type: ignore[import-not-found]
from sqlalchemy.exc import IntegrityError  # type: ignore[import-not-found]
from sqlalchemy.ext.asyncio import AsyncSession  # type: ignore[import-not-found]

from blogdesk.auth.exceptions import EmailAlreadyRegistered
from blogdesk.auth.models import User


def normalize_email(email: str) -> str:
    return email.strip().lower()


@dataclass(frozen=True)
class UserRepository:
    """
    Users table access.

    No transaction handling here; the service owns commit/rollback.
    """

    async def get_user_by_email(
        self, session: AsyncSession, *, email: str
    ) -> User | None:
        stmt = sa.select(User).where(User.email == normalize_email(email))
        res = await session.execute(stmt)
        return res.scalar_one_or_none()

    async def get_user_by_id(self, session: AsyncSession, *, user_id: int) -> User | None:
        stmt = sa.select(User).where(User.id == user_id)
        res = await session.execute(stmt)
        return res.scalar_one_or_none()

    async def insert_user(
        self,
        session: AsyncSession,
        *,
        email: str,
        name: str,
        password_hash: str,
        role: str,
    ) -> User:
        normalized = normalize_email(email)
        user = User(
            email=normalized,
            name=name.strip(),
            password_hash=password_hash,
            role=role,
        )
        session.add(user)
        try:
            await session.flush()
        except IntegrityError as exc:
            # Role is validated upstream; the unique email index is the only
            # constraint an insert can trip.
            raise EmailAlreadyRegistered(normalized) from exc
        return user

    async def update_password(
        self, session: AsyncSession, *, user_id: int, password_hash: str
    ) -> bool:
        stmt = (
            sa.update(User)
            .where(User.id == user_id)
            .values(password_hash=password_hash)
        )
        res = await session.execute(stmt)
        await session.flush()
        return bool(res.rowcount)

    async def touch_last_login(
        self, session: AsyncSession, *, user_id: int, at: dt.datetime
    ) -> None:
        stmt = sa.update(User).where(User.id == user_id).values(last_login_at=at)
        await session.execute(stmt)
        await session.flush()
