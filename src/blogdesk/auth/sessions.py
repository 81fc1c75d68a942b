"""
Durable session store.

Maps opaque bearer tokens to user ids with an absolute expiry. Only a SHA-256
of each token is persisted. Expiry is enforced lazily: an expired row is
deleted the first time someone reads it ("reap on read"), so no background
sweeper is needed for correctness. `purge_expired` exists for storage hygiene.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field

import sqlalchemy as sa  # type: ignore[import-not-found]
from sqlalchemy.ext.asyncio import AsyncSession  # type: ignore[import-not-found]

from blogdesk.auth.crypto import hash_session_token, new_session_token
from blogdesk.auth.models import Session
from blogdesk.commons.clock import Clock, utcnow
from blogdesk.commons.ids import uuid7_uuid


@dataclass(frozen=True)
class SessionStore:
    clock: Clock = field(default=utcnow)

    async def create(
        self,
        session: AsyncSession,
        *,
        user_id: int,
        ttl: dt.timedelta,
        ip: str | None = None,
        user_agent: str | None = None,
    ) -> str:
        token = new_session_token()
        now = self.clock()
        s = Session(
            id=uuid7_uuid(),
            user_id=user_id,
            token_hash=hash_session_token(token),
            created_at=now,
            expires_at=now + ttl,
            user_agent=user_agent,
            ip=ip,
        )
        session.add(s)
        await session.flush()
        return token

    async def get(self, session: AsyncSession, *, token: str) -> int | None:
        token_hash = hash_session_token(token)
        stmt = sa.select(Session.user_id, Session.expires_at).where(
            Session.token_hash == token_hash
        )
        row = (await session.execute(stmt)).one_or_none()
        if row is None:
            return None
        if self.clock() >= row.expires_at:
            await self._delete_by_hash(session, token_hash=token_hash)
            return None
        return row.user_id

    async def refresh(
        self, session: AsyncSession, *, token: str, ttl: dt.timedelta
    ) -> bool:
        now = self.clock()
        stmt = (
            sa.update(Session)
            .where(Session.token_hash == hash_session_token(token))
            .where(Session.expires_at > now)
            .values(expires_at=now + ttl)
            .execution_options(synchronize_session=False)
        )
        res = await session.execute(stmt)
        await session.flush()
        return bool(res.rowcount)

    async def delete(self, session: AsyncSession, *, token: str) -> bool:
        return await self._delete_by_hash(session, token_hash=hash_session_token(token))

    async def delete_for_user(
        self, session: AsyncSession, *, user_id: int, keep_token: str | None = None
    ) -> int:
        stmt = sa.delete(Session).where(Session.user_id == user_id)
        if keep_token is not None:
            stmt = stmt.where(Session.token_hash != hash_session_token(keep_token))
        res = await session.execute(stmt.execution_options(synchronize_session=False))
        await session.flush()
        return int(res.rowcount or 0)

    async def purge_expired(self, session: AsyncSession) -> int:
        stmt = (
            sa.delete(Session)
            .where(Session.expires_at <= self.clock())
            .execution_options(synchronize_session=False)
        )
        res = await session.execute(stmt)
        await session.flush()
        return int(res.rowcount or 0)

    async def _delete_by_hash(self, session: AsyncSession, *, token_hash: str) -> bool:
        stmt = (
            sa.delete(Session)
            .where(Session.token_hash == token_hash)
            .execution_options(synchronize_session=False)
        )
        res = await session.execute(stmt)
        await session.flush()
        return bool(res.rowcount)
