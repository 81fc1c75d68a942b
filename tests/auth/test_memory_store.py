import datetime as dt

import pytest  # type: ignore[import-not-found]

from blogdesk.auth.exceptions import EmailAlreadyRegistered
from blogdesk.auth.memory import InMemorySessionStore, InMemoryUserRepository
from blogdesk.commons.clock import FrozenClock

TTL = dt.timedelta(days=7)


@pytest.mark.anyio
async def test_created_session_resolves_to_owner(sessions: InMemorySessionStore) -> None:
    token = await sessions.create(None, user_id=7, ttl=TTL, ip="1.2.3.4", user_agent="UA")
    assert await sessions.get(None, token=token) == 7
    meta = sessions.metadata_for(token)
    assert meta is not None
    assert meta["ip"] == "1.2.3.4"
    assert meta["user_agent"] == "UA"


@pytest.mark.anyio
async def test_unknown_token_is_none(sessions: InMemorySessionStore) -> None:
    assert await sessions.get(None, token="never-issued") is None


@pytest.mark.anyio
async def test_expired_session_is_reaped_on_read(
    sessions: InMemorySessionStore, clock: FrozenClock
) -> None:
    token = await sessions.create(None, user_id=1, ttl=TTL)
    clock.advance(TTL)
    assert await sessions.get(None, token=token) is None
    assert len(sessions) == 0


@pytest.mark.anyio
async def test_session_valid_until_just_before_expiry(
    sessions: InMemorySessionStore, clock: FrozenClock
) -> None:
    token = await sessions.create(None, user_id=1, ttl=TTL)
    clock.advance(TTL - dt.timedelta(seconds=1))
    assert await sessions.get(None, token=token) == 1


@pytest.mark.anyio
async def test_refresh_extends_only_live_sessions(
    sessions: InMemorySessionStore, clock: FrozenClock
) -> None:
    token = await sessions.create(None, user_id=1, ttl=TTL)
    clock.advance(dt.timedelta(days=6))
    assert await sessions.refresh(None, token=token, ttl=TTL) is True
    clock.advance(dt.timedelta(days=6))
    assert await sessions.get(None, token=token) == 1

    clock.advance(TTL)
    assert await sessions.refresh(None, token=token, ttl=TTL) is False
    assert await sessions.refresh(None, token="never-issued", ttl=TTL) is False


@pytest.mark.anyio
async def test_delete_reports_whether_entry_existed(sessions: InMemorySessionStore) -> None:
    token = await sessions.create(None, user_id=1, ttl=TTL)
    assert await sessions.delete(None, token=token) is True
    assert await sessions.delete(None, token=token) is False
    assert await sessions.get(None, token=token) is None


@pytest.mark.anyio
async def test_delete_for_user_can_spare_one_token(sessions: InMemorySessionStore) -> None:
    keep = await sessions.create(None, user_id=1, ttl=TTL)
    await sessions.create(None, user_id=1, ttl=TTL)
    await sessions.create(None, user_id=1, ttl=TTL)
    other = await sessions.create(None, user_id=2, ttl=TTL)

    assert await sessions.delete_for_user(None, user_id=1, keep_token=keep) == 2
    assert await sessions.get(None, token=keep) == 1
    assert await sessions.get(None, token=other) == 2


@pytest.mark.anyio
async def test_purge_expired_removes_only_expired(
    sessions: InMemorySessionStore, clock: FrozenClock
) -> None:
    await sessions.create(None, user_id=1, ttl=dt.timedelta(hours=1))
    live = await sessions.create(None, user_id=2, ttl=TTL)
    clock.advance(dt.timedelta(hours=2))
    assert await sessions.purge_expired(None) == 1
    assert len(sessions) == 1
    assert await sessions.get(None, token=live) == 2


@pytest.mark.anyio
async def test_user_repository_enforces_case_insensitive_uniqueness(
    users: InMemoryUserRepository,
) -> None:
    user = await users.insert_user(
        None, email=" A@B.com ", name=" A ", password_hash="h", role="author"
    )
    assert user.id == 1
    assert user.email == "a@b.com"
    assert user.name == "A"
    assert (await users.get_user_by_email(None, email="a@B.COM")) is user

    with pytest.raises(EmailAlreadyRegistered):
        await users.insert_user(None, email="a@b.com", name="B", password_hash="h", role="author")
    assert len(users) == 1


@pytest.mark.anyio
async def test_user_repository_updates(users: InMemoryUserRepository, clock: FrozenClock) -> None:
    user = await users.insert_user(None, email="a@b.com", name="A", password_hash="old", role="author")
    assert await users.update_password(None, user_id=user.id, password_hash="new") is True
    assert await users.update_password(None, user_id=999, password_hash="new") is False
    await users.touch_last_login(None, user_id=user.id, at=clock())
    assert user.password_hash == "new"
    assert user.last_login_at == clock()
