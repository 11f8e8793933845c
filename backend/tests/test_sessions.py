import asyncio
from datetime import timedelta

from sqlalchemy import func, select

from catalog.database import utcnow
from catalog.models import AuthSession
from catalog.services import scheduler
from catalog.services.sessions import (
    create_session,
    delete_session,
    get_session,
    prune_expired_sessions,
    token_expired,
    update_session_tokens,
)


async def test_create_and_get_session(db):
    sid = await create_session(db, {"sub": "u-1", "email": "a@example.com"}, utcnow() + timedelta(hours=1))

    session = await get_session(db, sid)
    assert session is not None
    assert session.sess["claims"]["sub"] == "u-1"


async def test_session_ids_are_unique(db):
    expires = utcnow() + timedelta(hours=1)
    sids = {await create_session(db, {"sub": "u-1"}, expires) for _ in range(5)}
    assert len(sids) == 5


async def test_expired_session_is_not_returned(db):
    sid = await create_session(db, {"sub": "u-1"}, utcnow() - timedelta(seconds=1))
    assert await get_session(db, sid) is None


async def test_delete_session(db):
    sid = await create_session(db, {"sub": "u-1"}, utcnow() + timedelta(hours=1))
    await delete_session(db, sid)
    assert await get_session(db, sid) is None


async def test_prune_removes_only_expired(db):
    live = await create_session(db, {"sub": "u-1"}, utcnow() + timedelta(hours=1))
    await create_session(db, {"sub": "u-2"}, utcnow() - timedelta(hours=1))
    await create_session(db, {"sub": "u-3"}, utcnow() - timedelta(days=2))

    assert await prune_expired_sessions(db) == 2
    assert await db.scalar(select(func.count()).select_from(AuthSession)) == 1
    assert await get_session(db, live) is not None


async def test_scheduled_prune_uses_shared_session_factory(db, session_factory, monkeypatch):
    import catalog.database

    await create_session(db, {"sub": "u-1"}, utcnow() - timedelta(hours=1))
    monkeypatch.setattr(catalog.database, "get_sessionmaker", lambda: session_factory)

    await scheduler.prune_sessions()

    assert await db.scalar(select(func.count()).select_from(AuthSession)) == 0


async def test_scheduler_registers_prune_job(monkeypatch):
    fake = scheduler.AsyncIOScheduler()
    monkeypatch.setattr(scheduler, "_scheduler", fake)

    scheduler.start_scheduler()
    try:
        job = fake.get_job("prune_sessions")
        assert job is not None
        assert job.func is scheduler.prune_sessions
    finally:
        scheduler.stop_scheduler()
    # shutdown is applied on the next loop iteration
    await asyncio.sleep(0)
    assert not fake.running


async def test_session_keeps_token_expiry_and_refresh_token(db):
    sid = await create_session(
        db,
        {"sub": "u-1"},
        utcnow() + timedelta(days=1),
        {"access_token": "a", "expires_in": 300, "refresh_token": "r-1"},
    )

    session = await get_session(db, sid)
    assert session.sess["refresh_token"] == "r-1"
    assert not token_expired(session)
    assert session.sess["expires_at"] <= utcnow().timestamp() + 300


async def test_token_expiry(db):
    sid = await create_session(db, {"sub": "u-1"}, utcnow() + timedelta(days=1))
    session = await get_session(db, sid)
    # no token state recorded, nothing to expire
    assert not token_expired(session)

    await update_session_tokens(db, session, {"expires_in": 0})
    assert session.sess["expires_at"] is None

    session.sess = {**session.sess, "expires_at": int(utcnow().timestamp()) - 1}
    await db.commit()
    assert token_expired(await get_session(db, sid))
