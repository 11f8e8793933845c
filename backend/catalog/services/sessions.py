"""Server-side login sessions stored in the ``sessions`` table.

The ``sess`` blob holds the identity claims plus the provider token state:
``expires_at`` (access-token expiry, epoch seconds) and ``refresh_token``.
"""
from __future__ import annotations
import logging
import secrets
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.database import utcnow
from catalog.models.session import AuthSession

logger = logging.getLogger(__name__)


def token_state(tokens: Mapping[str, Any] | None) -> dict[str, Any]:
    """Pick the fields of a token response that are kept in the session."""
    if not tokens:
        return {}
    expires_in = tokens.get("expires_in")
    state: dict[str, Any] = {
        "expires_at": int(utcnow().timestamp()) + int(expires_in) if expires_in else None,
    }
    if tokens.get("refresh_token"):
        state["refresh_token"] = tokens["refresh_token"]
    return state


def token_expired(session: AuthSession) -> bool:
    expires_at = session.sess.get("expires_at")
    return expires_at is not None and utcnow().timestamp() >= expires_at


async def create_session(
    db: AsyncSession,
    claims: dict,
    expires_at: datetime,
    tokens: Mapping[str, Any] | None = None,
) -> str:
    """Persist a new session for the given identity claims and return its id."""
    sid = secrets.token_urlsafe(32)
    sess = {"claims": claims, **token_state(tokens)}
    db.add(AuthSession(sid=sid, sess=sess, expire=expires_at))
    await db.commit()
    return sid


async def get_session(db: AsyncSession, sid: str) -> AuthSession | None:
    """Return the session if it exists and has not expired."""
    result = await db.execute(
        select(AuthSession).where(AuthSession.sid == sid, AuthSession.expire > utcnow())
    )
    return result.scalar_one_or_none()


async def update_session_tokens(db: AsyncSession, session: AuthSession, tokens: Mapping[str, Any]) -> None:
    # new dict so the JSON column is flagged dirty
    session.sess = {**session.sess, **token_state(tokens)}
    await db.commit()


async def delete_session(db: AsyncSession, sid: str) -> None:
    await db.execute(delete(AuthSession).where(AuthSession.sid == sid))
    await db.commit()


async def prune_expired_sessions(db: AsyncSession) -> int:
    result = await db.execute(delete(AuthSession).where(AuthSession.expire <= utcnow()))
    await db.commit()
    removed = result.rowcount or 0
    if removed:
        logger.info(f"Pruned {removed} expired sessions")
    return removed
