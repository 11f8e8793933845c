import logging
import secrets
from typing import Any

from fastapi import Depends, HTTPException, Request
from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.config import get_settings
from catalog.database import get_db
from catalog.services.identity import IdentityClient, IdentityProviderError
from catalog.services.sessions import get_session, token_expired, update_session_tokens
from catalog.services.storage import DatabaseStorage

logger = logging.getLogger(__name__)
settings = get_settings()

_identity_client: IdentityClient | None = None


def get_storage(db: AsyncSession = Depends(get_db)) -> DatabaseStorage:
    return DatabaseStorage(db)


def get_identity_client() -> IdentityClient:
    global _identity_client
    if _identity_client is None:
        _identity_client = IdentityClient(
            settings.oidc_issuer_url,
            settings.oidc_client_id,
            settings.oidc_client_secret,
            settings.oidc_scopes,
        )
    return _identity_client


async def close_identity_client():
    global _identity_client
    if _identity_client is not None:
        await _identity_client.close()
    _identity_client = None


async def get_current_user_id(
    request: Request,
    db: AsyncSession = Depends(get_db),
    identity: IdentityClient = Depends(get_identity_client),
) -> str:
    """Resolve the session cookie to the logged-in user's id (the ``sub`` claim).

    Once the provider access token has expired the session is renewed with its
    refresh token; without one, or if the provider refuses, the request is 401.
    """
    sid = request.cookies.get(settings.session_cookie_name)
    if not sid:
        raise HTTPException(401, "Unauthorized")
    session = await get_session(db, sid)
    if session is None:
        raise HTTPException(401, "Unauthorized")
    if token_expired(session):
        refresh_token = session.sess.get("refresh_token")
        if not refresh_token:
            raise HTTPException(401, "Unauthorized")
        try:
            tokens = await identity.refresh_tokens(refresh_token)
        except IdentityProviderError as e:
            logger.warning(f"Session refresh failed: {e}")
            raise HTTPException(401, "Unauthorized")
        await update_session_tokens(db, session, tokens)
    sub = (session.sess.get("claims") or {}).get("sub")
    if not sub:
        raise HTTPException(401, "Unauthorized")
    return str(sub)


def check_admin_password(password: Any) -> None:
    if not isinstance(password, str) or not secrets.compare_digest(
        password.encode(), settings.admin_password.encode()
    ):
        raise HTTPException(401, "Invalid admin password")


async def require_admin(request: Request) -> dict[str, Any]:
    """Check the admin password carried in the JSON body and return the body.

    The password is checked before anything else in the payload is looked at.
    """
    try:
        payload = await request.json()
    except ValueError:
        payload = {}
    if not isinstance(payload, dict):
        payload = {}
    check_admin_password(payload.get("password"))
    return payload


def parse_admin_payload(model: type[BaseModel], payload: dict[str, Any], key: str, message: str):
    """Validate either the nested ``payload[key]`` object or the flat payload."""
    data = payload[key] if payload.get(key) is not None else payload
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise HTTPException(
            400,
            {"message": message, "errors": e.errors(include_url=False, include_context=False)},
        )
