"""Login flow against the OpenID Connect provider, plus the current-user endpoint."""
import logging
import secrets
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.api.deps import get_current_user_id, get_identity_client, get_storage
from catalog.config import get_settings
from catalog.database import get_db, utcnow
from catalog.schemas.user import UserResponse, UserUpsert
from catalog.services.identity import IdentityClient, IdentityProviderError
from catalog.services.sessions import create_session, delete_session
from catalog.services.storage import DatabaseStorage

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["auth"])
settings = get_settings()

STATE_COOKIE = "oauth_state"


def _redirect_uri(request: Request) -> str:
    return str(request.base_url).rstrip("/") + settings.oidc_redirect_path


def _back_to_login() -> RedirectResponse:
    response = RedirectResponse("/api/login", status_code=302)
    response.delete_cookie(STATE_COOKIE)
    return response


@router.get("/login")
async def login(request: Request, identity: IdentityClient = Depends(get_identity_client)):
    state = secrets.token_urlsafe(24)
    url = await identity.authorization_url(state, _redirect_uri(request))
    response = RedirectResponse(url, status_code=302)
    response.set_cookie(
        STATE_COOKIE,
        state,
        max_age=600,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    return response


@router.get("/callback")
async def callback(
    request: Request,
    code: str | None = None,
    state: str | None = None,
    identity: IdentityClient = Depends(get_identity_client),
    storage: DatabaseStorage = Depends(get_storage),
    db: AsyncSession = Depends(get_db),
):
    expected = request.cookies.get(STATE_COOKIE)
    if not code or not state or not expected or not secrets.compare_digest(state, expected):
        logger.warning("Login callback with missing or mismatched state")
        return _back_to_login()

    redirect_uri = _redirect_uri(request)
    try:
        tokens = await identity.exchange_code(code, redirect_uri)
        claims = await identity.fetch_userinfo(tokens["access_token"])
    except (IdentityProviderError, KeyError) as e:
        logger.warning(f"Login callback failed: {e}")
        return _back_to_login()

    await storage.upsert_user(UserUpsert.from_claims(claims).model_dump())
    ttl = timedelta(days=settings.session_ttl_days)
    sid = await create_session(db, claims, utcnow() + ttl, tokens)

    response = RedirectResponse("/", status_code=302)
    response.delete_cookie(STATE_COOKIE)
    response.set_cookie(
        settings.session_cookie_name,
        sid,
        max_age=int(ttl.total_seconds()),
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    return response


@router.get("/logout")
async def logout(
    request: Request,
    identity: IdentityClient = Depends(get_identity_client),
    db: AsyncSession = Depends(get_db),
):
    sid = request.cookies.get(settings.session_cookie_name)
    if sid:
        await delete_session(db, sid)

    target = "/"
    try:
        target = await identity.end_session_url(str(request.base_url)) or "/"
    except IdentityProviderError as e:
        logger.warning(f"Could not resolve provider logout URL: {e}")

    response = RedirectResponse(target, status_code=302)
    response.delete_cookie(settings.session_cookie_name)
    return response


@router.get("/auth/user", response_model=UserResponse)
async def current_user(
    user_id: str = Depends(get_current_user_id),
    storage: DatabaseStorage = Depends(get_storage),
):
    user = await storage.get_user(user_id)
    if not user:
        raise HTTPException(404, "User not found")
    return user
