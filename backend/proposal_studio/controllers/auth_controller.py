"""Auth controller: registration, login and cookie-based session handling."""

import logging
from datetime import datetime, timezone

from fastapi import HTTPException, Response
from sqlalchemy import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from proposal_studio.core.config import ModeEnum, settings
from proposal_studio.core.security import (
    ACCESS_COOKIE,
    REFRESH_COOKIE,
    create_access_token,
    create_refresh_token,
    hash_password,
    hash_token,
    verify_password,
)
from proposal_studio.models.refresh_token import RefreshToken
from proposal_studio.models.user import User
from proposal_studio.schemas.auth import RegisterRequest

logger = logging.getLogger(__name__)


def _set_auth_cookies(response: Response, access_token: str, refresh_token: str) -> None:
    is_secure = settings.MODE != ModeEnum.development
    response.set_cookie(
        key=ACCESS_COOKIE,
        value=access_token,
        httponly=True,
        secure=is_secure,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        path="/",
    )
    response.set_cookie(
        key=REFRESH_COOKIE,
        value=refresh_token,
        httponly=True,
        secure=is_secure,
        samesite="lax",
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 86400,
        path="/",
    )


def _clear_auth_cookies(response: Response) -> None:
    response.delete_cookie(ACCESS_COOKIE, path="/")
    response.delete_cookie(REFRESH_COOKIE, path="/")


def _normalize_email(email: str) -> str:
    return email.strip().lower()


# ── Email / Password Auth ────────────────────────────────────

async def handle_register(payload: RegisterRequest, db: AsyncSession) -> User:
    email = _normalize_email(payload.email)
    result = await db.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none():
        raise HTTPException(status_code=409, detail="Email already registered")

    user = User(
        email=email,
        full_name=payload.full_name.strip(),
        hashed_password=hash_password(payload.password),
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    logger.info("Registered user %s", user.id)
    return user


async def handle_login(email: str, password: str, db: AsyncSession) -> User:
    result = await db.execute(select(User).where(User.email == _normalize_email(email)))
    user = result.scalar_one_or_none()

    if not user or not verify_password(password, user.hashed_password):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if not user.is_active:
        raise HTTPException(status_code=401, detail="Account is inactive")
    return user


# ── Token Issuance ────────────────────────────────────────────

async def issue_tokens(user: User, response: Response, db: AsyncSession) -> None:
    access_token = create_access_token(user.id)
    refresh_token = await create_refresh_token(user.id, db)
    _set_auth_cookies(response, access_token, refresh_token)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


async def handle_refresh(
    refresh_token_value: str | None,
    response: Response,
    db: AsyncSession,
) -> User:
    """
    Validate a refresh token, rotate it, and issue a new access token.

    Reuse of an already revoked token revokes every live token of that user,
    forcing a fresh login everywhere.
    """
    if not refresh_token_value:
        raise HTTPException(status_code=401, detail="No refresh token")

    result = await db.execute(
        select(RefreshToken).where(RefreshToken.token_hash == hash_token(refresh_token_value))
    )
    token_record = result.scalar_one_or_none()
    if not token_record:
        raise HTTPException(status_code=401, detail="Invalid refresh token")

    if token_record.is_revoked:
        await db.execute(
            update(RefreshToken)
            .where(
                RefreshToken.user_id == token_record.user_id,
                RefreshToken.is_revoked == False,  # noqa: E712
            )
            .values(is_revoked=True)
        )
        # commit explicitly: the HTTPException below rolls the request session back
        await db.commit()
        logger.warning("Refresh token reuse for user %s; all sessions revoked", token_record.user_id)
        raise HTTPException(status_code=401, detail="Refresh token reuse detected")

    if _as_utc(token_record.expires_at) < datetime.now(timezone.utc):
        raise HTTPException(status_code=401, detail="Refresh token expired")

    token_record.is_revoked = True

    user = await db.get(User, token_record.user_id)
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="User not found or inactive")

    await issue_tokens(user, response, db)
    return user


# ── Logout ────────────────────────────────────────────────────

async def handle_logout(
    refresh_token_value: str | None,
    response: Response,
    db: AsyncSession,
) -> None:
    """Revoke the refresh token (if any) and clear cookies."""
    if refresh_token_value:
        result = await db.execute(
            select(RefreshToken).where(RefreshToken.token_hash == hash_token(refresh_token_value))
        )
        token_record = result.scalar_one_or_none()
        if token_record:
            token_record.is_revoked = True

    _clear_auth_cookies(response)
