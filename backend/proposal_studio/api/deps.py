"""
Shared FastAPI dependencies.

Routers import get_db, get_current_user and get_text_generator from here,
not from core.security, db.database or core.ai_generators directly, so tests
can override each in one place.
"""

from fastapi import Depends, Request
from sqlmodel.ext.asyncio.session import AsyncSession

from proposal_studio.core.ai_generators import TextGenerator, generate_text
from proposal_studio.core.security import get_current_user as _require_auth
from proposal_studio.db.database import get_db as _get_db
from proposal_studio.models.user import User

__all__ = ["get_db", "get_current_user", "get_text_generator"]


async def get_db() -> AsyncSession:
    """Yield an async database session."""
    async for session in _get_db():
        yield session


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User:
    return await _require_auth(request, db)


def get_text_generator() -> TextGenerator:
    """The external text generator used by the generation endpoints."""
    return generate_text
