"""Auth router: thin HTTP layer over auth_controller."""

from fastapi import APIRouter, Depends, Request, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from proposal_studio.api.deps import get_current_user, get_db
from proposal_studio.controllers import auth_controller
from proposal_studio.core.security import REFRESH_COOKIE
from proposal_studio.models.user import User
from proposal_studio.schemas.auth import LoginRequest, RegisterRequest, UserProfile

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserProfile, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """Create an account and sign it in."""
    user = await auth_controller.handle_register(payload, db)
    await auth_controller.issue_tokens(user, response, db)
    return user


@router.post("/login", response_model=UserProfile)
async def login(
    payload: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    user = await auth_controller.handle_login(payload.email, payload.password, db)
    await auth_controller.issue_tokens(user, response, db)
    return user


@router.get("/me", response_model=UserProfile)
async def get_me(user: User = Depends(get_current_user)):
    """The signed-in user's profile."""
    return user


@router.post("/refresh")
async def refresh_token(
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """Rotate the refresh token and issue a new access token."""
    user = await auth_controller.handle_refresh(request.cookies.get(REFRESH_COOKIE), response, db)
    return {"status": "ok", "user_id": str(user.id)}


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    await auth_controller.handle_logout(request.cookies.get(REFRESH_COOKIE), response, db)
    return {"status": "logged_out"}
