import uuid

from fastapi import APIRouter, Depends, HTTPException

from proposal_studio.api.deps import get_current_user
from proposal_studio.models.user import User
from proposal_studio.schemas.auth import UserProfile

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{user_id}", response_model=UserProfile)
async def get_profile(
    user_id: uuid.UUID,
    user: User = Depends(get_current_user),
):
    """A user's own profile; other users' profiles are not visible."""
    if user_id != user.id:
        raise HTTPException(status_code=404, detail="User not found")
    return user
