import uuid

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from proposal_studio.api.deps import get_current_user, get_db
from proposal_studio.controllers import pages_controller
from proposal_studio.models.user import User
from proposal_studio.schemas.pages import DashboardPagePayload
from proposal_studio.schemas.results import ResultsView

router = APIRouter(prefix="/pages", tags=["pages"])


@router.get("/dashboard", response_model=DashboardPagePayload)
async def get_dashboard_page(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Profile plus the five most recent projects."""
    return await pages_controller.get_dashboard_page(user, db)


@router.get("/results/{project_id}", response_model=ResultsView, response_model_exclude_none=True)
async def get_results_page(
    project_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """A saved project rendered the same way as a fresh result."""
    return await pages_controller.get_results_page(user, project_id, db)
