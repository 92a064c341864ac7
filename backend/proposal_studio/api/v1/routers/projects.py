import uuid
from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from proposal_studio.api.deps import get_current_user, get_db
from proposal_studio.controllers import project_controller
from proposal_studio.models.user import User
from proposal_studio.schemas.project import ProjectCreate, ProjectRead

router = APIRouter(prefix="/projects", tags=["projects"])


@router.post("", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
async def create_project(
    payload: ProjectCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Save a generated document."""
    return await project_controller.create_project(user, payload, db)


@router.get("", response_model=list[ProjectRead])
async def list_projects(
    limit: int = Query(project_controller.DEFAULT_RECENT_LIMIT, ge=1, le=100),
    order: Literal["asc", "desc"] = Query("desc", description="Sort by creation time"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await project_controller.list_projects(user, db, limit=limit, order=order)


@router.get("/{project_id}", response_model=ProjectRead)
async def get_project(
    project_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await project_controller.get_project(user, project_id, db)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await project_controller.delete_project(user, project_id, db)
