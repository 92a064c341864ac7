import uuid

from sqlmodel.ext.asyncio.session import AsyncSession

from proposal_studio.controllers import project_controller, results_controller
from proposal_studio.models.user import User
from proposal_studio.schemas.auth import UserProfile
from proposal_studio.schemas.pages import DashboardPagePayload
from proposal_studio.schemas.project import ProjectRead
from proposal_studio.schemas.results import ResultsView


async def get_dashboard_page(user: User, db: AsyncSession) -> DashboardPagePayload:
    projects = await project_controller.list_projects(user, db)
    return DashboardPagePayload(
        profile=UserProfile.model_validate(user),
        recent_projects=[ProjectRead.model_validate(p) for p in projects],
        project_count=await project_controller.count_projects(user, db),
    )


async def get_results_page(user: User, project_id: uuid.UUID, db: AsyncSession) -> ResultsView:
    project = await project_controller.get_project(user, project_id, db)
    return results_controller.build_results_view(project_controller.project_context(project))
