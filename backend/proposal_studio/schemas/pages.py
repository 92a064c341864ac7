from pydantic import BaseModel

from proposal_studio.schemas.auth import UserProfile
from proposal_studio.schemas.project import ProjectRead


class DashboardPagePayload(BaseModel):
    profile: UserProfile
    recent_projects: list[ProjectRead]
    project_count: int
