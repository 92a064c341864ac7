# Import all models so SQLModel.metadata registers them for Alembic autogenerate.
from proposal_studio.models.base import BaseUUIDModel  # noqa: F401
from proposal_studio.models.user import User  # noqa: F401
from proposal_studio.models.refresh_token import RefreshToken  # noqa: F401
from proposal_studio.models.project import Project  # noqa: F401
