from typing import TYPE_CHECKING

from sqlmodel import Field, Relationship

from proposal_studio.models.base import BaseUUIDModel

if TYPE_CHECKING:
    from proposal_studio.models.project import Project
    from proposal_studio.models.refresh_token import RefreshToken


class User(BaseUUIDModel, table=True):
    __tablename__ = "users"

    email: str = Field(max_length=320, unique=True, index=True)
    full_name: str = Field(max_length=100)
    hashed_password: str = Field(max_length=255)
    is_active: bool = Field(default=True)

    projects: list["Project"] = Relationship(
        back_populates="user",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )
    refresh_tokens: list["RefreshToken"] = Relationship(
        back_populates="user",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )
