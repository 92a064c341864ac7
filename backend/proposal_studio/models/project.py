from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Column, JSON
from sqlmodel import Field, Relationship

from proposal_studio.models.base import BaseUUIDModel

if TYPE_CHECKING:
    from proposal_studio.models.user import User


class Project(BaseUUIDModel, table=True):
    """A saved generated document."""

    __tablename__ = "projects"

    user_id: UUID = Field(foreign_key="users.id", index=True)
    title: str = Field(max_length=255)
    document_type: str = Field(max_length=20)  # proposal, pitch-deck
    status: str = Field(default="completed", max_length=50)  # draft, completed
    template_id: str | None = Field(default=None, max_length=50)

    # ProposalContent or PitchDeckContent in wire (camelCase) form
    content: dict = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    document_metadata: dict = Field(
        default_factory=dict, sa_column=Column("metadata", JSON, nullable=False)
    )

    user: "User" = Relationship(back_populates="projects")
