import logging
import uuid
from typing import Literal

from fastapi import HTTPException
from sqlalchemy import func, select
from sqlmodel.ext.asyncio.session import AsyncSession

from proposal_studio.core.templates import get_template
from proposal_studio.models.project import Project
from proposal_studio.models.user import User
from proposal_studio.schemas.document import GeneratedDocument
from proposal_studio.schemas.project import ProjectCreate
from proposal_studio.schemas.results import ResultsContext
from proposal_studio.schemas.template import DocumentType

logger = logging.getLogger(__name__)

DEFAULT_RECENT_LIMIT = 5


def default_title(payload: ProjectCreate) -> str:
    kind = "Proposal" if payload.document_type == DocumentType.proposal else "Pitch Deck"
    return f"{payload.metadata.company_name} {kind}"


async def create_project(user: User, payload: ProjectCreate, db: AsyncSession) -> Project:
    if payload.template_id and get_template(payload.template_id, payload.document_type) is None:
        raise HTTPException(status_code=422, detail=f"Unknown template '{payload.template_id}'")

    document = payload.to_document()
    project = Project(
        user_id=user.id,
        title=(payload.title or "").strip() or default_title(payload),
        document_type=payload.document_type.value,
        status=payload.status,
        template_id=payload.template_id,
        content=document.content.model_dump(mode="json", by_alias=True, exclude_none=True),
        document_metadata=document.metadata.model_dump(mode="json", by_alias=True),
    )
    db.add(project)
    await db.flush()
    await db.refresh(project)
    logger.info("Saved %s project %s for user %s", project.document_type, project.id, user.id)
    return project


async def list_projects(
    user: User,
    db: AsyncSession,
    limit: int | None = DEFAULT_RECENT_LIMIT,
    order: Literal["asc", "desc"] = "desc",
) -> list[Project]:
    query = select(Project).where(Project.user_id == user.id)
    if order == "desc":
        query = query.order_by(Project.created_at.desc())
    else:
        query = query.order_by(Project.created_at.asc())
    if limit is not None:
        query = query.limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


async def count_projects(user: User, db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count()).select_from(Project).where(Project.user_id == user.id)
    )
    return result.scalar_one()


async def get_project(user: User, project_id: uuid.UUID, db: AsyncSession) -> Project:
    project = await db.get(Project, project_id)
    if not project or project.user_id != user.id:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


async def delete_project(user: User, project_id: uuid.UUID, db: AsyncSession) -> None:
    project = await get_project(user, project_id, db)
    await db.delete(project)
    await db.flush()


def project_context(project: Project) -> ResultsContext | None:
    """The results context of a saved project; ``None`` if its stored document no longer reads."""
    document_type = DocumentType(project.document_type)
    key = "proposal" if document_type == DocumentType.proposal else "pitch_deck"
    try:
        document = GeneratedDocument(
            document_type=document_type,
            metadata=project.document_metadata,
            **{key: project.content},
        )
    except ValueError as exc:
        logger.warning("Project %s holds an unreadable document: %s", project.id, exc)
        return None
    return ResultsContext(document=document, template_id=project.template_id)
