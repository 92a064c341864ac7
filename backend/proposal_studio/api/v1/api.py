"""API v1: aggregates all routers under a single prefix."""

from fastapi import APIRouter

from proposal_studio.api.v1.routers import (
    auth,
    export,
    generation,
    pages,
    projects,
    results,
    templates,
    users,
)

router = APIRouter()
router.include_router(templates.router)
router.include_router(generation.router)
router.include_router(export.router)
router.include_router(results.router)
router.include_router(auth.router)
router.include_router(users.router)
router.include_router(projects.router)
router.include_router(pages.router)
