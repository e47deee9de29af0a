"""
API Version 1 Router.

Aggregates all v1 endpoint routers.
"""

from fastapi import APIRouter

from studynotes.api.v1.endpoints import (
    attachments,
    auth,
    groups,
    notes,
    subjects,
    tags,
    users,
)

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(notes.router, prefix="/notes", tags=["notes"])
router.include_router(subjects.router, prefix="/subjects", tags=["subjects"])
router.include_router(tags.router, prefix="/tags", tags=["tags"])
router.include_router(groups.router, prefix="/groups", tags=["groups"])
router.include_router(attachments.router, prefix="/attachments", tags=["attachments"])
