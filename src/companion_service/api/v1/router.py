"""
API v1 router aggregator.

Routes included in v1:
    - /companions - Library search, creation, lookup, bookmarks, sessions
    - /sessions - Recent sessions across users
    - /users/me - The caller's companions, bookmarks, sessions and journey
    - /subjects - Subject catalog

Routes NOT versioned (kept at root level):
    - /health, /health/ready
"""

from fastapi import APIRouter

from companion_service.api.routes import companions, sessions, subjects, users


# Create main v1 router
router = APIRouter()

router.include_router(
    companions.router,
    prefix="/companions",
    tags=["Companions"]
)

router.include_router(
    sessions.router,
    prefix="/sessions",
    tags=["Sessions"]
)

router.include_router(
    users.router,
    prefix="/users/me",
    tags=["Me"]
)

router.include_router(
    subjects.router,
    prefix="/subjects",
    tags=["Subjects"]
)


__all__ = ["router"]
