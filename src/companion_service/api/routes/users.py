"""Endpoints scoped to the signed-in user."""

from fastapi import APIRouter

from companion_service.api.dependencies import Companions, CurrentIdentity, HistoryLimit
from companion_service.api.schemas.companion import CompanionResponse, JourneyResponse

router = APIRouter()


def _companions(items) -> list[CompanionResponse]:
    return [CompanionResponse.model_validate(c) for c in items]


@router.get("/companions", response_model=list[CompanionResponse])
async def my_companions(identity: CurrentIdentity, service: Companions) -> list[CompanionResponse]:
    """Companions the caller authored, newest first."""
    return _companions(await service.get_user_companions(identity.user_id))


@router.get("/bookmarks", response_model=list[CompanionResponse])
async def my_bookmarks(identity: CurrentIdentity, service: Companions) -> list[CompanionResponse]:
    """Companions the caller bookmarked, most recently bookmarked first."""
    return _companions(await service.get_bookmarked_companions(identity.user_id))


@router.get("/sessions", response_model=list[CompanionResponse])
async def my_sessions(
    identity: CurrentIdentity,
    service: Companions,
    limit: HistoryLimit,
) -> list[CompanionResponse]:
    """Companions from the caller's most recent sessions, newest first."""
    return _companions(await service.get_user_sessions(identity.user_id, limit=limit))


@router.get("/journey", response_model=JourneyResponse)
async def my_journey(identity: CurrentIdentity, service: Companions) -> JourneyResponse:
    """Summary for the "my journey" page."""
    journey = await service.get_user_journey(identity.user_id)
    return JourneyResponse(
        companions_created=journey.companions_created,
        lessons_completed=journey.lessons_completed,
        companions=_companions(journey.companions),
        sessions=_companions(journey.sessions),
        bookmarks=_companions(journey.bookmarks),
    )
