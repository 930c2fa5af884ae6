"""Session history endpoints shared by all users."""

from fastapi import APIRouter

from companion_service.api.dependencies import Companions, HistoryLimit
from companion_service.api.schemas.companion import CompanionResponse

router = APIRouter()


@router.get("/recent", response_model=list[CompanionResponse])
async def recent_sessions(
    service: Companions,
    limit: HistoryLimit,
) -> list[CompanionResponse]:
    """Companions from the most recent sessions across all users, newest first."""
    companions = await service.get_recent_sessions(limit=limit)
    return [CompanionResponse.model_validate(c) for c in companions]
