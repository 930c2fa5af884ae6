"""
Companion library endpoints.

Library listing, creation behind the plan quota, single companion lookup,
voice assistant configuration, bookmarks and session recording.
"""

from typing import Optional
from urllib.parse import urlencode
from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from companion_service.api.dependencies import Companions, CurrentIdentity, OptionalIdentity, Pages, PageSize
from companion_service.api.schemas.companion import (
    AssistantConfigResponse,
    BookmarkRequest,
    CompanionCreate,
    CompanionResponse,
    QuotaResponse,
    SessionRecordedResponse,
)
from companion_service.api.schemas.pagination import PaginatedResponse, PaginationMeta
from companion_service.domain.assistant import configure_assistant, session_overrides
from companion_service.domain.exceptions import CompanionLimitReached, CompanionNotFound
from companion_service.infrastructure.database.models import Companion
from companion_service.services.companion_service import LIBRARY_PATH, CompanionService

router = APIRouter()


async def _get_or_404(service: CompanionService, companion_id: UUID) -> Companion:
    companion = await service.get_companion(companion_id)
    if companion is None:
        raise CompanionNotFound(details={"companion_id": str(companion_id)})
    return companion


@router.get("", response_model=PaginatedResponse[CompanionResponse])
async def list_companions(
    service: Companions,
    pages: Pages,
    limit: PageSize,
    subject: Optional[str] = Query(None, description="Subject contains this term"),
    topic: Optional[str] = Query(None, description="Topic or name contains this term"),
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
) -> dict:
    """Search the companion library. Results are served from the page cache when fresh."""
    query = urlencode({"subject": subject or "", "topic": topic or "", "page": page, "limit": limit})

    cached = await pages.get(LIBRARY_PATH, query)
    if cached is not None:
        return cached

    result = await service.get_all_companions(subject=subject, topic=topic, page=page, limit=limit)
    payload = PaginatedResponse[CompanionResponse](
        items=[CompanionResponse.model_validate(c) for c in result.items],
        pagination=PaginationMeta.from_result(result),
    ).model_dump(mode="json")

    await pages.set(LIBRARY_PATH, query, payload)
    return payload


@router.post("", response_model=CompanionResponse, status_code=status.HTTP_201_CREATED)
async def create_companion(
    form: CompanionCreate,
    identity: CurrentIdentity,
    service: Companions,
) -> CompanionResponse:
    """Create a companion authored by the caller, if their plan allows another one."""
    quota = await service.get_creation_quota(identity)
    if not quota.allowed:
        raise CompanionLimitReached(details={"limit": quota.limit, "used": quota.used})

    companion = await service.create_companion(form.to_record(), identity)
    return CompanionResponse.model_validate(companion)


@router.get("/permissions", response_model=QuotaResponse)
async def get_permissions(identity: CurrentIdentity, service: Companions) -> QuotaResponse:
    """Whether the caller may create another companion, with their cap and usage."""
    quota = await service.get_creation_quota(identity)
    return QuotaResponse(
        allowed=quota.allowed,
        limit=quota.limit,
        used=quota.used,
        unlimited=quota.unlimited,
    )


@router.get("/{companion_id}", response_model=CompanionResponse)
async def get_companion(companion_id: UUID, service: Companions) -> CompanionResponse:
    companion = await _get_or_404(service, companion_id)
    return CompanionResponse.model_validate(companion)


@router.get("/{companion_id}/assistant", response_model=AssistantConfigResponse)
async def get_assistant_config(companion_id: UUID, service: Companions) -> AssistantConfigResponse:
    """Voice assistant definition and call overrides for starting a session."""
    companion = await _get_or_404(service, companion_id)
    return AssistantConfigResponse(
        companion_id=companion.id,
        assistant=configure_assistant(companion.voice, companion.style),
        overrides=session_overrides(companion.subject, companion.topic, companion.style),
    )


@router.post("/{companion_id}/bookmark", status_code=status.HTTP_204_NO_CONTENT)
async def add_bookmark(
    companion_id: UUID,
    body: BookmarkRequest,
    identity: OptionalIdentity,
    service: Companions,
) -> Response:
    """Bookmark a companion. Anonymous calls are accepted and ignored."""
    await _get_or_404(service, companion_id)
    await service.add_bookmark(companion_id, body.path, identity)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{companion_id}/bookmark", status_code=status.HTTP_204_NO_CONTENT)
async def remove_bookmark(
    companion_id: UUID,
    identity: OptionalIdentity,
    service: Companions,
    path: str = Query(..., min_length=1, pattern=r"^/", description="View to refresh"),
) -> Response:
    """Remove the caller's bookmark. Anonymous calls are accepted and ignored."""
    await service.remove_bookmark(companion_id, path, identity)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{companion_id}/sessions",
    response_model=SessionRecordedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_session(
    companion_id: UUID,
    identity: OptionalIdentity,
    service: Companions,
) -> SessionRecordedResponse:
    """Record a finished voice session with a companion."""
    await _get_or_404(service, companion_id)
    entry = await service.add_to_session_history(companion_id, identity)
    return SessionRecordedResponse.model_validate(entry)
