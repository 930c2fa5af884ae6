"""Subject catalog for the library filter."""

from fastapi import APIRouter

from companion_service.api.schemas.companion import SubjectResponse
from companion_service.domain.subjects import Subject, get_subject_color

router = APIRouter()


@router.get("", response_model=list[SubjectResponse])
async def list_subjects() -> list[SubjectResponse]:
    return [SubjectResponse(name=s.value, color=get_subject_color(s.value)) for s in Subject]
