"""Request and response schemas for companion endpoints."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field

from companion_service.domain.subjects import Style, Subject, Voice, get_subject_color


class CompanionCreate(BaseModel):
    """
    Companion authoring form.

    All fields are required. Strings are trimmed and must not be empty;
    ``duration`` accepts numeric strings and is coerced to an int of at
    least 1. The author is never part of the form.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255, examples=["Neura the Brainy Explorer"])
    subject: Subject = Field(..., examples=["science"])
    topic: str = Field(..., min_length=1, examples=["Neural Network of the Brain"])
    voice: Voice = Field(..., examples=["female"])
    style: Style = Field(..., examples=["casual"])
    duration: int = Field(..., ge=1, description="Session duration in minutes", examples=[15])

    def to_record(self) -> dict[str, Any]:
        """Plain values for the service layer (enums flattened to their strings)."""
        return self.model_dump(mode="json")


class CompanionResponse(BaseModel):
    """A companion as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    subject: str
    topic: str
    voice: str
    style: str
    duration: int
    author: str
    created_at: datetime

    @computed_field  # type: ignore[prop-decorator]
    @property
    def color(self) -> str:
        """Display color of the companion's subject."""
        return get_subject_color(self.subject)


class QuotaResponse(BaseModel):
    """Result of the creation permission check."""

    allowed: bool = Field(..., description="Whether the caller may create another companion")
    limit: Optional[int] = Field(None, description="Companion cap; null for unlimited plans")
    used: Optional[int] = Field(None, description="Companions already authored; null when not counted")
    unlimited: bool = Field(False, description="Caller's plan has no cap")


class BookmarkRequest(BaseModel):
    """Bookmark toggle; ``path`` is the view to refresh afterwards."""

    model_config = ConfigDict(str_strip_whitespace=True)

    path: str = Field(..., min_length=1, pattern=r"^/", examples=["/companions", "/my-journey"])


class SessionRecordedResponse(BaseModel):
    """A recorded session history entry."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    companion_id: UUID
    user_id: str
    created_at: datetime


class AssistantConfigResponse(BaseModel):
    """Voice assistant payload plus the per-call overrides for one companion."""

    companion_id: UUID
    assistant: dict[str, Any]
    overrides: dict[str, Any]


class JourneyResponse(BaseModel):
    """The "my journey" summary for the caller."""

    companions_created: int
    lessons_completed: int
    companions: list[CompanionResponse]
    sessions: list[CompanionResponse]
    bookmarks: list[CompanionResponse]


class SubjectResponse(BaseModel):
    name: str
    color: str
