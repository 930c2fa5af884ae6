# src/companion_service/infrastructure/database/base_model.py
from datetime import datetime, timezone
from uuid import UUID, uuid4
from sqlalchemy import DateTime, text
from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel(SQLModel):
    """
    Base for all database models.

    Records in this service are append-only, so there is no ``updated_at``.
    ``created_at`` doubles as the ordering key for listings and is always
    timezone-aware UTC.

    Example:
        class Bookmark(BaseModel, table=True):
            __tablename__ = "bookmarks"
            companion_id: UUID = Field(foreign_key="companions.id")
            user_id: str
    """
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_type=DateTime(timezone=True),
        nullable=False,
        index=True,
        sa_column_kwargs={"server_default": text("CURRENT_TIMESTAMP")}
    )
