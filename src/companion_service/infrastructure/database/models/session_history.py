"""SQLModel table for completed companion sessions."""

from uuid import UUID

from sqlalchemy import Index
from sqlmodel import Field

from companion_service.infrastructure.database.base_model import BaseModel


class SessionHistoryEntry(BaseModel, table=True):
    """
    One completed voice session between a user and a companion.

    Append-only: a row is written every time a session ends, with no
    de-duplication. ``created_at`` is assigned at insert and orders the
    history newest first.
    """

    __tablename__ = "session_history"

    companion_id: UUID = Field(
        foreign_key="companions.id",
        ondelete="CASCADE",
        nullable=False,
        index=True,
        sa_column_kwargs={"comment": "Companion the session was held with"}
    )

    user_id: str = Field(
        nullable=False,
        max_length=255,
        index=True,
        sa_column_kwargs={"comment": "Identity of the user who held the session"}
    )

    __table_args__ = (
        Index("ix_session_history_user_id_created_at", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"SessionHistoryEntry(id={self.id}, "
            f"companion_id={self.companion_id}, "
            f"user_id={self.user_id!r})"
        )
