"""
SQLModel table for companions.

A companion is a configurable tutor persona: what it teaches (subject,
topic), how it sounds (voice, style) and how long a session is expected
to last. The author is taken from the caller's resolved identity at
creation time and never changes.
"""

from sqlalchemy import CheckConstraint, Index
from sqlmodel import Field

from companion_service.infrastructure.database.base_model import BaseModel


class Companion(BaseModel, table=True):
    """
    Companion model.

    Attributes:
        id: Unique identifier (UUID, store generated)
        name: Display name of the companion
        subject: Subject taught (one of the fixed subjects)
        topic: Free-text topic the companion helps with
        voice: Voice identifier (male, female)
        style: Delivery style (formal, casual)
        duration: Expected session duration in minutes (>= 1)
        author: Identity of the user who created the companion
        created_at: Timestamp when the companion was created

    Indexes:
        - author: Fast retrieval and counting of a user's companions
        - created_at, id: Stable library pagination

    Example:
        >>> companion = Companion(
        ...     name="Neura",
        ...     subject="science",
        ...     topic="brain",
        ...     voice="female",
        ...     style="casual",
        ...     duration=30,
        ...     author="user_2abc",
        ... )
    """

    __tablename__ = "companions"

    name: str = Field(
        nullable=False,
        max_length=255,
        sa_column_kwargs={"comment": "Companion display name"}
    )

    subject: str = Field(
        nullable=False,
        max_length=100,
        index=True,
        sa_column_kwargs={"comment": "Subject taught by the companion"}
    )

    topic: str = Field(
        nullable=False,
        sa_column_kwargs={"comment": "Topic the companion helps with"}
    )

    voice: str = Field(
        nullable=False,
        max_length=50,
        sa_column_kwargs={"comment": "Voice identifier: male, female"}
    )

    style: str = Field(
        nullable=False,
        max_length=50,
        sa_column_kwargs={"comment": "Delivery style: formal, casual"}
    )

    duration: int = Field(
        nullable=False,
        ge=1,
        sa_column_kwargs={"comment": "Expected session duration in minutes"}
    )

    author: str = Field(
        nullable=False,
        max_length=255,
        index=True,
        sa_column_kwargs={"comment": "Identity of the creating user"}
    )

    __table_args__ = (
        Index("ix_companions_created_at_id", "created_at", "id"),
        CheckConstraint("duration >= 1", name="ck_companions_duration_positive"),
    )

    def __repr__(self) -> str:
        return (
            f"Companion(id={self.id}, "
            f"name={self.name!r}, "
            f"subject={self.subject!r}, "
            f"author={self.author!r})"
        )
