"""SQLModel table for user bookmarks."""

from uuid import UUID

from sqlalchemy import Index
from sqlmodel import Field

from companion_service.infrastructure.database.base_model import BaseModel


class Bookmark(BaseModel, table=True):
    """
    A saved association between a user and a companion.

    The (companion_id, user_id) pair is not unique: repeated adds insert
    repeated rows. Listings collapse them to one companion and removal
    deletes every row of the pair.
    """

    __tablename__ = "bookmarks"

    companion_id: UUID = Field(
        foreign_key="companions.id",
        ondelete="CASCADE",
        nullable=False,
        index=True,
        sa_column_kwargs={"comment": "Bookmarked companion"}
    )

    user_id: str = Field(
        nullable=False,
        max_length=255,
        index=True,
        sa_column_kwargs={"comment": "Identity of the bookmark owner"}
    )

    __table_args__ = (
        Index("ix_bookmarks_user_id_companion_id", "user_id", "companion_id"),
    )

    def __repr__(self) -> str:
        return (
            f"Bookmark(id={self.id}, "
            f"companion_id={self.companion_id}, "
            f"user_id={self.user_id!r})"
        )
