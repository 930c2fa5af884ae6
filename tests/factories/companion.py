# tests/factories/companion.py
"""Factories for companions, bookmarks and session history rows."""

from datetime import datetime, timedelta, timezone

import factory

from companion_service.infrastructure.database.models import Bookmark, Companion, SessionHistoryEntry
from tests.factories.base import AsyncSQLModelFactory

# Fixed origin so ordering tests do not depend on the wall clock
EPOCH = datetime(2025, 1, 1, 9, 0, 0, tzinfo=timezone.utc)


def _minutes(n: int) -> datetime:
    return EPOCH + timedelta(minutes=n)


class CompanionFactory(AsyncSQLModelFactory):
    """
    Companion with a strictly increasing ``created_at``.

    Usage:
        maths = await CompanionFactory.create_async(db_session, subject="maths")
    """

    class Meta:
        model = Companion

    name = factory.Sequence(lambda n: f"Companion {n}")
    subject = "science"
    topic = factory.Sequence(lambda n: f"Topic {n}")
    voice = "female"
    style = "casual"
    duration = 15
    author = "author_1"
    created_at = factory.Sequence(_minutes)


class BookmarkFactory(AsyncSQLModelFactory):
    class Meta:
        model = Bookmark

    companion_id = factory.LazyAttribute(lambda o: o.companion.id)
    user_id = "user_1"
    created_at = factory.Sequence(_minutes)

    class Params:
        companion = None


class SessionHistoryFactory(AsyncSQLModelFactory):
    class Meta:
        model = SessionHistoryEntry

    companion_id = factory.LazyAttribute(lambda o: o.companion.id)
    user_id = "user_1"
    created_at = factory.Sequence(_minutes)

    class Params:
        companion = None
