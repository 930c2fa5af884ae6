"""
Integration tests for the repositories against SQLite.

Covers the library search filter branches, pagination windows, literal
matching of LIKE wildcards, bookmark ownership and history ordering.
"""

from datetime import timedelta
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from companion_service.domain.exceptions import StoreError
from companion_service.domain.filters import NoFilter, SubjectAndTopic, SubjectOnly, TopicOnly
from companion_service.infrastructure.database.models import Companion
from companion_service.infrastructure.database.repositories import (
    BookmarkRepository,
    CompanionRepository,
    SessionHistoryRepository,
)
from tests.factories import BookmarkFactory, CompanionFactory, SessionHistoryFactory


@pytest.fixture
async def library(db_session: AsyncSession):
    """Four companions spread over subjects, topics and names."""
    return {
        "calculus": await CompanionFactory.create_async(
            db_session, name="Countsy", subject="Mathematics", topic="Derivatives & Integrals"
        ),
        "history": await CompanionFactory.create_async(
            db_session, name="Integrals Historian", subject="History", topic="Ancient Rome"
        ),
        "algebra": await CompanionFactory.create_async(
            db_session, name="Algie", subject="maths", topic="Linear equations"
        ),
        "brain": await CompanionFactory.create_async(
            db_session, name="Neura", subject="science", topic="The Brain"
        ),
    }


def _names(result) -> set[str]:
    return {c.name for c in result.items}


@pytest.mark.integration
class TestCompanionSearch:
    """Four filter branches over the same library."""

    async def test_no_filter_returns_everything(self, db_session, library):
        result = await CompanionRepository(db_session).search(NoFilter())
        assert result.total == 4

    async def test_subject_only(self, db_session, library):
        result = await CompanionRepository(db_session).search(SubjectOnly(subject="MATH"))
        assert _names(result) == {"Countsy", "Algie"}

    async def test_topic_only_matches_topic_or_name(self, db_session, library):
        result = await CompanionRepository(db_session).search(TopicOnly(topic="integrals"))
        assert _names(result) == {"Countsy", "Integrals Historian"}

    async def test_subject_and_topic(self, db_session, library):
        result = await CompanionRepository(db_session).search(
            SubjectAndTopic(subject="math", topic="integrals")
        )
        assert _names(result) == {"Countsy"}

    async def test_subject_and_topic_via_name(self, db_session, library):
        result = await CompanionRepository(db_session).search(
            SubjectAndTopic(subject="science", topic="neura")
        )
        assert _names(result) == {"Neura"}

    async def test_no_match(self, db_session, library):
        result = await CompanionRepository(db_session).search(SubjectOnly(subject="coding"))
        assert result.items == []
        assert result.total == 0
        assert result.total_pages == 0

    async def test_wildcards_match_literally(self, db_session):
        await CompanionFactory.create_async(db_session, name="Percent", topic="100% effort")
        await CompanionFactory.create_async(db_session, name="Plain", topic="1000 effort")
        await CompanionFactory.create_async(db_session, name="Underscore", topic="snake_case")
        await CompanionFactory.create_async(db_session, name="Spaced", topic="snakeXcase")

        repo = CompanionRepository(db_session)
        assert _names(await repo.search(TopicOnly(topic="100%"))) == {"Percent"}
        assert _names(await repo.search(TopicOnly(topic="snake_"))) == {"Underscore"}


@pytest.mark.integration
class TestCompanionPagination:

    async def test_second_page_window(self, db_session):
        companions = await CompanionFactory.create_batch_async(db_session, 12)

        result = await CompanionRepository(db_session).search(NoFilter(), page=2, page_size=5)

        assert [c.id for c in result.items] == [c.id for c in companions[5:10]]
        assert result.total == 12
        assert result.total_pages == 3
        assert result.has_next is True
        assert result.has_prev is True

    async def test_last_page_is_partial(self, db_session):
        companions = await CompanionFactory.create_batch_async(db_session, 12)

        result = await CompanionRepository(db_session).search(NoFilter(), page=3, page_size=5)

        assert [c.id for c in result.items] == [c.id for c in companions[10:]]
        assert result.has_next is False

    async def test_page_past_end_is_empty(self, db_session):
        await CompanionFactory.create_batch_async(db_session, 3)

        result = await CompanionRepository(db_session).search(NoFilter(), page=5, page_size=5)

        assert result.items == []
        assert result.total == 3

    async def test_equal_timestamps_order_by_id(self, db_session):
        first = await CompanionFactory.create_async(db_session)
        same_time = [
            await CompanionFactory.create_async(db_session, created_at=first.created_at)
            for _ in range(3)
        ]

        result = await CompanionRepository(db_session).search(NoFilter(), page=1, page_size=10)

        tied = [first, *same_time]
        assert [c.id for c in result.items] == sorted(c.id for c in tied)


@pytest.mark.integration
class TestAuthoredCompanions:

    async def test_count_and_list_by_author(self, db_session):
        older = await CompanionFactory.create_async(db_session, author="u1")
        newer = await CompanionFactory.create_async(db_session, author="u1")
        await CompanionFactory.create_async(db_session, author="u2")

        repo = CompanionRepository(db_session)
        assert await repo.count_by_author("u1") == 2
        assert await repo.count_by_author("nobody") == 0
        assert [c.id for c in await repo.list_by_author("u1")] == [newer.id, older.id]


@pytest.mark.integration
class TestBookmarkRepository:

    async def test_remove_only_deletes_own_rows(self, db_session):
        companion = await CompanionFactory.create_async(db_session)
        await BookmarkFactory.create_async(db_session, companion=companion, user_id="u1")
        await BookmarkFactory.create_async(db_session, companion=companion, user_id="u2")

        repo = BookmarkRepository(db_session)
        assert await repo.remove(companion.id, "u2") == 1
        await db_session.commit()

        assert await repo.exists(companion.id, "u1") is True
        assert await repo.exists(companion.id, "u2") is False

    async def test_remove_by_non_owner_is_noop(self, db_session):
        companion = await CompanionFactory.create_async(db_session)
        await BookmarkFactory.create_async(db_session, companion=companion, user_id="u1")

        repo = BookmarkRepository(db_session)
        assert await repo.remove(companion.id, "intruder") == 0
        assert await repo.exists(companion.id, "u1") is True

    async def test_duplicates_collapse_in_listing(self, db_session):
        first = await CompanionFactory.create_async(db_session)
        second = await CompanionFactory.create_async(db_session)
        await BookmarkFactory.create_async(db_session, companion=first, user_id="u1")
        await BookmarkFactory.create_async(db_session, companion=second, user_id="u1")
        # Re-bookmarking ``first`` makes it the most recent one
        await BookmarkFactory.create_async(db_session, companion=first, user_id="u1")

        companions = await BookmarkRepository(db_session).list_companions("u1")

        assert [c.id for c in companions] == [first.id, second.id]

    async def test_remove_deletes_every_duplicate(self, db_session):
        companion = await CompanionFactory.create_async(db_session)
        await BookmarkFactory.create_batch_async(db_session, 2, companion=companion, user_id="u1")

        repo = BookmarkRepository(db_session)
        assert await repo.remove(companion.id, "u1") == 2
        assert await repo.list_companions("u1") == []


@pytest.mark.integration
class TestSessionHistoryRepository:

    async def test_newest_first_with_limit_and_duplicates(self, db_session):
        a = await CompanionFactory.create_async(db_session, name="A")
        b = await CompanionFactory.create_async(db_session, name="B")
        start = a.created_at + timedelta(days=1)

        for offset, companion in enumerate([a, b, a, b, a]):
            await SessionHistoryFactory.create_async(
                db_session,
                companion=companion,
                user_id="u1",
                created_at=start + timedelta(minutes=offset),
            )

        repo = SessionHistoryRepository(db_session)
        assert [c.name for c in await repo.list_recent(user_id="u1", limit=4)] == ["A", "B", "A", "B"]
        assert len(await repo.list_recent(user_id="u1", limit=10)) == 5
        assert await repo.count_by_user("u1") == 5

    async def test_recent_across_users(self, db_session):
        a = await CompanionFactory.create_async(db_session, name="A")
        b = await CompanionFactory.create_async(db_session, name="B")
        await SessionHistoryFactory.create_async(db_session, companion=a, user_id="u1")
        await SessionHistoryFactory.create_async(db_session, companion=b, user_id="u2")

        repo = SessionHistoryRepository(db_session)
        assert [c.name for c in await repo.list_recent(limit=10)] == ["B", "A"]
        assert [c.name for c in await repo.list_recent(user_id="u2")] == ["B"]

    async def test_unknown_user_has_no_history(self, db_session):
        assert await SessionHistoryRepository(db_session).list_recent(user_id=str(uuid4())) == []


@pytest.mark.integration
class TestSchemaConstraints:

    async def test_deleting_companion_cascades(self, db_session):
        companion = await CompanionFactory.create_async(db_session)
        await BookmarkFactory.create_async(db_session, companion=companion, user_id="u1")
        await SessionHistoryFactory.create_async(db_session, companion=companion, user_id="u1")

        await db_session.delete(companion)
        await db_session.commit()

        assert await BookmarkRepository(db_session).list_companions("u1") == []
        assert await SessionHistoryRepository(db_session).count_by_user("u1") == 0

    async def test_rows_must_reference_a_companion(self, db_session):
        with pytest.raises(StoreError):
            await BookmarkRepository(db_session).add(uuid4(), "u1")

    async def test_duration_must_be_positive(self, db_session):
        companion = Companion(
            name="Zero", subject="maths", topic="Nothing", voice="male", style="formal", duration=0, author="u1"
        )

        with pytest.raises(StoreError):
            await CompanionRepository(db_session).create(companion)
