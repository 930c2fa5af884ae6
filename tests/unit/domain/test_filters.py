"""Unit tests for companion search filter construction."""

import pytest
from sqlalchemy.dialects import sqlite

from companion_service.domain.filters import (
    NoFilter,
    SubjectAndTopic,
    SubjectOnly,
    TopicOnly,
    build_companion_filter,
)
from companion_service.infrastructure.database.models import Companion


def _sql(clause) -> str:
    return str(clause.compile(dialect=sqlite.dialect(), compile_kwargs={"literal_binds": True}))


@pytest.mark.unit
class TestBuildCompanionFilter:
    """Each combination of terms maps to exactly one variant."""

    @pytest.mark.parametrize(
        "subject, topic, expected",
        [
            (None, None, NoFilter()),
            ("", "", NoFilter()),
            ("math", None, SubjectOnly(subject="math")),
            ("math", "", SubjectOnly(subject="math")),
            (None, "brain", TopicOnly(topic="brain")),
            ("", "brain", TopicOnly(topic="brain")),
            ("math", "integrals", SubjectAndTopic(subject="math", topic="integrals")),
        ],
    )
    def test_variant_selection(self, subject, topic, expected):
        assert build_companion_filter(subject=subject, topic=topic) == expected

    def test_no_filter_has_no_clause(self):
        assert NoFilter().clause(Companion) is None


@pytest.mark.unit
class TestFilterClauses:
    """Rendered SQL of each variant."""

    def test_subject_only_matches_subject_column(self):
        sql = _sql(SubjectOnly(subject="math").clause(Companion))
        assert "companions.subject" in sql
        assert "companions.topic" not in sql
        assert "companions.name" not in sql

    def test_topic_only_matches_topic_or_name(self):
        sql = _sql(TopicOnly(topic="brain").clause(Companion))
        assert "companions.topic" in sql
        assert "companions.name" in sql
        assert " OR " in sql
        assert "companions.subject" not in sql

    def test_subject_and_topic_combines_with_and(self):
        sql = _sql(SubjectAndTopic(subject="math", topic="integrals").clause(Companion))
        assert " AND " in sql
        assert " OR " in sql
        assert "companions.subject" in sql

    def test_matching_is_case_insensitive(self):
        sql = _sql(SubjectOnly(subject="Math").clause(Companion)).lower()
        assert "lower(companions.subject)" in sql

    def test_wildcards_are_escaped(self):
        sql = _sql(TopicOnly(topic="100%_sure").clause(Companion))
        assert "/%" in sql
        assert "/_" in sql
        assert "ESCAPE '/'" in sql
