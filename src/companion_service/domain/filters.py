"""
Companion library search filters.

A search request carries an optional subject term and an optional topic
term. They are turned into exactly one of four filter variants:

    NoFilter          neither term given, full listing
    SubjectOnly       subject contains the term
    TopicOnly         topic OR name contains the term
    SubjectAndTopic   subject contains subject-term AND (topic OR name contains topic-term)

Matching is case-insensitive substring containment. ``%`` and ``_`` in a
term are matched literally.

Usage:
    from companion_service.domain.filters import build_companion_filter

    search = build_companion_filter(subject="math", topic="integrals")
    clause = search.clause(Companion)
    if clause is not None:
        query = query.where(clause)
"""

from dataclasses import dataclass
from typing import Any, Union

from sqlalchemy import and_, or_
from sqlalchemy.sql.elements import ColumnElement


def _contains(column: Any, term: str) -> ColumnElement[bool]:
    return column.icontains(term, autoescape=True)


@dataclass(frozen=True)
class NoFilter:
    """Match every companion."""

    def clause(self, model: Any) -> ColumnElement[bool] | None:
        return None


@dataclass(frozen=True)
class SubjectOnly:
    """Match companions whose subject contains ``subject``."""

    subject: str

    def clause(self, model: Any) -> ColumnElement[bool] | None:
        return _contains(model.subject, self.subject)


@dataclass(frozen=True)
class TopicOnly:
    """Match companions whose topic or name contains ``topic``."""

    topic: str

    def clause(self, model: Any) -> ColumnElement[bool] | None:
        return or_(_contains(model.topic, self.topic), _contains(model.name, self.topic))


@dataclass(frozen=True)
class SubjectAndTopic:
    """Subject must match AND (topic or name) must match."""

    subject: str
    topic: str

    def clause(self, model: Any) -> ColumnElement[bool] | None:
        return and_(
            _contains(model.subject, self.subject),
            or_(_contains(model.topic, self.topic), _contains(model.name, self.topic)),
        )


CompanionFilter = Union[NoFilter, SubjectOnly, TopicOnly, SubjectAndTopic]


def build_companion_filter(subject: str | None = None, topic: str | None = None) -> CompanionFilter:
    """
    Build the filter variant for a pair of optional search terms.

    Empty strings count as "not provided".

    Args:
        subject: Subject search term
        topic: Topic search term (also matched against the companion name)

    Returns:
        One of NoFilter, SubjectOnly, TopicOnly, SubjectAndTopic

    Example:
        >>> build_companion_filter("math", "")
        SubjectOnly(subject='math')
        >>> build_companion_filter(None, "brain")
        TopicOnly(topic='brain')
    """
    if subject and topic:
        return SubjectAndTopic(subject=subject, topic=topic)
    if subject:
        return SubjectOnly(subject=subject)
    if topic:
        return TopicOnly(topic=topic)
    return NoFilter()
