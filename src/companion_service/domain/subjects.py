"""Subject, voice and style catalogs shared by the form schema and the assistant config."""

from enum import Enum


class Subject(str, Enum):
    """Subjects a companion can teach."""

    MATHS = "maths"
    LANGUAGE = "language"
    SCIENCE = "science"
    HISTORY = "history"
    CODING = "coding"
    ECONOMICS = "economics"


class Voice(str, Enum):
    MALE = "male"
    FEMALE = "female"


class Style(str, Enum):
    FORMAL = "formal"
    CASUAL = "casual"


SUBJECT_COLORS: dict[str, str] = {
    Subject.MATHS.value: "#FFDA6E",
    Subject.LANGUAGE.value: "#BDE7FF",
    Subject.SCIENCE.value: "#E5D0FF",
    Subject.HISTORY.value: "#FFECC8",
    Subject.CODING.value: "#FFC8E4",
    Subject.ECONOMICS.value: "#C8FFDF",
}

DEFAULT_SUBJECT_COLOR = "#E5E5E5"


def get_subject_color(subject: str) -> str:
    """Display color for a subject; unknown subjects get a neutral grey."""
    return SUBJECT_COLORS.get(subject.lower(), DEFAULT_SUBJECT_COLOR)
