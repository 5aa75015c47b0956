"""Course catalog for Kali."""

from .course import (
    Course,
    Lesson,
    Question,
    QuestionType,
    Unit,
    Word,
    load_course,
    parse_course,
)
from .loader import ContentLoader

__all__ = [
    "ContentLoader",
    "Course",
    "Lesson",
    "Question",
    "QuestionType",
    "Unit",
    "Word",
    "load_course",
    "parse_course",
]
