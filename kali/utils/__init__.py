"""Utility modules for Kali."""

from .errors import (
    ContentError,
    EmptyLessonError,
    IncompleteLessonError,
    KaliError,
    LessonLockedError,
    LessonNotFoundError,
    MalformedQuestionError,
    NoActiveLessonError,
)

__all__ = [
    "ContentError",
    "EmptyLessonError",
    "IncompleteLessonError",
    "KaliError",
    "LessonLockedError",
    "LessonNotFoundError",
    "MalformedQuestionError",
    "NoActiveLessonError",
]
