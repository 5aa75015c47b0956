"""Database layer for Kali."""

from .connection import Database
from .models import Answer, LessonProgress, LessonResult, UserProgress
from .repositories import LessonResultRepository, ProgressRepository

__all__ = [
    "Answer",
    "Database",
    "LessonProgress",
    "LessonResult",
    "LessonResultRepository",
    "ProgressRepository",
    "UserProgress",
]
