"""Database repositories for domain-specific operations."""

from .base import BaseRepository
from .progress_repository import ProgressRepository
from .result_repository import LessonResultRepository

__all__ = [
    "BaseRepository",
    "LessonResultRepository",
    "ProgressRepository",
]
