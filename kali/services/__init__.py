"""Application services."""

from .lesson_service import LessonCompletion, LessonService
from .session_manager import LessonSession, LessonSessionManager
from .stats_service import StatsService

__all__ = [
    "LessonCompletion",
    "LessonService",
    "LessonSession",
    "LessonSessionManager",
    "StatsService",
]
