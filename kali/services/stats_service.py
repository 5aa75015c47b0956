"""Stats service for profile statistics and lesson availability."""

from typing import TYPE_CHECKING, Dict, List

from ..learning.progress import LessonStatus, course_lesson_statuses
from ..learning.stats import ProgressStats

if TYPE_CHECKING:
    from ..content.course import Course, Lesson
    from ..database.repositories import LessonResultRepository, ProgressRepository
    from ..database.models import LessonResult


class StatsService:
    """Service for read-only progress views."""

    def __init__(
        self,
        course: "Course",
        progress_repo: "ProgressRepository",
        result_repo: "LessonResultRepository",
    ):
        self.course = course
        self.progress_repo = progress_repo
        self.result_repo = result_repo

    async def get_stats(self, user_id: str) -> ProgressStats:
        """Aggregated statistics for a user."""
        progress = await self.progress_repo.get(user_id)
        return ProgressStats.from_progress(progress, len(self.course.lessons))

    async def get_lesson_statuses(self, user_id: str) -> Dict[str, LessonStatus]:
        """Locked/available/completed for every lesson, in course order."""
        progress = await self.progress_repo.get(user_id)
        return course_lesson_statuses(self.course, progress)

    async def get_available_lessons(self, user_id: str) -> List["Lesson"]:
        """Lessons the user can start now and has not completed."""
        statuses = await self.get_lesson_statuses(user_id)
        return [
            self.course.get_lesson(lesson_id)
            for lesson_id, status in statuses.items()
            if status == LessonStatus.AVAILABLE
        ]

    async def get_history(self, user_id: str, limit: int = 10) -> List["LessonResult"]:
        """Most recent finished attempts."""
        results = await self.result_repo.get_for_user(user_id)
        return results[:limit]
