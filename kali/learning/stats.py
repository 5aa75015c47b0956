"""Aggregated statistics for a learner's profile."""

from dataclasses import dataclass
from typing import Optional

from ..constants import MAX_STARS
from ..database.models import UserProgress


@dataclass
class ProgressStats:
    """Summary of a user's progress across the course."""

    xp: int = 0
    streak: int = 0
    total_stars: int = 0
    completed_lessons: int = 0
    total_lessons: int = 0
    average_score: float = 0.0
    total_attempts: int = 0
    perfect_lessons: int = 0

    @property
    def progress_fraction(self) -> float:
        """Completed share of the course, between 0 and 1."""
        if self.total_lessons == 0:
            return 0.0
        return self.completed_lessons / self.total_lessons

    @property
    def progress_percentage(self) -> float:
        """Completed share of the course as a percentage."""
        return self.progress_fraction * 100

    def get_summary(self) -> str:
        """Get a one-line summary string."""
        return (
            f"{self.xp} XP | {self.streak} day streak | "
            f"{self.completed_lessons}/{self.total_lessons} lessons | "
            f"{self.total_stars} stars"
        )

    @classmethod
    def from_progress(
        cls, progress: Optional[UserProgress], total_lessons: int
    ) -> "ProgressStats":
        """Build stats from a progress record, or empty stats if there is none."""
        if progress is None:
            return cls(total_lessons=total_lessons)

        summaries = list(progress.lesson_progress.values())
        completed = [p for p in summaries if p.completed]
        average = sum(p.score for p in completed) / len(completed) if completed else 0.0

        return cls(
            xp=progress.xp,
            streak=progress.streak,
            total_stars=sum(p.stars for p in summaries),
            completed_lessons=len(progress.completed_lesson_ids),
            total_lessons=total_lessons,
            average_score=average,
            total_attempts=sum(p.attempts for p in summaries),
            perfect_lessons=sum(1 for p in summaries if p.stars == MAX_STARS),
        )
