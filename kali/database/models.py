"""Data models for lesson attempts and user progress."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional


@dataclass(frozen=True)
class Answer:
    """A judged answer to one question. Never persisted on its own."""

    question_id: str
    user_answer: str
    is_correct: bool
    is_fuzzy_match: bool = False
    time_spent: float = 0.0  # seconds


@dataclass(frozen=True)
class LessonResult:
    """Write-once record of one finished lesson attempt."""

    lesson_id: str
    user_id: str
    total_questions: int
    correct_answers: int
    xp_earned: int
    stars: int
    score: float
    completed_at: datetime
    time_spent: float = 0.0
    id: Optional[int] = None


@dataclass
class LessonProgress:
    """Latest known state of one lesson for a user."""

    lesson_id: str
    completed: bool = False
    score: float = 0.0
    attempts: int = 0
    stars: int = 0
    completed_at: Optional[datetime] = None


@dataclass
class UserProgress:
    """Cumulative progress of a user across all lessons."""

    user_id: str
    completed_lesson_ids: List[str] = field(default_factory=list)
    xp: int = 0
    streak: int = 0
    last_activity_date: Optional[datetime] = None
    current_lesson_id: Optional[str] = None
    lesson_progress: Dict[str, LessonProgress] = field(default_factory=dict)

    def has_completed(self, lesson_id: str) -> bool:
        """Whether the lesson has been completed at least once."""
        return lesson_id in self.completed_lesson_ids

    def get_lesson_progress(self, lesson_id: str) -> Optional[LessonProgress]:
        """Get the per-lesson summary, if any."""
        return self.lesson_progress.get(lesson_id)
