"""Lesson results and the user progress fold."""

import logging
from dataclasses import replace
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from ..constants import STATUS_AVAILABLE, STATUS_COMPLETED, STATUS_LOCKED
from ..content.course import Course, Lesson
from ..database.models import Answer, LessonProgress, LessonResult, UserProgress
from ..utils.errors import EmptyLessonError, IncompleteLessonError
from .scoring import ScoreCalculator
from .streak import StreakState, update_streak

logger = logging.getLogger(__name__)


class LessonStatus(Enum):
    """Availability of a lesson for a user."""

    LOCKED = STATUS_LOCKED
    AVAILABLE = STATUS_AVAILABLE
    COMPLETED = STATUS_COMPLETED


class ProgressAggregator:
    """Turns judged answers into a LessonResult and folds it into progress.

    Every method is pure: inputs are never mutated and no I/O happens here.
    Persisting the returned values is the caller's job.
    """

    def __init__(self, calculator: ScoreCalculator = None):
        self.calculator = calculator or ScoreCalculator()

    def build_result(
        self,
        lesson: Lesson,
        user_id: str,
        answers: Sequence[Answer],
        completed_at: datetime,
        time_spent: Optional[float] = None,
    ) -> LessonResult:
        """Score a finished attempt.

        Args:
            lesson: The lesson that was attempted
            user_id: Who attempted it
            answers: One judged answer per question, in lesson order
            completed_at: Completion time
            time_spent: Total seconds; defaults to the sum over answers

        Returns:
            A new LessonResult without a store-assigned id

        Raises:
            EmptyLessonError: If the lesson has no questions
            IncompleteLessonError: If the answers do not cover the lesson
        """
        total = len(lesson.questions)
        if total == 0:
            raise EmptyLessonError(lesson.id)

        expected = [q.id for q in lesson.questions]
        answered = [a.question_id for a in answers]
        if answered != expected:
            raise IncompleteLessonError(
                f"Lesson {lesson.id} expects answers for {expected}, got {answered}"
            )

        correct = sum(1 for a in answers if a.is_correct)
        score = self.calculator.score(lesson.xp_reward, correct, total)

        if time_spent is None:
            time_spent = sum(a.time_spent for a in answers)

        return LessonResult(
            lesson_id=lesson.id,
            user_id=user_id,
            total_questions=total,
            correct_answers=correct,
            xp_earned=score.xp_earned,
            stars=score.stars,
            score=score.score_percent,
            completed_at=completed_at,
            time_spent=time_spent,
        )

    def fold(
        self, progress: Optional[UserProgress], result: LessonResult
    ) -> UserProgress:
        """Fold one lesson result into a user's cumulative progress.

        XP is added on every completion, retakes included, and the
        per-lesson summary keeps the latest attempt rather than the best.
        """
        if progress is None:
            progress = UserProgress(user_id=result.user_id)
        elif progress.user_id != result.user_id:
            raise ValueError(
                f"Result for user {result.user_id} cannot be folded into "
                f"progress of user {progress.user_id}"
            )

        previous = progress.get_lesson_progress(result.lesson_id)
        attempts = (previous.attempts if previous else 0) + 1

        lesson_progress = dict(progress.lesson_progress)
        lesson_progress[result.lesson_id] = LessonProgress(
            lesson_id=result.lesson_id,
            completed=True,
            score=result.score,
            attempts=attempts,
            stars=result.stars,
            completed_at=result.completed_at,
        )

        completed = list(progress.completed_lesson_ids)
        if result.lesson_id not in completed:
            completed.append(result.lesson_id)

        streak = update_streak(
            StreakState(progress.streak, progress.last_activity_date),
            result.completed_at,
        )

        updated = replace(
            progress,
            completed_lesson_ids=completed,
            xp=progress.xp + result.xp_earned,
            streak=streak.streak,
            last_activity_date=streak.last_activity_date,
            current_lesson_id=result.lesson_id,
            lesson_progress=lesson_progress,
        )
        logger.debug(
            f"Folded {result.lesson_id} for {result.user_id}: xp {progress.xp} -> "
            f"{updated.xp}, streak {progress.streak} -> {updated.streak}, attempt {attempts}"
        )
        return updated

    def complete_lesson(
        self,
        progress: Optional[UserProgress],
        lesson: Lesson,
        user_id: str,
        answers: Sequence[Answer],
        completed_at: datetime,
        time_spent: Optional[float] = None,
    ) -> Tuple[LessonResult, UserProgress]:
        """Build the result for an attempt and fold it in one step."""
        result = self.build_result(lesson, user_id, answers, completed_at, time_spent)
        return result, self.fold(progress, result)


def missing_prerequisites(lesson: Lesson, progress: Optional[UserProgress]) -> List[str]:
    """Prerequisite lesson IDs the user has not completed yet."""
    completed = set(progress.completed_lesson_ids) if progress else set()
    return [p for p in lesson.prerequisites if p not in completed]


def lesson_status(
    lesson: Lesson, progress: Optional[UserProgress], is_first: bool
) -> LessonStatus:
    """Availability of one lesson.

    Completion is sticky: a completed lesson stays completed even if its
    prerequisites would no longer unlock it.
    """
    if progress is not None and progress.has_completed(lesson.id):
        return LessonStatus.COMPLETED
    if is_first or not missing_prerequisites(lesson, progress):
        return LessonStatus.AVAILABLE
    return LessonStatus.LOCKED


def course_lesson_statuses(
    course: Course, progress: Optional[UserProgress]
) -> Dict[str, LessonStatus]:
    """Status of every lesson in the course, in course order."""
    return {
        lesson.id: lesson_status(lesson, progress, course.is_first_in_unit(lesson))
        for lesson in course.lessons
    }
