"""Answer evaluation, scoring and progress tracking for Kali."""

from .evaluation import AnswerEvaluator, EvaluationResult, levenshtein_distance
from .progress import (
    LessonStatus,
    ProgressAggregator,
    course_lesson_statuses,
    lesson_status,
    missing_prerequisites,
)
from .scoring import LessonScore, ScoreCalculator
from .stats import ProgressStats
from .streak import StreakState, update_streak
from .validation import CourseProblem, find_course_problems, find_lesson_problems

__all__ = [
    "AnswerEvaluator",
    "CourseProblem",
    "EvaluationResult",
    "LessonScore",
    "LessonStatus",
    "ProgressAggregator",
    "ProgressStats",
    "ScoreCalculator",
    "StreakState",
    "course_lesson_statuses",
    "find_course_problems",
    "find_lesson_problems",
    "lesson_status",
    "levenshtein_distance",
    "missing_prerequisites",
    "update_streak",
]
