"""Row-to-model mappers for database operations."""

from datetime import datetime
from typing import Any, Iterable, Optional

from .models import LessonProgress, LessonResult, UserProgress


def _parse_datetime(value: Any) -> Optional[datetime]:
    """Parse a datetime value from SQLite.

    SQLite stores datetimes as strings in ISO format.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        # "YYYY-MM-DD HH:MM:SS.ffffff", "YYYY-MM-DDTHH:MM:SS" and friends
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return None
    return None


def format_datetime(value: Optional[datetime]) -> Optional[str]:
    """Serialize a datetime for storage."""
    if value is None:
        return None
    return value.isoformat()


def row_to_lesson_result(row: Any) -> LessonResult:
    """Convert database row to LessonResult model."""
    return LessonResult(
        id=row["id"],
        lesson_id=row["lesson_id"],
        user_id=row["user_id"],
        total_questions=row["total_questions"],
        correct_answers=row["correct_answers"],
        xp_earned=row["xp_earned"],
        stars=row["stars"],
        score=row["score"],
        time_spent=row["time_spent"],
        completed_at=_parse_datetime(row["completed_at"]),
    )


def row_to_lesson_progress(row: Any) -> LessonProgress:
    """Convert database row to LessonProgress model."""
    return LessonProgress(
        lesson_id=row["lesson_id"],
        completed=bool(row["completed"]),
        score=row["score"],
        attempts=row["attempts"],
        stars=row["stars"],
        completed_at=_parse_datetime(row["completed_at"]),
    )


def rows_to_user_progress(
    row: Any, completed_rows: Iterable[Any], lesson_rows: Iterable[Any]
) -> UserProgress:
    """Assemble a UserProgress from its three tables."""
    lesson_progress = {}
    for lesson_row in lesson_rows:
        summary = row_to_lesson_progress(lesson_row)
        lesson_progress[summary.lesson_id] = summary

    return UserProgress(
        user_id=row["user_id"],
        completed_lesson_ids=[r["lesson_id"] for r in completed_rows],
        xp=row["xp"],
        streak=row["streak"],
        last_activity_date=_parse_datetime(row["last_activity_date"]),
        current_lesson_id=row["current_lesson_id"],
        lesson_progress=lesson_progress,
    )
