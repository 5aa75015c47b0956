"""Lesson result repository for the append-only attempt log."""

from dataclasses import replace
from typing import List, Optional

from ..mappers import format_datetime, row_to_lesson_result
from ..models import LessonResult
from .base import BaseRepository


class LessonResultRepository(BaseRepository):
    """Repository for finished lesson attempts."""

    async def append(self, result: LessonResult) -> LessonResult:
        """Append a result and return it with its assigned id."""
        conn = self.connection
        cursor = await conn.execute(
            """INSERT INTO lesson_results
               (user_id, lesson_id, total_questions, correct_answers,
                xp_earned, stars, score, time_spent, completed_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                result.user_id,
                result.lesson_id,
                result.total_questions,
                result.correct_answers,
                result.xp_earned,
                result.stars,
                result.score,
                result.time_spent,
                format_datetime(result.completed_at),
            ),
        )
        await conn.commit()

        return replace(result, id=cursor.lastrowid)

    async def get_for_user(
        self, user_id: str, lesson_id: Optional[str] = None
    ) -> List[LessonResult]:
        """Get a user's results, newest first, optionally for one lesson."""
        conn = self.connection
        if lesson_id is None:
            cursor = await conn.execute(
                """SELECT * FROM lesson_results
                   WHERE user_id = ?
                   ORDER BY completed_at DESC, id DESC""",
                (user_id,),
            )
        else:
            cursor = await conn.execute(
                """SELECT * FROM lesson_results
                   WHERE user_id = ? AND lesson_id = ?
                   ORDER BY completed_at DESC, id DESC""",
                (user_id, lesson_id),
            )
        rows = await cursor.fetchall()

        return [row_to_lesson_result(row) for row in rows]

    async def count_for_user(self, user_id: str) -> int:
        """Get total finished attempts for a user."""
        conn = self.connection
        cursor = await conn.execute(
            "SELECT COUNT(*) as total FROM lesson_results WHERE user_id = ?",
            (user_id,),
        )
        row = await cursor.fetchone()
        return row["total"] if row else 0
