"""Progress repository for cumulative user progress."""

import logging
from typing import List, Optional

from ..mappers import format_datetime, rows_to_user_progress
from ..models import UserProgress
from .base import BaseRepository

logger = logging.getLogger(__name__)


class ProgressRepository(BaseRepository):
    """Repository for user progress records."""

    async def get(self, user_id: str) -> Optional[UserProgress]:
        """Load a user's progress, or None if they have never finished a lesson."""
        conn = self.connection
        cursor = await conn.execute(
            "SELECT * FROM user_progress WHERE user_id = ?", (user_id,)
        )
        row = await cursor.fetchone()

        if not row:
            return None

        cursor = await conn.execute(
            """SELECT lesson_id FROM completed_lessons
               WHERE user_id = ?
               ORDER BY position""",
            (user_id,),
        )
        completed_rows = await cursor.fetchall()

        cursor = await conn.execute(
            "SELECT * FROM lesson_progress WHERE user_id = ? ORDER BY lesson_id",
            (user_id,),
        )
        lesson_rows = await cursor.fetchall()

        return rows_to_user_progress(row, completed_rows, lesson_rows)

    async def save(self, progress: UserProgress) -> None:
        """Write the whole progress record in one transaction.

        On failure the transaction is rolled back and the error re-raised.
        """
        conn = self.connection
        try:
            await conn.execute(
                """INSERT INTO user_progress
                   (user_id, current_lesson_id, xp, streak, last_activity_date)
                   VALUES (?, ?, ?, ?, ?)
                   ON CONFLICT(user_id) DO UPDATE SET
                       current_lesson_id = excluded.current_lesson_id,
                       xp = excluded.xp,
                       streak = excluded.streak,
                       last_activity_date = excluded.last_activity_date,
                       updated_at = CURRENT_TIMESTAMP""",
                (
                    progress.user_id,
                    progress.current_lesson_id,
                    progress.xp,
                    progress.streak,
                    format_datetime(progress.last_activity_date),
                ),
            )

            await conn.execute(
                "DELETE FROM completed_lessons WHERE user_id = ?", (progress.user_id,)
            )
            await conn.executemany(
                """INSERT INTO completed_lessons (user_id, lesson_id, position)
                   VALUES (?, ?, ?)""",
                [
                    (progress.user_id, lesson_id, position)
                    for position, lesson_id in enumerate(progress.completed_lesson_ids)
                ],
            )

            await conn.executemany(
                """INSERT INTO lesson_progress
                   (user_id, lesson_id, completed, score, attempts, stars, completed_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?)
                   ON CONFLICT(user_id, lesson_id) DO UPDATE SET
                       completed = excluded.completed,
                       score = excluded.score,
                       attempts = excluded.attempts,
                       stars = excluded.stars,
                       completed_at = excluded.completed_at""",
                [
                    (
                        progress.user_id,
                        summary.lesson_id,
                        summary.completed,
                        summary.score,
                        summary.attempts,
                        summary.stars,
                        format_datetime(summary.completed_at),
                    )
                    for summary in progress.lesson_progress.values()
                ],
            )
            await conn.commit()
        except Exception:
            await conn.rollback()
            logger.error(f"Failed to save progress for user {progress.user_id}")
            raise

    async def get_all_user_ids(self) -> List[str]:
        """Get the IDs of all users with a progress record."""
        conn = self.connection
        cursor = await conn.execute("SELECT user_id FROM user_progress ORDER BY user_id")
        rows = await cursor.fetchall()
        return [row["user_id"] for row in rows]
