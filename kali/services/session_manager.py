"""Manager for in-flight lesson attempts."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from ..constants import SESSION_TIMEOUT_MINUTES
from ..content.course import Lesson, Question
from ..database.models import Answer, LessonResult

logger = logging.getLogger(__name__)


@dataclass
class LessonSession:
    """A lesson attempt in progress for one user."""

    user_id: str
    lesson: Lesson
    started_at: datetime
    answers: List[Answer] = field(default_factory=list)
    # Stored result, reused if finishing is retried
    result: Optional[LessonResult] = None

    @property
    def current_index(self) -> int:
        """Index of the next question to answer."""
        return len(self.answers)

    @property
    def current_question(self) -> Optional[Question]:
        """The next question to answer, or None when all are judged."""
        if self.current_index >= len(self.lesson.questions):
            return None
        return self.lesson.questions[self.current_index]

    @property
    def is_complete(self) -> bool:
        """Whether every question has been judged."""
        return self.current_question is None


class LessonSessionManager:
    """Keeps at most one lesson attempt per user.

    Uses an asyncio lock to safely handle concurrent operations. An
    attempt that is abandoned or expires is simply dropped.
    """

    def __init__(self, timeout_minutes: int = SESSION_TIMEOUT_MINUTES):
        self._sessions: Dict[str, LessonSession] = {}
        self._lock = asyncio.Lock()
        self._timeout = timedelta(minutes=timeout_minutes)

    async def start(self, user_id: str, lesson: Lesson, now: datetime = None) -> LessonSession:
        """Start an attempt, replacing any attempt the user already had."""
        session = LessonSession(
            user_id=user_id, lesson=lesson, started_at=now or datetime.now()
        )
        async with self._lock:
            replaced = self._sessions.get(user_id)
            self._sessions[user_id] = session
        if replaced is not None:
            logger.info(
                f"User {user_id} abandoned lesson {replaced.lesson.id} "
                f"after {len(replaced.answers)} answers"
            )
        logger.debug(f"Started lesson {lesson.id} for user {user_id}")
        return session

    async def get(self, user_id: str, now: datetime = None) -> Optional[LessonSession]:
        """Get a user's attempt.

        Returns None if no attempt exists or if it has expired.
        """
        async with self._lock:
            session = self._sessions.get(user_id)
            if session is None:
                return None

            # Check expiration
            if (now or datetime.now()) - session.started_at > self._timeout:
                del self._sessions[user_id]
                logger.warning(
                    f"Lesson {session.lesson.id} expired for user {user_id}"
                )
                return None

            return session

    async def remove(
        self, user_id: str, session: LessonSession = None
    ) -> Optional[LessonSession]:
        """Remove and return a user's attempt.

        If ``session`` is given, the attempt is only removed while it is
        still the user's current one.
        """
        async with self._lock:
            current = self._sessions.get(user_id)
            if current is None or (session is not None and current is not session):
                return None
            return self._sessions.pop(user_id)

    async def cleanup_expired(self, now: datetime = None) -> int:
        """Remove all expired attempts and return count of removed."""
        async with self._lock:
            now = now or datetime.now()
            expired = [
                user_id
                for user_id, session in self._sessions.items()
                if now - session.started_at > self._timeout
            ]
            for user_id in expired:
                del self._sessions[user_id]

        if expired:
            logger.info(f"Cleaned up {len(expired)} expired lesson attempts")
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)
