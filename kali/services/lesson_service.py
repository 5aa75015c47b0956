"""Lesson service orchestrating attempts, scoring and persistence."""

import asyncio
import logging
import weakref
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from ..learning.evaluation import AnswerEvaluator
from ..learning.progress import (
    LessonStatus,
    ProgressAggregator,
    lesson_status,
    missing_prerequisites,
)
from ..learning.validation import find_lesson_problems
from ..database.models import Answer, LessonResult, UserProgress
from ..utils.errors import (
    EmptyLessonError,
    IncompleteLessonError,
    LessonLockedError,
    LessonNotFoundError,
    MalformedQuestionError,
    NoActiveLessonError,
)
from .session_manager import LessonSession, LessonSessionManager

if TYPE_CHECKING:
    from ..content.course import Course
    from ..database.repositories import LessonResultRepository, ProgressRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LessonCompletion:
    """What finishing a lesson produced."""

    result: LessonResult
    progress: UserProgress
    first_completion: bool


class LessonService:
    """Service for running lesson attempts end to end.

    Loads and saves progress through the repositories and serialises the
    load-fold-save sequence per user, so two completions for the same user
    in this process never lose an update. Locks are held weakly and disappear
    once no coroutine is using them.
    """

    def __init__(
        self,
        course: "Course",
        progress_repo: "ProgressRepository",
        result_repo: "LessonResultRepository",
        sessions: LessonSessionManager,
        evaluator: AnswerEvaluator = None,
        aggregator: ProgressAggregator = None,
    ):
        self.course = course
        self.progress_repo = progress_repo
        self.result_repo = result_repo
        self.sessions = sessions
        self.evaluator = evaluator or AnswerEvaluator()
        self.aggregator = aggregator or ProgressAggregator()
        self._user_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

    async def start_lesson(
        self, user_id: str, lesson_id: str, now: datetime = None
    ) -> LessonSession:
        """Start an attempt at a lesson the user has unlocked.

        Raises:
            LessonNotFoundError: If the lesson is not in the catalog
            EmptyLessonError: If the lesson has no questions
            MalformedQuestionError: If any question cannot be graded
            LessonLockedError: If prerequisites are not completed
        """
        lesson = self.course.get_lesson(lesson_id)
        if lesson is None:
            raise LessonNotFoundError(lesson_id)
        if not lesson.questions:
            raise EmptyLessonError(lesson.id)

        problems = find_lesson_problems(lesson, self.evaluator)
        if problems:
            for problem in problems:
                logger.error(f"Cannot start lesson {lesson.id}: {problem}")
            raise MalformedQuestionError(problems[0].question_id, problems[0].message)

        progress = await self.progress_repo.get(user_id)
        status = lesson_status(lesson, progress, self.course.is_first_in_unit(lesson))
        if status == LessonStatus.LOCKED:
            raise LessonLockedError(lesson.id, missing_prerequisites(lesson, progress))

        return await self.sessions.start(user_id, lesson, now)

    async def submit_answer(
        self,
        user_id: str,
        raw_answer: str,
        time_spent: float = 0.0,
        now: datetime = None,
    ) -> Answer:
        """Judge the answer to the current question and record it.

        Raises:
            NoActiveLessonError: If the user has no attempt in progress
            IncompleteLessonError: If every question is already answered
            MalformedQuestionError: If the current question cannot be graded
        """
        session = await self._require_session(user_id, now)
        question = session.current_question
        if question is None:
            raise IncompleteLessonError(
                f"All questions in lesson {session.lesson.id} are already answered"
            )

        verdict = self.evaluator.evaluate(question, raw_answer)
        answer = Answer(
            question_id=question.id,
            user_answer=raw_answer,
            is_correct=verdict.correct,
            is_fuzzy_match=verdict.is_fuzzy_match,
            time_spent=time_spent,
        )
        session.answers.append(answer)
        return answer

    async def finish_lesson(self, user_id: str, now: datetime = None) -> LessonCompletion:
        """Score the attempt, fold it into progress and persist both.

        The attempt is only discarded once both writes have succeeded;
        storage errors propagate unchanged. If the progress write fails,
        finishing again reuses the stored result instead of appending a
        second one.
        """
        now = now or datetime.now()

        async with self._user_lock(user_id):
            session = await self._require_session(user_id, now)
            if not session.is_complete:
                raise IncompleteLessonError(
                    f"Lesson {session.lesson.id} has "
                    f"{len(session.lesson.questions) - len(session.answers)} "
                    f"unanswered questions"
                )

            previous = await self.progress_repo.get(user_id)
            if session.result is None:
                time_spent = max(0.0, (now - session.started_at).total_seconds())
                result = self.aggregator.build_result(
                    session.lesson, user_id, session.answers, now, time_spent
                )
                session.result = await self.result_repo.append(result)
            else:
                logger.info(
                    f"Retrying progress save for {session.lesson.id}, "
                    f"user {user_id}, result {session.result.id}"
                )

            result = session.result
            progress = self.aggregator.fold(previous, result)
            await self.progress_repo.save(progress)
            await self.sessions.remove(user_id, session)

        first_completion = previous is None or not previous.has_completed(result.lesson_id)
        logger.info(
            f"User {user_id} finished {result.lesson_id}: "
            f"{result.correct_answers}/{result.total_questions}, "
            f"{result.stars} stars, +{result.xp_earned} XP"
        )
        return LessonCompletion(
            result=result, progress=progress, first_completion=first_completion
        )

    async def abandon_lesson(self, user_id: str) -> Optional[LessonSession]:
        """Drop the user's attempt without recording anything."""
        return await self.sessions.remove(user_id)

    def _user_lock(self, user_id: str) -> asyncio.Lock:
        lock = self._user_locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._user_locks[user_id] = lock
        return lock

    async def _require_session(self, user_id: str, now: datetime = None) -> LessonSession:
        session = await self.sessions.get(user_id, now)
        if session is None:
            raise NoActiveLessonError(f"User {user_id} has no lesson in progress")
        return session
