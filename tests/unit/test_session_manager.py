"""Tests for the in-flight lesson attempt manager."""

from datetime import timedelta

import pytest

from kali.database.models import Answer
from kali.services.session_manager import LessonSessionManager


class TestLessonSessionManager:
    @pytest.mark.asyncio
    async def test_start_and_get(self, sample_lesson, base_time):
        manager = LessonSessionManager(timeout_minutes=30)

        session = await manager.start("user-1", sample_lesson, now=base_time)

        assert await manager.get("user-1", now=base_time) is session
        assert session.current_question.id == "q1"
        assert not session.is_complete
        assert len(manager) == 1

    @pytest.mark.asyncio
    async def test_current_question_advances(self, sample_lesson, base_time):
        manager = LessonSessionManager()
        session = await manager.start("user-1", sample_lesson, now=base_time)

        for question in sample_lesson.questions:
            session.answers.append(
                Answer(question_id=question.id, user_answer="", is_correct=True)
            )

        assert session.current_index == 4
        assert session.current_question is None
        assert session.is_complete

    @pytest.mark.asyncio
    async def test_expired_attempt_is_dropped(self, sample_lesson, base_time):
        manager = LessonSessionManager(timeout_minutes=30)
        await manager.start("user-1", sample_lesson, now=base_time)

        assert await manager.get("user-1", now=base_time + timedelta(minutes=31)) is None
        assert len(manager) == 0

    @pytest.mark.asyncio
    async def test_cleanup_expired(self, sample_lesson, intro_lesson, base_time):
        manager = LessonSessionManager(timeout_minutes=30)
        await manager.start("user-1", sample_lesson, now=base_time)
        await manager.start("user-2", intro_lesson, now=base_time + timedelta(minutes=20))

        removed = await manager.cleanup_expired(now=base_time + timedelta(minutes=40))

        assert removed == 1
        assert await manager.get("user-1", now=base_time) is None
        assert await manager.get("user-2", now=base_time + timedelta(minutes=40)) is not None

    @pytest.mark.asyncio
    async def test_remove(self, sample_lesson, base_time):
        manager = LessonSessionManager()
        await manager.start("user-1", sample_lesson, now=base_time)

        removed = await manager.remove("user-1")

        assert removed.lesson is sample_lesson
        assert await manager.remove("user-1") is None

    @pytest.mark.asyncio
    async def test_remove_only_the_given_attempt(self, sample_lesson, intro_lesson, base_time):
        manager = LessonSessionManager()
        old = await manager.start("user-1", sample_lesson, now=base_time)
        new = await manager.start("user-1", intro_lesson, now=base_time)

        assert await manager.remove("user-1", old) is None
        assert await manager.remove("user-1", new) is new
        assert len(manager) == 0
