"""Pytest configuration and shared fixtures for Kali tests."""

import sys
from datetime import datetime
from pathlib import Path

import pytest
import pytest_asyncio

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def test_database():
    """Create an in-memory database for testing."""
    from kali.database.connection import Database

    # Use in-memory SQLite
    db = Database(":memory:")
    await db.connect()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def progress_repository(test_database):
    """Create a progress repository with the test database."""
    from kali.database.repositories import ProgressRepository

    return ProgressRepository(test_database)


@pytest_asyncio.fixture
async def result_repository(test_database):
    """Create a lesson result repository with the test database."""
    from kali.database.repositories import LessonResultRepository

    return LessonResultRepository(test_database)


# ============================================================================
# Course Fixtures
# ============================================================================


@pytest.fixture
def explanation_question():
    """A read-and-continue screen."""
    from kali.content.course import Question, Word

    return Question(
        id="q1",
        type="explanation",
        prompt="Polite Words & Phrases",
        content="Here are essential polite expressions in Kannada.",
        words=(
            Word(kannada="ದಯವಿಟ್ಟು", english="Please", transliteration="Dayaviṭṭu"),
            Word(kannada="ಸರಿ", english="Okay", transliteration="Sari"),
        ),
    )


@pytest.fixture
def multiple_choice_question():
    """A multiple-choice question with Kannada options."""
    from kali.content.course import Question

    return Question(
        id="q2",
        type="multiple-choice",
        prompt='How do you say "Please" in Kannada?',
        options=("ಕ್ಷಮಿಸಿ", "ದಯವಿಟ್ಟು", "ಸರಿ", "ಧನ್ಯವಾದ"),
        correct_answers=("ದಯವಿಟ್ಟು",),
        xp=5,
    )


@pytest.fixture
def true_false_question():
    """A true/false question."""
    from kali.content.course import Question

    return Question(
        id="q3",
        type="true-false",
        prompt='ಕ್ಷಮಿಸಿ can mean both "Sorry" and "Excuse me"',
        options=("True", "False"),
        correct_answers=("True",),
        xp=5,
    )


@pytest.fixture
def fill_blank_question():
    """A fill-in-the-blank question with a transliteration alternative."""
    from kali.content.course import Question

    return Question(
        id="q4",
        type="fill-blank",
        prompt='Complete: "Thank you very much" = ತುಂಬಾ ___',
        correct_answers=("ಧನ್ಯವಾದ",),
        answer_transliteration="Dhanyavada",
        xp=5,
    )


@pytest.fixture
def sample_lesson(
    explanation_question, multiple_choice_question, true_false_question, fill_blank_question
):
    """A four-question lesson worth 20 XP."""
    from kali.content.course import Lesson

    return Lesson(
        id="lesson_002",
        title="Polite Expressions",
        description="Learn to be polite in Kannada",
        unit_id="unit_001",
        order=1,
        xp_reward=20,
        prerequisites=("lesson_001",),
        questions=(
            explanation_question,
            multiple_choice_question,
            true_false_question,
            fill_blank_question,
        ),
    )


@pytest.fixture
def intro_lesson(multiple_choice_question):
    """The opening lesson of the first unit."""
    from kali.content.course import Lesson

    return Lesson(
        id="lesson_001",
        title="Introduction to Greetings",
        unit_id="unit_001",
        order=0,
        xp_reward=15,
        questions=(multiple_choice_question,),
    )


@pytest.fixture
def numbers_lesson(true_false_question):
    """The opening lesson of the second unit, gated on the first unit."""
    from kali.content.course import Lesson

    return Lesson(
        id="lesson_003",
        title="Numbers 1-10",
        unit_id="unit_002",
        order=0,
        xp_reward=20,
        prerequisites=("lesson_002",),
        questions=(true_false_question,),
    )


@pytest.fixture
def family_lesson(true_false_question):
    """A later lesson in the second unit."""
    from kali.content.course import Lesson

    return Lesson(
        id="lesson_004",
        title="Family Members",
        unit_id="unit_002",
        order=1,
        xp_reward=20,
        prerequisites=("lesson_003",),
        questions=(true_false_question,),
    )


@pytest.fixture
def sample_course(intro_lesson, sample_lesson, numbers_lesson, family_lesson):
    """Create a two-unit course for testing."""
    from kali.content.course import Course, Unit

    return Course(
        name="Kannada Basics",
        code="KN101",
        units=(
            Unit(
                id="unit_001",
                title="Basic Greetings",
                order=0,
                lessons=(intro_lesson, sample_lesson),
            ),
            Unit(
                id="unit_002",
                title="Numbers",
                order=1,
                lessons=(numbers_lesson, family_lesson),
            ),
        ),
    )


# ============================================================================
# Service Fixtures
# ============================================================================


@pytest.fixture
def evaluator():
    """Create an answer evaluator with default tolerance."""
    from kali.learning.evaluation import AnswerEvaluator

    return AnswerEvaluator()


@pytest.fixture
def aggregator():
    """Create a progress aggregator with default thresholds."""
    from kali.learning.progress import ProgressAggregator

    return ProgressAggregator()


@pytest_asyncio.fixture
async def lesson_service(sample_course, progress_repository, result_repository):
    """Create a lesson service backed by the test database."""
    from kali.services.lesson_service import LessonService
    from kali.services.session_manager import LessonSessionManager

    return LessonService(
        course=sample_course,
        progress_repo=progress_repository,
        result_repo=result_repository,
        sessions=LessonSessionManager(timeout_minutes=60),
    )


@pytest_asyncio.fixture
async def stats_service(sample_course, progress_repository, result_repository):
    """Create a stats service backed by the test database."""
    from kali.services.stats_service import StatsService

    return StatsService(
        course=sample_course,
        progress_repo=progress_repository,
        result_repo=result_repository,
    )


# ============================================================================
# Test Data Fixtures
# ============================================================================


@pytest.fixture
def base_time():
    """A fixed point in time for deterministic streak tests."""
    return datetime(2024, 3, 10, 9, 30)


@pytest.fixture
def make_answers():
    """Factory for judged answers covering a lesson."""
    from kali.database.models import Answer

    def _make_answers(lesson, correct_count, time_spent=2.0):
        return [
            Answer(
                question_id=question.id,
                user_answer="answer",
                is_correct=index < correct_count,
                time_spent=time_spent,
            )
            for index, question in enumerate(lesson.questions)
        ]

    return _make_answers


@pytest.fixture
def play_lesson():
    """Factory that runs a whole lesson attempt through a LessonService.

    Every question is answered correctly except those whose IDs are in
    ``wrong``; the attempt finishes two minutes after it starts.
    """
    from datetime import timedelta

    correct = {"q1": "", "q2": "ದಯವಿಟ್ಟು", "q3": "True", "q4": "ಧನ್ಯವಾದ"}

    async def _play_lesson(service, user_id, lesson_id, now, wrong=()):
        session = await service.start_lesson(user_id, lesson_id, now=now)
        for question in session.lesson.questions:
            answer = "wrong" if question.id in wrong else correct[question.id]
            await service.submit_answer(user_id, answer, time_spent=3.0, now=now)
        return await service.finish_lesson(user_id, now=now + timedelta(minutes=2))

    return _play_lesson
