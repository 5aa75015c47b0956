"""Course, unit, lesson and question data models."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from ..constants import (
    DIFFICULTY_LEVELS,
    QUESTION_EXPLANATION,
    QUESTION_FILL_BLANK,
    QUESTION_LISTEN,
    QUESTION_MATCH_PAIRS,
    QUESTION_MULTIPLE_CHOICE,
    QUESTION_SPEAK,
    QUESTION_TRANSLATE,
    QUESTION_TRUE_FALSE,
)
from ..utils.errors import ContentError

logger = logging.getLogger(__name__)


class QuestionType(Enum):
    """Question types understood by the catalog format."""

    MULTIPLE_CHOICE = QUESTION_MULTIPLE_CHOICE
    TRUE_FALSE = QUESTION_TRUE_FALSE
    FILL_BLANK = QUESTION_FILL_BLANK
    EXPLANATION = QUESTION_EXPLANATION
    MATCH_PAIRS = QUESTION_MATCH_PAIRS
    TRANSLATE = QUESTION_TRANSLATE
    SPEAK = QUESTION_SPEAK
    LISTEN = QUESTION_LISTEN

    @property
    def is_graded(self) -> bool:
        """Whether answers to this type carry evaluation semantics."""
        return self in (
            QuestionType.MULTIPLE_CHOICE,
            QuestionType.TRUE_FALSE,
            QuestionType.FILL_BLANK,
            QuestionType.EXPLANATION,
        )


@dataclass(frozen=True)
class Word:
    """A vocabulary entry taught on an explanation screen."""

    kannada: str
    english: str
    transliteration: str = ""


@dataclass(frozen=True)
class Question:
    """One question within a lesson.

    ``type`` is kept as the raw catalog string so that unknown types
    reach the evaluator, which reports them as configuration errors.
    """

    id: str
    type: str
    prompt: str
    correct_answers: Tuple[str, ...] = ()
    answer_transliteration: Optional[str] = None
    xp: int = 0
    options: Tuple[str, ...] = ()
    options_transliteration: Tuple[str, ...] = ()
    prompt_transliteration: Tuple[Tuple[str, str], ...] = ()
    hint: str = ""
    explanation: str = ""
    content: str = ""
    words: Tuple[Word, ...] = ()

    @property
    def question_type(self) -> Optional[QuestionType]:
        """The parsed question type, or None if the type is unknown."""
        try:
            return QuestionType(self.type)
        except ValueError:
            return None


@dataclass(frozen=True)
class Lesson:
    """An ordered sequence of questions with an XP reward."""

    id: str
    title: str
    questions: Tuple[Question, ...]
    xp_reward: int = 0
    prerequisites: Tuple[str, ...] = ()
    description: str = ""
    unit_id: str = ""
    order: int = 0
    difficulty: str = "beginner"

    def get_question(self, question_id: str) -> Optional[Question]:
        """Get a question by ID."""
        for question in self.questions:
            if question.id == question_id:
                return question
        return None


@dataclass(frozen=True)
class Unit:
    """A group of lessons shown together."""

    id: str
    title: str
    description: str = ""
    order: int = 0
    color: str = ""
    lessons: Tuple[Lesson, ...] = ()


@dataclass(frozen=True)
class Course:
    """Course information and structure."""

    name: str
    code: str = ""
    description: str = ""
    units: Tuple[Unit, ...] = ()
    _index: Dict[str, Lesson] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        index: Dict[str, Lesson] = {}
        for lesson in self.lessons:
            if lesson.id in index:
                raise ContentError(f"Duplicate lesson id: {lesson.id}")
            index[lesson.id] = lesson
        object.__setattr__(self, "_index", index)

    @property
    def lessons(self) -> List[Lesson]:
        """All lessons, in unit order then lesson order."""
        ordered_units = sorted(self.units, key=lambda u: u.order)
        return [
            lesson
            for unit in ordered_units
            for lesson in sorted(unit.lessons, key=lambda item: item.order)
        ]

    def get_lesson(self, lesson_id: str) -> Optional[Lesson]:
        """Get a lesson by ID."""
        return self._index.get(lesson_id)

    def get_unit(self, unit_id: str) -> Optional[Unit]:
        """Get a unit by ID."""
        for unit in self.units:
            if unit.id == unit_id:
                return unit
        return None

    def is_first_in_unit(self, lesson: Lesson) -> bool:
        """Whether the lesson opens its unit."""
        unit = self.get_unit(lesson.unit_id)
        if unit is None or not unit.lessons:
            return False
        first = min(unit.lessons, key=lambda item: item.order)
        return first.id == lesson.id

    def find_lesson(self, query: str) -> Optional[Lesson]:
        """Find a lesson by ID or title (case-insensitive, partial).

        Args:
            query: Lesson ID, title, or partial title to search for

        Returns:
            Matching lesson or None
        """
        if not query:
            return None

        query_lower = query.lower().strip()

        # 1. Exact ID match
        for lesson in self.lessons:
            if lesson.id.lower() == query_lower:
                return lesson

        # 2. Exact title match
        for lesson in self.lessons:
            if lesson.title.lower() == query_lower:
                return lesson

        # 3. Partial title match
        for lesson in self.lessons:
            if query_lower in lesson.title.lower():
                return lesson

        return None


def _as_tuple(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(str(v) for v in value)
    return (str(value),)


def _parse_question(data: Dict[str, Any], lesson_id: str) -> Question:
    question_id = str(data.get("id", ""))
    if not question_id:
        raise ContentError(f"Question without id in lesson {lesson_id}")

    xp = data.get("xp", 0)
    if not isinstance(xp, int) or xp < 0:
        raise ContentError(
            f"Question {question_id} in lesson {lesson_id} has invalid xp: {xp!r}"
        )

    transliteration = data.get("question_transliteration") or {}
    words = tuple(
        Word(
            kannada=w.get("kannada", ""),
            english=w.get("english", ""),
            transliteration=w.get("transliteration", ""),
        )
        for w in data.get("words", [])
    )

    return Question(
        id=question_id,
        type=str(data.get("type", "")),
        prompt=data.get("question", ""),
        correct_answers=_as_tuple(data.get("correct_answer")),
        answer_transliteration=data.get("correct_answer_transliteration"),
        xp=xp,
        options=_as_tuple(data.get("options")),
        options_transliteration=_as_tuple(data.get("options_transliteration")),
        prompt_transliteration=tuple(transliteration.items()),
        hint=data.get("hint", ""),
        explanation=data.get("explanation", ""),
        content=data.get("content", ""),
        words=words,
    )


def _parse_lesson(data: Dict[str, Any], unit_id: str) -> Lesson:
    lesson_id = str(data.get("id", ""))
    if not lesson_id:
        raise ContentError(f"Lesson without id in unit {unit_id}")

    xp_reward = data.get("xp_reward", 0)
    if not isinstance(xp_reward, int) or xp_reward < 0:
        raise ContentError(f"Lesson {lesson_id} has invalid xp_reward: {xp_reward!r}")

    difficulty = data.get("difficulty", "beginner")
    if difficulty not in DIFFICULTY_LEVELS:
        raise ContentError(f"Lesson {lesson_id} has unknown difficulty: {difficulty}")

    return Lesson(
        id=lesson_id,
        title=data.get("title", ""),
        description=data.get("description", ""),
        unit_id=unit_id,
        order=data.get("order", 0),
        xp_reward=xp_reward,
        difficulty=difficulty,
        prerequisites=_as_tuple(data.get("required_previous_lessons")),
        questions=tuple(
            _parse_question(q, lesson_id) for q in data.get("questions", [])
        ),
    )


def parse_course(data: Dict[str, Any]) -> Course:
    """Build a Course from already-decoded catalog data."""
    if not isinstance(data, dict):
        raise ContentError("Course data must be a mapping")

    course_data = data.get("course", {})

    units = []
    for unit_data in data.get("units", []):
        unit_id = str(unit_data.get("id", ""))
        units.append(
            Unit(
                id=unit_id,
                title=unit_data.get("title", ""),
                description=unit_data.get("description", ""),
                order=unit_data.get("order", 0),
                color=unit_data.get("color", ""),
                lessons=tuple(
                    _parse_lesson(item, unit_id) for item in unit_data.get("lessons", [])
                ),
            )
        )

    course = Course(
        name=course_data.get("name", ""),
        code=course_data.get("code", ""),
        description=course_data.get("description", ""),
        units=tuple(units),
    )
    logger.debug(f"Parsed course {course.name!r}: {len(course.lessons)} lessons")
    return course


def load_course(course_path: str = "course.yaml") -> Course:
    """Load the course catalog from a YAML file.

    Args:
        course_path: Path to the course YAML file

    Returns:
        Course with all units, lessons and questions
    """
    path = Path(course_path)
    if not path.exists():
        raise FileNotFoundError(f"Course file not found: {course_path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    return parse_course(data)
