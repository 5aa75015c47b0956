"""Catalog checks that run every question through the evaluator."""

import logging
from dataclasses import dataclass
from typing import List

from ..content.course import Course, Lesson, QuestionType
from ..utils.errors import MalformedQuestionError
from .evaluation import AnswerEvaluator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CourseProblem:
    """A configuration problem found in a catalog."""

    lesson_id: str
    question_id: str
    message: str

    def __str__(self) -> str:
        if self.question_id:
            return f"{self.lesson_id}/{self.question_id}: {self.message}"
        return f"{self.lesson_id}: {self.message}"


def find_lesson_problems(
    lesson: Lesson, evaluator: AnswerEvaluator = None
) -> List[CourseProblem]:
    """Check that a lesson can be scored and every answer key is accepted.

    A lesson with no questions, a question the evaluator refuses, an
    answer key that is not among a choice question's options, and an
    answer key the evaluator would mark wrong are all reported.
    """
    evaluator = evaluator or AnswerEvaluator()
    problems: List[CourseProblem] = []

    if not lesson.questions:
        problems.append(CourseProblem(lesson.id, "", "lesson has no questions"))

    for question in lesson.questions:
        if question.question_type == QuestionType.EXPLANATION:
            continue

        try:
            accepted = evaluator.accepted_answers(question)
            key = accepted[0] if accepted else ""
            verdict = evaluator.evaluate(question, key)
        except MalformedQuestionError as e:
            problems.append(CourseProblem(lesson.id, question.id, e.reason))
            continue

        if not verdict.correct or verdict.is_fuzzy_match:
            problems.append(
                CourseProblem(lesson.id, question.id, "answer key is not accepted")
            )

        if question.options and not set(question.correct_answers) <= set(question.options):
            problems.append(
                CourseProblem(lesson.id, question.id, "answer is not one of the options")
            )

    return problems


def find_course_problems(
    course: Course, evaluator: AnswerEvaluator = None
) -> List[CourseProblem]:
    """Check every lesson, and that every prerequisite is in the catalog."""
    evaluator = evaluator or AnswerEvaluator()
    problems: List[CourseProblem] = []

    for lesson in course.lessons:
        problems.extend(find_lesson_problems(lesson, evaluator))

        for prerequisite in lesson.prerequisites:
            if course.get_lesson(prerequisite) is None:
                problems.append(
                    CourseProblem(lesson.id, "", f"unknown prerequisite {prerequisite}")
                )

    logger.debug(f"Checked {len(course.lessons)} lessons, {len(problems)} problems")
    return problems
