"""Answer evaluation with typo-tolerant matching for free-text questions."""

import logging
from dataclasses import dataclass
from typing import List

from ..config import EvaluationConfig
from ..content.course import Question, QuestionType
from ..utils.errors import MalformedQuestionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EvaluationResult:
    """Result of evaluating one answer."""

    correct: bool
    is_fuzzy_match: bool = False


def levenshtein_distance(a: str, b: str) -> int:
    """Minimum single-character insertions, deletions or substitutions
    needed to turn ``a`` into ``b``.

    Exact dynamic programming over two rolling rows. Characters are
    Unicode code points, so a Kannada consonant cluster such as ``ಟ್ಟ``
    counts as three characters.
    """
    if a == b:
        return 0
    # Keep the shorter string in the inner loop
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            if char_a == char_b:
                current.append(previous[j - 1])
            else:
                current.append(
                    min(
                        previous[j - 1] + 1,  # substitution
                        current[j - 1] + 1,  # insertion
                        previous[j] + 1,  # deletion
                    )
                )
        previous = current
    return previous[-1]


def normalize_text(text: str) -> str:
    """Trim surrounding whitespace and lower-case."""
    return text.strip().lower()


class AnswerEvaluator:
    """Decides whether a submitted answer is correct."""

    def __init__(self, config: EvaluationConfig = None):
        self.config = config or EvaluationConfig()

    def evaluate(self, question: Question, raw_answer: str) -> EvaluationResult:
        """Judge one answer against the question's accepted answers.

        Args:
            question: The question being answered
            raw_answer: The user's input, exactly as submitted

        Returns:
            EvaluationResult with the verdict and fuzzy-match flag

        Raises:
            MalformedQuestionError: If the question cannot be graded
        """
        question_type = question.question_type
        if question_type is None:
            raise MalformedQuestionError(question.id, f"unknown type {question.type!r}")
        if not question_type.is_graded:
            raise MalformedQuestionError(
                question.id, f"type {question.type!r} is not gradable"
            )

        # Read-and-continue screens are never graded
        if question_type == QuestionType.EXPLANATION:
            return EvaluationResult(correct=True)

        accepted = self.accepted_answers(question)
        if not accepted:
            raise MalformedQuestionError(question.id, "no accepted answers")

        if question_type == QuestionType.FILL_BLANK:
            result = self._evaluate_free_text(raw_answer, accepted)
        else:
            # Options are fixed labels, so compare them verbatim
            result = EvaluationResult(correct=raw_answer in accepted)

        logger.debug(
            f"Question {question.id}: correct={result.correct}, "
            f"fuzzy={result.is_fuzzy_match}"
        )
        return result

    def accepted_answers(self, question: Question) -> List[str]:
        """Canonical answers, plus the transliteration for fill-blank questions."""
        accepted = [a for a in question.correct_answers if a]
        if question.question_type == QuestionType.FILL_BLANK and question.answer_transliteration:
            accepted.append(question.answer_transliteration)
        return accepted

    def typo_tolerance(self, answer: str, accepted: str) -> int:
        """Largest edit distance still treated as a typo."""
        longest = max(len(answer), len(accepted))
        return max(self.config.min_typo_distance, int(longest * self.config.typo_ratio))

    def is_typo(self, answer: str, accepted: str) -> bool:
        """Whether two normalized strings differ by a tolerated typo."""
        if not answer:
            return False
        distance = levenshtein_distance(answer, accepted)
        return 0 < distance <= self.typo_tolerance(answer, accepted)

    def _evaluate_free_text(self, raw_answer: str, accepted: List[str]) -> EvaluationResult:
        answer = normalize_text(raw_answer)
        candidates = [normalize_text(a) for a in accepted]

        if answer and answer in candidates:
            return EvaluationResult(correct=True)

        if any(self.is_typo(answer, candidate) for candidate in candidates):
            return EvaluationResult(correct=True, is_fuzzy_match=True)

        return EvaluationResult(correct=False)
