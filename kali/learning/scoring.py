"""Lesson scoring: score percentage, stars and XP."""

from dataclasses import dataclass

from ..config import ScoringConfig


@dataclass(frozen=True)
class LessonScore:
    """Outcome of one finished lesson attempt."""

    total_questions: int
    correct_answers: int
    stars: int
    xp_earned: int

    @property
    def score_percent(self) -> float:
        """Share of correct answers as a percentage."""
        return 100 * self.correct_answers / self.total_questions


class ScoreCalculator:
    """Calculator for stars and XP from a correct/total count."""

    def __init__(self, config: ScoringConfig = None):
        self.config = config or ScoringConfig()

    def calculate_stars(self, correct: int, total: int) -> int:
        """Stars for a result, thresholds evaluated high to low.

        Compares ``100 * correct / total >= threshold`` in integers so a
        result sitting exactly on a threshold is never lost to rounding.
        """
        thresholds = (
            (self.config.three_star_percent, 3),
            (self.config.two_star_percent, 2),
            (self.config.one_star_percent, 1),
        )
        for percent, stars in thresholds:
            if 100 * correct >= percent * total:
                return stars
        return 0

    def calculate_xp(self, xp_reward: int, correct: int, total: int) -> int:
        """XP earned, truncated: ``floor(xp_reward * score_percent / 100)``."""
        return xp_reward * correct // total

    def score(self, xp_reward: int, correct: int, total: int) -> LessonScore:
        """Score a lesson attempt.

        Args:
            xp_reward: The lesson's declared XP reward
            correct: Number of correct answers
            total: Number of questions, must be positive

        Returns:
            LessonScore with stars and XP
        """
        if total <= 0:
            raise ValueError("total must be positive")
        if not 0 <= correct <= total:
            raise ValueError(f"correct must be between 0 and {total}, got {correct}")

        return LessonScore(
            total_questions=total,
            correct_answers=correct,
            stars=self.calculate_stars(correct, total),
            xp_earned=self.calculate_xp(xp_reward, correct, total),
        )
