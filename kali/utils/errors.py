"""Custom exceptions for lesson evaluation and progress tracking."""


class KaliError(Exception):
    """Base exception for all Kali errors."""

    pass


class ContentError(KaliError):
    """Raised when course content is misconfigured."""

    pass


class MalformedQuestionError(ContentError):
    """Raised when a question cannot be graded as configured.

    This is distinct from an incorrect answer: callers must not grade
    these questions as wrong.
    """

    def __init__(self, question_id: str, reason: str):
        self.question_id = question_id
        self.reason = reason
        super().__init__(f"Question {question_id!r} is malformed: {reason}")


class EmptyLessonError(ContentError):
    """Raised when a lesson has no questions to score."""

    def __init__(self, lesson_id: str):
        self.lesson_id = lesson_id
        super().__init__(f"Lesson {lesson_id!r} has no questions")


class LessonNotFoundError(KaliError):
    """Raised when a lesson ID does not exist in the catalog."""

    def __init__(self, lesson_id: str):
        self.lesson_id = lesson_id
        super().__init__(f"Lesson not found: {lesson_id}")


class LessonLockedError(KaliError):
    """Raised when starting a lesson whose prerequisites are not completed."""

    def __init__(self, lesson_id: str, missing: list):
        self.lesson_id = lesson_id
        self.missing = missing
        super().__init__(
            f"Lesson {lesson_id!r} is locked; complete {', '.join(missing)} first"
        )


class IncompleteLessonError(KaliError):
    """Raised when finishing a lesson before every question is judged."""

    pass


class NoActiveLessonError(KaliError):
    """Raised when an action requires an in-flight lesson attempt."""

    pass
