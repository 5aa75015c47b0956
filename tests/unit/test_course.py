"""Tests for course catalog parsing and remote loading."""

import httpx
import pytest

from kali.content.course import QuestionType, load_course, parse_course
from kali.content.loader import ContentLoader
from kali.utils.errors import ContentError

COURSE_YAML = """
course:
  name: Kannada Basics
  code: KN101
units:
  - id: unit_002
    title: Numbers
    order: 1
    lessons:
      - id: lesson_003
        title: Numbers 1-10
        order: 0
        xp_reward: 20
        required_previous_lessons: [lesson_002]
        questions:
          - id: q1
            type: fill-blank
            question: "The number 3 in Kannada is: ___"
            correct_answer: ಮೂರು
            correct_answer_transliteration: Mūru
            xp: 5
  - id: unit_001
    title: Basic Greetings
    order: 0
    color: "#58CC02"
    lessons:
      - id: lesson_002
        title: Polite Expressions
        order: 1
        xp_reward: 15
        required_previous_lessons: [lesson_001]
        questions:
          - id: q1
            type: true-false
            question: ಕ್ಷಮಿಸಿ means "Sorry"
            options: ["True", "False"]
            correct_answer: "True"
            xp: 5
      - id: lesson_001
        title: Introduction to Greetings
        order: 0
        xp_reward: 15
        questions:
          - id: q1
            type: explanation
            question: Common Kannada Greetings
            content: The most common formal greeting is ನಮಸ್ಕಾರ.
            words:
              - kannada: ನಮಸ್ಕಾರ
                english: Hello
                transliteration: Namaskāra
            xp: 0
          - id: q2
            type: multiple-choice
            question: How do you say "Hello" formally in Kannada?
            question_transliteration:
              ನಮಸ್ಕಾರ: Namaskāra
            options: [ನಮಸ್ಕಾರ, ವಿದಾಯ, ಧನ್ಯವಾದ, ಹಲೋ]
            correct_answer: ನಮಸ್ಕಾರ
            xp: 5
"""


@pytest.fixture
def course_file(tmp_path):
    path = tmp_path / "course.yaml"
    path.write_text(COURSE_YAML, encoding="utf-8")
    return path


class TestLoadCourse:
    def test_lessons_follow_unit_then_lesson_order(self, course_file):
        course = load_course(str(course_file))

        assert course.name == "Kannada Basics"
        assert [lesson.id for lesson in course.lessons] == ["lesson_001", "lesson_002", "lesson_003"]

    def test_questions_are_parsed(self, course_file):
        lesson = load_course(str(course_file)).get_lesson("lesson_001")

        explanation, choice = lesson.questions
        assert explanation.question_type == QuestionType.EXPLANATION
        assert explanation.words[0].transliteration == "Namaskāra"
        assert choice.correct_answers == ("ನಮಸ್ಕಾರ",)
        assert choice.options == ("ನಮಸ್ಕಾರ", "ವಿದಾಯ", "ಧನ್ಯವಾದ", "ಹಲೋ")
        assert dict(choice.prompt_transliteration) == {"ನಮಸ್ಕಾರ": "Namaskāra"}

    def test_lesson_fields(self, course_file):
        lesson = load_course(str(course_file)).get_lesson("lesson_003")

        assert lesson.unit_id == "unit_002"
        assert lesson.xp_reward == 20
        assert lesson.prerequisites == ("lesson_002",)
        assert lesson.questions[0].answer_transliteration == "Mūru"

    def test_first_in_unit(self, course_file):
        course = load_course(str(course_file))

        assert course.is_first_in_unit(course.get_lesson("lesson_001")) is True
        assert course.is_first_in_unit(course.get_lesson("lesson_002")) is False
        assert course.is_first_in_unit(course.get_lesson("lesson_003")) is True

    def test_find_lesson(self, course_file):
        course = load_course(str(course_file))

        assert course.find_lesson("LESSON_002").id == "lesson_002"
        assert course.find_lesson("numbers").id == "lesson_003"
        assert course.find_lesson("missing") is None
        assert course.get_lesson("missing") is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_course(str(tmp_path / "nope.yaml"))


class TestParseCourseErrors:
    def _course(self, lesson):
        return {"course": {"name": "x"}, "units": [{"id": "u", "lessons": [lesson]}]}

    def test_negative_xp_reward(self):
        with pytest.raises(ContentError):
            parse_course(self._course({"id": "l", "xp_reward": -5}))

    def test_negative_question_xp(self):
        lesson = {"id": "l", "questions": [{"id": "q", "type": "explanation", "xp": -1}]}

        with pytest.raises(ContentError):
            parse_course(self._course(lesson))

    def test_duplicate_lesson_ids(self):
        data = {
            "units": [
                {"id": "a", "lessons": [{"id": "l"}]},
                {"id": "b", "lessons": [{"id": "l"}]},
            ]
        }

        with pytest.raises(ContentError):
            parse_course(data)

    def test_unknown_question_type_is_kept_for_the_evaluator(self):
        lesson = {"id": "l", "questions": [{"id": "q", "type": "essay"}]}

        course = parse_course(self._course(lesson))

        assert course.get_lesson("l").questions[0].question_type is None

    def test_not_a_mapping(self):
        with pytest.raises(ContentError):
            parse_course(["not", "a", "course"])


class TestContentLoader:
    @pytest.mark.asyncio
    async def test_fetch_course_and_cache(self):
        calls = []

        def handler(request):
            calls.append(request.url)
            return httpx.Response(200, text=COURSE_YAML)

        loader = ContentLoader(transport=httpx.MockTransport(handler))

        course = await loader.fetch_course("https://example.com/course.yaml")
        again = await loader.fetch_course("https://example.com/course.yaml")

        assert course.get_lesson("lesson_002").title == "Polite Expressions"
        assert again is course
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_http_error_is_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request.url)
            return httpx.Response(404)

        loader = ContentLoader(max_retries=3, transport=httpx.MockTransport(handler))

        with pytest.raises(httpx.HTTPStatusError):
            await loader.fetch_course("https://example.com/missing.yaml")

        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_timeouts_are_retried_then_raised(self):
        calls = []

        def handler(request):
            calls.append(request.url)
            raise httpx.ReadTimeout("slow", request=request)

        loader = ContentLoader(max_retries=2, transport=httpx.MockTransport(handler))

        with pytest.raises(httpx.TimeoutException):
            await loader.fetch_course("https://example.com/course.yaml")

        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_load_prefers_url(self, course_file):
        def handler(request):
            return httpx.Response(200, text=COURSE_YAML.replace("Kannada Basics", "Remote"))

        loader = ContentLoader(transport=httpx.MockTransport(handler))

        remote = await loader.load(str(course_file), url="https://example.com/c.yaml")
        local = await loader.load(str(course_file))

        assert remote.name == "Remote"
        assert local.name == "Kannada Basics"

    @pytest.mark.asyncio
    async def test_invalidate_refetches(self):
        calls = []

        def handler(request):
            calls.append(request.url)
            return httpx.Response(200, text=COURSE_YAML)

        loader = ContentLoader(transport=httpx.MockTransport(handler))
        url = "https://example.com/course.yaml"

        await loader.fetch_course(url)
        loader.invalidate(url)
        await loader.fetch_course(url)
        loader.clear_cache()
        await loader.fetch_course(url)

        assert len(calls) == 3
