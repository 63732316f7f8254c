"""Unit tests for response statistics aggregation."""

from survey_api.models.enums import QuestionType
from survey_api.models.response import Answer, Response
from survey_api.models.survey import Question
from survey_api.services.statistics import compute_question_stats, compute_survey_statistics


def make_question(question_id, question_type) -> Question:
    return Question(id=question_id, text=f"{question_id}?", type=question_type)


def make_answers(question_id, *values) -> list[Answer]:
    return [Answer(question_id=question_id, value=value) for value in values]


def make_response(answers=(), completed=True, completion_time=None) -> Response:
    metadata = {"completionTime": completion_time} if completion_time is not None else {}
    return Response(is_completed=completed, response_metadata=metadata, answers=list(answers))


class TestQuestionStats:
    """Tests for compute_question_stats."""

    def test_single_choice_counts(self):
        question = make_question("q1", QuestionType.SINGLE_CHOICE)
        answers = make_answers("q1", {"choice": "yes"}, {"choice": "no"}, {"choice": "yes"})

        stats = compute_question_stats(question, answers)

        assert stats.total_answers == 3
        assert stats.type == QuestionType.SINGLE_CHOICE
        assert stats.choices == {"yes": 2, "no": 1}

    def test_multiple_choice_counts_every_selection(self):
        question = make_question("q1", QuestionType.MULTIPLE_CHOICE)
        answers = make_answers("q1", {"choices": ["red", "blue"]}, {"choices": ["red"]})

        stats = compute_question_stats(question, answers)

        assert stats.choices == {"red": 2, "blue": 1}

    def test_rating_average_and_distribution(self):
        question = make_question("q1", QuestionType.RATING)
        answers = make_answers("q1", {"rating": 4}, {"rating": 5}, {"rating": 4})

        stats = compute_question_stats(question, answers)

        assert abs(stats.average - 13 / 3) < 1e-9
        assert stats.distribution == {4: 2, 5: 1}

    def test_text_responses_skip_empty(self):
        question = make_question("q1", QuestionType.TEXT)
        answers = make_answers("q1", {"text": "great"}, {"text": ""}, {"text": "slow"})

        stats = compute_question_stats(question, answers)

        assert stats.responses == ["great", "slow"]

    def test_number_average_min_max(self):
        question = make_question("q1", QuestionType.NUMBER)
        answers = make_answers("q1", {"number": 10}, {"number": 2.5}, {"number": 30})

        stats = compute_question_stats(question, answers)

        assert stats.average == 42.5 / 3
        assert stats.min == 2.5
        assert stats.max == 30

    def test_date_range(self):
        question = make_question("q1", QuestionType.DATE)
        answers = make_answers("q1", {"date": "2024-05-01"}, {"date": "2023-12-31"}, {"date": "2024-01-15"})

        stats = compute_question_stats(question, answers)

        assert stats.earliest == "2023-12-31"
        assert stats.latest == "2024-05-01"

    def test_no_answers(self):
        stats = compute_question_stats(make_question("q1", QuestionType.RATING), [])

        assert stats.total_answers == 0
        assert stats.average is None
        assert stats.distribution is None


class TestSurveyStatistics:
    """Tests for compute_survey_statistics."""

    def test_empty_survey(self):
        stats = compute_survey_statistics([make_question("q1", QuestionType.TEXT)], [])

        assert stats.total_responses == 0
        assert stats.completion_rate == 0
        assert stats.average_completion_time == 0
        assert stats.question_stats["q1"].total_answers == 0

    def test_average_completion_time(self):
        responses = [make_response(completion_time=1000), make_response(completion_time=3000)]

        stats = compute_survey_statistics([], responses)

        assert stats.average_completion_time == 2000

    def test_missing_completion_time_counts_as_zero(self):
        responses = [make_response(completion_time=3000), make_response()]

        assert compute_survey_statistics([], responses).average_completion_time == 1500

    def test_completion_rate(self):
        responses = [
            make_response(completed=True),
            make_response(completed=False),
            make_response(completed=True),
            make_response(completed=True),
        ]

        stats = compute_survey_statistics([], responses)

        assert stats.completion_rate == 0.75
        assert 0 <= stats.completion_rate <= 1

    def test_answers_grouped_by_question(self):
        q1 = make_question("q1", QuestionType.SINGLE_CHOICE)
        q2 = make_question("q2", QuestionType.RATING)
        responses = [
            make_response(make_answers("q1", {"choice": "yes"}) + make_answers("q2", {"rating": 3})),
            make_response(make_answers("q1", {"choice": "no"})),
        ]

        stats = compute_survey_statistics([q1, q2], responses)

        assert stats.total_responses == 2
        assert stats.question_stats["q1"].choices == {"yes": 1, "no": 1}
        assert stats.question_stats["q2"].total_answers == 1
        assert stats.question_stats["q2"].average == 3
