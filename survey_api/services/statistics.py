"""Response statistics aggregation.

Pure functions over already-loaded questions and responses; no database
access happens here.
"""

from collections import Counter
from typing import Iterable, Sequence

from survey_api.models.enums import QuestionType
from survey_api.models.response import Answer, Response
from survey_api.models.survey import Question
from survey_api.schemas.response import QuestionStats, SurveyStatistics


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def compute_question_stats(question: Question, answers: Sequence[Answer]) -> QuestionStats:
    """Aggregate the answers to one question according to its type.

    - single_choice: ``choices`` maps each chosen value to its count
    - multiple_choice: ``choices`` counts every selected value
    - rating: ``average`` and ``distribution`` (rating -> count)
    - text: ``responses`` lists every non-empty text verbatim
    - number: ``average``, ``min`` and ``max``
    - date: ``earliest`` and ``latest``

    ``total_answers`` and ``type`` are always reported.
    """
    stats = QuestionStats(total_answers=len(answers), type=question.type)
    values = [answer.value or {} for answer in answers]

    if question.type.has_options:
        choices: Counter = Counter()
        for value in values:
            if value.get("choice"):
                choices[value["choice"]] += 1
            if question.type == QuestionType.MULTIPLE_CHOICE:
                for choice in value.get("choices") or []:
                    choices[choice] += 1
        stats.choices = dict(choices)

    elif question.type == QuestionType.RATING:
        ratings = [value["rating"] for value in values if _is_number(value.get("rating"))]
        if ratings:
            stats.average = sum(ratings) / len(ratings)
            stats.distribution = dict(Counter(ratings))

    elif question.type == QuestionType.TEXT:
        stats.responses = [
            value["text"] for value in values
            if isinstance(value.get("text"), str) and value["text"]
        ]

    elif question.type == QuestionType.NUMBER:
        numbers = [value["number"] for value in values if _is_number(value.get("number"))]
        if numbers:
            stats.average = sum(numbers) / len(numbers)
            stats.min = min(numbers)
            stats.max = max(numbers)

    elif question.type == QuestionType.DATE:
        # ISO dates sort chronologically as strings
        dates = sorted(value["date"] for value in values if isinstance(value.get("date"), str))
        if dates:
            stats.earliest = dates[0]
            stats.latest = dates[-1]

    return stats


def compute_survey_statistics(
    questions: Iterable[Question],
    responses: Sequence[Response],
) -> SurveyStatistics:
    """Aggregate all responses of a survey.

    ``completion_rate`` is completed / total and ``average_completion_time``
    is the sum of reported completion times (missing counted as 0) over the
    total; both are 0 when there are no responses.
    """
    total = len(responses)
    completed = sum(1 for response in responses if response.is_completed)
    total_time = sum(response.completion_time for response in responses)

    answers_by_question: dict[str, list[Answer]] = {}
    for response in responses:
        for answer in response.answers:
            answers_by_question.setdefault(answer.question_id, []).append(answer)

    return SurveyStatistics(
        total_responses=total,
        completion_rate=completed / total if total else 0.0,
        average_completion_time=total_time / total if total else 0.0,
        question_stats={
            question.id: compute_question_stats(question, answers_by_question.get(question.id, []))
            for question in questions
        },
    )
