"""Unit tests for answer validation.

Tests the value variant check and the validation rules for every question type.
"""

import pytest

from survey_api.models.enums import QuestionType
from survey_api.models.survey import Question, QuestionOption
from survey_api.services.validation import AnswerValidator


def make_question(question_type, validations=None, options=None) -> Question:
    return Question(
        id="q1",
        text="Question?",
        type=question_type,
        validations=validations,
        options=[
            QuestionOption(text=text, order=index, option_metadata=meta)
            for index, (text, meta) in enumerate(options or [])
        ],
    )


class TestAnswerValidator:
    """Tests for AnswerValidator."""

    def test_missing_value_invalid(self):
        result = AnswerValidator.validate(make_question(QuestionType.TEXT), None)

        assert not result.is_valid
        assert "missing" in result.error_message

    def test_wrong_variant_invalid(self):
        result = AnswerValidator.validate(make_question(QuestionType.TEXT), {"number": 3})

        assert not result.is_valid
        assert "text question" in result.error_message

    def test_extra_fields_rejected(self):
        result = AnswerValidator.validate(
            make_question(QuestionType.TEXT),
            {"text": "hello", "number": 4},
        )

        assert not result.is_valid

    def test_null_fields_are_ignored(self):
        result = AnswerValidator.validate(
            make_question(QuestionType.TEXT),
            {"text": "hello", "number": None, "choice": None},
        )

        assert result.is_valid
        assert result.value == {"text": "hello"}

    def test_text_length_rules(self):
        question = make_question(QuestionType.TEXT, {"minLength": 3, "maxLength": 5})

        assert not AnswerValidator.validate(question, {"text": "ab"}).is_valid
        assert AnswerValidator.validate(question, {"text": "abc"}).is_valid
        assert AnswerValidator.validate(question, {"text": "abcde"}).is_valid

        result = AnswerValidator.validate(question, {"text": "abcdef"})
        assert not result.is_valid
        assert "5 characters" in result.error_message

    def test_text_pattern_must_match_fully(self):
        question = make_question(QuestionType.TEXT, {"pattern": r"[A-Z]{3}-\d+"})

        assert AnswerValidator.validate(question, {"text": "ABC-123"}).is_valid
        assert not AnswerValidator.validate(question, {"text": "xABC-123"}).is_valid

    def test_text_whitespace_preserved(self):
        result = AnswerValidator.validate(make_question(QuestionType.TEXT), {"text": "  padded  "})

        assert result.value == {"text": "  padded  "}

    def test_broken_stored_pattern_rejects(self):
        question = make_question(QuestionType.TEXT, {"pattern": "([unclosed"})

        result = AnswerValidator.validate(question, {"text": "anything"})

        assert not result.is_valid
        assert "invalid validation pattern" in result.error_message

    def test_number_range(self):
        question = make_question(QuestionType.NUMBER, {"min": 0, "max": 120})

        assert AnswerValidator.validate(question, {"number": 42}).value == {"number": 42.0}
        assert not AnswerValidator.validate(question, {"number": -1}).is_valid
        assert not AnswerValidator.validate(question, {"number": 121}).is_valid

    def test_number_rejects_non_numeric(self):
        question = make_question(QuestionType.NUMBER)

        assert not AnswerValidator.validate(question, {"number": "many"}).is_valid

    def test_number_rejects_non_finite(self):
        question = make_question(QuestionType.NUMBER)

        assert not AnswerValidator.validate(question, {"number": "nan"}).is_valid
        assert not AnswerValidator.validate(question, {"number": "inf"}).is_valid

    def test_rating_scale_is_normalised(self):
        question = make_question(QuestionType.RATING, {"min": 1, "max": 5})

        result = AnswerValidator.validate(question, {"scale": 4})

        assert result.is_valid
        assert result.value == {"rating": 4}

    def test_rating_out_of_range(self):
        question = make_question(QuestionType.RATING, {"min": 1, "max": 5})

        result = AnswerValidator.validate(question, {"rating": 6})

        assert not result.is_valid
        assert "at most 5" in result.error_message

    def test_single_choice_must_be_known_option(self):
        question = make_question(QuestionType.SINGLE_CHOICE, options=[("yes", None), ("no", None)])

        assert AnswerValidator.validate(question, {"choice": "yes"}).is_valid

        result = AnswerValidator.validate(question, {"choice": "maybe"})
        assert not result.is_valid
        assert "Valid options: yes, no" in result.error_message

    def test_choice_matches_option_metadata_value(self):
        question = make_question(
            QuestionType.SINGLE_CHOICE,
            options=[("Very good", {"value": 5}), ("Poor", {"value": 1})],
        )

        assert AnswerValidator.validate(question, {"choice": "5"}).is_valid

    def test_choice_without_options_accepts_anything(self):
        question = make_question(QuestionType.SINGLE_CHOICE)

        assert AnswerValidator.validate(question, {"choice": "anything"}).is_valid

    def test_multiple_choice(self):
        question = make_question(
            QuestionType.MULTIPLE_CHOICE,
            options=[("red", None), ("green", None), ("blue", None)],
        )

        result = AnswerValidator.validate(question, {"choices": ["red", "blue"]})
        assert result.is_valid
        assert result.value == {"choices": ["red", "blue"]}

        assert not AnswerValidator.validate(question, {"choices": ["red", "pink"]}).is_valid
        assert not AnswerValidator.validate(question, {"choices": []}).is_valid
        assert not AnswerValidator.validate(question, {"choice": "red"}).is_valid

    @pytest.mark.parametrize("raw,valid", [
        ({"date": "2024-03-15"}, True),
        ({"date": "15/03/2024"}, False),
        ({"date": "2024-02-30"}, False),
    ])
    def test_date(self, raw, valid):
        result = AnswerValidator.validate(make_question(QuestionType.DATE), raw)

        assert result.is_valid is valid
        if valid:
            assert result.value == {"date": "2024-03-15"}
