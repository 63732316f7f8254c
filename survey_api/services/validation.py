"""Answer validation service.

This module validates a submitted answer value against the question it
answers: the value variant for the question type first, then the
question's validation rules (length, range, pattern) and its options.
"""

import re
from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from survey_api.logging_config import get_logger
from survey_api.models.enums import QuestionType
from survey_api.models.survey import Question
from survey_api.schemas.response import parse_answer_value

logger = get_logger(__name__)


@dataclass
class ValidationResult:
    """Result of answer validation.

    Attributes:
        is_valid: Whether the value passed validation
        value: Normalized value ready for storage
        error_message: Error message if validation failed
    """
    is_valid: bool
    value: Optional[dict]
    error_message: Optional[str]


def _invalid(message: str) -> ValidationResult:
    return ValidationResult(is_valid=False, value=None, error_message=message)


class AnswerValidator:
    """Service for validating submitted answers against their question."""

    @staticmethod
    def validate(question: Question, raw_value: Optional[dict]) -> ValidationResult:
        """Validate a raw answer value for ``question``.

        Args:
            question: Question being answered
            raw_value: Value object as submitted by the client

        Returns:
            ValidationResult with the normalized value if valid

        Example:
            >>> result = AnswerValidator.validate(rating_question, {"scale": 4})
            >>> result.value
            {'rating': 4}
        """
        if not raw_value:
            return _invalid(f"Answer to question '{question.text}' is missing a value")

        try:
            parsed = parse_answer_value(question.type, raw_value)
        except PydanticValidationError as e:
            fields = ", ".join(
                ".".join(str(part) for part in error["loc"]) or "value"
                for error in e.errors()
            )
            return _invalid(
                f"Invalid value for {question.type.value} question '{question.text}': {fields}"
            )

        value = parsed.to_storage()
        rules = question.validations or {}

        if question.type == QuestionType.TEXT:
            return AnswerValidator._validate_text(question, value, rules)
        elif question.type in (QuestionType.NUMBER, QuestionType.RATING):
            return AnswerValidator._validate_range(question, value, rules)
        elif question.type.has_options:
            return AnswerValidator._validate_choice(question, value)

        return ValidationResult(is_valid=True, value=value, error_message=None)

    @staticmethod
    def _validate_text(question: Question, value: dict, rules: dict) -> ValidationResult:
        """Validate text against minLength, maxLength and pattern rules."""
        text = value["text"]

        min_length = rules.get("minLength")
        if min_length is not None and len(text) < min_length:
            return _invalid(f"Please enter at least {min_length} characters for '{question.text}'.")

        max_length = rules.get("maxLength")
        if max_length is not None and len(text) > max_length:
            return _invalid(f"Please enter no more than {max_length} characters for '{question.text}'.")

        pattern = rules.get("pattern")
        if pattern:
            try:
                if not re.fullmatch(pattern, text):
                    return _invalid(f"Invalid format for '{question.text}'.")
            except re.error as e:
                logger.error(f"Invalid regex pattern in question {question.id}: {e}")
                return _invalid("Internal error: invalid validation pattern")

        return ValidationResult(is_valid=True, value=value, error_message=None)

    @staticmethod
    def _validate_range(question: Question, value: dict, rules: dict) -> ValidationResult:
        """Validate a number or rating against min and max rules."""
        number = value.get("number", value.get("rating"))

        minimum = rules.get("min")
        if minimum is not None and number < minimum:
            return _invalid(f"Value for '{question.text}' must be at least {minimum}.")

        maximum = rules.get("max")
        if maximum is not None and number > maximum:
            return _invalid(f"Value for '{question.text}' must be at most {maximum}.")

        return ValidationResult(is_valid=True, value=value, error_message=None)

    @staticmethod
    def _validate_choice(question: Question, value: dict) -> ValidationResult:
        """Validate selected choices against the question's options.

        An option matches by its text or by its metadata value. Questions
        without options accept any choice.
        """
        if not question.options:
            return ValidationResult(is_valid=True, value=value, error_message=None)

        valid = set()
        for option in question.options:
            valid.add(option.text)
            option_value = (option.option_metadata or {}).get("value")
            if option_value is not None:
                valid.add(str(option_value))

        selected = value["choices"] if "choices" in value else [value["choice"]]
        unknown = [choice for choice in selected if choice not in valid]
        if unknown:
            valid_options = [option.text for option in question.options]
            return _invalid(
                f"Unknown choice {', '.join(unknown)} for '{question.text}'. "
                f"Valid options: {', '.join(valid_options)}"
            )

        return ValidationResult(is_valid=True, value=value, error_message=None)
