"""
Response validation rules.

All validation functions follow the pattern:
1. Accept the submitted response and the question it answers
2. Check identity (question id and type) first
3. Apply the type-specific business rule
4. Return None or raise ValidationError with the specific reason

Scenario and visual answers select a presented choice by its text; the
strategy attaches the choice's persona alignment afterwards. Behavioral
observations have no rule here and are left to the strategy.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from readiness.assessment.types import AssessmentResponse, Question


class ValidationError(Exception):
    """Raised when a response fails validation."""

    pass


# ============================================================================
# Identity
# ============================================================================


def validate_question_identity(response: AssessmentResponse, question: Question) -> None:
    """
    Check that the response targets the question currently presented.

    Raises:
        ValidationError: If question id or question type differ
    """
    if response.question_id != question.id:
        raise ValidationError(
            f"Response is for question {response.question_id}, expected {question.id}"
        )

    if response.question_type != question.type:
        raise ValidationError(
            f"Response type {response.question_type} does not match question type {question.type}"
        )


# ============================================================================
# Type-specific rules
# ============================================================================


def validate_multiple_choice(response: AssessmentResponse, question: Question) -> None:
    """
    Multiple choice answers must be one of the offered options, verbatim.

    Raises:
        ValidationError: If the question has no options or the value is not one of them
    """
    if not question.options:
        raise ValidationError(f"Question {question.id} has no options")

    if not isinstance(response.response_value, str):
        raise ValidationError("Multiple choice response must be an option string")

    if response.response_value not in question.options:
        raise ValidationError(f"'{response.response_value}' is not an option")


def validate_choice_selection(response: AssessmentResponse, question: Question) -> None:
    """
    Scenario and visual pattern answers must name one of the presented choices.

    Raises:
        ValidationError: If the question has no choices or the value is not one of them
    """
    if not question.options:
        raise ValidationError(f"Question {question.id} has no choices")

    if not isinstance(response.response_value, str):
        raise ValidationError("Choice response must be the text of a presented choice")

    if response.response_value not in question.options:
        raise ValidationError(f"'{response.response_value}' is not a presented choice")


def validate_scale_rating(response: AssessmentResponse, question: Question) -> None:
    """
    Scale ratings must be numeric and inside the inclusive scale range.

    Raises:
        ValidationError: If the question has no range or the value is outside it
    """
    if question.scale_range is None:
        raise ValidationError(f"Question {question.id} has no scale range")

    value = response.response_value
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValidationError("Scale rating response must be a number")

    low, high = question.scale_range.min, question.scale_range.max
    if not low <= value <= high:
        raise ValidationError(f"Rating {value} outside scale {low}-{high}")


def validate_text_input(response: AssessmentResponse, question: Question) -> None:  # noqa: ARG001
    """
    Text answers must contain something other than whitespace.

    Raises:
        ValidationError: If the value is not a string or is blank
    """
    value = response.response_value
    if not isinstance(value, str):
        raise ValidationError("Text response must be a string")

    if value.strip() == "":
        raise ValidationError("Text response cannot be empty")


_TYPE_RULES = {
    "multiple_choice": validate_multiple_choice,
    "scale_rating": validate_scale_rating,
    "text_input": validate_text_input,
    "scenario_selection": validate_choice_selection,
    "visual_pattern": validate_choice_selection,
}


def validate_response(response: AssessmentResponse, question: Question) -> None:
    """
    Validate a response against the question it answers.

    Args:
        response: Submitted response
        question: Question as presented to the respondent

    Raises:
        ValidationError: On the first failing rule
    """
    validate_question_identity(response, question)

    rule = _TYPE_RULES.get(str(question.type))
    if rule is not None:
        rule(response, question)
