"""Pydantic schemas for API validation."""

from .assessments import (
    AssessmentSessionResponse,
    AssessmentTypeInfo,
    RecommendationResponse,
    StartAssessmentRequest,
    SubmitResponseResult,
)

__all__ = [
    "StartAssessmentRequest",
    "AssessmentTypeInfo",
    "RecommendationResponse",
    "AssessmentSessionResponse",
    "SubmitResponseResult",
]
