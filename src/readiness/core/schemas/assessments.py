"""
Assessment Pydantic Schemas

Request/response models for assessment API endpoints. Domain values
(sessions, questions, progress) are returned as-is; these schemas only wrap
them into request-specific envelopes.
"""

from pydantic import BaseModel, Field

from readiness.assessment.types import (
    AssessmentMetadata,
    AssessmentSession,
    AssessmentType,
    NextQuestion,
    UserContext,
)


# Request schemas
class StartAssessmentRequest(BaseModel):
    """Request schema for starting an assessment session.

    ``assessment_type`` is a plain string so unknown types are reported as
    an unsupported type (400) rather than a schema error.
    """

    assessment_type: str
    user_context: UserContext = Field(default_factory=UserContext)
    session_id: str | None = Field(default=None, max_length=100)


# Response schemas
class AssessmentTypeInfo(BaseModel):
    """An available assessment type with its catalogue metadata."""

    assessment_type: AssessmentType
    metadata: AssessmentMetadata


class RecommendationResponse(BaseModel):
    assessment_type: AssessmentType


class AssessmentSessionResponse(BaseModel):
    """A session and the question to present next (None when finished)."""

    session: AssessmentSession
    next_question: NextQuestion | None = None


class SubmitResponseResult(AssessmentSessionResponse):
    completed: bool = False
