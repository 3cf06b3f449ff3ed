"""
Assessment Data Types

Immutable value types shared by the orchestrator, the five strategies,
the factory and the engine façade.

Sessions are copy-on-write: every lifecycle operation returns a new
AssessmentSession instead of mutating fields in place, so the persistence
layer can commit whole values and detect concurrent writers.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import SessionClosedError


class AssessmentType(StrEnum):
    """Assessment modalities supported by the engine."""

    QUESTIONNAIRE = "questionnaire"
    SCENARIO_BASED = "scenario-based"
    CONVERSATIONAL = "conversational"
    VISUAL_PATTERN = "visual-pattern"
    BEHAVIORAL_OBSERVATION = "behavioral-observation"


class QuestionType(StrEnum):
    MULTIPLE_CHOICE = "multiple_choice"
    SCALE_RATING = "scale_rating"
    TEXT_INPUT = "text_input"
    SCENARIO_SELECTION = "scenario_selection"
    VISUAL_PATTERN = "visual_pattern"
    BEHAVIORAL_OBSERVATION = "behavioral_observation"


class SessionStatus(StrEnum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class PersonaType(StrEnum):
    """Persona labels, ordered high → low authority/resources/readiness."""

    STRATEGIC_ARCHITECT = "Strategic Architect"
    STRATEGIC_CATALYST = "Strategic Catalyst"
    STRATEGIC_CONTRIBUTOR = "Strategic Contributor"
    STRATEGIC_EXPLORER = "Strategic Explorer"
    STRATEGIC_OBSERVER = "Strategic Observer"


def utcnow() -> datetime:
    return datetime.now(UTC)


# ============================================================================
# Questions and responses
# ============================================================================


class ScaleRange(BaseModel):
    """Inclusive numeric range for scale_rating questions."""

    model_config = ConfigDict(frozen=True)

    min: int
    max: int
    labels: tuple[str, ...] = ()


class Question(BaseModel):
    """A question as stored in a bank.

    Bank entries are never mutated; adaptations produce copies via
    ``model_copy(update=...)``.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    type: QuestionType
    text: str
    options: tuple[str, ...] | None = None
    scale_range: ScaleRange | None = None
    cultural_adaptations: dict[str, str] = Field(default_factory=dict)
    industry_specific: bool = False
    required_for_persona: tuple[PersonaType, ...] = ()


class AssessmentResponse(BaseModel):
    """A single recorded answer. Append-only once part of a session."""

    model_config = ConfigDict(frozen=True)

    question_id: str
    question_type: QuestionType
    response_value: str | int | float | dict[str, Any] | None = None
    response_time_seconds: float | None = None
    metadata: dict[str, Any] | None = None


# ============================================================================
# User context
# ============================================================================


class UserContext(BaseModel):
    """Caller-supplied respondent context (read-only to the engine).

    ``cultural_context`` is ordered; adaptation lookup is first-match-wins.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str | None = None
    industry: str | None = None
    geographic_region: str | None = None
    cultural_context: tuple[str, ...] = ()
    preferred_language: str | None = None
    assessment_history: tuple[str, ...] | None = None


# ============================================================================
# Session
# ============================================================================


class Progress(BaseModel):
    model_config = ConfigDict(frozen=True)

    current: int
    total: int
    percentage: int


class AssessmentSession(BaseModel):
    """Assessment session value.

    Invariant: once the orchestrator has processed a submission,
    ``current_question_index == len(responses)``.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    assessment_type: AssessmentType
    status: SessionStatus = SessionStatus.IN_PROGRESS

    start_time: datetime = Field(default_factory=utcnow)
    completion_time: datetime | None = None
    duration_minutes: int | None = None

    modality_used: str | None = None
    cultural_adaptations: tuple[str, ...] = ()

    current_question_index: int = 0
    total_questions: int | None = None
    responses: tuple[AssessmentResponse, ...] = ()

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @classmethod
    def create(
        cls,
        *,
        id: str,  # noqa: A002
        user_id: str,
        assessment_type: AssessmentType,
        cultural_adaptations: tuple[str, ...] | list[str] = (),
    ) -> AssessmentSession:
        """Create a fresh in-progress session."""
        now = utcnow()
        return cls(
            id=id,
            user_id=user_id,
            assessment_type=assessment_type,
            status=SessionStatus.IN_PROGRESS,
            start_time=now,
            modality_used=str(assessment_type),
            cultural_adaptations=tuple(cultural_adaptations),
            created_at=now,
            updated_at=now,
        )

    @property
    def is_terminal(self) -> bool:
        return self.status != SessionStatus.IN_PROGRESS

    def _ensure_open(self) -> None:
        if self.is_terminal:
            raise SessionClosedError(f"Session {self.id} is {self.status} and cannot change")

    def with_response(self, response: AssessmentResponse) -> AssessmentSession:
        """Return a copy with ``response`` appended and the index advanced."""
        self._ensure_open()
        return self.model_copy(
            update={
                "responses": (*self.responses, response),
                "current_question_index": self.current_question_index + 1,
                "updated_at": utcnow(),
            }
        )

    def update_progress(
        self, question_index: int, total_questions: int | None = None
    ) -> AssessmentSession:
        self._ensure_open()
        return self.model_copy(
            update={
                "current_question_index": question_index,
                "total_questions": total_questions or self.total_questions,
                "updated_at": utcnow(),
            }
        )

    def complete(self, now: datetime | None = None) -> AssessmentSession:
        """Transition to ``completed`` and stamp duration in whole minutes."""
        self._ensure_open()
        completion_time = now or utcnow()
        duration = round((completion_time - self.start_time).total_seconds() / 60)
        return self.model_copy(
            update={
                "status": SessionStatus.COMPLETED,
                "completion_time": completion_time,
                "duration_minutes": duration,
                "updated_at": completion_time,
            }
        )

    def abandon(self) -> AssessmentSession:
        self._ensure_open()
        return self.model_copy(update={"status": SessionStatus.ABANDONED, "updated_at": utcnow()})

    def progress(self) -> Progress:
        total = self.total_questions or 1
        current = self.current_question_index
        return Progress(current=current, total=total, percentage=round(current / total * 100))

    def duration(self) -> int | None:
        """Session length in minutes, or None while not completed."""
        if self.completion_time is None:
            return None
        return round((self.completion_time - self.start_time).total_seconds() / 60)


# ============================================================================
# Derived / presentation values
# ============================================================================


class QuestionAdaptations(BaseModel):
    model_config = ConfigDict(frozen=True)

    cultural_context: str | None = None
    industry_focus: str | None = None
    persona_hint: PersonaType | None = None


class NextQuestion(BaseModel):
    """A question ready for presentation, with progress and the context used."""

    model_config = ConfigDict(frozen=True)

    question: Question
    progress: Progress
    adaptations: QuestionAdaptations = Field(default_factory=QuestionAdaptations)


class ResponsePattern(BaseModel):
    """Aggregate view of how a respondent has been answering. Not persisted."""

    model_config = ConfigDict(frozen=True)

    average_response_time: float
    consistency_score: float
    engagement_level: float
    preferred_question_types: tuple[QuestionType, ...] = ()
    cultural_adaptations_used: tuple[str, ...] = ()


class AssessmentMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    estimated_duration: int
    difficulty: str
    cultural_adaptations: bool
