"""
Assessment Session Models

Persisted assessment sessions. Responses and the respondent context are
stored as JSONB documents; the question list is not stored because it is
rebuilt deterministically from the responses on resume.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from readiness.assessment.types import AssessmentResponse, AssessmentSession, UserContext

from .base import Base, TimestampMixin


class AssessmentSessionRecord(Base, TimestampMixin):
    """One assessment session and the context it was started with."""

    __tablename__ = "assessment_sessions"
    __table_args__ = (
        CheckConstraint(
            "status IN ('in_progress', 'completed', 'abandoned')", name="check_session_status"
        ),
        CheckConstraint(
            "assessment_type IN ('questionnaire', 'scenario-based', 'conversational', "
            "'visual-pattern', 'behavioral-observation')",
            name="check_assessment_type",
        ),
        CheckConstraint("current_question_index >= 0", name="check_question_index"),
        Index("idx_assessment_sessions_user", "user_id"),
        Index("idx_assessment_sessions_status", "status"),
    )

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(100), nullable=False)
    assessment_type: Mapped[str] = mapped_column(String(40), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default="in_progress", comment="in_progress, completed, abandoned"
    )

    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    completion_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)

    modality_used: Mapped[str | None] = mapped_column(String(40), nullable=True)
    cultural_adaptations: Mapped[list[str]] = mapped_column(JSONB, default=list)

    current_question_index: Mapped[int] = mapped_column(
        Integer, default=0, comment="Optimistic concurrency token"
    )
    total_questions: Mapped[int | None] = mapped_column(Integer, nullable=True)
    responses: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONB, default=list, comment="Append-only response log"
    )
    user_context: Mapped[dict[str, Any]] = mapped_column(JSONB, default=dict)

    @classmethod
    def from_session(
        cls, session: AssessmentSession, user_context: UserContext
    ) -> AssessmentSessionRecord:
        record = cls(id=session.id, user_context=user_context.model_dump(mode="json"))
        record.apply(session)
        return record

    def apply(self, session: AssessmentSession) -> None:
        """Copy a session value onto this row."""
        self.user_id = session.user_id
        self.assessment_type = str(session.assessment_type)
        self.status = str(session.status)
        self.start_time = session.start_time
        self.completion_time = session.completion_time
        self.duration_minutes = session.duration_minutes
        self.modality_used = session.modality_used
        self.cultural_adaptations = list(session.cultural_adaptations)
        self.current_question_index = session.current_question_index
        self.total_questions = session.total_questions
        self.responses = [r.model_dump(mode="json") for r in session.responses]
        self.created_at = session.created_at
        self.updated_at = session.updated_at

    def to_session(self) -> AssessmentSession:
        return AssessmentSession(
            id=self.id,
            user_id=self.user_id,
            assessment_type=self.assessment_type,
            status=self.status,
            start_time=self.start_time,
            completion_time=self.completion_time,
            duration_minutes=self.duration_minutes,
            modality_used=self.modality_used,
            cultural_adaptations=tuple(self.cultural_adaptations or ()),
            current_question_index=self.current_question_index,
            total_questions=self.total_questions,
            responses=tuple(AssessmentResponse.model_validate(r) for r in self.responses or ()),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def to_user_context(self) -> UserContext:
        return UserContext.model_validate(self.user_context or {})
