"""
Assessment Engine

Façade over the factory and orchestrator. One engine holds at most one
active session; callers build an engine per request and persist the
session value between requests.
"""

from __future__ import annotations

import logging
from uuid import uuid4

from .exceptions import NoActiveSessionError
from .factory import AssessmentFactory
from .orchestrator import AssessmentOrchestrator
from .types import (
    AssessmentMetadata,
    AssessmentResponse,
    AssessmentSession,
    AssessmentType,
    NextQuestion,
    Progress,
    ResponsePattern,
    UserContext,
)

logger = logging.getLogger(__name__)


def generate_session_id() -> str:
    return f"session_{uuid4().hex}"


class AssessmentEngine:
    """Single-session assessment façade."""

    def __init__(self) -> None:
        self.current_assessment: AssessmentOrchestrator | None = None

    @property
    def current_session(self) -> AssessmentSession | None:
        return self.current_assessment.session if self.current_assessment else None

    def _require_assessment(self) -> AssessmentOrchestrator:
        if self.current_assessment is None:
            raise NoActiveSessionError()
        return self.current_assessment

    def start_assessment(
        self,
        assessment_type: AssessmentType | str,
        user_context: UserContext,
        session_id: str | None = None,
    ) -> tuple[AssessmentSession, NextQuestion | None]:
        """Create a session and return it with its first question.

        Args:
            assessment_type: Modality to run
            user_context: Respondent context
            session_id: Caller-chosen id (generated when omitted)

        Returns:
            (session, first question)

        Raises:
            UnsupportedAssessmentTypeError: Unknown assessment type
        """
        resolved_type = AssessmentFactory.resolve_type(assessment_type)
        session = AssessmentSession.create(
            id=session_id or generate_session_id(),
            user_id=user_context.user_id or "anonymous",
            assessment_type=resolved_type,
            cultural_adaptations=user_context.cultural_context,
        )

        assessment = AssessmentFactory.create_assessment(resolved_type, user_context, session)
        assessment.initialize()
        assessment.session = session.update_progress(0, len(assessment.questions))
        self.current_assessment = assessment

        logger.info(f"Started {resolved_type} assessment {session.id} for {session.user_id}")
        return assessment.session, assessment.get_current_question()

    def resume_assessment(
        self, session: AssessmentSession, user_context: UserContext
    ) -> NextQuestion | None:
        """Rebuild the strategy from a persisted session and return its current question."""
        assessment = AssessmentFactory.create_assessment(
            session.assessment_type, user_context, session
        )
        assessment.initialize()
        self.current_assessment = assessment

        logger.info(
            f"Resumed assessment {session.id} at question {session.current_question_index}"
        )
        return assessment.get_current_question()

    def submit_response(self, response: AssessmentResponse) -> NextQuestion | None:
        """Forward a response to the active assessment.

        Raises:
            NoActiveSessionError: No session has been started or resumed
        """
        return self._require_assessment().submit_response(response)

    def get_session(self) -> AssessmentSession:
        """Active session value.

        Raises:
            NoActiveSessionError: No session has been started or resumed
        """
        return self._require_assessment().session

    def get_current_question(self) -> NextQuestion | None:
        return self._require_assessment().get_current_question()

    def get_progress(self) -> Progress | None:
        if self.current_assessment is None:
            return None
        return self.current_assessment.get_progress()

    def is_complete(self) -> bool:
        return self.current_assessment.is_complete() if self.current_assessment else False

    def analyze_response_pattern(self) -> ResponsePattern:
        return self._require_assessment().analyze_response_pattern()

    def complete_assessment(self) -> AssessmentSession:
        session = self._require_assessment().complete()
        logger.info(f"Completed assessment {session.id} in {session.duration_minutes} min")
        return session

    def abandon_assessment(self) -> AssessmentSession:
        session = self._require_assessment().abandon()
        logger.info(f"Abandoned assessment {session.id} at question {session.current_question_index}")
        return session

    # ========================================================================
    # Catalogue
    # ========================================================================

    @staticmethod
    def get_available_assessment_types() -> list[AssessmentType]:
        return AssessmentFactory.get_available_types()

    @staticmethod
    def get_assessment_metadata(assessment_type: AssessmentType | str) -> AssessmentMetadata:
        return AssessmentFactory.get_assessment_metadata(assessment_type)

    @staticmethod
    def recommend_assessment_type(user_context: UserContext) -> AssessmentType:
        return AssessmentFactory.recommend_assessment_type(user_context)
