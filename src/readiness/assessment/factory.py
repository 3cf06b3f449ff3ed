"""
Assessment Factory

Maps assessment types to strategies and exposes type metadata and the
recommendation heuristic used to suggest a modality to new respondents.
"""

from __future__ import annotations

import logging

from .exceptions import UnsupportedAssessmentTypeError
from .orchestrator import AssessmentOrchestrator, AssessmentStrategy
from .strategies import (
    BehavioralStrategy,
    ConversationalStrategy,
    QuestionnaireStrategy,
    ScenarioStrategy,
    VisualPatternStrategy,
)
from .types import AssessmentMetadata, AssessmentSession, AssessmentType, UserContext

logger = logging.getLogger(__name__)


class AssessmentFactory:
    """Resolves assessment types to strategies."""

    STRATEGIES: dict[AssessmentType, type[AssessmentStrategy]] = {
        AssessmentType.QUESTIONNAIRE: QuestionnaireStrategy,
        AssessmentType.SCENARIO_BASED: ScenarioStrategy,
        AssessmentType.CONVERSATIONAL: ConversationalStrategy,
        AssessmentType.VISUAL_PATTERN: VisualPatternStrategy,
        AssessmentType.BEHAVIORAL_OBSERVATION: BehavioralStrategy,
    }

    METADATA: dict[AssessmentType, AssessmentMetadata] = {
        AssessmentType.QUESTIONNAIRE: AssessmentMetadata(
            name="Traditional Questionnaire",
            description="Structured questions with multiple choice and rating scales",
            estimated_duration=10,
            difficulty="easy",
            cultural_adaptations=True,
        ),
        AssessmentType.SCENARIO_BASED: AssessmentMetadata(
            name="Business Scenarios",
            description="Real-world business situations requiring strategic decisions",
            estimated_duration=15,
            difficulty="moderate",
            cultural_adaptations=True,
        ),
        AssessmentType.CONVERSATIONAL: AssessmentMetadata(
            name="Conversational Assessment",
            description="Natural language conversation with AI analysis",
            estimated_duration=12,
            difficulty="moderate",
            cultural_adaptations=True,
        ),
        AssessmentType.VISUAL_PATTERN: AssessmentMetadata(
            name="Visual Pattern Recognition",
            description="Visual diagrams and pattern-based questions",
            estimated_duration=8,
            difficulty="moderate",
            cultural_adaptations=True,
        ),
        AssessmentType.BEHAVIORAL_OBSERVATION: AssessmentMetadata(
            name="Behavioral Analysis",
            description="Assessment based on interaction patterns and behavior",
            estimated_duration=20,
            difficulty="advanced",
            cultural_adaptations=False,
        ),
    }

    # Cultural contexts that favour scenario-based assessment
    SCENARIO_CULTURES = ("kenyan", "east_african")

    @staticmethod
    def resolve_type(assessment_type: AssessmentType | str) -> AssessmentType:
        """Parse an assessment type.

        Raises:
            UnsupportedAssessmentTypeError: If the value is not a known type
        """
        try:
            return AssessmentType(assessment_type)
        except ValueError:
            logger.warning(f"Unsupported assessment type requested: {assessment_type}")
            raise UnsupportedAssessmentTypeError(assessment_type) from None

    @classmethod
    def create_strategy(
        cls, assessment_type: AssessmentType | str, user_context: UserContext
    ) -> AssessmentStrategy:
        strategy_class = cls.STRATEGIES[cls.resolve_type(assessment_type)]
        return strategy_class(user_context)

    @classmethod
    def create_assessment(
        cls,
        assessment_type: AssessmentType | str,
        user_context: UserContext,
        session: AssessmentSession,
    ) -> AssessmentOrchestrator:
        """Build an (uninitialized) orchestrator for the given type and session."""
        strategy = cls.create_strategy(assessment_type, user_context)
        return AssessmentOrchestrator(strategy, user_context, session)

    @classmethod
    def get_available_types(cls) -> list[AssessmentType]:
        return list(cls.STRATEGIES)

    @classmethod
    def get_assessment_metadata(cls, assessment_type: AssessmentType | str) -> AssessmentMetadata:
        return cls.METADATA[cls.resolve_type(assessment_type)]

    @classmethod
    def recommend_assessment_type(cls, user_context: UserContext) -> AssessmentType:
        """Suggest a modality for the respondent.

        Rules, first match wins:
        1. Known-empty assessment history → questionnaire (familiar format)
        2. Kenyan or East African context → scenario-based
        3. Technology industry → visual-pattern
        4. Otherwise → questionnaire

        An unknown history (None) is not treated as empty.
        """
        if user_context.assessment_history is not None and not user_context.assessment_history:
            return AssessmentType.QUESTIONNAIRE

        if any(c in user_context.cultural_context for c in cls.SCENARIO_CULTURES):
            return AssessmentType.SCENARIO_BASED

        # Case-insensitive, so "Technology" from a form selects visual-pattern too
        if user_context.industry and user_context.industry.lower() == "technology":
            return AssessmentType.VISUAL_PATTERN

        return AssessmentType.QUESTIONNAIRE
