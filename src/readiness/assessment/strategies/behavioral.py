"""
Behavioral Observation Strategy

Infers a persona from how the respondent interacts rather than what they
answer. Every response yields observations (response time, engagement
depth, decision confidence); averaged metrics are scored against each
persona's expected ranges.

Observations are derived from the recorded responses alone, never from
wall-clock state, so replaying a session reproduces the same analysis
and the same adaptive questions.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from readiness.config import settings

from ..orchestrator import AssessmentStrategy, record_response
from ..types import (
    AssessmentResponse,
    AssessmentSession,
    AssessmentType,
    PersonaType,
    Question,
    QuestionType,
    ScaleRange,
    UserContext,
)

logger = logging.getLogger(__name__)

SessionPhase = Literal["start", "middle", "end"]
MeasurementType = Literal["time_based", "interaction_based", "pattern_based"]

ADAPTIVE_ID_PREFIX = "beh_adaptive_"


class BehavioralMetric(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    measurement_type: MeasurementType
    persona_indicators: dict[PersonaType, tuple[float, float]]


class BehavioralObservation(BaseModel):
    model_config = ConfigDict(frozen=True)

    metric_id: str
    value: float
    context: str
    session_phase: SessionPhase


class BehavioralAnalysis(BaseModel):
    """Persona scoring over the current behavioral metrics."""

    model_config = ConfigDict(frozen=True)

    persona_scores: dict[PersonaType, float]
    likely_persona: PersonaType
    confidence: float
    behavioral_profile: dict[str, str]
    observation_count: int


class BehavioralSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    session_duration: int
    total_interactions: int
    behavioral_metrics: dict[str, float]
    observation_count: int
    behavioral_profile: dict[str, str]


def _ranges(
    architect: tuple[float, float],
    catalyst: tuple[float, float],
    contributor: tuple[float, float],
    explorer: tuple[float, float],
    observer: tuple[float, float],
) -> dict[PersonaType, tuple[float, float]]:
    return {
        PersonaType.STRATEGIC_ARCHITECT: architect,
        PersonaType.STRATEGIC_CATALYST: catalyst,
        PersonaType.STRATEGIC_CONTRIBUTOR: contributor,
        PersonaType.STRATEGIC_EXPLORER: explorer,
        PersonaType.STRATEGIC_OBSERVER: observer,
    }


BEHAVIORAL_METRICS: tuple[BehavioralMetric, ...] = (
    BehavioralMetric(
        id="response_time",
        name="Response Time",
        description="Time taken to respond to questions",
        measurement_type="time_based",
        persona_indicators=_ranges((10, 30), (15, 45), (20, 60), (30, 90), (45, 120)),
    ),
    BehavioralMetric(
        id="question_revisits",
        name="Question Revisits",
        description="Number of times user revisits or changes responses",
        measurement_type="interaction_based",
        persona_indicators=_ranges((0, 1), (1, 2), (1, 3), (2, 5), (3, 7)),
    ),
    BehavioralMetric(
        id="engagement_depth",
        name="Engagement Depth",
        description="Depth of engagement with assessment content",
        measurement_type="pattern_based",
        persona_indicators=_ranges((3, 5), (4, 7), (5, 8), (6, 9), (7, 10)),
    ),
    BehavioralMetric(
        id="decision_confidence",
        name="Decision Confidence",
        description="Confidence level in responses based on interaction patterns",
        measurement_type="pattern_based",
        persona_indicators=_ranges((8, 10), (7, 9), (6, 8), (5, 7), (4, 6)),
    ),
)


BEHAVIORAL_QUESTIONS: tuple[Question, ...] = (
    Question(
        id="beh_001",
        type=QuestionType.BEHAVIORAL_OBSERVATION,
        text=(
            "This assessment will observe your interaction patterns to better understand your "
            "decision-making style. Please proceed naturally through the following scenarios."
        ),
        cultural_adaptations={
            "kenyan": (
                "This assessment will watch how you interact to understand your decision-making "
                "style. Please go through the scenarios normally."
            ),
            "east_african": (
                "This assessment observes your interaction patterns to understand how you make "
                "decisions. Please proceed naturally."
            ),
        },
    ),
    Question(
        id="beh_002",
        type=QuestionType.MULTIPLE_CHOICE,
        text="When faced with a complex business decision, what is your typical first step?",
        options=(
            "Make a quick decision based on experience",
            "Gather additional information and data",
            "Consult with key stakeholders",
            "Analyze potential risks and benefits",
            "Look for similar past situations for guidance",
        ),
        cultural_adaptations={
            "kenyan": "When you have a difficult business decision to make, what do you usually do first?",
            "east_african": "What is your first step when facing a complex business decision?",
        },
    ),
    Question(
        id="beh_003",
        type=QuestionType.SCALE_RATING,
        text="How comfortable are you with making decisions under uncertainty?",
        scale_range=ScaleRange(
            min=1, max=10, labels=("Very uncomfortable", "Neutral", "Very comfortable")
        ),
        cultural_adaptations={
            "kenyan": "How comfortable are you making decisions when you don't have all the information?",
            "east_african": "Rate your comfort level with making decisions in uncertain situations.",
        },
    ),
)


# Confirming questions keyed by likely persona; None is the fallback
ADAPTIVE_QUESTIONS: dict[PersonaType | None, tuple[str, tuple[str, ...]]] = {
    PersonaType.STRATEGIC_ARCHITECT: (
        "When implementing organization-wide changes, what is your primary focus?",
        (
            "Ensuring strategic alignment with long-term vision",
            "Managing stakeholder expectations and buy-in",
            "Optimizing resource allocation and ROI",
            "Minimizing operational disruption",
            "Building consensus among leadership team",
        ),
    ),
    PersonaType.STRATEGIC_CATALYST: (
        "How do you typically drive adoption of new initiatives?",
        (
            "Lead by example and demonstrate value",
            "Build coalition of supporters across departments",
            "Create compelling business case with data",
            "Address concerns and resistance directly",
            "Provide training and support resources",
        ),
    ),
    None: (
        "What motivates you most when evaluating new business opportunities?",
        (
            "Potential for significant impact",
            "Alignment with personal values",
            "Learning and growth opportunities",
            "Risk-reward balance",
            "Team and organizational benefits",
        ),
    ),
}


def original_value(response: AssessmentResponse) -> Any:
    """The respondent's own answer, unwrapping a previously enriched value."""
    value = response.response_value
    if isinstance(value, dict) and "original_response" in value:
        return value["original_response"]
    return value


def determine_session_phase(elapsed_seconds: float) -> SessionPhase:
    minutes = elapsed_seconds / 60
    if minutes < 5:
        return "start"
    if minutes < 15:
        return "middle"
    return "end"


def calculate_engagement_depth(response: AssessmentResponse) -> float:
    """Engagement on a 0-10 scale from question type, answer length and latency."""
    depth = 5.0
    question_type = response.question_type

    if question_type == QuestionType.TEXT_INPUT:
        value = original_value(response)
        text_length = len(value) if isinstance(value, str) else 0
        depth += min(text_length / 50, 3)
    elif question_type == QuestionType.MULTIPLE_CHOICE:
        depth += 1
    elif question_type == QuestionType.SCALE_RATING:
        depth += 2
    elif question_type == QuestionType.SCENARIO_SELECTION:
        depth += 3
    elif question_type == QuestionType.VISUAL_PATTERN:
        depth += 2

    if response.response_time_seconds:
        if response.response_time_seconds > 30:
            depth += 1
        if response.response_time_seconds > 60:
            depth += 1

    return min(depth, 10)


CONFIDENCE_WORDS = ("definitely", "certainly", "absolutely", "clearly", "obviously")
UNCERTAINTY_WORDS = ("maybe", "perhaps", "possibly", "might", "unsure", "not sure")


def calculate_decision_confidence(response: AssessmentResponse) -> float:
    """Decision confidence clamped to [1, 10]."""
    confidence = 5.0

    seconds = response.response_time_seconds
    if seconds:
        if seconds < 15:
            confidence += 2
        elif seconds > 90:
            confidence -= 1

    value = original_value(response)
    if isinstance(value, str):
        text = value.lower()
        if any(word in text for word in CONFIDENCE_WORDS):
            confidence += 2
        if any(word in text for word in UNCERTAINTY_WORDS):
            confidence -= 2

    return max(1.0, min(confidence, 10.0))


def collect_observations(responses: Sequence[AssessmentResponse]) -> list[BehavioralObservation]:
    """Derive the observation log from the response history."""
    observations: list[BehavioralObservation] = []
    elapsed = 0.0

    for response in responses:
        elapsed += response.response_time_seconds or 0
        phase = determine_session_phase(elapsed)

        if response.response_time_seconds:
            observations.append(
                BehavioralObservation(
                    metric_id="response_time",
                    value=response.response_time_seconds,
                    context=f"Question: {response.question_id}",
                    session_phase=phase,
                )
            )

        observations.append(
            BehavioralObservation(
                metric_id="engagement_depth",
                value=calculate_engagement_depth(response),
                context=f"Question type: {response.question_type}",
                session_phase=phase,
            )
        )
        observations.append(
            BehavioralObservation(
                metric_id="decision_confidence",
                value=calculate_decision_confidence(response),
                context="Response pattern analysis",
                session_phase=phase,
            )
        )

    return observations


def generate_behavioral_profile(metrics: dict[str, float]) -> dict[str, str]:
    response_time = metrics.get("response_time") or 0
    if response_time < 20:
        response_style = "Quick and decisive"
    elif response_time < 45:
        response_style = "Thoughtful and balanced"
    else:
        response_style = "Careful and deliberate"

    engagement = metrics.get("engagement_depth") or 5
    if engagement > 7:
        engagement_style = "Deep and thorough"
    elif engagement > 5:
        engagement_style = "Balanced and focused"
    else:
        engagement_style = "Efficient and direct"

    confidence = metrics.get("decision_confidence") or 5
    if confidence > 7:
        confidence_level = "High confidence in decisions"
    elif confidence > 5:
        confidence_level = "Moderate confidence with consideration"
    else:
        confidence_level = "Cautious and analytical approach"

    return {
        "response_style": response_style,
        "engagement_style": engagement_style,
        "confidence_level": confidence_level,
    }


class BehavioralStrategy(AssessmentStrategy):
    """Persona inference from interaction behaviour."""

    assessment_type = AssessmentType.BEHAVIORAL_OBSERVATION

    # Adaptive confirming questions fire below this analysis confidence
    ADAPTIVE_CONFIDENCE_THRESHOLD = 0.7
    MIN_OBSERVATIONS_FOR_ADAPTATION = 3

    # Points for a value inside a persona's range; proximity scores top out at 2
    IN_RANGE_SCORE = 3
    PROXIMITY_MAX_SCORE = 2
    MIN_RANGE_WIDTH = 10

    # Score that maps to full confidence
    CONFIDENCE_DIVISOR = 12

    behavioral_metrics = BEHAVIORAL_METRICS

    def __init__(self, user_context: UserContext, max_adaptive_questions: int | None = None):
        super().__init__(user_context)
        self.max_adaptive_questions = (
            settings.BEHAVIORAL_MAX_ADAPTIVE_QUESTIONS
            if max_adaptive_questions is None
            else max_adaptive_questions
        )

    def initialize_questions(self) -> list[Question]:
        return list(BEHAVIORAL_QUESTIONS)

    def process_response(
        self,
        response: AssessmentResponse,
        current_question: Question,  # noqa: ARG002
        session: AssessmentSession,
    ) -> AssessmentSession:
        """Record the response wrapped with the metrics and analysis it produces."""
        responses = (*session.responses, response)
        observations = collect_observations(responses)
        metrics = self.current_metrics(observations)

        enriched = response.model_copy(
            update={
                "response_value": {
                    "original_response": response.response_value,
                    "behavioral_metrics": metrics,
                    "behavioral_analysis": self.analyze_behavioral_patterns(
                        observations
                    ).model_dump(mode="json"),
                    "interaction_count": len(responses),
                }
            }
        )
        return record_response(session, enriched)

    def determine_next_question(
        self, responses: Sequence[AssessmentResponse], current_index: int
    ) -> Question | None:
        observations = collect_observations(responses)
        analysis = self.analyze_behavioral_patterns(observations)

        if not self.should_generate_adaptive_question(analysis, responses):
            return None

        return self.generate_adaptive_question(analysis.likely_persona, current_index)

    # ========================================================================
    # Metrics and scoring
    # ========================================================================

    def current_metrics(self, observations: Sequence[BehavioralObservation]) -> dict[str, float]:
        """Mean observed value per metric; metrics without observations are omitted."""
        metrics: dict[str, float] = {}
        for metric in self.behavioral_metrics:
            values = [o.value for o in observations if o.metric_id == metric.id]
            if values:
                metrics[metric.id] = sum(values) / len(values)
        return metrics

    def score_value(self, value: float, low: float, high: float) -> float:
        """Full score inside the range, decaying with distance outside it."""
        if low <= value <= high:
            return self.IN_RANGE_SCORE

        distance = min(abs(value - low), abs(value - high))
        max_distance = max(high - low, self.MIN_RANGE_WIDTH)
        return max(
            0.0, self.PROXIMITY_MAX_SCORE - (distance / max_distance) * self.PROXIMITY_MAX_SCORE
        )

    def analyze_behavioral_patterns(
        self, observations: Sequence[BehavioralObservation]
    ) -> BehavioralAnalysis:
        metrics = self.current_metrics(observations)
        scores = dict.fromkeys(PersonaType, 0.0)

        for metric in self.behavioral_metrics:
            value = metrics.get(metric.id)
            if value is None:
                continue
            for persona, (low, high) in metric.persona_indicators.items():
                scores[persona] += self.score_value(value, low, high)

        likely_persona = PersonaType.STRATEGIC_OBSERVER
        best_score = 0.0
        for persona in PersonaType:
            if scores[persona] > best_score:
                likely_persona, best_score = persona, scores[persona]

        return BehavioralAnalysis(
            persona_scores=scores,
            likely_persona=likely_persona,
            confidence=min(best_score / self.CONFIDENCE_DIVISOR, 1.0),
            behavioral_profile=generate_behavioral_profile(metrics),
            observation_count=len(observations),
        )

    # ========================================================================
    # Adaptive questions
    # ========================================================================

    def should_generate_adaptive_question(
        self, analysis: BehavioralAnalysis, responses: Sequence[AssessmentResponse]
    ) -> bool:
        if analysis.confidence >= self.ADAPTIVE_CONFIDENCE_THRESHOLD:
            return False
        if analysis.observation_count < self.MIN_OBSERVATIONS_FOR_ADAPTATION:
            return False

        asked = sum(1 for r in responses if r.question_id.startswith(ADAPTIVE_ID_PREFIX))
        return asked < self.max_adaptive_questions

    @staticmethod
    def generate_adaptive_question(likely_persona: PersonaType, index: int) -> Question:
        text, options = ADAPTIVE_QUESTIONS.get(likely_persona, ADAPTIVE_QUESTIONS[None])
        question = Question(
            id=f"{ADAPTIVE_ID_PREFIX}{index}",
            type=QuestionType.MULTIPLE_CHOICE,
            text=text,
            options=options,
            cultural_adaptations={
                "kenyan": text.replace("organization-wide", "company-wide"),
                "east_african": text,
            },
        )
        logger.info(f"Behavioral confirming question {question.id} for {likely_persona}")
        return question

    def persona_hint(self, responses: Sequence[AssessmentResponse]) -> PersonaType | None:
        observations = collect_observations(responses)
        if not observations:
            return None
        return self.analyze_behavioral_patterns(observations).likely_persona

    def behavioral_summary(self, responses: Sequence[AssessmentResponse]) -> BehavioralSummary:
        """Summary of the observed behaviour across the session so far."""
        observations = collect_observations(responses)
        metrics = self.current_metrics(observations)
        elapsed = sum(r.response_time_seconds or 0 for r in responses)

        return BehavioralSummary(
            session_duration=round(elapsed / 60),
            total_interactions=len(responses),
            behavioral_metrics=metrics,
            observation_count=len(observations),
            behavioral_profile=generate_behavioral_profile(metrics),
        )
