"""
Assessment Orchestrator

Question sequencing, response validation, progress tracking and
adaptation for a single session. Modality-specific work is delegated to
an AssessmentStrategy:

1. INITIALIZE: strategy builds the bank-derived question list
2. PRESENT: current question with cultural/industry adaptations applied
3. VALIDATE: response checked against the presented question
4. PROCESS: strategy records (and may enrich) the response
5. BRANCH: strategy may inject an adaptive question at the new index
6. TERMINATE: no question at the index → caller completes the session
"""

from __future__ import annotations

import logging
import statistics
from abc import ABC, abstractmethod
from collections import Counter
from collections.abc import Sequence
from typing import ClassVar

from readiness.core.validation import ValidationError, validate_response

from .exceptions import (
    AssessmentCompleteError,
    AssessmentError,
    InvalidResponseError,
    SessionClosedError,
)
from .types import (
    AssessmentResponse,
    AssessmentSession,
    AssessmentType,
    NextQuestion,
    PersonaType,
    Progress,
    Question,
    QuestionAdaptations,
    ResponsePattern,
    UserContext,
)

logger = logging.getLogger(__name__)

# Response latency treated as ideal engagement, in seconds
OPTIMAL_RESPONSE_TIME = 30


# ============================================================================
# Strategy contract
# ============================================================================


class AssessmentStrategy(ABC):
    """Modality-specific behaviour plugged into the orchestrator.

    Implementations must be deterministic: the same responses always yield
    the same questions, so a persisted session can be resumed by replay.
    """

    assessment_type: ClassVar[AssessmentType]

    def __init__(self, user_context: UserContext):
        self.user_context = user_context

    @property
    def industry(self) -> str | None:
        """Respondent industry, lower-cased for table lookups."""
        return self.user_context.industry.lower() if self.user_context.industry else None

    @abstractmethod
    def initialize_questions(self) -> list[Question]:
        """Build the initial question sequence from the modality's bank."""

    @abstractmethod
    def process_response(
        self,
        response: AssessmentResponse,
        current_question: Question,
        session: AssessmentSession,
    ) -> AssessmentSession:
        """Record the response and return the updated session."""

    @abstractmethod
    def determine_next_question(
        self, responses: Sequence[AssessmentResponse], current_index: int
    ) -> Question | None:
        """Return an adaptive question for ``current_index``, or None to keep the plan."""

    def apply_industry_adaptations(self, question: Question) -> Question:
        return question

    def persona_hint(self, responses: Sequence[AssessmentResponse]) -> PersonaType | None:  # noqa: ARG002
        return None


# ============================================================================
# Shared helpers
# ============================================================================


def record_response(session: AssessmentSession, response: AssessmentResponse) -> AssessmentSession:
    """Append a response to the session (copy-on-write)."""
    return session.with_response(response)


def apply_cultural_adaptation(question: Question, cultural_context: Sequence[str]) -> Question:
    """Substitute question text for the first matching cultural context tag."""
    for context in cultural_context:
        adapted_text = question.cultural_adaptations.get(context)
        if adapted_text:
            return question.model_copy(update={"text": adapted_text})
    return question


def tally_persona_alignment(responses: Sequence[AssessmentResponse]) -> dict[PersonaType, int]:
    """Count persona alignments recorded in enriched choice responses."""
    scores = dict.fromkeys(PersonaType, 0)
    for response in responses:
        value = response.response_value
        if isinstance(value, dict):
            for persona in value.get("persona_alignment") or []:
                scores[PersonaType(persona)] += 1
    return scores


def leading_persona(scores: dict[PersonaType, float]) -> PersonaType | None:
    """Highest scoring persona; ties go to the earlier persona. None if all zero."""
    best: PersonaType | None = None
    best_score = 0.0
    for persona in PersonaType:
        score = scores.get(persona, 0)
        if score > best_score:
            best, best_score = persona, score
    return best


def calculate_consistency_score(response_times: Sequence[float]) -> float:
    """1.0 for perfectly steady latencies, falling with relative spread."""
    if len(response_times) < 2:
        return 1.0

    mean = statistics.fmean(response_times)
    if mean == 0:
        return 1.0
    deviation = statistics.pstdev(response_times)
    return max(0.0, 1 - min(deviation / mean, 1))


def calculate_engagement_level(
    responses: Sequence[AssessmentResponse], average_response_time: float
) -> float:
    """Blend answer completeness with closeness to the optimal latency."""
    engagement_score = 0.0
    factors = 0

    if responses:
        complete = sum(1 for r in responses if r.response_value not in (None, ""))
        engagement_score += complete / len(responses)
        factors += 1

    if average_response_time > 0:
        time_score = max(
            0.0, 1 - abs(average_response_time - OPTIMAL_RESPONSE_TIME) / OPTIMAL_RESPONSE_TIME
        )
        engagement_score += time_score
        factors += 1

    return engagement_score / factors if factors else 1.0


def analyze_response_pattern(
    responses: Sequence[AssessmentResponse], cultural_adaptations_used: Sequence[str] = ()
) -> ResponsePattern:
    """Aggregate latency, consistency, engagement and question-type preference."""
    if not responses:
        return ResponsePattern(
            average_response_time=0.0,
            consistency_score=1.0,
            engagement_level=1.0,
            preferred_question_types=(),
            cultural_adaptations_used=(),
        )

    response_times = [
        r.response_time_seconds for r in responses if r.response_time_seconds is not None
    ]
    average_response_time = statistics.fmean(response_times) if response_times else 0.0

    # Counter.most_common keeps first-seen order for ties
    type_frequency = Counter(r.question_type for r in responses)
    preferred = tuple(question_type for question_type, _ in type_frequency.most_common())

    return ResponsePattern(
        average_response_time=average_response_time,
        consistency_score=calculate_consistency_score(response_times),
        engagement_level=calculate_engagement_level(responses, average_response_time),
        preferred_question_types=preferred,
        cultural_adaptations_used=tuple(cultural_adaptations_used),
    )


def inject_question(questions: list[Question], index: int, question: Question) -> None:
    """Place an adaptive question at ``index``, replacing or appending."""
    if index < len(questions):
        questions[index] = question
    else:
        questions.append(question)


# ============================================================================
# Orchestrator
# ============================================================================


class AssessmentOrchestrator:
    """Drives one session through its strategy.

    State machine:
        NotStarted → InProgress (initialize)
        InProgress → InProgress (each valid submit while questions remain)
        InProgress → Completed | Abandoned (external, once no question remains
                                            or on explicit abandon)
    """

    def __init__(
        self,
        strategy: AssessmentStrategy,
        user_context: UserContext,
        session: AssessmentSession,
    ):
        """Initialize orchestrator for a session.

        Args:
            strategy: Modality strategy
            user_context: Respondent context used for adaptation
            session: Session value to continue from
        """
        self.strategy = strategy
        self.user_context = user_context
        self.session = session
        self.questions: list[Question] = []
        self.current_question_index = 0

    @property
    def assessment_type(self) -> AssessmentType:
        return self.strategy.assessment_type

    def initialize(self) -> None:
        """Build the question list and restore position from the session.

        Adaptive injections are replayed over the recorded responses so a
        resumed session sees exactly the sequence it had before.
        """
        questions = list(self.strategy.initialize_questions())

        responses = self.session.responses
        for answered in range(1, len(responses) + 1):
            adaptive = self.strategy.determine_next_question(responses[:answered], answered)
            if adaptive is not None:
                inject_question(questions, answered, adaptive)

        self.questions = questions
        self.current_question_index = self.session.current_question_index

    def get_current_question(self) -> NextQuestion | None:
        """Current question with adaptations applied, or None when finished."""
        if self.current_question_index >= len(self.questions):
            return None

        question = self.apply_adaptations(self.questions[self.current_question_index])
        position = self.current_question_index + 1
        total = len(self.questions)

        return NextQuestion(
            question=question,
            progress=Progress(
                current=position, total=total, percentage=round(position / total * 100)
            ),
            adaptations=QuestionAdaptations(
                cultural_context=(
                    self.user_context.cultural_context[0]
                    if self.user_context.cultural_context
                    else None
                ),
                industry_focus=self.user_context.industry,
                persona_hint=self.strategy.persona_hint(self.session.responses),
            ),
        )

    def submit_response(self, response: AssessmentResponse) -> NextQuestion | None:
        """Validate and record a response, then advance.

        Raises:
            AssessmentCompleteError: No question is awaiting a response
            InvalidResponseError: Response does not fit the current question
            SessionClosedError: Session is completed or abandoned
        """
        if self.session.is_terminal:
            raise SessionClosedError(f"Session {self.session.id} is {self.session.status}")

        if self.current_question_index >= len(self.questions):
            raise AssessmentCompleteError(f"Session {self.session.id} has no remaining questions")

        presented = self.apply_adaptations(self.questions[self.current_question_index])

        try:
            validate_response(response, presented)
        except ValidationError as e:
            logger.warning(f"Rejected response for {presented.id} in {self.session.id}: {e}")
            raise InvalidResponseError(str(e)) from e

        session = self.strategy.process_response(response, presented, self.session)
        next_index = self.current_question_index + 1

        adaptive = self.strategy.determine_next_question(session.responses, next_index)
        if adaptive is not None:
            inject_question(self.questions, next_index, adaptive)
            logger.info(f"Adaptive question {adaptive.id} placed at {next_index} in {session.id}")

        self.session = session.update_progress(next_index, len(self.questions))
        self.current_question_index = next_index

        return self.get_current_question()

    def apply_adaptations(self, question: Question) -> Question:
        """Apply cultural substitution, then the strategy's industry hook."""
        adapted = apply_cultural_adaptation(question, self.user_context.cultural_context)

        if self.user_context.industry and question.industry_specific:
            adapted = self.strategy.apply_industry_adaptations(adapted)

        return adapted

    def analyze_response_pattern(
        self, responses: Sequence[AssessmentResponse] | None = None
    ) -> ResponsePattern:
        return analyze_response_pattern(
            self.session.responses if responses is None else responses,
            self.session.cultural_adaptations,
        )

    def get_progress(self) -> Progress:
        total = len(self.questions)
        current = self.current_question_index
        percentage = round(current / total * 100) if total else 100
        return Progress(current=current, total=total, percentage=percentage)

    def is_complete(self) -> bool:
        return self.current_question_index >= len(self.questions)

    def get_questions(self) -> list[Question]:
        return list(self.questions)

    def complete(self) -> AssessmentSession:
        """Mark the session completed once every question has been answered."""
        if not self.is_complete():
            raise AssessmentError(f"Session {self.session.id} still has unanswered questions")
        self.session = self.session.complete()
        return self.session

    def abandon(self) -> AssessmentSession:
        self.session = self.session.abandon()
        return self.session
