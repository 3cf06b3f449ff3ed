"""
Conversational Strategy

Open-ended turns answered in free text. Each answer is run through a
SignalExtractor; when the answer is too brief or misses the turn's trigger
words, a follow-up question is substituted as the next question.

Follow-up answers are analyzed against their parent turn and never
trigger a further follow-up.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field

from ..orchestrator import AssessmentStrategy, leading_persona, record_response
from ..signals import KeywordSignalExtractor, SignalExtractor
from ..types import (
    AssessmentResponse,
    AssessmentSession,
    AssessmentType,
    PersonaType,
    Question,
    QuestionType,
    UserContext,
)

logger = logging.getLogger(__name__)

FOLLOW_UP_SUFFIX = "_followup"


class ConversationTurn(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    analysis_keywords: tuple[str, ...]
    follow_up_triggers: tuple[str, ...] = ()
    cultural_adaptations: dict[str, str] = Field(default_factory=dict)


CONVERSATION_FLOW: tuple[ConversationTurn, ...] = (
    ConversationTurn(
        id="conv_001",
        text=(
            "Tell me about your role and how you typically approach strategic decisions "
            "in your organization."
        ),
        analysis_keywords=("decision", "strategic", "role", "authority", "influence", "team", "leadership"),
        follow_up_triggers=("leadership", "team", "decisions", "authority"),
        cultural_adaptations={
            "kenyan": "Please describe your position and how you usually make important business decisions.",
            "east_african": "Can you explain your role and your approach to making strategic business decisions?",
        },
    ),
    ConversationTurn(
        id="conv_002",
        text=(
            "What challenges does your organization currently face that you think "
            "technology could help solve?"
        ),
        analysis_keywords=(
            "challenges",
            "problems",
            "technology",
            "automation",
            "efficiency",
            "costs",
            "competition",
        ),
        follow_up_triggers=("efficiency", "costs", "competition", "automation"),
        cultural_adaptations={
            "kenyan": "What problems does your organization have that technology might be able to fix?",
            "east_african": "What are the main challenges your organization faces that technology could address?",
        },
    ),
    ConversationTurn(
        id="conv_003",
        text=(
            "How familiar are you with artificial intelligence, and what interests you most "
            "about its potential applications?"
        ),
        analysis_keywords=(
            "AI",
            "artificial intelligence",
            "automation",
            "data",
            "insights",
            "efficiency",
            "innovation",
        ),
        follow_up_triggers=("automation", "data", "insights", "innovation"),
        cultural_adaptations={
            "kenyan": "How well do you know about AI, and what do you find most interesting about how it could be used?",
            "east_african": "What is your understanding of AI, and what applications interest you the most?",
        },
    ),
)


FOLLOW_UP_TEXTS = {
    "conv_001": "Can you tell me more about the specific types of strategic decisions you're involved in?",
    "conv_002": "Which of these challenges would you say is the most critical for your organization right now?",
    "conv_003": "What specific AI applications do you think would have the biggest impact on your organization?",
}
DEFAULT_FOLLOW_UP_TEXT = "Could you elaborate on that a bit more?"


def parent_turn_id(question_id: str) -> str:
    """Strip the follow-up suffix, if any."""
    return question_id.removesuffix(FOLLOW_UP_SUFFIX)


def is_follow_up(question_id: str) -> bool:
    return question_id.endswith(FOLLOW_UP_SUFFIX)


class ConversationalStrategy(AssessmentStrategy):
    """Natural-language conversation analyzed by a SignalExtractor."""

    assessment_type = AssessmentType.CONVERSATIONAL

    conversation_flow = CONVERSATION_FLOW

    def __init__(self, user_context: UserContext, extractor: SignalExtractor | None = None):
        super().__init__(user_context)
        self.extractor = extractor or KeywordSignalExtractor()

    def initialize_questions(self) -> list[Question]:
        return [
            Question(
                id=turn.id,
                type=QuestionType.TEXT_INPUT,
                text=turn.text,
                cultural_adaptations=dict(turn.cultural_adaptations),
                industry_specific=False,
            )
            for turn in self.conversation_flow
        ]

    def get_turn(self, question_id: str) -> ConversationTurn | None:
        turn_id = parent_turn_id(question_id)
        return next((t for t in self.conversation_flow if t.id == turn_id), None)

    def process_response(
        self,
        response: AssessmentResponse,
        current_question: Question,  # noqa: ARG002
        session: AssessmentSession,
    ) -> AssessmentSession:
        """Record the answer enriched with its analysis and extracted insights."""
        turn = self.get_turn(response.question_id)
        text = response.response_value

        if turn is None or not isinstance(text, str):
            return record_response(session, response)

        analysis = self.extractor.analyze(text, turn.analysis_keywords, turn.follow_up_triggers)
        enriched = response.model_copy(
            update={
                "response_value": {
                    "original_text": text,
                    "analysis": analysis.model_dump(mode="json"),
                    "extracted_insights": self.extractor.extract_insights(text, turn.id),
                }
            }
        )
        return record_response(session, enriched)

    def determine_next_question(
        self, responses: Sequence[AssessmentResponse], current_index: int
    ) -> Question | None:
        if not responses:
            return None

        last = responses[-1]
        if is_follow_up(last.question_id) or not self.should_generate_follow_up(last):
            return None

        follow_up = self.generate_follow_up_question(last.question_id)
        logger.info(f"Follow-up {follow_up.id} synthesized at index {current_index}")
        return follow_up

    @staticmethod
    def should_generate_follow_up(response: AssessmentResponse) -> bool:
        value = response.response_value
        if not isinstance(value, dict):
            return False
        analysis = value.get("analysis") or {}
        return bool(analysis.get("follow_up_needed"))

    @staticmethod
    def generate_follow_up_question(question_id: str) -> Question:
        text = FOLLOW_UP_TEXTS.get(question_id, DEFAULT_FOLLOW_UP_TEXT)
        return Question(
            id=f"{question_id}{FOLLOW_UP_SUFFIX}",
            type=QuestionType.TEXT_INPUT,
            text=text,
            cultural_adaptations={
                "kenyan": text.replace("Could you elaborate", "Can you explain more about"),
                "east_african": text.replace("Could you elaborate", "Please tell us more about"),
            },
        )

    def persona_hint(self, responses: Sequence[AssessmentResponse]) -> PersonaType | None:
        signals: Counter[PersonaType] = Counter()
        for response in responses:
            value = response.response_value
            if isinstance(value, dict):
                analysis = value.get("analysis") or {}
                signals.update(PersonaType(p) for p in analysis.get("persona_signals", ()))
        return leading_persona(dict(signals))
