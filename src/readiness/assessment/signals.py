"""
Free-text Signal Extraction

Turns a conversational answer into structured signals: keyword matches,
sentiment buckets, persona signals, a confidence estimate, and per-turn
insights (authority level, challenge types, AI knowledge, ...).

The conversational strategy depends only on the SignalExtractor protocol,
so keyword matching can be swapped for a model-backed extractor without
touching the strategy.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict

from .types import PersonaType

# Responses shorter than this (space-separated tokens) always get a follow-up
MIN_RESPONSE_TOKENS = 10


class ResponseAnalysis(BaseModel):
    """Signals extracted from one free-text answer."""

    model_config = ConfigDict(frozen=True)

    keyword_matches: tuple[str, ...] = ()
    sentiment_indicators: tuple[str, ...] = ()
    persona_signals: tuple[PersonaType, ...] = ()
    confidence_level: float = 0.0
    follow_up_needed: bool = False


class SignalExtractor(Protocol):
    def analyze(
        self,
        text: str,
        analysis_keywords: Sequence[str],
        follow_up_triggers: Sequence[str],
    ) -> ResponseAnalysis: ...

    def extract_insights(self, text: str, turn_id: str) -> dict[str, Any]: ...


def _contains_any(text: str, fragments: Sequence[str]) -> bool:
    return any(fragment in text for fragment in fragments)


def _first_label(text: str, rules: Sequence[tuple[str, Sequence[str]]]) -> str:
    for label, fragments in rules:
        if _contains_any(text, fragments):
            return label
    return "unknown"


def _all_labels(text: str, rules: Sequence[tuple[str, Sequence[str]]]) -> list[str]:
    return [label for label, fragments in rules if _contains_any(text, fragments)]


class KeywordSignalExtractor:
    """Substring-based extractor. All matching is on lower-cased text."""

    PERSONA_SIGNALS: tuple[tuple[PersonaType, tuple[str, ...]], ...] = (
        (
            PersonaType.STRATEGIC_ARCHITECT,
            ("ceo", "executive", "final decision", "strategic vision", "board"),
        ),
        (
            PersonaType.STRATEGIC_CATALYST,
            ("influence", "drive change", "lead initiatives", "cross-functional", "transformation"),
        ),
        (
            PersonaType.STRATEGIC_CONTRIBUTOR,
            ("department", "team lead", "implement", "execute", "manage team"),
        ),
        (
            PersonaType.STRATEGIC_EXPLORER,
            ("learn", "explore", "interested in", "curious", "potential"),
        ),
        (
            PersonaType.STRATEGIC_OBSERVER,
            ("watch", "monitor", "assess", "evaluate", "cautious"),
        ),
    )

    SENTIMENT_WORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
        (
            "positive",
            ("excited", "optimistic", "confident", "enthusiastic", "positive", "great", "excellent"),
        ),
        (
            "negative",
            ("concerned", "worried", "skeptical", "doubtful", "challenging", "difficult"),
        ),
        ("neutral", ("considering", "evaluating", "exploring", "assessing")),
    )

    # Per-turn insight rules. Levels take the first matching label, lists take all.
    AUTHORITY_LEVEL = (
        ("high", ("ceo", "president", "final decision")),
        ("medium", ("manager", "director", "influence")),
        ("low", ("team lead", "supervisor")),
    )
    TEAM_SIZE = (
        ("large", ("large team", "department", "100")),
        ("small", ("small team", "few people")),
        ("individual", ("individual", "alone")),
    )
    DECISION_STYLE = (
        ("collaborative", ("collaborative", "team input")),
        ("analytical", ("data", "analysis")),
        ("decisive", ("quick", "fast")),
    )
    CHALLENGE_TYPES = (
        ("efficiency", ("efficiency", "slow")),
        ("cost", ("cost", "expensive")),
        ("competition", ("competition", "competitor")),
        ("data_management", ("data", "information")),
        ("customer_service", ("customer", "client")),
    )
    TECHNOLOGY_READINESS = (
        ("high", ("advanced", "cutting edge", "latest")),
        ("low", ("basic", "traditional", "manual")),
        ("medium", ("some technology", "moderate")),
    )
    URGENCY_LEVEL = (
        ("high", ("urgent", "immediately", "critical")),
        ("medium", ("soon", "important")),
        ("low", ("eventually", "future")),
    )
    AI_KNOWLEDGE_LEVEL = (
        ("expert", ("expert", "extensive", "deep knowledge")),
        ("intermediate", ("familiar", "some experience")),
        ("beginner", ("basic", "heard of", "new to")),
    )
    INTEREST_AREAS = (
        ("automation", ("automation",)),
        ("data_analytics", ("data", "analytics")),
        ("customer_service", ("customer", "service")),
        ("decision_support", ("decision", "insights")),
        ("optimization", ("efficiency", "optimization")),
    )
    IMPLEMENTATION_CONCERNS = (
        ("cost", ("cost", "expensive")),
        ("job_displacement", ("job", "employment")),
        ("security", ("security", "privacy")),
        ("complexity", ("complex", "difficult")),
        ("change_management", ("change", "resistance")),
    )

    def analyze(
        self,
        text: str,
        analysis_keywords: Sequence[str],
        follow_up_triggers: Sequence[str],
    ) -> ResponseAnalysis:
        """Analyze a free-text answer against one turn's keyword lists.

        Args:
            text: Raw answer text
            analysis_keywords: Turn keywords to look for
            follow_up_triggers: Turn words whose absence calls for a follow-up

        Returns:
            ResponseAnalysis with confidence in [0, 1]
        """
        lowered = text.lower()

        keyword_matches = tuple(k for k in analysis_keywords if k.lower() in lowered)
        persona_signals = self.detect_persona_signals(lowered)
        sentiment = self.detect_sentiment(lowered)

        return ResponseAnalysis(
            keyword_matches=keyword_matches,
            sentiment_indicators=sentiment,
            persona_signals=persona_signals,
            confidence_level=self.calculate_confidence(
                len(keyword_matches), len(persona_signals), bool(sentiment)
            ),
            follow_up_needed=self.should_follow_up(lowered, follow_up_triggers),
        )

    def detect_persona_signals(self, text: str) -> tuple[PersonaType, ...]:
        return tuple(
            persona for persona, fragments in self.PERSONA_SIGNALS if _contains_any(text, fragments)
        )

    def detect_sentiment(self, text: str) -> tuple[str, ...]:
        return tuple(_all_labels(text, self.SENTIMENT_WORDS))

    @staticmethod
    def should_follow_up(text: str, follow_up_triggers: Sequence[str]) -> bool:
        if len(text.split(" ")) < MIN_RESPONSE_TOKENS:
            return True

        if follow_up_triggers and not _contains_any(
            text, [trigger.lower() for trigger in follow_up_triggers]
        ):
            return True

        return False

    @staticmethod
    def calculate_confidence(keyword_count: int, signal_count: int, has_sentiment: bool) -> float:
        confidence = min(keyword_count * 0.2, 0.6)
        confidence += min(signal_count * 0.15, 0.3)
        confidence += 0.1 if has_sentiment else 0.0
        return min(confidence, 1.0)

    def extract_insights(self, text: str, turn_id: str) -> dict[str, Any]:
        """Structured insights for the known turns; empty for anything else."""
        lowered = text.lower()

        if turn_id == "conv_001":
            return {
                "authority_level": _first_label(lowered, self.AUTHORITY_LEVEL),
                "team_size": _first_label(lowered, self.TEAM_SIZE),
                "decision_making_style": _first_label(lowered, self.DECISION_STYLE),
            }
        if turn_id == "conv_002":
            return {
                "challenge_types": _all_labels(lowered, self.CHALLENGE_TYPES),
                "technology_readiness": _first_label(lowered, self.TECHNOLOGY_READINESS),
                "urgency_level": _first_label(lowered, self.URGENCY_LEVEL),
            }
        if turn_id == "conv_003":
            return {
                "ai_knowledge_level": _first_label(lowered, self.AI_KNOWLEDGE_LEVEL),
                "interest_areas": _all_labels(lowered, self.INTEREST_AREAS),
                "implementation_concerns": _all_labels(lowered, self.IMPLEMENTATION_CONCERNS),
            }
        return {}
