"""
Unit tests for keyword-based signal extraction.
"""

import pytest

from readiness.assessment import KeywordSignalExtractor, PersonaType
from readiness.assessment.signals import MIN_RESPONSE_TOKENS


@pytest.fixture
def extractor():
    return KeywordSignalExtractor()


class TestAnalyze:
    def test_keywords_signals_and_confidence(self, extractor):
        analysis = extractor.analyze(
            "As operations director I lead a team of forty people and make the final decision on budgets.",
            ("decision", "strategic", "team", "leadership"),
            ("leadership", "team", "decisions", "authority"),
        )

        assert analysis.keyword_matches == ("decision", "team")
        assert analysis.persona_signals == (PersonaType.STRATEGIC_ARCHITECT,)
        assert analysis.sentiment_indicators == ()
        assert analysis.confidence_level == pytest.approx(0.55)
        assert analysis.follow_up_needed is False

    def test_matching_ignores_case(self, extractor):
        analysis = extractor.analyze("We are EXCITED about AI", ("AI",), ())

        assert analysis.keyword_matches == ("AI",)
        assert analysis.sentiment_indicators == ("positive",)

    def test_multiple_sentiments(self, extractor):
        sentiment = extractor.detect_sentiment("excited but worried, still evaluating options")
        assert sentiment == ("positive", "negative", "neutral")


class TestFollowUp:
    def test_short_answer_needs_follow_up(self, extractor):
        assert extractor.should_follow_up("i am the ceo", ("team",)) is True

    def test_missing_triggers_needs_follow_up(self, extractor):
        text = "we mostly talk things over and then somebody eventually picks a direction"
        assert len(text.split(" ")) >= MIN_RESPONSE_TOKENS
        assert extractor.should_follow_up(text, ("leadership", "team")) is True

    def test_long_answer_with_trigger(self, extractor):
        text = "my team and i review every proposal together before we commit any budget"
        assert extractor.should_follow_up(text, ("team",)) is False

    def test_no_triggers_configured(self, extractor):
        text = "we mostly talk things over and then somebody eventually picks a direction"
        assert extractor.should_follow_up(text, ()) is False


class TestConfidence:
    @pytest.mark.parametrize(
        ("keywords", "signals", "sentiment", "expected"),
        [
            (0, 0, False, 0.0),
            (1, 1, True, 0.45),
            (3, 2, False, 0.9),
            (10, 10, True, 1.0),
        ],
    )
    def test_weighted_and_capped(self, keywords, signals, sentiment, expected):
        assert KeywordSignalExtractor.calculate_confidence(keywords, signals, sentiment) == (
            pytest.approx(expected)
        )


class TestInsights:
    def test_role_turn(self, extractor):
        insights = extractor.extract_insights(
            "I am a director in a large team and we rely on data for every call", "conv_001"
        )
        assert insights == {
            "authority_level": "medium",
            "team_size": "large",
            "decision_making_style": "analytical",
        }

    def test_challenge_turn(self, extractor):
        insights = extractor.extract_insights(
            "Our biggest problem is slow manual processes and high cost, it is urgent", "conv_002"
        )
        assert insights == {
            "challenge_types": ["efficiency", "cost"],
            "technology_readiness": "low",
            "urgency_level": "high",
        }

    def test_ai_turn(self, extractor):
        insights = extractor.extract_insights(
            "I have some experience with AI and want automation and data analytics "
            "but worry about job security",
            "conv_003",
        )
        assert insights == {
            "ai_knowledge_level": "intermediate",
            "interest_areas": ["automation", "data_analytics"],
            "implementation_concerns": ["job_displacement", "security"],
        }

    def test_unmatched_levels_are_unknown(self, extractor):
        insights = extractor.extract_insights("hello there", "conv_001")
        assert set(insights.values()) == {"unknown"}

    def test_unknown_turn(self, extractor):
        assert extractor.extract_insights("anything", "conv_999") == {}
