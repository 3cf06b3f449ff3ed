"""
Unit tests for the scenario-based strategy.
"""

import pytest

from readiness.assessment import (
    AssessmentOrchestrator,
    AssessmentResponse,
    InvalidResponseError,
    PersonaType,
    QuestionType,
    UserContext,
)
from readiness.assessment.strategies import ScenarioStrategy
from readiness.assessment.strategies.scenario import SCENARIO_CHOICES, SCENARIOS


def pick(question_id: str, option: str) -> AssessmentResponse:
    return AssessmentResponse(
        question_id=question_id,
        question_type=QuestionType.SCENARIO_SELECTION,
        response_value=option,
        response_time_seconds=40,
    )


@pytest.fixture
def strategy(user_context):
    return ScenarioStrategy(user_context)


@pytest.fixture
def orchestrator(strategy, user_context, make_session):
    orchestrator = AssessmentOrchestrator(strategy, user_context, make_session())
    orchestrator.initialize()
    return orchestrator


class TestScenarioBank:
    def test_four_scenarios_with_four_choices_each(self):
        assert [s.id for s in SCENARIOS] == ["sc_001", "sc_002", "sc_003", "sc_004"]
        assert all(len(SCENARIO_CHOICES[s.id]) == 4 for s in SCENARIOS)

    def test_question_rendering(self, strategy):
        question = strategy.initialize_questions()[0]

        assert question.type == QuestionType.SCENARIO_SELECTION
        assert question.text.startswith("**AI Implementation Decision**")
        assert "**Key Stakeholders:** IT Department" in question.text
        assert question.options[0] == "Proceed with full implementation immediately"

    def test_cultural_rendering_enumerates_adapted_choices(self, strategy):
        question = strategy.initialize_questions()[0]
        kenyan = question.cultural_adaptations["kenyan"]

        assert "**Key People Involved:** Technology Team" in kenyan
        assert "1. Go ahead with the full system right away" in kenyan
        assert "4. Ask more people for their opinions before deciding" in kenyan


class TestProcessResponse:
    def test_response_enriched_with_choice(self, orchestrator):
        orchestrator.submit_response(pick("sc_001", "Start with a pilot program in one department"))

        value = orchestrator.session.responses[0].response_value
        assert value["selected_option"] == "Start with a pilot program in one department"
        assert value["choice_id"] == "sc_001_b"
        assert value["reasoning"] == "Reduce risk while testing effectiveness"
        assert value["persona_alignment"] == ["Strategic Contributor", "Strategic Explorer"]
        assert "Lower risk" in value["implications"]

    def test_unknown_option_rejected(self, orchestrator):
        with pytest.raises(InvalidResponseError, match="Invalid response for current question"):
            orchestrator.submit_response(pick("sc_001", "Something else entirely"))

        assert orchestrator.session.responses == ()

    def test_client_supplied_alignment_rejected(self, orchestrator):
        forged = pick("sc_001", "x").model_copy(
            update={"response_value": {"persona_alignment": ["Strategic Architect"] * 50}}
        )

        with pytest.raises(InvalidResponseError):
            orchestrator.submit_response(forged)

        assert orchestrator.session.responses == ()
        assert orchestrator.get_current_question().adaptations.persona_hint is None

    def test_unknown_persona_label_rejected(self, orchestrator):
        forged = pick("sc_001", "x").model_copy(
            update={"response_value": {"persona_alignment": ["bogus"]}}
        )

        with pytest.raises(InvalidResponseError):
            orchestrator.submit_response(forged)


class TestSequencing:
    def test_scenarios_in_bank_order(self, orchestrator):
        asked = []
        current = orchestrator.get_current_question()
        while current is not None:
            asked.append(current.question.id)
            current = orchestrator.submit_response(pick(current.question.id, current.question.options[0]))

        assert asked == ["sc_001", "sc_002", "sc_003", "sc_004"]
        assert orchestrator.is_complete()

    def test_persona_alignment_and_hint(self, orchestrator, strategy):
        orchestrator.submit_response(pick("sc_001", "Proceed with full implementation immediately"))
        current = orchestrator.submit_response(
            pick("sc_002", "Choose the comprehensive AI platform for maximum automation")
        )

        scores = strategy.analyze_persona_alignment(orchestrator.session.responses)
        assert scores[PersonaType.STRATEGIC_ARCHITECT] == 2
        assert scores[PersonaType.STRATEGIC_CATALYST] == 1
        assert current.adaptations.persona_hint == PersonaType.STRATEGIC_ARCHITECT


class TestIndustryAdaptations:
    @pytest.mark.parametrize(
        ("industry", "index", "expected"),
        [
            ("Healthcare", 0, "patient communication system with HIPAA compliance"),
            ("financial_services", 0, "regulatory-compliant customer service system"),
            ("Manufacturing", 1, "production and supply chain operations"),
            ("government", 3, "A another government agency or private sector organization"),
        ],
    )
    def test_substitutions(self, industry, index, expected):
        strategy = ScenarioStrategy(UserContext(industry=industry))
        question = strategy.initialize_questions()[index]

        assert expected in strategy.apply_industry_adaptations(question).text

    def test_other_scenarios_unchanged(self):
        strategy = ScenarioStrategy(UserContext(industry="healthcare"))
        question = strategy.initialize_questions()[1]

        assert strategy.apply_industry_adaptations(question) == question

    def test_non_industry_scenario_unchanged(self):
        strategy = ScenarioStrategy(UserContext(industry="healthcare"))
        question = strategy.initialize_questions()[2]

        assert not question.industry_specific
        assert strategy.apply_industry_adaptations(question) == question
