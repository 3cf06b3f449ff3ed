"""
Unit tests for the questionnaire strategy.
"""

import pytest

from readiness.assessment import (
    AssessmentOrchestrator,
    AssessmentResponse,
    PersonaType,
    QuestionType,
    UserContext,
)
from readiness.assessment.strategies import QuestionnaireStrategy
from readiness.assessment.strategies.questionnaire import QUESTION_BANK


def choice(question_id: str, value: str) -> AssessmentResponse:
    return AssessmentResponse(
        question_id=question_id, question_type=QuestionType.MULTIPLE_CHOICE, response_value=value
    )


def rating(question_id: str, value: int) -> AssessmentResponse:
    return AssessmentResponse(
        question_id=question_id, question_type=QuestionType.SCALE_RATING, response_value=value
    )


def default_answer(question) -> AssessmentResponse:
    if question.type == QuestionType.MULTIPLE_CHOICE:
        return choice(question.id, question.options[0])
    if question.type == QuestionType.SCALE_RATING:
        return rating(question.id, question.scale_range.max)
    return AssessmentResponse(
        question_id=question.id,
        question_type=question.type,
        response_value="Budget approvals take months",
    )


@pytest.fixture
def strategy(user_context):
    return QuestionnaireStrategy(user_context, adaptive_questioning_enabled=True)


class TestQuestionBank:
    def test_bank_has_twelve_unique_questions(self):
        ids = [q.id for q in QUESTION_BANK]
        assert len(ids) == 12
        assert len(set(ids)) == 12

    def test_every_question_has_both_adaptations(self):
        for question in QUESTION_BANK:
            assert set(question.cultural_adaptations) == {"kenyan", "east_african"}


class TestInitializeQuestions:
    def test_core_sequence_without_industry(self, strategy):
        ids = [q.id for q in strategy.initialize_questions()]
        assert ids == ["sa_001", "sa_002", "oi_001", "oi_002", "ai_001"]

    def test_industry_adds_three_industry_questions(self):
        strategy = QuestionnaireStrategy(UserContext(industry="Technology"))
        ids = [q.id for q in strategy.initialize_questions()]
        assert ids == [
            "sa_001",
            "sa_002",
            "oi_001",
            "oi_002",
            "ai_001",
            "ra_001",
            "ir_001",
            "ca_001",
        ]


class TestPersonaPrediction:
    def test_needs_two_responses(self, strategy):
        assert strategy.predict_persona([]) is None
        assert strategy.predict_persona([rating("sa_002", 5)]) is None

    def test_architect(self, strategy):
        responses = [
            choice("sa_001", "I make final strategic decisions for the organization"),
            rating("sa_002", 4),
            choice("ra_001", "$200,000 - $1,000,000"),
        ]
        assert strategy.predict_persona(responses) == PersonaType.STRATEGIC_ARCHITECT

    def test_catalyst(self, strategy):
        responses = [
            choice("sa_001", "I significantly influence strategic decisions"),
            rating("sa_002", 2),
            choice("oi_001", "6-20 people"),
        ]
        assert strategy.predict_persona(responses) == PersonaType.STRATEGIC_CATALYST

    def test_contributor_from_influence(self, strategy):
        responses = [
            choice("sa_001", "I have limited involvement in strategic decisions"),
            choice("oi_001", "21-100 people"),
        ]
        assert strategy.predict_persona(responses) == PersonaType.STRATEGIC_CONTRIBUTOR

    def test_explorer_and_observer(self, strategy):
        explorer = [rating("sa_002", 2), choice("oi_001", "1-5 people")]
        observer = [rating("sa_002", 1), choice("oi_001", "1-5 people")]

        assert strategy.predict_persona(explorer) == PersonaType.STRATEGIC_EXPLORER
        assert strategy.predict_persona(observer) == PersonaType.STRATEGIC_OBSERVER


class TestAdaptiveSelection:
    def test_backfill_starts_with_resources(self, strategy):
        responses = [choice("sa_001", "I contribute to strategic discussions")]
        assert strategy.determine_next_question(responses, 1).id == "ra_001"

    def test_backfill_picks_strictly_fewest_category(self, strategy):
        responses = [choice("ra_001", "Less than $10,000"), rating("ir_002", 3)]
        # ra_ and ir_ answered once; ca_ is the first category with fewer answers
        assert strategy.select_adaptive_question(responses, None).id == "ca_001"

    def test_persona_required_question_first(self, strategy):
        responses = [rating("sa_002", 5), choice("ra_001", "More than $1,000,000")]
        question = strategy.select_adaptive_question(responses, PersonaType.STRATEGIC_ARCHITECT)
        assert question.id == "sa_001"

    def test_none_when_bank_exhausted(self, strategy):
        responses = [default_answer(q) for q in QUESTION_BANK]
        assert strategy.determine_next_question(responses, 12) is None

    def test_adaptive_disabled_keeps_static_sequence(self, user_context):
        strategy = QuestionnaireStrategy(user_context, adaptive_questioning_enabled=False)
        responses = [choice("sa_001", "I contribute to strategic discussions")]
        assert strategy.determine_next_question(responses, 1) is None

    def test_categorize_responses(self, strategy):
        counts = strategy.categorize_responses([rating("ai_001", 3), rating("ai_002", 1)])
        assert counts["ai_"] == 2
        assert counts["ra_"] == 0


class TestIndustryAdaptations:
    def test_financial_services_budget_text(self):
        strategy = QuestionnaireStrategy(UserContext(industry="Financial_Services"))
        ra_001 = next(q for q in QUESTION_BANK if q.id == "ra_001")

        adapted = strategy.apply_industry_adaptations(ra_001)

        assert "regulatory-compliant" in adapted.text
        assert "regulatory-compliant" not in ra_001.text

    def test_manufacturing_replaces_options(self):
        strategy = QuestionnaireStrategy(UserContext(industry="manufacturing"))
        ai_002 = next(q for q in QUESTION_BANK if q.id == "ai_002")

        adapted = strategy.apply_industry_adaptations(ai_002)

        assert adapted.options[1] == "Predictive maintenance and equipment monitoring"
        assert adapted.text == ai_002.text

    def test_unknown_industry_unchanged(self):
        strategy = QuestionnaireStrategy(UserContext(industry="agriculture"))
        assert strategy.apply_industry_adaptations(QUESTION_BANK[4]) == QUESTION_BANK[4]


class TestFullRun:
    def test_adaptive_run_visits_whole_bank(self, make_session):
        context = UserContext(user_id="user_123", industry="Technology")
        strategy = QuestionnaireStrategy(context, adaptive_questioning_enabled=True)
        orchestrator = AssessmentOrchestrator(strategy, context, make_session())
        orchestrator.initialize()

        asked = []
        current = orchestrator.get_current_question()
        while current is not None:
            asked.append(current.question.id)
            current = orchestrator.submit_response(default_answer(current.question))

        assert asked == [
            "sa_001",
            "ra_001",
            "ir_001",
            "ca_001",
            "ai_001",
            "ra_002",
            "ir_002",
            "ca_002",
            "ai_002",
            "sa_002",
            "oi_001",
            "oi_002",
        ]

    def test_manufacturing_options_validate(self, make_session):
        context = UserContext(user_id="user_123", industry="Manufacturing")
        strategy = QuestionnaireStrategy(context, adaptive_questioning_enabled=False)
        orchestrator = AssessmentOrchestrator(strategy, context, make_session())
        orchestrator.initialize()
        orchestrator.questions = [q for q in QUESTION_BANK if q.id == "ai_002"]

        presented = orchestrator.get_current_question().question
        orchestrator.submit_response(choice("ai_002", presented.options[0]))

        assert orchestrator.session.responses[0].response_value == presented.options[0]
