"""
Questionnaire Strategy

Structured multiple choice / rating scale assessment with adaptive
branching. A partial persona is predicted from the answers so far and
drives which bank question is injected next:

1. PERSONA: unanswered questions required for the predicted persona
2. BACK-FILL: category (ra_, ir_, ca_, ai_) with the fewest answers
3. FALLBACK: first unanswered bank question
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

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


QUESTION_BANK: tuple[Question, ...] = (
    # Strategic authority
    Question(
        id="sa_001",
        type=QuestionType.MULTIPLE_CHOICE,
        text="What is your primary role in strategic decision-making within your organization?",
        options=(
            "I make final strategic decisions for the organization",
            "I significantly influence strategic decisions",
            "I contribute to strategic discussions",
            "I implement strategic decisions made by others",
            "I have limited involvement in strategic decisions",
        ),
        cultural_adaptations={
            "kenyan": "What is your role in making important business decisions in your organization?",
            "east_african": "How do you participate in your organization's strategic planning?",
        },
        industry_specific=True,
        required_for_persona=(PersonaType.STRATEGIC_ARCHITECT, PersonaType.STRATEGIC_CATALYST),
    ),
    Question(
        id="sa_002",
        type=QuestionType.SCALE_RATING,
        text="How much authority do you have to approve technology investments?",
        scale_range=ScaleRange(
            min=1,
            max=5,
            labels=(
                "No authority",
                "Limited input",
                "Some influence",
                "Significant authority",
                "Full authority",
            ),
        ),
        cultural_adaptations={
            "kenyan": "How much say do you have in approving new technology purchases?",
            "east_african": "What level of decision-making power do you have for technology investments?",
        },
        industry_specific=True,
    ),
    # Organizational influence
    Question(
        id="oi_001",
        type=QuestionType.MULTIPLE_CHOICE,
        text="How many people report to you directly or indirectly?",
        options=(
            "None - I work independently",
            "1-5 people",
            "6-20 people",
            "21-100 people",
            "More than 100 people",
        ),
        cultural_adaptations={
            "kenyan": "How many team members do you supervise or manage?",
            "east_african": "What is the size of your team or department?",
        },
    ),
    Question(
        id="oi_002",
        type=QuestionType.SCALE_RATING,
        text="How often do other departments seek your input on their initiatives?",
        scale_range=ScaleRange(
            min=1, max=5, labels=("Never", "Rarely", "Sometimes", "Often", "Always")
        ),
        cultural_adaptations={
            "kenyan": "How often do colleagues from other departments ask for your advice?",
            "east_african": "How frequently do you collaborate across different departments?",
        },
    ),
    # Resource availability
    Question(
        id="ra_001",
        type=QuestionType.MULTIPLE_CHOICE,
        text="What is your organization's typical budget range for strategic technology initiatives?",
        options=(
            "Less than $10,000",
            "$10,000 - $50,000",
            "$50,000 - $200,000",
            "$200,000 - $1,000,000",
            "More than $1,000,000",
        ),
        cultural_adaptations={
            "kenyan": "What budget range does your organization typically allocate for new technology projects? (in KSH)",
            "east_african": "What is your organization's investment capacity for strategic technology initiatives?",
        },
        industry_specific=True,
    ),
    Question(
        id="ra_002",
        type=QuestionType.SCALE_RATING,
        text="How readily available are skilled technical resources in your organization?",
        scale_range=ScaleRange(
            min=1, max=5, labels=("Very limited", "Limited", "Adequate", "Good", "Excellent")
        ),
        cultural_adaptations={
            "kenyan": "How easy is it to find skilled technical people in your organization?",
            "east_african": "What is the availability of technical expertise in your team?",
        },
    ),
    # Implementation readiness
    Question(
        id="ir_001",
        type=QuestionType.MULTIPLE_CHOICE,
        text="How would you describe your organization's approach to adopting new technologies?",
        options=(
            "We are early adopters and embrace new technologies quickly",
            "We adopt proven technologies after careful evaluation",
            "We follow industry standards and best practices",
            "We are cautious and prefer established solutions",
            "We are very conservative and slow to change",
        ),
        cultural_adaptations={
            "kenyan": "How does your organization typically approach new technology adoption?",
            "east_african": "What is your organization's attitude toward implementing new technologies?",
        },
        industry_specific=True,
    ),
    Question(
        id="ir_002",
        type=QuestionType.SCALE_RATING,
        text="How prepared is your organization to manage significant technological change?",
        scale_range=ScaleRange(
            min=1,
            max=5,
            labels=(
                "Not prepared",
                "Minimally prepared",
                "Somewhat prepared",
                "Well prepared",
                "Fully prepared",
            ),
        ),
        cultural_adaptations={
            "kenyan": "How ready is your organization to handle major technology changes?",
            "east_african": "What is your organization's capacity for managing technological transformation?",
        },
    ),
    # Cultural alignment
    Question(
        id="ca_001",
        type=QuestionType.MULTIPLE_CHOICE,
        text="Which best describes your organization's decision-making culture?",
        options=(
            "Hierarchical - decisions flow from top leadership",
            "Collaborative - decisions involve multiple stakeholders",
            "Consensus-driven - we seek agreement from all parties",
            "Data-driven - decisions based on analysis and metrics",
            "Agile - quick decisions with iterative improvements",
        ),
        cultural_adaptations={
            "kenyan": "How are important decisions typically made in your organization?",
            "east_african": "What is your organization's approach to making business decisions?",
        },
        industry_specific=True,
    ),
    Question(
        id="ca_002",
        type=QuestionType.TEXT_INPUT,
        text=(
            "What are the biggest cultural or organizational barriers to implementing "
            "new technologies in your context?"
        ),
        cultural_adaptations={
            "kenyan": "What challenges do you face when trying to introduce new technologies in your organization?",
            "east_african": "What obstacles typically prevent successful technology implementation in your environment?",
        },
    ),
    # AI familiarity
    Question(
        id="ai_001",
        type=QuestionType.SCALE_RATING,
        text="How familiar are you with artificial intelligence and its business applications?",
        scale_range=ScaleRange(
            min=1,
            max=5,
            labels=(
                "Not familiar",
                "Slightly familiar",
                "Moderately familiar",
                "Very familiar",
                "Expert level",
            ),
        ),
        cultural_adaptations={
            "kenyan": "How well do you understand AI and how it can be used in business?",
            "east_african": "What is your level of knowledge about artificial intelligence applications?",
        },
    ),
    Question(
        id="ai_002",
        type=QuestionType.MULTIPLE_CHOICE,
        text="What is your primary interest in AI for your organization?",
        options=(
            "Automating routine tasks and processes",
            "Enhancing decision-making with data insights",
            "Improving customer experience and engagement",
            "Creating new products or services",
            "Gaining competitive advantage in the market",
        ),
        cultural_adaptations={
            "kenyan": "How do you see AI helping your organization the most?",
            "east_african": "What would be the main benefit of AI for your business?",
        },
        industry_specific=True,
    ),
)


# Industry overrides: industry -> question id -> fields to replace
INDUSTRY_ADAPTATIONS: dict[str, dict[str, dict[str, object]]] = {
    "financial_services": {
        "ra_001": {
            "text": "What is your organization's typical budget range for regulatory-compliant technology initiatives?"
        },
    },
    "healthcare": {
        "ir_001": {
            "text": (
                "How would you describe your organization's approach to adopting new "
                "healthcare technologies while maintaining patient safety?"
            )
        },
    },
    "manufacturing": {
        "ai_002": {
            "options": (
                "Optimizing production processes and quality control",
                "Predictive maintenance and equipment monitoring",
                "Supply chain optimization and demand forecasting",
                "Enhancing worker safety and training",
                "Reducing waste and improving efficiency",
            )
        },
    },
    "government": {
        "ca_001": {
            "text": "Which best describes your organization's approach to public sector decision-making?",
            "options": (
                "Policy-driven - decisions follow established regulations",
                "Stakeholder consultation - involving citizens and partners",
                "Evidence-based - using data and research",
                "Transparent - with public accountability",
                "Collaborative - across government departments",
            ),
        },
    },
}


class QuestionnaireStrategy(AssessmentStrategy):
    """Traditional questionnaire with persona-driven adaptive branching."""

    assessment_type = AssessmentType.QUESTIONNAIRE

    # Question families used for information-gap back-fill, in priority order
    BACKFILL_CATEGORIES = ("ra_", "ir_", "ca_", "ai_")

    # Core sequence: every sa_/oi_ question plus the AI familiarity rating
    CORE_PREFIXES = ("sa_", "oi_")
    CORE_EXTRA_IDS = ("ai_001",)

    # Industry-specific questions appended when an industry is known
    INDUSTRY_QUESTION_LIMIT = 3

    # Substring → score for the text-valued scoring questions
    ROLE_SCORES = (
        ("make final strategic decisions", 5),
        ("significantly influence", 4),
        ("contribute to strategic", 3),
    )
    TEAM_SIZE_SCORES = (
        ("More than 100", 5),
        ("21-100", 4),
        ("6-20", 3),
    )
    BUDGET_SCORES = (
        ("More than $1,000,000", 5),
        ("$200,000 - $1,000,000", 4),
        ("$50,000 - $200,000", 3),
    )

    def __init__(
        self, user_context: UserContext, adaptive_questioning_enabled: bool | None = None
    ):
        super().__init__(user_context)
        self.question_bank = QUESTION_BANK
        self.adaptive_questioning_enabled = (
            settings.ADAPTIVE_QUESTIONING_ENABLED
            if adaptive_questioning_enabled is None
            else adaptive_questioning_enabled
        )

    def initialize_questions(self) -> list[Question]:
        core = [
            q
            for q in self.question_bank
            if q.id.startswith(self.CORE_PREFIXES) or q.id in self.CORE_EXTRA_IDS
        ]

        if self.user_context.industry:
            industry_questions = [q for q in self.question_bank if q.industry_specific and q not in core]
            core.extend(industry_questions[: self.INDUSTRY_QUESTION_LIMIT])

        return core

    def process_response(
        self,
        response: AssessmentResponse,
        current_question: Question,  # noqa: ARG002
        session: AssessmentSession,
    ) -> AssessmentSession:
        return record_response(session, response)

    def determine_next_question(
        self, responses: Sequence[AssessmentResponse], current_index: int  # noqa: ARG002
    ) -> Question | None:
        if not self.adaptive_questioning_enabled:
            return None

        return self.select_adaptive_question(responses, self.predict_persona(responses))

    def persona_hint(self, responses: Sequence[AssessmentResponse]) -> PersonaType | None:
        return self.predict_persona(responses)

    # ========================================================================
    # Persona prediction
    # ========================================================================

    def predict_persona(self, responses: Sequence[AssessmentResponse]) -> PersonaType | None:
        """Predict a persona from authority, influence and resource answers.

        Args:
            responses: Responses recorded so far

        Returns:
            Predicted persona, or None with fewer than two responses
        """
        if len(responses) < 2:
            return None

        authority = 0.0
        influence = 0
        resources = 0

        for response in responses:
            value = response.response_value
            if response.question_id == "sa_001":
                authority += self._substring_score(value, self.ROLE_SCORES)
            elif response.question_id == "sa_002":
                if isinstance(value, int | float) and not isinstance(value, bool):
                    authority += value
            elif response.question_id == "oi_001":
                influence += self._substring_score(value, self.TEAM_SIZE_SCORES)
            elif response.question_id == "ra_001":
                resources += self._substring_score(value, self.BUDGET_SCORES)

        if authority >= 8 and resources >= 4:
            return PersonaType.STRATEGIC_ARCHITECT
        if authority >= 6 and influence >= 3:
            return PersonaType.STRATEGIC_CATALYST
        if authority >= 4 or influence >= 3:
            return PersonaType.STRATEGIC_CONTRIBUTOR
        if authority >= 2:
            return PersonaType.STRATEGIC_EXPLORER
        return PersonaType.STRATEGIC_OBSERVER

    @staticmethod
    def _substring_score(value: object, table: tuple[tuple[str, int], ...]) -> int:
        if not isinstance(value, str):
            return 0
        for fragment, score in table:
            if fragment in value:
                return score
        return 0

    # ========================================================================
    # Adaptive selection
    # ========================================================================

    def select_adaptive_question(
        self, responses: Sequence[AssessmentResponse], likely_persona: PersonaType | None
    ) -> Question | None:
        """Choose the next bank question to inject.

        Returns:
            Bank question, or None once every bank question is answered
        """
        answered_ids = {r.question_id for r in responses}
        unanswered = [q for q in self.question_bank if q.id not in answered_ids]

        if not unanswered:
            return None

        if likely_persona is not None:
            for question in unanswered:
                if likely_persona in question.required_for_persona:
                    return question

        counts = self.categorize_responses(responses)
        least_answered = self.BACKFILL_CATEGORIES[0]
        for category in self.BACKFILL_CATEGORIES[1:]:
            if counts[category] < counts[least_answered]:
                least_answered = category

        for question in unanswered:
            if question.id.startswith(least_answered):
                return question

        return unanswered[0]

    @staticmethod
    def categorize_responses(responses: Sequence[AssessmentResponse]) -> Counter[str]:
        """Count responses per three-character question id prefix."""
        return Counter(r.question_id[:3] for r in responses)

    def apply_industry_adaptations(self, question: Question) -> Question:
        industry = self.industry
        if not industry:
            return question

        overrides = INDUSTRY_ADAPTATIONS.get(industry, {}).get(question.id)
        if not overrides:
            return question

        return question.model_copy(update=overrides)
