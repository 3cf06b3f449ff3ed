"""
Visual Pattern Strategy

Pattern-recognition assessment: the respondent picks the diagram that best
matches how their organization works. Patterns are ordered by complexity
(simple → moderate → complex) and narrowed to those relevant to the
respondent's industry when any remain.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ..orchestrator import (
    AssessmentStrategy,
    leading_persona,
    record_response,
    tally_persona_alignment,
)
from ..types import (
    AssessmentResponse,
    AssessmentSession,
    AssessmentType,
    PersonaType,
    Question,
    QuestionType,
)

PatternType = Literal["workflow", "hierarchy", "network", "process", "system"]
Complexity = Literal["simple", "moderate", "complex"]

COMPLEXITY_ORDER: tuple[Complexity, ...] = ("simple", "moderate", "complex")
ALL_INDUSTRIES = "all"


class PatternAdaptation(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    description: str


class VisualPattern(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    pattern_type: PatternType
    complexity: Complexity
    industry_relevance: tuple[str, ...]
    image_url: str | None = None
    cultural_adaptations: dict[str, PatternAdaptation] = Field(default_factory=dict)

    @property
    def industry_specific(self) -> bool:
        return len(self.industry_relevance) > 1


class PatternChoice(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    visual_description: str
    strategic_implication: str
    persona_alignment: tuple[PersonaType, ...]
    cultural_adaptations: dict[str, str] = Field(default_factory=dict)


class PatternPreferences(BaseModel):
    """Pattern types chosen so far and the persona alignment they imply."""

    model_config = ConfigDict(frozen=True)

    pattern_types: tuple[PatternType, ...] = ()
    pattern_type_counts: dict[str, int] = Field(default_factory=dict)
    persona_alignment: dict[PersonaType, int] = Field(default_factory=dict)


VISUAL_PATTERNS: tuple[VisualPattern, ...] = (
    VisualPattern(
        id="vp_001",
        title="Organizational Decision Flow",
        description="How do strategic decisions typically flow through your organization?",
        pattern_type="workflow",
        complexity="moderate",
        industry_relevance=(ALL_INDUSTRIES,),
        cultural_adaptations={
            "kenyan": PatternAdaptation(
                title="How Decisions Are Made",
                description="How do important business decisions move through your organization?",
            ),
            "east_african": PatternAdaptation(
                title="Decision-Making Process",
                description="What is the typical process for making strategic decisions in your organization?",
            ),
        },
    ),
    VisualPattern(
        id="vp_002",
        title="Information Architecture",
        description="How does information and data flow through your organization?",
        pattern_type="network",
        complexity="complex",
        industry_relevance=("technology", "financial_services", "healthcare"),
        cultural_adaptations={
            "kenyan": PatternAdaptation(
                title="Information Flow",
                description="How does information move around in your organization?",
            ),
        },
    ),
    VisualPattern(
        id="vp_003",
        title="Change Implementation Pattern",
        description="How does your organization typically implement new initiatives?",
        pattern_type="process",
        complexity="moderate",
        industry_relevance=(ALL_INDUSTRIES,),
        cultural_adaptations={
            "kenyan": PatternAdaptation(
                title="How Changes Are Made",
                description="How does your organization usually bring in new ways of doing things?",
            ),
        },
    ),
    VisualPattern(
        id="vp_004",
        title="Technology Integration Model",
        description="How does your organization approach integrating new technologies?",
        pattern_type="system",
        complexity="complex",
        industry_relevance=("technology", "manufacturing", "financial_services"),
        cultural_adaptations={
            "kenyan": PatternAdaptation(
                title="Technology Integration",
                description="How does your organization add new technology to existing systems?",
            ),
        },
    ),
)


PATTERN_CHOICES: dict[str, tuple[PatternChoice, ...]] = {
    "vp_001": (
        PatternChoice(
            id="vp_001_a",
            text="Top-down hierarchical flow",
            visual_description="Decisions start at the top and cascade down through clear reporting lines",
            strategic_implication="Centralized control with clear authority structure",
            persona_alignment=(PersonaType.STRATEGIC_ARCHITECT, PersonaType.STRATEGIC_OBSERVER),
            cultural_adaptations={
                "kenyan": "Decisions come from the top and go down through the organization",
                "east_african": "Leadership makes decisions that flow down through management levels",
            },
        ),
        PatternChoice(
            id="vp_001_b",
            text="Collaborative consensus building",
            visual_description="Multiple stakeholders contribute input before decisions are finalized",
            strategic_implication="Inclusive decision-making with broader buy-in",
            persona_alignment=(PersonaType.STRATEGIC_CATALYST, PersonaType.STRATEGIC_CONTRIBUTOR),
            cultural_adaptations={
                "kenyan": "Everyone gives their opinion before decisions are made",
                "east_african": "Decisions involve input from multiple team members",
            },
        ),
        PatternChoice(
            id="vp_001_c",
            text="Matrix-based cross-functional",
            visual_description="Decisions involve multiple departments and expertise areas",
            strategic_implication="Complex coordination with specialized input",
            persona_alignment=(PersonaType.STRATEGIC_CATALYST, PersonaType.STRATEGIC_EXPLORER),
            cultural_adaptations={
                "kenyan": "Different departments work together to make decisions",
                "east_african": "Decisions involve coordination across different areas of expertise",
            },
        ),
        PatternChoice(
            id="vp_001_d",
            text="Agile iterative cycles",
            visual_description="Quick decisions with regular review and adjustment cycles",
            strategic_implication="Flexible and adaptive approach to decision-making",
            persona_alignment=(PersonaType.STRATEGIC_CATALYST, PersonaType.STRATEGIC_EXPLORER),
            cultural_adaptations={
                "kenyan": "Quick decisions that can be changed based on results",
                "east_african": "Fast decision-making with regular reviews and adjustments",
            },
        ),
    ),
    "vp_002": (
        PatternChoice(
            id="vp_002_a",
            text="Centralized data hub",
            visual_description="All information flows through a central team or system before it is shared",
            strategic_implication="Strong governance with a single source of truth",
            persona_alignment=(PersonaType.STRATEGIC_ARCHITECT, PersonaType.STRATEGIC_OBSERVER),
            cultural_adaptations={"kenyan": "One central team keeps and shares all the information"},
        ),
        PatternChoice(
            id="vp_002_b",
            text="Connected departmental networks",
            visual_description="Departments exchange data directly with each other as needed",
            strategic_implication="Fast local access with coordination overhead",
            persona_alignment=(PersonaType.STRATEGIC_CATALYST, PersonaType.STRATEGIC_CONTRIBUTOR),
            cultural_adaptations={"kenyan": "Departments share information directly with each other"},
        ),
        PatternChoice(
            id="vp_002_c",
            text="Self-service open access",
            visual_description="Teams use shared data platforms and build their own insights",
            strategic_implication="Empowered teams with higher data literacy demands",
            persona_alignment=(PersonaType.STRATEGIC_CATALYST, PersonaType.STRATEGIC_EXPLORER),
            cultural_adaptations={"kenyan": "Anyone can find the information they need on their own"},
        ),
        PatternChoice(
            id="vp_002_d",
            text="Siloed request-based sharing",
            visual_description="Information stays within departments and is released on request",
            strategic_implication="Limited visibility and slower decisions",
            persona_alignment=(PersonaType.STRATEGIC_OBSERVER, PersonaType.STRATEGIC_CONTRIBUTOR),
            cultural_adaptations={"kenyan": "Each department keeps its information and shares only when asked"},
        ),
    ),
    "vp_003": (
        PatternChoice(
            id="vp_003_a",
            text="Organization-wide rollout",
            visual_description="A change is launched across every part of the organization at once",
            strategic_implication="Fast transformation with concentrated risk",
            persona_alignment=(PersonaType.STRATEGIC_ARCHITECT, PersonaType.STRATEGIC_CATALYST),
            cultural_adaptations={"kenyan": "The change is started everywhere at the same time"},
        ),
        PatternChoice(
            id="vp_003_b",
            text="Phased departmental rollout",
            visual_description="A change moves department by department on a planned schedule",
            strategic_implication="Controlled risk with longer timelines",
            persona_alignment=(PersonaType.STRATEGIC_CONTRIBUTOR, PersonaType.STRATEGIC_OBSERVER),
            cultural_adaptations={"kenyan": "The change is brought in one department at a time"},
        ),
        PatternChoice(
            id="vp_003_c",
            text="Pilot then scale",
            visual_description="Small experiments prove value before wider adoption",
            strategic_implication="Evidence-driven scaling with learning loops",
            persona_alignment=(PersonaType.STRATEGIC_EXPLORER, PersonaType.STRATEGIC_CATALYST),
            cultural_adaptations={"kenyan": "A small test is done first and then expanded if it works"},
        ),
        PatternChoice(
            id="vp_003_d",
            text="Adopt proven practices later",
            visual_description="A change follows once others have demonstrated success",
            strategic_implication="Low risk with slower competitive response",
            persona_alignment=(PersonaType.STRATEGIC_OBSERVER,),
            cultural_adaptations={"kenyan": "We wait to see what works for others before changing"},
        ),
    ),
    "vp_004": (
        PatternChoice(
            id="vp_004_a",
            text="Unified enterprise platform",
            visual_description="New technology is built into a single enterprise architecture",
            strategic_implication="Cohesive systems with high upfront planning",
            persona_alignment=(PersonaType.STRATEGIC_ARCHITECT,),
            cultural_adaptations={"kenyan": "All new technology is joined into one main system"},
        ),
        PatternChoice(
            id="vp_004_b",
            text="Modular connected services",
            visual_description="Tools connect through standard interfaces and can be replaced independently",
            strategic_implication="Flexible ecosystem requiring integration skills",
            persona_alignment=(PersonaType.STRATEGIC_CATALYST, PersonaType.STRATEGIC_EXPLORER),
            cultural_adaptations={"kenyan": "Different tools are linked together and can be changed easily"},
        ),
        PatternChoice(
            id="vp_004_c",
            text="Standalone point solutions",
            visual_description="Each team adopts tools that solve its immediate needs",
            strategic_implication="Quick wins with fragmentation risk",
            persona_alignment=(PersonaType.STRATEGIC_CONTRIBUTOR, PersonaType.STRATEGIC_EXPLORER),
            cultural_adaptations={"kenyan": "Each team picks its own tools for its own work"},
        ),
        PatternChoice(
            id="vp_004_d",
            text="Vendor-managed packages",
            visual_description="External vendors provide and maintain integrated packages",
            strategic_implication="Reduced internal burden with vendor dependency",
            persona_alignment=(PersonaType.STRATEGIC_OBSERVER, PersonaType.STRATEGIC_CONTRIBUTOR),
            cultural_adaptations={"kenyan": "Outside companies set up and look after our technology"},
        ),
    ),
}


# Industry substitutions: industry -> (pattern id, phrase, replacement)
INDUSTRY_SUBSTITUTIONS: dict[str, tuple[str, str, str]] = {
    "financial_services": (
        "vp_002",
        "information and data flow",
        "regulatory-compliant information and data flow with audit trails",
    ),
    "healthcare": (
        "vp_002",
        "information and data flow",
        "patient information and clinical data flow with privacy protection",
    ),
    "manufacturing": (
        "vp_004",
        "integrating new technologies",
        "integrating new production and automation technologies",
    ),
}


def format_pattern_text(pattern: VisualPattern) -> str:
    return (
        f"**{pattern.title}**\n\n{pattern.description}\n\n"
        "Please select the pattern that best represents your organization's approach:"
    )


def build_cultural_renderings(
    pattern: VisualPattern, choices: Sequence[PatternChoice]
) -> dict[str, str]:
    renderings: dict[str, str] = {}

    for culture, adaptation in pattern.cultural_adaptations.items():
        adapted_choices = "\n".join(
            f"{number}. {choice.cultural_adaptations.get(culture) or choice.text}"
            for number, choice in enumerate(choices, start=1)
        )
        renderings[culture] = (
            f"**{adaptation.title}**\n\n{adaptation.description}\n\n"
            f"Please choose the option that best fits your organization:\n\n{adapted_choices}"
        )

    return renderings


class VisualPatternStrategy(AssessmentStrategy):
    """Visual pattern recognition over the pattern library."""

    assessment_type = AssessmentType.VISUAL_PATTERN

    visual_patterns = VISUAL_PATTERNS
    pattern_choices = PATTERN_CHOICES

    def initialize_questions(self) -> list[Question]:
        return [self.build_question(pattern) for pattern in self.visual_patterns]

    def build_question(self, pattern: VisualPattern) -> Question:
        choices = self.pattern_choices.get(pattern.id, ())
        return Question(
            id=pattern.id,
            type=QuestionType.VISUAL_PATTERN,
            text=format_pattern_text(pattern),
            options=tuple(choice.text for choice in choices),
            cultural_adaptations=build_cultural_renderings(pattern, choices),
            industry_specific=pattern.industry_specific,
        )

    def get_pattern(self, pattern_id: str) -> VisualPattern | None:
        return next((p for p in self.visual_patterns if p.id == pattern_id), None)

    def process_response(
        self,
        response: AssessmentResponse,
        current_question: Question,
        session: AssessmentSession,
    ) -> AssessmentSession:
        """Record the response, enriched with the matching choice when found."""
        selected_option = response.response_value
        choices = self.pattern_choices.get(response.question_id, ())
        options = current_question.options or ()

        if isinstance(selected_option, str) and selected_option in options:
            selected_index = options.index(selected_option)
            if selected_index < len(choices):
                choice = choices[selected_index]
                pattern = self.get_pattern(response.question_id)
                response = response.model_copy(
                    update={
                        "response_value": {
                            "selected_option": selected_option,
                            "choice_id": choice.id,
                            "visual_description": choice.visual_description,
                            "strategic_implication": choice.strategic_implication,
                            "persona_alignment": [str(p) for p in choice.persona_alignment],
                            "pattern_type": pattern.pattern_type if pattern else None,
                        }
                    }
                )

        return record_response(session, response)

    def determine_next_question(
        self, responses: Sequence[AssessmentResponse], current_index: int  # noqa: ARG002
    ) -> Question | None:
        answered = {r.question_id for r in responses}
        remaining = [p for p in self.visual_patterns if p.id not in answered]

        pattern = self.select_optimal_pattern(remaining)
        return self.build_question(pattern) if pattern is not None else None

    def select_optimal_pattern(self, remaining: Sequence[VisualPattern]) -> VisualPattern | None:
        """Pick the simplest remaining pattern, preferring industry-relevant ones."""
        if not remaining:
            return None

        candidates = list(remaining)
        industry = self.industry
        if industry:
            relevant = [
                p
                for p in candidates
                if industry in p.industry_relevance or ALL_INDUSTRIES in p.industry_relevance
            ]
            if relevant:
                candidates = relevant

        for complexity in COMPLEXITY_ORDER:
            for pattern in candidates:
                if pattern.complexity == complexity:
                    return pattern

        return candidates[0]

    def analyze_pattern_preferences(
        self, responses: Sequence[AssessmentResponse]
    ) -> PatternPreferences:
        """Summarize chosen pattern types and persona alignment."""
        pattern_types: list[PatternType] = []
        for response in responses:
            value = response.response_value
            if isinstance(value, dict) and value.get("pattern_type"):
                pattern_types.append(value["pattern_type"])

        return PatternPreferences(
            pattern_types=tuple(pattern_types),
            pattern_type_counts=dict(Counter(pattern_types)),
            persona_alignment={
                persona: count
                for persona, count in tally_persona_alignment(responses).items()
                if count
            },
        )

    def persona_hint(self, responses: Sequence[AssessmentResponse]) -> PersonaType | None:
        return leading_persona(tally_persona_alignment(responses))

    def apply_industry_adaptations(self, question: Question) -> Question:
        industry = self.industry
        if not industry or not question.industry_specific:
            return question

        substitution = INDUSTRY_SUBSTITUTIONS.get(industry)
        if substitution is None or substitution[0] != question.id:
            return question

        _, phrase, replacement = substitution
        return question.model_copy(update={"text": question.text.replace(phrase, replacement, 1)})
