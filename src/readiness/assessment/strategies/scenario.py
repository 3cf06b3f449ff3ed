"""
Scenario Strategy

Business-situation assessment: each question is a short case with
stakeholders and constraints, answered by choosing one of four courses of
action. Every choice carries the personas it aligns with, and the chosen
choice is recorded in the response so alignment can be tallied later.
"""

from __future__ import annotations

from collections.abc import Sequence

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

ARCHITECT = PersonaType.STRATEGIC_ARCHITECT
CATALYST = PersonaType.STRATEGIC_CATALYST
CONTRIBUTOR = PersonaType.STRATEGIC_CONTRIBUTOR
EXPLORER = PersonaType.STRATEGIC_EXPLORER
OBSERVER = PersonaType.STRATEGIC_OBSERVER


class ScenarioAdaptation(BaseModel):
    model_config = ConfigDict(frozen=True)

    context: str
    situation: str
    stakeholders: tuple[str, ...]


class Scenario(BaseModel):
    """A business situation presented as one scenario_selection question."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    context: str
    situation: str
    stakeholders: tuple[str, ...]
    constraints: tuple[str, ...]
    cultural_adaptations: dict[str, ScenarioAdaptation] = Field(default_factory=dict)
    industry_specific: bool = False


class ScenarioChoice(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    reasoning: str | None = None
    implications: tuple[str, ...] = ()
    persona_alignment: tuple[PersonaType, ...] = ()
    cultural_adaptations: dict[str, str] = Field(default_factory=dict)


SCENARIOS: tuple[Scenario, ...] = (
    Scenario(
        id="sc_001",
        title="AI Implementation Decision",
        context="Your organization is considering implementing an AI-powered customer service system.",
        situation=(
            "The IT department has proposed a solution that could reduce response times by 60% "
            "and cut customer service costs by 40%. However, it requires significant upfront "
            "investment, staff retraining, and may initially disrupt current operations. Some team "
            "members are concerned about job displacement, while others worry about maintaining "
            "service quality during the transition."
        ),
        stakeholders=(
            "IT Department",
            "Customer Service Team",
            "Finance Department",
            "Senior Management",
            "Customers",
        ),
        constraints=("Limited budget", "Tight timeline", "Staff concerns", "Service quality requirements"),
        cultural_adaptations={
            "kenyan": ScenarioAdaptation(
                context="Your organization is considering implementing an AI system to improve customer service.",
                situation=(
                    "The technology team has suggested a solution that could make customer service "
                    "much faster and cheaper. But it needs a big investment upfront, training for "
                    "staff, and might cause problems at first. Some workers worry about losing their "
                    "jobs, while others are concerned about keeping good service quality."
                ),
                stakeholders=(
                    "Technology Team",
                    "Customer Service Staff",
                    "Finance Team",
                    "Management",
                    "Customers",
                ),
            ),
            "east_african": ScenarioAdaptation(
                context="Your company is thinking about using AI technology for better customer service.",
                situation=(
                    "The technical team has recommended a system that could improve response times "
                    "significantly and reduce costs. However, it requires substantial investment, "
                    "employee training, and may cause initial disruptions. Team members have concerns "
                    "about employment security and maintaining service standards."
                ),
                stakeholders=("Technical Team", "Service Staff", "Finance Team", "Leadership", "Clients"),
            ),
        },
        industry_specific=True,
    ),
    Scenario(
        id="sc_002",
        title="Strategic Technology Investment",
        context="Your organization has received approval for a major technology investment.",
        situation=(
            "You have been allocated a significant budget to implement a strategic technology "
            "initiative that will transform how your organization operates. You must choose between "
            "three options: 1) A comprehensive AI platform that automates multiple processes, 2) A "
            "data analytics system that provides deep business insights, or 3) A digital "
            "transformation platform that modernizes all customer-facing operations. Each option has "
            "different implementation timelines, resource requirements, and potential returns."
        ),
        stakeholders=(
            "Board of Directors",
            "Department Heads",
            "IT Team",
            "Operations Team",
            "External Consultants",
        ),
        constraints=(
            "Fixed budget",
            "12-month timeline",
            "Limited technical expertise",
            "Regulatory compliance",
        ),
        cultural_adaptations={
            "kenyan": ScenarioAdaptation(
                context="Your organization has been given money for a major technology upgrade.",
                situation=(
                    "You have a good budget to implement a big technology project that will change "
                    "how your organization works. You can choose between: 1) An AI system that "
                    "automates many tasks, 2) A data system that gives business insights, or 3) A "
                    "digital platform that improves customer services. Each choice has different "
                    "costs, time needs, and benefits."
                ),
                stakeholders=(
                    "Board Members",
                    "Department Leaders",
                    "IT Staff",
                    "Operations Staff",
                    "External Advisors",
                ),
            ),
        },
        industry_specific=True,
    ),
    Scenario(
        id="sc_003",
        title="Change Management Challenge",
        context="Your organization is facing resistance to a new AI initiative.",
        situation=(
            "Six months into implementing an AI-powered workflow system, you're encountering "
            "significant resistance from middle management and frontline staff. Productivity has "
            "temporarily decreased, some employees are actively avoiding the new system, and there "
            "are concerns about data accuracy. Senior leadership is questioning the investment, and "
            "you need to decide how to proceed."
        ),
        stakeholders=(
            "Senior Leadership",
            "Middle Management",
            "Frontline Staff",
            "IT Support",
            "Training Team",
        ),
        constraints=(
            "Declining morale",
            "Productivity concerns",
            "Budget pressures",
            "Timeline expectations",
        ),
        cultural_adaptations={
            "kenyan": ScenarioAdaptation(
                context="Your organization is having problems with a new AI system.",
                situation=(
                    "After six months of using a new AI workflow system, many managers and workers "
                    "are not happy with it. Work has become slower temporarily, some people refuse "
                    "to use the new system, and there are worries about whether the data is correct. "
                    "Senior leaders are questioning if the investment was worth it."
                ),
                stakeholders=("Senior Leaders", "Managers", "Workers", "IT Support", "Training Team"),
            ),
        },
    ),
    Scenario(
        id="sc_004",
        title="Competitive Advantage Opportunity",
        context="A competitor has just announced a major AI breakthrough in your industry.",
        situation=(
            "Your main competitor has launched an AI-powered service that is gaining significant "
            "market attention and customer interest. Early reports suggest it could disrupt "
            "traditional business models in your sector. You need to decide how to respond: develop "
            "a competing solution, partner with an AI vendor, acquire a startup with relevant "
            "technology, or focus on your existing strengths while monitoring the situation."
        ),
        stakeholders=(
            "Executive Team",
            "Product Development",
            "Marketing Team",
            "Sales Team",
            "Customers",
        ),
        constraints=(
            "Competitive pressure",
            "Market expectations",
            "Resource allocation",
            "Time to market",
        ),
        cultural_adaptations={
            "kenyan": ScenarioAdaptation(
                context="A competitor has introduced a new AI service that is getting a lot of attention.",
                situation=(
                    "Your main competitor has launched an AI service that customers are very "
                    "interested in. It might change how business is done in your industry. You need "
                    "to decide what to do: create your own competing solution, work with an AI "
                    "company, buy a startup with the right technology, or stick to what you do best "
                    "while watching what happens."
                ),
                stakeholders=(
                    "Executive Team",
                    "Product Team",
                    "Marketing Team",
                    "Sales Team",
                    "Customers",
                ),
            ),
        },
        industry_specific=True,
    ),
)


SCENARIO_CHOICES: dict[str, tuple[ScenarioChoice, ...]] = {
    "sc_001": (
        ScenarioChoice(
            id="sc_001_a",
            text="Proceed with full implementation immediately",
            reasoning="Maximize benefits and competitive advantage",
            implications=("High risk", "Potential for significant returns", "Requires strong change management"),
            persona_alignment=(ARCHITECT, CATALYST),
            cultural_adaptations={
                "kenyan": "Go ahead with the full system right away",
                "east_african": "Implement the complete solution immediately",
            },
        ),
        ScenarioChoice(
            id="sc_001_b",
            text="Start with a pilot program in one department",
            reasoning="Reduce risk while testing effectiveness",
            implications=("Lower risk", "Slower benefits realization", "Learning opportunity"),
            persona_alignment=(CONTRIBUTOR, EXPLORER),
            cultural_adaptations={
                "kenyan": "Test it first in one department only",
                "east_african": "Begin with a trial in one department",
            },
        ),
        ScenarioChoice(
            id="sc_001_c",
            text="Delay implementation until staff concerns are addressed",
            reasoning="Ensure organizational readiness and buy-in",
            implications=("Delayed benefits", "Better change management", "Potential competitive disadvantage"),
            persona_alignment=(OBSERVER, CONTRIBUTOR),
            cultural_adaptations={
                "kenyan": "Wait until workers are more comfortable with the change",
                "east_african": "Postpone until staff concerns are resolved",
            },
        ),
        ScenarioChoice(
            id="sc_001_d",
            text="Seek additional stakeholder input before deciding",
            reasoning="Gather more information and build consensus",
            implications=("More informed decision", "Slower decision-making", "Broader buy-in"),
            persona_alignment=(EXPLORER, OBSERVER),
            cultural_adaptations={
                "kenyan": "Ask more people for their opinions before deciding",
                "east_african": "Consult with more stakeholders before making a decision",
            },
        ),
    ),
    "sc_002": (
        ScenarioChoice(
            id="sc_002_a",
            text="Choose the comprehensive AI platform for maximum automation",
            reasoning="Achieve the greatest operational transformation",
            implications=(
                "Highest complexity",
                "Maximum long-term benefits",
                "Significant change management needs",
            ),
            persona_alignment=(ARCHITECT,),
            cultural_adaptations={"kenyan": "Pick the complete AI system for maximum automation"},
        ),
        ScenarioChoice(
            id="sc_002_b",
            text="Select the data analytics system for better decision-making",
            reasoning="Focus on intelligence and insights",
            implications=("Moderate complexity", "Enhanced decision-making capability", "Requires data literacy"),
            persona_alignment=(CATALYST, CONTRIBUTOR),
            cultural_adaptations={"kenyan": "Choose the data system for better business decisions"},
        ),
        ScenarioChoice(
            id="sc_002_c",
            text="Implement the digital transformation platform",
            reasoning="Improve customer experience and market position",
            implications=("Customer-focused benefits", "Market differentiation", "External visibility"),
            persona_alignment=(CATALYST, EXPLORER),
            cultural_adaptations={"kenyan": "Go with the digital platform to improve customer service"},
        ),
        ScenarioChoice(
            id="sc_002_d",
            text="Split the budget across multiple smaller initiatives",
            reasoning="Diversify risk and address multiple needs",
            implications=("Lower individual impact", "Reduced risk", "Broader organizational benefit"),
            persona_alignment=(OBSERVER, CONTRIBUTOR),
            cultural_adaptations={"kenyan": "Use the money for several smaller technology projects"},
        ),
    ),
    "sc_003": (
        ScenarioChoice(
            id="sc_003_a",
            text="Double down with additional training and support",
            reasoning="Overcome resistance through education and assistance",
            implications=(
                "Additional investment required",
                "Potential for breakthrough",
                "Continued short-term challenges",
            ),
            persona_alignment=(ARCHITECT, CATALYST),
            cultural_adaptations={"kenyan": "Provide more training and support to help people use the system"},
        ),
        ScenarioChoice(
            id="sc_003_b",
            text="Modify the system based on user feedback",
            reasoning="Address specific concerns and improve usability",
            implications=("Development costs", "Better user adoption", "Delayed full benefits"),
            persona_alignment=(CONTRIBUTOR, EXPLORER),
            cultural_adaptations={"kenyan": "Change the system based on what users are saying"},
        ),
        ScenarioChoice(
            id="sc_003_c",
            text="Pause implementation and reassess the approach",
            reasoning="Prevent further damage and develop a better strategy",
            implications=("Sunk costs", "Opportunity to restart properly", "Loss of momentum"),
            persona_alignment=(OBSERVER,),
            cultural_adaptations={"kenyan": "Stop for now and think of a better way to do this"},
        ),
        ScenarioChoice(
            id="sc_003_d",
            text="Implement a hybrid approach with manual and AI processes",
            reasoning="Balance innovation with user comfort",
            implications=("Compromise solution", "Easier adoption", "Reduced efficiency gains"),
            persona_alignment=(CONTRIBUTOR, OBSERVER),
            cultural_adaptations={"kenyan": "Use both the old way and the new AI system together"},
        ),
    ),
    "sc_004": (
        ScenarioChoice(
            id="sc_004_a",
            text="Rapidly develop a competing AI solution",
            reasoning="Match competitor capabilities quickly",
            implications=("High resource commitment", "Fast response", "Technical and market risks"),
            persona_alignment=(ARCHITECT, CATALYST),
            cultural_adaptations={"kenyan": "Quickly create our own AI solution to compete"},
        ),
        ScenarioChoice(
            id="sc_004_b",
            text="Partner with an established AI vendor",
            reasoning="Leverage existing expertise and technology",
            implications=("Faster time to market", "Dependency on partner", "Shared value creation"),
            persona_alignment=(CATALYST, CONTRIBUTOR),
            cultural_adaptations={
                "kenyan": "Work together with an AI company that already has the technology"
            },
        ),
        ScenarioChoice(
            id="sc_004_c",
            text="Acquire a startup with relevant AI technology",
            reasoning="Gain technology and talent quickly",
            implications=("High acquisition cost", "Integration challenges", "Immediate capability gain"),
            persona_alignment=(ARCHITECT,),
            cultural_adaptations={"kenyan": "Buy a small company that has the AI technology we need"},
        ),
        ScenarioChoice(
            id="sc_004_d",
            text="Focus on existing strengths while monitoring the market",
            reasoning="Avoid hasty decisions and maintain current advantages",
            implications=("Lower risk", "Potential market share loss", "Time to develop better strategy"),
            persona_alignment=(OBSERVER, EXPLORER),
            cultural_adaptations={
                "kenyan": "Keep doing what we do best while watching what happens in the market"
            },
        ),
    ),
}


# Industry substitutions: industry -> (scenario id, phrase, replacement)
INDUSTRY_SUBSTITUTIONS: dict[str, tuple[str, str, str]] = {
    "financial_services": (
        "sc_001",
        "customer service system",
        "regulatory-compliant customer service system with audit trails",
    ),
    "healthcare": (
        "sc_001",
        "customer service system",
        "patient communication system with HIPAA compliance",
    ),
    "manufacturing": (
        "sc_002",
        "customer-facing operations",
        "production and supply chain operations",
    ),
    "government": (
        "sc_004",
        "competitor",
        "another government agency or private sector organization",
    ),
}


def format_scenario_text(scenario: Scenario) -> str:
    return (
        f"**{scenario.title}**\n\n{scenario.context}\n\n"
        f"**Situation:** {scenario.situation}\n\n"
        f"**Key Stakeholders:** {', '.join(scenario.stakeholders)}\n\n"
        f"**Constraints:** {', '.join(scenario.constraints)}\n\n"
        "What would be your approach?"
    )


def build_cultural_renderings(
    scenario: Scenario, choices: Sequence[ScenarioChoice]
) -> dict[str, str]:
    """Full culturally adapted rendering per context, choices enumerated."""
    renderings: dict[str, str] = {}

    for culture, adaptation in scenario.cultural_adaptations.items():
        adapted_choices = "\n".join(
            f"{number}. {choice.cultural_adaptations.get(culture) or choice.text}"
            for number, choice in enumerate(choices, start=1)
        )
        renderings[culture] = (
            f"**{scenario.title}**\n\n{adaptation.context}\n\n"
            f"**Situation:** {adaptation.situation}\n\n"
            f"**Key People Involved:** {', '.join(adaptation.stakeholders)}\n\n"
            f"What would you do?\n\n{adapted_choices}"
        )

    return renderings


class ScenarioStrategy(AssessmentStrategy):
    """Scenario-based assessment over the scenario bank."""

    assessment_type = AssessmentType.SCENARIO_BASED

    scenarios = SCENARIOS
    scenario_choices = SCENARIO_CHOICES

    def initialize_questions(self) -> list[Question]:
        return [self.build_question(scenario) for scenario in self.scenarios]

    def build_question(self, scenario: Scenario) -> Question:
        choices = self.scenario_choices.get(scenario.id, ())
        return Question(
            id=scenario.id,
            type=QuestionType.SCENARIO_SELECTION,
            text=format_scenario_text(scenario),
            options=tuple(choice.text for choice in choices),
            cultural_adaptations=build_cultural_renderings(scenario, choices),
            industry_specific=scenario.industry_specific,
        )

    def process_response(
        self,
        response: AssessmentResponse,
        current_question: Question,
        session: AssessmentSession,
    ) -> AssessmentSession:
        """Record the response, enriched with the matching choice when found."""
        selected_option = response.response_value
        choices = self.scenario_choices.get(response.question_id, ())
        options = current_question.options or ()

        if isinstance(selected_option, str) and selected_option in options:
            selected_index = options.index(selected_option)
            if selected_index < len(choices):
                choice = choices[selected_index]
                response = response.model_copy(
                    update={
                        "response_value": {
                            "selected_option": selected_option,
                            "choice_id": choice.id,
                            "reasoning": choice.reasoning,
                            "implications": list(choice.implications),
                            "persona_alignment": [str(p) for p in choice.persona_alignment],
                        }
                    }
                )

        return record_response(session, response)

    def determine_next_question(
        self, responses: Sequence[AssessmentResponse], current_index: int  # noqa: ARG002
    ) -> Question | None:
        answered = {r.question_id for r in responses}
        remaining = [s for s in self.scenarios if s.id not in answered]

        scenario = self.select_optimal_scenario(remaining, self.analyze_persona_alignment(responses))
        return self.build_question(scenario) if scenario is not None else None

    def analyze_persona_alignment(
        self, responses: Sequence[AssessmentResponse]
    ) -> dict[PersonaType, int]:
        """Tally persona alignment over the enriched scenario responses."""
        return tally_persona_alignment(responses)

    def select_optimal_scenario(
        self,
        remaining: Sequence[Scenario],
        persona_scores: dict[PersonaType, int],  # noqa: ARG002
    ) -> Scenario | None:
        # TODO: prefer scenarios whose choices separate the two leading personas
        return remaining[0] if remaining else None

    def persona_hint(self, responses: Sequence[AssessmentResponse]) -> PersonaType | None:
        return leading_persona(self.analyze_persona_alignment(responses))

    def apply_industry_adaptations(self, question: Question) -> Question:
        industry = self.industry
        if not industry or not question.industry_specific:
            return question

        substitution = INDUSTRY_SUBSTITUTIONS.get(industry)
        if substitution is None or substitution[0] != question.id:
            return question

        _, phrase, replacement = substitution
        return question.model_copy(update={"text": question.text.replace(phrase, replacement, 1)})
