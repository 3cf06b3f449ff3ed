"""
Assessment Strategies

One strategy per assessment modality.
"""

from .behavioral import BehavioralStrategy
from .conversational import ConversationalStrategy
from .questionnaire import QuestionnaireStrategy
from .scenario import ScenarioStrategy
from .visual import VisualPatternStrategy

__all__ = [
    "BehavioralStrategy",
    "ConversationalStrategy",
    "QuestionnaireStrategy",
    "ScenarioStrategy",
    "VisualPatternStrategy",
]
