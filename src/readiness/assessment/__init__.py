"""
Assessment Module

Adaptive assessment engine: orchestrator, modality strategies, factory and
engine façade.
"""

from .engine import AssessmentEngine
from .exceptions import (
    AssessmentCompleteError,
    AssessmentError,
    InvalidResponseError,
    NoActiveSessionError,
    SessionClosedError,
    SessionExistsError,
    SessionNotFoundError,
    StaleSessionError,
    UnsupportedAssessmentTypeError,
)
from .factory import AssessmentFactory
from .orchestrator import AssessmentOrchestrator, AssessmentStrategy
from .signals import KeywordSignalExtractor, ResponseAnalysis, SignalExtractor
from .types import (
    AssessmentMetadata,
    AssessmentResponse,
    AssessmentSession,
    AssessmentType,
    NextQuestion,
    PersonaType,
    Progress,
    Question,
    QuestionType,
    ResponsePattern,
    SessionStatus,
    UserContext,
)

__all__ = [
    # Engine
    "AssessmentEngine",
    "AssessmentFactory",
    "AssessmentOrchestrator",
    "AssessmentStrategy",
    # Signals
    "KeywordSignalExtractor",
    "ResponseAnalysis",
    "SignalExtractor",
    # Types
    "AssessmentMetadata",
    "AssessmentResponse",
    "AssessmentSession",
    "AssessmentType",
    "NextQuestion",
    "PersonaType",
    "Progress",
    "Question",
    "QuestionType",
    "ResponsePattern",
    "SessionStatus",
    "UserContext",
    # Errors
    "AssessmentError",
    "AssessmentCompleteError",
    "InvalidResponseError",
    "NoActiveSessionError",
    "SessionClosedError",
    "SessionExistsError",
    "SessionNotFoundError",
    "StaleSessionError",
    "UnsupportedAssessmentTypeError",
]
