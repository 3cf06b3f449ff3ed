"""
Readiness SQLAlchemy Models
"""

from .base import Base, TimestampMixin
from .sessions import AssessmentSessionRecord

__all__ = [
    "Base",
    "TimestampMixin",
    "AssessmentSessionRecord",
]
