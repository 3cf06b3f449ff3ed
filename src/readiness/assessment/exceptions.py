"""
Assessment Exceptions

Contract and precondition violations raised by the assessment engine.
Callers translate these into 4xx-class responses.
"""


class AssessmentError(Exception):
    """Base class for assessment engine errors."""

    pass


class InvalidResponseError(AssessmentError):
    """Submitted response does not fit the question currently presented."""

    def __init__(self, reason: str | None = None):
        super().__init__("Invalid response for current question")
        self.reason = reason


class UnsupportedAssessmentTypeError(AssessmentError):
    def __init__(self, assessment_type: object):
        super().__init__(f"Unsupported assessment type: {assessment_type}")
        self.assessment_type = assessment_type


class NoActiveSessionError(AssessmentError):
    def __init__(self) -> None:
        super().__init__("No active assessment session")


class SessionNotFoundError(AssessmentError):
    def __init__(self, session_id: str):
        super().__init__(f"Session not found with ID: {session_id}")
        self.session_id = session_id


class SessionClosedError(AssessmentError):
    """Mutation attempted on a completed or abandoned session."""

    pass


class AssessmentCompleteError(AssessmentError):
    """Response submitted after the final question."""

    pass


class StaleSessionError(AssessmentError):
    """Session changed underneath the writer (optimistic concurrency)."""

    def __init__(self, session_id: str, expected_index: int, actual_index: int):
        super().__init__(
            f"Session {session_id} was modified concurrently "
            f"(expected question index {expected_index}, found {actual_index})"
        )
        self.session_id = session_id
        self.expected_index = expected_index
        self.actual_index = actual_index


class SessionExistsError(AssessmentError):
    """A session with the requested id has already been stored."""

    def __init__(self, session_id: str):
        super().__init__(f"Session already exists with ID: {session_id}")
        self.session_id = session_id
