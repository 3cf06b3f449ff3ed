"""
Assessment API Endpoints

Assessment catalogue, session start/resume, response submission and
abandonment. Every request builds a fresh AssessmentEngine, resumes it from
the session store and saves the new session value with the question index
it was loaded at.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, HTTPException, status

from readiness.assessment import (
    AssessmentEngine,
    AssessmentError,
    AssessmentMetadata,
    AssessmentResponse,
    AssessmentSession,
    InvalidResponseError,
    NextQuestion,
    Progress,
    ResponsePattern,
    SessionClosedError,
    SessionExistsError,
    SessionNotFoundError,
    StaleSessionError,
    UserContext,
)
from readiness.config import settings
from readiness.core.database import get_db
from readiness.core.schemas.assessments import (
    AssessmentSessionResponse,
    AssessmentTypeInfo,
    RecommendationResponse,
    StartAssessmentRequest,
    SubmitResponseResult,
)
from readiness.core.store import (
    DatabaseSessionStore,
    InMemorySessionStore,
    SessionStore,
    StoredAssessment,
)

router = APIRouter()

memory_store = InMemorySessionStore()


async def get_session_store() -> AsyncGenerator[SessionStore, None]:
    """Yield the configured session store.

    The database store shares one transaction per request via ``get_db``.
    """
    if settings.SESSION_STORE == "database":
        async with asynccontextmanager(get_db)() as db:
            yield DatabaseSessionStore(db)
    else:
        yield memory_store


def to_http_exception(error: AssessmentError) -> HTTPException:
    """Translate an engine error into the matching HTTP status."""
    if isinstance(error, SessionNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))

    if isinstance(error, SessionClosedError | SessionExistsError | StaleSessionError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))

    # InvalidResponse, UnsupportedAssessmentType, NoActiveSession, AssessmentComplete
    detail = str(error)
    if isinstance(error, InvalidResponseError) and error.reason:
        detail = f"{detail}: {error.reason}"
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


async def load_session(store: SessionStore, session_id: str) -> StoredAssessment:
    try:
        return await store.get(session_id)
    except SessionNotFoundError as e:
        raise to_http_exception(e) from e


def resume_engine(stored: StoredAssessment) -> tuple[AssessmentEngine, NextQuestion | None]:
    engine = AssessmentEngine()
    next_question = engine.resume_assessment(stored.session, stored.user_context)
    return engine, next_question


# ============================================================================
# Catalogue
# ============================================================================


@router.get("/types", response_model=list[AssessmentTypeInfo])
async def list_assessment_types() -> list[AssessmentTypeInfo]:
    """List available assessment types with their metadata."""
    return [
        AssessmentTypeInfo(
            assessment_type=assessment_type,
            metadata=AssessmentEngine.get_assessment_metadata(assessment_type),
        )
        for assessment_type in AssessmentEngine.get_available_assessment_types()
    ]


@router.get("/types/{assessment_type}", response_model=AssessmentMetadata)
async def get_assessment_type(assessment_type: str) -> AssessmentMetadata:
    """Get metadata for one assessment type."""
    try:
        return AssessmentEngine.get_assessment_metadata(assessment_type)
    except AssessmentError as e:
        raise to_http_exception(e) from e


@router.post("/recommendation", response_model=RecommendationResponse)
async def recommend_assessment_type(user_context: UserContext) -> RecommendationResponse:
    """Suggest an assessment type for a respondent."""
    return RecommendationResponse(
        assessment_type=AssessmentEngine.recommend_assessment_type(user_context)
    )


# ============================================================================
# Sessions
# ============================================================================


@router.post(
    "/sessions", response_model=AssessmentSessionResponse, status_code=status.HTTP_201_CREATED
)
async def start_assessment(
    request: StartAssessmentRequest, store: SessionStore = Depends(get_session_store)
) -> AssessmentSessionResponse:
    """Start a new assessment session and return its first question."""
    engine = AssessmentEngine()
    try:
        session, next_question = engine.start_assessment(
            request.assessment_type, request.user_context, request.session_id
        )
        await store.add(session, request.user_context)
    except AssessmentError as e:
        raise to_http_exception(e) from e

    return AssessmentSessionResponse(session=session, next_question=next_question)


@router.get("/sessions/{session_id}", response_model=AssessmentSession)
async def get_session(
    session_id: str, store: SessionStore = Depends(get_session_store)
) -> AssessmentSession:
    """Get assessment session details by ID."""
    stored = await load_session(store, session_id)
    return stored.session


@router.get("/sessions/{session_id}/question", response_model=NextQuestion | None)
async def get_current_question(
    session_id: str, store: SessionStore = Depends(get_session_store)
) -> NextQuestion | None:
    """Resume a session and return the question to present (None when finished)."""
    stored = await load_session(store, session_id)
    if stored.session.is_terminal:
        return None

    _, next_question = resume_engine(stored)
    return next_question


@router.get("/sessions/{session_id}/progress", response_model=Progress)
async def get_progress(
    session_id: str, store: SessionStore = Depends(get_session_store)
) -> Progress | None:
    """Get progress through the session's question list."""
    stored = await load_session(store, session_id)
    engine, _ = resume_engine(stored)
    return engine.get_progress()


@router.get("/sessions/{session_id}/pattern", response_model=ResponsePattern)
async def get_response_pattern(
    session_id: str, store: SessionStore = Depends(get_session_store)
) -> ResponsePattern:
    """Summarize response timing and engagement for a session."""
    stored = await load_session(store, session_id)
    engine, _ = resume_engine(stored)
    return engine.analyze_response_pattern()


@router.post("/sessions/{session_id}/responses", response_model=SubmitResponseResult)
async def submit_response(
    session_id: str,
    response: AssessmentResponse,
    store: SessionStore = Depends(get_session_store),
) -> SubmitResponseResult:
    """Submit an answer to the current question.

    When no question follows, the session is completed in the same request.
    """
    stored = await load_session(store, session_id)
    expected_index = stored.session.current_question_index

    try:
        engine, _ = resume_engine(stored)
        next_question = engine.submit_response(response)
        session = engine.complete_assessment() if next_question is None else engine.get_session()
        await store.save(session, expected_index)
    except AssessmentError as e:
        raise to_http_exception(e) from e

    return SubmitResponseResult(
        session=session,
        next_question=next_question,
        completed=next_question is None,
    )


@router.post("/sessions/{session_id}/abandon", response_model=AssessmentSession)
async def abandon_assessment(
    session_id: str, store: SessionStore = Depends(get_session_store)
) -> AssessmentSession:
    """Abandon an in-progress session."""
    stored = await load_session(store, session_id)
    expected_index = stored.session.current_question_index

    try:
        engine, _ = resume_engine(stored)
        session = engine.abandon_assessment()
        await store.save(session, expected_index)
    except AssessmentError as e:
        raise to_http_exception(e) from e

    return session
