"""
Integration Tests for the Database Session Store

Runs against a real PostgreSQL database; skipped when none is reachable.
"""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from readiness.assessment import (
    AssessmentEngine,
    AssessmentResponse,
    SessionExistsError,
    SessionNotFoundError,
    StaleSessionError,
    UserContext,
)
from readiness.core.models import AssessmentSessionRecord
from readiness.core.store import DatabaseSessionStore

pytestmark = pytest.mark.database


def first_option(next_question) -> AssessmentResponse:
    question = next_question.question
    return AssessmentResponse(
        question_id=question.id,
        question_type=question.type,
        response_value=question.options[0] if question.options else "We rely on spreadsheets",
        response_time_seconds=30,
    )


@pytest.fixture
def context() -> UserContext:
    return UserContext(user_id="user_db", industry="healthcare", cultural_context=("kenyan",))


class TestDatabaseSessionStore:
    async def test_add_and_get(self, db_session, context):
        store = DatabaseSessionStore(db_session)
        session, _ = AssessmentEngine().start_assessment("scenario-based", context)

        await store.add(session, context)
        stored = await store.get(session.id)

        assert stored.session == session
        assert stored.user_context == context

    async def test_duplicate_id_rejected(self, db_session, context):
        store = DatabaseSessionStore(db_session)
        session, _ = AssessmentEngine().start_assessment("scenario-based", context)
        await store.add(session, context)

        other, _ = AssessmentEngine().start_assessment(
            "questionnaire", UserContext(user_id="user_other"), session_id=session.id
        )
        with pytest.raises(SessionExistsError):
            await store.add(other, UserContext(user_id="user_other"))

        stored = await store.get(session.id)
        assert stored.session == session
        assert stored.user_context == context

    async def test_get_unknown(self, db_session):
        with pytest.raises(SessionNotFoundError):
            await DatabaseSessionStore(db_session).get("missing")

    async def test_save_persists_responses(self, db_session, context):
        store = DatabaseSessionStore(db_session)
        engine = AssessmentEngine()
        session, current = engine.start_assessment("scenario-based", context)
        await store.add(session, context)

        engine.submit_response(first_option(current))
        await store.save(engine.current_session, expected_index=0)

        result = await db_session.execute(
            select(AssessmentSessionRecord).where(AssessmentSessionRecord.id == session.id)
        )
        record = result.scalar_one()
        assert record.current_question_index == 1
        assert record.responses[0]["response_value"]["choice_id"] == "sc_001_a"

    async def test_stale_save_rejected(self, db_session, context):
        store = DatabaseSessionStore(db_session)
        engine = AssessmentEngine()
        session, current = engine.start_assessment("scenario-based", context)
        await store.add(session, context)
        engine.submit_response(first_option(current))
        await store.save(engine.current_session, expected_index=0)

        with pytest.raises(StaleSessionError):
            await store.save(engine.current_session, expected_index=0)

    async def test_resume_from_database(self, db_session, context):
        store = DatabaseSessionStore(db_session)
        engine = AssessmentEngine()
        session, current = engine.start_assessment("conversational", context)
        await store.add(session, context)
        expected_next = engine.submit_response(first_option(current))
        await store.save(engine.current_session, expected_index=0)

        stored = await store.get(session.id)
        resumed = AssessmentEngine().resume_assessment(stored.session, stored.user_context)

        assert resumed == expected_next

    async def test_invalid_status_rejected_by_constraint(self, db_session, context):
        session, _ = AssessmentEngine().start_assessment("questionnaire", context)
        record = AssessmentSessionRecord.from_session(session, context)
        record.status = "paused"
        db_session.add(record)

        with pytest.raises(IntegrityError):
            await db_session.flush()
