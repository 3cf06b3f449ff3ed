"""
Session Stores

Persistence for assessment sessions between requests. The engine itself is
stateless across calls; the HTTP layer loads a session, resumes an engine
over it, and saves the new value with the question index it started from.

A save whose ``expected_index`` no longer matches the stored index means
another writer advanced the session first, and is rejected with
StaleSessionError instead of silently overwriting responses. Adding a
session under an id that is already stored raises SessionExistsError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from readiness.assessment.exceptions import (
    SessionExistsError,
    SessionNotFoundError,
    StaleSessionError,
)
from readiness.assessment.types import AssessmentSession, UserContext
from readiness.core.models import AssessmentSessionRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredAssessment:
    """A persisted session together with the context it was started with."""

    session: AssessmentSession
    user_context: UserContext


class SessionStore(Protocol):
    async def get(self, session_id: str) -> StoredAssessment: ...

    async def add(self, session: AssessmentSession, user_context: UserContext) -> None: ...

    async def save(self, session: AssessmentSession, expected_index: int) -> None: ...


class InMemorySessionStore:
    """Process-local store for development and tests."""

    def __init__(self) -> None:
        self._sessions: dict[str, StoredAssessment] = {}

    async def get(self, session_id: str) -> StoredAssessment:
        stored = self._sessions.get(session_id)
        if stored is None:
            raise SessionNotFoundError(session_id)
        return stored

    async def add(self, session: AssessmentSession, user_context: UserContext) -> None:
        if session.id in self._sessions:
            logger.warning(f"Rejected duplicate session id {session.id}")
            raise SessionExistsError(session.id)
        self._sessions[session.id] = StoredAssessment(session=session, user_context=user_context)

    async def save(self, session: AssessmentSession, expected_index: int) -> None:
        stored = await self.get(session.id)
        actual_index = stored.session.current_question_index
        if actual_index != expected_index:
            logger.warning(
                f"Stale write to session {session.id}: "
                f"expected index {expected_index}, found {actual_index}"
            )
            raise StaleSessionError(session.id, expected_index, actual_index)

        self._sessions[session.id] = StoredAssessment(
            session=session, user_context=stored.user_context
        )


class DatabaseSessionStore:
    """Store backed by the ``assessment_sessions`` table.

    Transaction boundaries belong to the caller (``get_db`` commits at the
    end of the request); this store only flushes.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _load(self, session_id: str, for_update: bool = False) -> AssessmentSessionRecord:
        query = select(AssessmentSessionRecord).where(AssessmentSessionRecord.id == session_id)
        if for_update:
            query = query.with_for_update()

        result = await self.db.execute(query)
        record = result.scalar_one_or_none()
        if record is None:
            raise SessionNotFoundError(session_id)
        return record

    async def get(self, session_id: str) -> StoredAssessment:
        record = await self._load(session_id)
        return StoredAssessment(session=record.to_session(), user_context=record.to_user_context())

    async def add(self, session: AssessmentSession, user_context: UserContext) -> None:
        existing = await self.db.get(AssessmentSessionRecord, session.id)
        if existing is not None:
            logger.warning(f"Rejected duplicate session id {session.id}")
            raise SessionExistsError(session.id)

        self.db.add(AssessmentSessionRecord.from_session(session, user_context))
        await self._flush(session.id)

    async def save(self, session: AssessmentSession, expected_index: int) -> None:
        record = await self._load(session.id, for_update=True)
        if record.current_question_index != expected_index:
            logger.warning(
                f"Stale write to session {session.id}: "
                f"expected index {expected_index}, found {record.current_question_index}"
            )
            raise StaleSessionError(session.id, expected_index, record.current_question_index)

        record.apply(session)
        await self._flush(session.id)

    async def _flush(self, session_id: str) -> None:
        try:
            await self.db.flush()
        except SQLAlchemyError as e:
            logger.error(f"Failed to persist session {session_id}: {e}")
            raise
