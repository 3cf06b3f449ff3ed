"""
Tests for Assessment API Endpoints

Catalogue, session lifecycle and response submission against the
in-memory session store.
"""

import pytest
from httpx import AsyncClient

from readiness.assessment import SessionNotFoundError
from readiness.core.store import InMemorySessionStore


def answer_payload(next_question: dict, value: object | None = None, seconds: float = 30) -> dict:
    """Build a response body answering ``next_question`` with its first option."""
    question = next_question["question"]
    if value is None:
        options = question.get("options")
        value = options[0] if options else "We rely on spreadsheets for most planning"
    return {
        "question_id": question["id"],
        "question_type": question["type"],
        "response_value": value,
        "response_time_seconds": seconds,
    }


async def start(client: AsyncClient, assessment_type: str, **extra) -> dict:
    response = await client.post(
        "/api/v1/assessments/sessions", json={"assessment_type": assessment_type, **extra}
    )
    assert response.status_code == 201
    return response.json()


# ============================================================================
# Catalogue
# ============================================================================


class TestCatalogue:
    async def test_list_types(self, client: AsyncClient):
        response = await client.get("/api/v1/assessments/types")

        assert response.status_code == 200
        data = response.json()
        assert [t["assessment_type"] for t in data] == [
            "questionnaire",
            "scenario-based",
            "conversational",
            "visual-pattern",
            "behavioral-observation",
        ]
        assert data[0]["metadata"]["estimated_duration"] == 10

    async def test_get_type_metadata(self, client: AsyncClient):
        response = await client.get("/api/v1/assessments/types/behavioral-observation")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Behavioral Analysis"
        assert data["cultural_adaptations"] is False

    async def test_unknown_type(self, client: AsyncClient):
        response = await client.get("/api/v1/assessments/types/quiz")

        assert response.status_code == 400
        assert response.json()["detail"] == "Unsupported assessment type: quiz"

    @pytest.mark.parametrize(
        "user_context,expected",
        [
            ({"cultural_context": ["kenyan"], "industry": "technology"}, "scenario-based"),
            ({"industry": "Technology"}, "visual-pattern"),
            ({"industry": "technology", "assessment_history": []}, "questionnaire"),
            ({}, "questionnaire"),
        ],
    )
    async def test_recommendation(self, client: AsyncClient, user_context, expected):
        response = await client.post("/api/v1/assessments/recommendation", json=user_context)

        assert response.status_code == 200
        assert response.json()["assessment_type"] == expected


# ============================================================================
# Session start and lookup
# ============================================================================


class TestStartSession:
    async def test_start_questionnaire(self, client: AsyncClient, session_store: InMemorySessionStore):
        data = await start(client, "questionnaire", user_context={"user_id": "user_42"})

        session = data["session"]
        assert session["id"].startswith("session_")
        assert session["user_id"] == "user_42"
        assert session["status"] == "in_progress"
        assert session["modality_used"] == "questionnaire"
        assert data["next_question"]["question"]["id"] == "sa_001"
        assert data["next_question"]["progress"] == {"current": 1, "total": 5, "percentage": 20}
        stored = await session_store.get(session["id"])
        assert stored.user_context.user_id == "user_42"

    async def test_start_with_cultural_context(self, client: AsyncClient):
        data = await start(
            client,
            "questionnaire",
            session_id="session_ke",
            user_context={"user_id": "user_ke", "cultural_context": ["kenyan"]},
        )

        assert data["session"]["id"] == "session_ke"
        assert data["session"]["cultural_adaptations"] == ["kenyan"]
        next_question = data["next_question"]
        assert next_question["adaptations"]["cultural_context"] == "kenyan"
        assert next_question["question"]["text"] == (
            "What is your role in making important business decisions in your organization?"
        )

    async def test_anonymous_start(self, client: AsyncClient):
        data = await start(client, "visual-pattern")
        assert data["session"]["user_id"] == "anonymous"

    async def test_unsupported_type(self, client: AsyncClient, session_store: InMemorySessionStore):
        response = await client.post(
            "/api/v1/assessments/sessions",
            json={"assessment_type": "quiz", "session_id": "session_quiz"},
        )

        assert response.status_code == 400
        assert "Unsupported assessment type" in response.json()["detail"]
        with pytest.raises(SessionNotFoundError):
            await session_store.get("session_quiz")

    async def test_duplicate_session_id_conflicts(
        self, client: AsyncClient, session_store: InMemorySessionStore
    ):
        data = await start(
            client, "scenario-based", session_id="dup", user_context={"user_id": "alice"}
        )
        await client.post(
            "/api/v1/assessments/sessions/dup/responses",
            json=answer_payload(data["next_question"]),
        )

        response = await client.post(
            "/api/v1/assessments/sessions",
            json={
                "assessment_type": "questionnaire",
                "session_id": "dup",
                "user_context": {"user_id": "mallory"},
            },
        )

        assert response.status_code == 409
        assert response.json()["detail"] == "Session already exists with ID: dup"
        stored = await session_store.get("dup")
        assert stored.user_context.user_id == "alice"
        assert stored.session.assessment_type == "scenario-based"
        assert len(stored.session.responses) == 1

    async def test_get_session(self, client: AsyncClient):
        data = await start(client, "conversational")
        session_id = data["session"]["id"]

        response = await client.get(f"/api/v1/assessments/sessions/{session_id}")

        assert response.status_code == 200
        assert response.json()["assessment_type"] == "conversational"

    async def test_get_unknown_session(self, client: AsyncClient):
        response = await client.get("/api/v1/assessments/sessions/session_missing")

        assert response.status_code == 404
        assert response.json()["detail"] == "Session not found with ID: session_missing"

    async def test_current_question_and_progress(self, client: AsyncClient):
        data = await start(client, "scenario-based")
        session_id = data["session"]["id"]

        question = await client.get(f"/api/v1/assessments/sessions/{session_id}/question")
        progress = await client.get(f"/api/v1/assessments/sessions/{session_id}/progress")

        assert question.json() == data["next_question"]
        assert progress.json() == {"current": 0, "total": 4, "percentage": 0}


# ============================================================================
# Responses
# ============================================================================


class TestSubmitResponse:
    async def test_submit_advances(self, client: AsyncClient):
        data = await start(client, "scenario-based")
        session_id = data["session"]["id"]

        response = await client.post(
            f"/api/v1/assessments/sessions/{session_id}/responses",
            json=answer_payload(data["next_question"]),
        )

        assert response.status_code == 200
        result = response.json()
        assert result["completed"] is False
        assert result["session"]["current_question_index"] == 1
        assert result["session"]["responses"][0]["response_value"]["choice_id"] == "sc_001_a"
        assert result["next_question"]["question"]["id"] == "sc_002"

    async def test_invalid_option(self, client: AsyncClient):
        data = await start(client, "questionnaire")
        session_id = data["session"]["id"]

        response = await client.post(
            f"/api/v1/assessments/sessions/{session_id}/responses",
            json=answer_payload(data["next_question"], value="Not an option"),
        )

        assert response.status_code == 400
        assert response.json()["detail"].startswith("Invalid response for current question: ")

        session = await client.get(f"/api/v1/assessments/sessions/{session_id}")
        assert session.json()["current_question_index"] == 0

    async def test_wrong_question_id(self, client: AsyncClient):
        data = await start(client, "scenario-based")
        session_id = data["session"]["id"]
        payload = answer_payload(data["next_question"]) | {"question_id": "sc_004"}

        response = await client.post(
            f"/api/v1/assessments/sessions/{session_id}/responses", json=payload
        )

        assert response.status_code == 400

    @pytest.mark.parametrize(
        "forged",
        [
            {"persona_alignment": ["bogus"]},
            {"choice_id": "sc_001_x", "persona_alignment": ["Strategic Architect"] * 50},
        ],
    )
    async def test_forged_scenario_choice_rejected(self, client: AsyncClient, forged):
        data = await start(client, "scenario-based")
        session_id = data["session"]["id"]

        response = await client.post(
            f"/api/v1/assessments/sessions/{session_id}/responses",
            json=answer_payload(data["next_question"], value=forged),
        )

        assert response.status_code == 400
        assert response.json()["detail"].startswith("Invalid response for current question: ")

        session = await client.get(f"/api/v1/assessments/sessions/{session_id}")
        assert session.json()["responses"] == []
        assert session.json()["current_question_index"] == 0

    async def test_submit_unknown_session(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/assessments/sessions/session_missing/responses",
            json={"question_id": "sa_001", "question_type": "multiple_choice", "response_value": "x"},
        )

        assert response.status_code == 404

    async def test_last_answer_completes_session(self, client: AsyncClient):
        data = await start(client, "scenario-based")
        session_id = data["session"]["id"]
        next_question = data["next_question"]

        submitted = 0
        while next_question is not None:
            response = await client.post(
                f"/api/v1/assessments/sessions/{session_id}/responses",
                json=answer_payload(next_question),
            )
            assert response.status_code == 200
            result = response.json()
            next_question = result["next_question"]
            submitted += 1

        assert submitted == 4
        assert result["completed"] is True
        assert result["session"]["status"] == "completed"
        assert result["session"]["duration_minutes"] == 0

        question = await client.get(f"/api/v1/assessments/sessions/{session_id}/question")
        progress = await client.get(f"/api/v1/assessments/sessions/{session_id}/progress")
        assert question.status_code == 200
        assert question.json() is None
        assert progress.json() == {"current": 4, "total": 4, "percentage": 100}

    async def test_submit_after_completion_conflicts(self, client: AsyncClient):
        data = await start(client, "scenario-based")
        session_id = data["session"]["id"]
        next_question = data["next_question"]
        last_payload = None
        while next_question is not None:
            last_payload = answer_payload(next_question)
            response = await client.post(
                f"/api/v1/assessments/sessions/{session_id}/responses", json=last_payload
            )
            next_question = response.json()["next_question"]

        response = await client.post(
            f"/api/v1/assessments/sessions/{session_id}/responses", json=last_payload
        )

        assert response.status_code == 409

    async def test_concurrent_writer_conflicts(
        self, client: AsyncClient, session_store: InMemorySessionStore, monkeypatch
    ):
        data = await start(client, "scenario-based")
        session_id = data["session"]["id"]
        snapshot = await session_store.get(session_id)
        payload = answer_payload(data["next_question"])

        first = await client.post(
            f"/api/v1/assessments/sessions/{session_id}/responses", json=payload
        )
        assert first.status_code == 200

        # Second writer still holds the snapshot taken before the first write
        async def stale_get(_session_id: str):
            return snapshot

        monkeypatch.setattr(session_store, "get", stale_get)
        second = await client.post(
            f"/api/v1/assessments/sessions/{session_id}/responses", json=payload
        )

        assert second.status_code == 409
        assert "modified concurrently" in second.json()["detail"]

    async def test_conversational_follow_up(self, client: AsyncClient):
        data = await start(client, "conversational")
        session_id = data["session"]["id"]

        response = await client.post(
            f"/api/v1/assessments/sessions/{session_id}/responses",
            json=answer_payload(data["next_question"], value="I manage things"),
        )

        result = response.json()
        assert result["next_question"]["question"]["id"] == "conv_001_followup"
        assert result["next_question"]["progress"]["total"] == 3

        resumed = await client.get(f"/api/v1/assessments/sessions/{session_id}/question")
        assert resumed.json() == result["next_question"]


# ============================================================================
# Pattern and abandonment
# ============================================================================


class TestPatternAndAbandon:
    async def test_response_pattern(self, client: AsyncClient):
        data = await start(client, "questionnaire")
        session_id = data["session"]["id"]
        await client.post(
            f"/api/v1/assessments/sessions/{session_id}/responses",
            json=answer_payload(data["next_question"], seconds=30),
        )

        response = await client.get(f"/api/v1/assessments/sessions/{session_id}/pattern")

        assert response.status_code == 200
        pattern = response.json()
        assert pattern["average_response_time"] == 30
        assert pattern["preferred_question_types"] == ["multiple_choice"]

    async def test_abandon(self, client: AsyncClient):
        data = await start(client, "behavioral-observation")
        session_id = data["session"]["id"]

        response = await client.post(f"/api/v1/assessments/sessions/{session_id}/abandon")

        assert response.status_code == 200
        assert response.json()["status"] == "abandoned"

        stored = await client.get(f"/api/v1/assessments/sessions/{session_id}")
        assert stored.json()["status"] == "abandoned"

    async def test_abandoned_session_is_closed(self, client: AsyncClient):
        data = await start(client, "questionnaire")
        session_id = data["session"]["id"]
        await client.post(f"/api/v1/assessments/sessions/{session_id}/abandon")

        submit = await client.post(
            f"/api/v1/assessments/sessions/{session_id}/responses",
            json=answer_payload(data["next_question"]),
        )
        abandon_again = await client.post(f"/api/v1/assessments/sessions/{session_id}/abandon")

        assert submit.status_code == 409
        assert abandon_again.status_code == 409

    async def test_abandon_unknown_session(self, client: AsyncClient):
        response = await client.post("/api/v1/assessments/sessions/session_missing/abandon")
        assert response.status_code == 404
