"""Tests for the /sessions endpoints (CRUD layer patched)."""

from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import HTTPException

from pomotask.schemas.session import SessionHistory, SessionRead, SessionStats

STARTED = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)


def session(**overrides) -> SessionRead:
    data = dict(id="s1", task_id="t1", duration_seconds=1500, type="focus",
                started_at=STARTED, completed=False)
    data.update(overrides)
    return SessionRead(**data)


def test_start_session_returns_201(client, user_id):
    """Test starting a session returns the camelCase record."""
    mock_start = AsyncMock(return_value=session())
    with patch("pomotask.crud.sessions.start_session", mock_start):
        response = client.post("/sessions/start",
                               json={"taskId": "t1", "durationSeconds": 1500, "type": "focus"})

    assert response.status_code == 201
    body = response.json()
    assert body == {
        "id": "s1",
        "taskId": "t1",
        "durationSeconds": 1500,
        "type": "focus",
        "startedAt": "2026-10-19T09:00:00Z",
        "completed": False,
    }
    called_user, payload = mock_start.call_args.args
    assert called_user == user_id
    assert payload.task_id == "t1"


def test_start_session_accepts_snake_case_and_no_task(client):
    mock_start = AsyncMock(return_value=session(task_id=None, type="break", duration_seconds=300))
    with patch("pomotask.crud.sessions.start_session", mock_start):
        response = client.post("/sessions/start", json={"duration_seconds": 300, "type": "break"})

    assert response.status_code == 201
    assert mock_start.call_args.args[1].task_id is None


@pytest.mark.parametrize("payload", [
    {"durationSeconds": 1500, "type": "nap"},
    {"type": "focus"},
    {"durationSeconds": 0, "type": "focus"},
    {"durationSeconds": 1500},
])
def test_start_session_validation_errors_are_400(client, payload):
    """Test invalid type or missing duration is rejected with 400."""
    mock_start = AsyncMock()
    with patch("pomotask.crud.sessions.start_session", mock_start):
        response = client.post("/sessions/start", json=payload)

    assert response.status_code == 400
    mock_start.assert_not_called()


def test_start_session_unknown_task_is_404(client):
    mock_start = AsyncMock(side_effect=HTTPException(status_code=404, detail="Task not found"))
    with patch("pomotask.crud.sessions.start_session", mock_start):
        response = client.post("/sessions/start",
                               json={"taskId": "nope", "durationSeconds": 60, "type": "focus"})

    assert response.status_code == 404
    assert response.json()["detail"] == "Task not found"


def test_complete_session(client, user_id):
    mock_complete = AsyncMock(return_value=session(completed=True))
    with patch("pomotask.crud.sessions.complete_session", mock_complete):
        response = client.put("/sessions/s1/complete")

    assert response.status_code == 200
    assert response.json()["completed"] is True
    mock_complete.assert_awaited_once_with(user_id, "s1")


def test_complete_missing_session_is_404(client):
    with patch("pomotask.crud.sessions.complete_session", AsyncMock(return_value=None)):
        response = client.put("/sessions/missing/complete")

    assert response.status_code == 404


def test_history(client, user_id):
    history = SessionHistory(
        sessions=[],
        stats=SessionStats(total_sessions=0),
    )
    mock_history = AsyncMock(return_value=history)
    with patch("pomotask.crud.sessions.get_session_history", mock_history):
        response = client.get("/sessions/history", params={"date": "2026-10-19"})

    assert response.status_code == 200
    assert response.json()["stats"] == {
        "totalSessions": 0,
        "focusSessions": 0,
        "breakSessions": 0,
        "completedFocusSessions": 0,
        "totalFocusTimeSeconds": 0,
        "totalBreakTimeSeconds": 0,
        "completionRate": 0,
    }
    mock_history.assert_awaited_once_with(user_id, date(2026, 10, 19))


@pytest.mark.parametrize("params", [{}, {"date": "19/10/2026"}])
def test_history_requires_valid_date(client, params):
    response = client.get("/sessions/history", params=params)
    assert response.status_code == 400


def test_sessions_require_auth(anon_client):
    response = anon_client.put("/sessions/s1/complete")
    assert response.status_code == 401
