"""Tests for the /tasks endpoints (CRUD layer patched)."""

from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest

from pomotask.schemas.task import TaskHistoryRead, TaskRead, TaskStats

CREATED = datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc)


def task(**overrides) -> TaskRead:
    data = dict(id="t1", user_id="u1", text="Write report", priority="high",
                estimated_minutes=50, created_at=CREATED)
    data.update(overrides)
    return TaskRead(**data)


def test_create_task(client, user_id):
    mock_create = AsyncMock(return_value=task())
    with patch("pomotask.crud.tasks.create_task", mock_create):
        response = client.post("/tasks", json={
            "text": "  Write report ",
            "priority": "high",
            "estimatedMinutes": 50,
        })

    assert response.status_code == 201
    body = response.json()
    assert body["estimatedMinutes"] == 50
    assert body["actualMinutes"] == 0
    assert body["completedAt"] is None

    called_user, payload = mock_create.call_args.args
    assert called_user == user_id
    assert payload.text == "Write report"


@pytest.mark.parametrize("payload", [
    {"text": "   ", "priority": "high", "estimatedMinutes": 10},
    {"text": "x", "priority": "someday", "estimatedMinutes": 10},
    {"text": "x", "priority": "low", "estimatedMinutes": 0},
    {"priority": "low", "estimatedMinutes": 10},
])
def test_create_task_validation(client, payload):
    mock_create = AsyncMock()
    with patch("pomotask.crud.tasks.create_task", mock_create):
        response = client.post("/tasks", json=payload)

    assert response.status_code == 400
    assert response.json()["detail"]
    mock_create.assert_not_called()


def test_list_tasks(client):
    tasks = [task(id="a", priority="urgent"), task(id="b", priority="low")]
    with patch("pomotask.crud.tasks.get_tasks_for_day", AsyncMock(return_value=tasks)):
        response = client.get("/tasks")

    assert response.status_code == 200
    assert [t["id"] for t in response.json()] == ["a", "b"]


def test_read_missing_task_is_404(client):
    with patch("pomotask.crud.tasks.get_task", AsyncMock(return_value=None)):
        response = client.get("/tasks/not-an-id")

    assert response.status_code == 404


def test_update_task_completion(client, user_id):
    done = task(completed=True, completed_at=CREATED)
    mock_update = AsyncMock(return_value=done)
    with patch("pomotask.crud.tasks.update_task", mock_update):
        response = client.put("/tasks/t1", json={"completed": True})

    assert response.status_code == 200
    assert response.json()["completed"] is True
    called_user, task_id, payload = mock_update.call_args.args
    assert (called_user, task_id) == (user_id, "t1")
    assert payload.model_dump(exclude_unset=True) == {"completed": True}


def test_update_ignores_actual_minutes(client):
    """Test actualMinutes in an update body never reaches the store."""
    mock_update = AsyncMock(return_value=task())
    with patch("pomotask.crud.tasks.update_task", mock_update):
        response = client.put("/tasks/t1", json={"actualMinutes": 999, "text": "New"})

    assert response.status_code == 200
    payload = mock_update.call_args.args[2]
    assert payload.model_dump(exclude_unset=True) == {"text": "New"}


def test_update_missing_task_is_404(client):
    with patch("pomotask.crud.tasks.update_task", AsyncMock(return_value=None)):
        response = client.put("/tasks/t1", json={"completed": True})

    assert response.status_code == 404


def test_delete_task(client):
    with patch("pomotask.crud.tasks.delete_task", AsyncMock(return_value=True)):
        response = client.delete("/tasks/t1")

    assert response.status_code == 200
    assert response.json() == {"message": "Task deleted successfully"}


def test_delete_missing_task_is_404(client):
    with patch("pomotask.crud.tasks.delete_task", AsyncMock(return_value=False)):
        response = client.delete("/tasks/t1")

    assert response.status_code == 404


def test_history(client, user_id):
    rows = [TaskHistoryRead(id="h1", task_id="t1", date="2026-10-18", status="completed",
                            text="Write report", priority="high", estimated_minutes=50,
                            actual_minutes=25)]
    mock_history = AsyncMock(return_value=rows)
    with patch("pomotask.crud.tasks.get_task_history", mock_history):
        response = client.get("/tasks/history",
                              params={"startDate": "2026-10-12", "endDate": "2026-10-18"})

    assert response.status_code == 200
    assert response.json()[0]["taskId"] == "t1"
    mock_history.assert_awaited_once_with(user_id, date(2026, 10, 12), date(2026, 10, 18))


def test_history_rejects_reversed_range(client):
    response = client.get("/tasks/history",
                          params={"startDate": "2026-10-18", "endDate": "2026-10-12"})
    assert response.status_code == 400


def test_stats(client, user_id):
    stats = TaskStats(dates=["2026-10-19"], completed=[1], failed=[0],
                      in_progress=[1], completion_rate=[50])
    mock_stats = AsyncMock(return_value=stats)
    with patch("pomotask.crud.tasks.get_task_stats", mock_stats):
        response = client.get("/tasks/stats", params={"period": "week"})

    assert response.status_code == 200
    assert response.json()["inProgress"] == [1]
    assert response.json()["completionRate"] == [50]
    mock_stats.assert_awaited_once_with(user_id, "week")


def test_stats_rejects_unknown_period(client):
    response = client.get("/tasks/stats", params={"period": "year"})
    assert response.status_code == 400


def test_tasks_require_auth(anon_client):
    assert anon_client.get("/tasks").status_code == 401
