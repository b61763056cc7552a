"""Tests for the HTTP Session Recorder and task client."""

import json

import httpx
import pytest

from pomotask.timer.recorder import (
    HttpSessionRecorder,
    HttpTaskClient,
    SessionRecorderError,
    TaskClientError,
    build_client,
    login,
)
from pomotask.timer.state import TimerMode

SESSION_JSON = {
    "id": "abc",
    "taskId": "t1",
    "durationSeconds": 1500,
    "type": "focus",
    "startedAt": "2026-10-19T09:00:00Z",
    "completed": False,
}


def make_client(handler):
    return httpx.AsyncClient(base_url="http://api.test", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_open_posts_session():
    """Test open sends camelCase payload and parses the session."""
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json=SESSION_JSON)

    async with make_client(handler) as client:
        session = await HttpSessionRecorder(client).open("t1", 1500, TimerMode.FOCUS)

    assert seen == {
        "method": "POST",
        "path": "/sessions/start",
        "body": {"taskId": "t1", "durationSeconds": 1500, "type": "focus"},
    }
    assert session.id == "abc"
    assert session.type is TimerMode.FOCUS
    assert session.completed is False


@pytest.mark.asyncio
async def test_complete_puts_session():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "PUT"
        assert request.url.path == "/sessions/abc/complete"
        return httpx.Response(200, json={**SESSION_JSON, "completed": True})

    async with make_client(handler) as client:
        session = await HttpSessionRecorder(client).complete("abc")

    assert session.completed is True


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [400, 404, 500])
async def test_http_errors_raise_recorder_error(status_code):
    """Test non-2xx responses surface as SessionRecorderError, no retry."""
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(status_code, json={"detail": "nope"})

    async with make_client(handler) as client:
        with pytest.raises(SessionRecorderError):
            await HttpSessionRecorder(client).complete("abc")

    assert len(calls) == 1


@pytest.mark.asyncio
async def test_network_error_raises_recorder_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    async with make_client(handler) as client:
        with pytest.raises(SessionRecorderError):
            await HttpSessionRecorder(client).open(None, 300, TimerMode.BREAK)


@pytest.mark.asyncio
async def test_complete_task_marks_task_done():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={})

    async with make_client(handler) as client:
        await HttpTaskClient(client).complete_task("t1")

    assert seen == {"path": "/tasks/t1", "body": {"completed": True}}


@pytest.mark.asyncio
async def test_complete_task_failure_raises():
    async with make_client(lambda request: httpx.Response(404)) as client:
        with pytest.raises(TaskClientError):
            await HttpTaskClient(client).complete_task("missing")


@pytest.mark.asyncio
async def test_login_sets_bearer_header():
    def handler(request):
        assert request.url.path == "/auth/login"
        return httpx.Response(200, json={"token": "jwt-token", "user": {}})

    async with make_client(handler) as client:
        token = await login(client, "me@example.com", "secret")

        assert token == "jwt-token"
        assert client.headers["Authorization"] == "Bearer jwt-token"


@pytest.mark.asyncio
async def test_build_client_headers():
    async with build_client("http://api.test/", token="abc") as client:
        assert client.headers["Authorization"] == "Bearer abc"
        assert client.base_url.host == "api.test"
