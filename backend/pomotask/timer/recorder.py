# backend/pomotask/timer/recorder.py
"""HTTP clients the focus timer uses to talk to the backend."""

from datetime import datetime
from typing import Optional, Protocol

import httpx
from pydantic import ValidationError

from pomotask.schemas.common import CamelModel
from pomotask.timer.state import TimerMode


class SessionRecorderError(Exception):
    """A session could not be opened or completed."""


class TaskClientError(Exception):
    """A task could not be marked completed."""


class RecordedSession(CamelModel):
    id: str
    task_id: Optional[str] = None
    duration_seconds: int
    type: TimerMode
    started_at: Optional[datetime] = None
    completed: bool = False


class SessionRecorder(Protocol):
    async def open(
        self,
        task_id: Optional[str],
        duration_seconds: int,
        session_type: TimerMode,
    ) -> RecordedSession:
        ...

    async def complete(self, session_id: str) -> RecordedSession:
        ...


class TaskCompleter(Protocol):
    async def complete_task(self, task_id: str) -> None:
        ...


def build_client(base_url: str, token: Optional[str] = None, timeout: float = 10.0) -> httpx.AsyncClient:
    """Async HTTP client for the backend, bearer-authenticated when a token is given."""
    headers = {
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return httpx.AsyncClient(base_url=base_url.rstrip("/"), headers=headers, timeout=timeout)


async def login(client: httpx.AsyncClient, email: str, password: str) -> str:
    """Exchange credentials for an access token and attach it to `client`."""
    response = await client.post("/auth/login", json={"email": email, "password": password})
    response.raise_for_status()
    token = response.json()["token"]
    client.headers["Authorization"] = f"Bearer {token}"
    return token


class HttpSessionRecorder:
    """Session Recorder backed by /sessions. No retries."""

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    async def open(
        self,
        task_id: Optional[str],
        duration_seconds: int,
        session_type: TimerMode,
    ) -> RecordedSession:
        payload = {
            "taskId": task_id,
            "durationSeconds": duration_seconds,
            "type": TimerMode(session_type).value,
        }
        return await self._send("POST", "/sessions/start", json=payload)

    async def complete(self, session_id: str) -> RecordedSession:
        return await self._send("PUT", f"/sessions/{session_id}/complete")

    async def _send(self, method: str, url: str, **kwargs) -> RecordedSession:
        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
            return RecordedSession.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            raise SessionRecorderError(
                f"{method} {url} failed with {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            raise SessionRecorderError(f"{method} {url} failed: {e}") from e


class HttpTaskClient:
    """Marks the bound task done when a focus phase completes."""

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    async def complete_task(self, task_id: str) -> None:
        try:
            response = await self._client.put(f"/tasks/{task_id}", json={"completed": True})
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TaskClientError(
                f"completing task {task_id} failed with {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise TaskClientError(f"completing task {task_id} failed: {e}") from e
