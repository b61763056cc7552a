"""Shared test fixtures.

Timer tests run against stub collaborators and a manual ticker; API tests
run against the FastAPI app with the CRUD layer patched out, so no MongoDB
is needed.
"""

from typing import List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from pomotask.api.deps import get_current_user_id
from pomotask.main import app
from pomotask.timer.controller import FocusTimer
from pomotask.timer.recorder import RecordedSession, SessionRecorderError, TaskClientError
from pomotask.timer.state import TimerDurations, TimerMode

TEST_USER_ID = "65f000000000000000000001"


# ---------------------------------------------------------------------------
# Timer collaborators
# ---------------------------------------------------------------------------


class ManualTicker:
    """Ticker stand-in: records start/stop, ticks only when the test calls tick()."""

    def __init__(self, callback):
        self.callback = callback
        self.running = False
        self.starts = 0
        self.stops = 0

    def start(self):
        if not self.running:
            self.starts += 1
        self.running = True

    def stop(self):
        if self.running:
            self.stops += 1
        self.running = False


class StubRecorder:
    """In-memory Session Recorder that can be told to fail."""

    def __init__(self, fail_open: bool = False, fail_complete: bool = False):
        self.fail_open = fail_open
        self.fail_complete = fail_complete
        self.opened: List[Tuple[Optional[str], int, TimerMode]] = []
        self.completed: List[str] = []

    async def open(self, task_id, duration_seconds, session_type):
        self.opened.append((task_id, duration_seconds, session_type))
        if self.fail_open:
            raise SessionRecorderError("backend unreachable")
        return RecordedSession(
            id=f"session-{len(self.opened)}",
            task_id=task_id,
            duration_seconds=duration_seconds,
            type=session_type,
        )

    async def complete(self, session_id):
        self.completed.append(session_id)
        if self.fail_complete:
            raise SessionRecorderError("backend unreachable")
        return RecordedSession(id=session_id, duration_seconds=1, type=TimerMode.FOCUS, completed=True)


class StubTasks:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.completed: List[str] = []

    async def complete_task(self, task_id):
        self.completed.append(task_id)
        if self.fail:
            raise TaskClientError("backend unreachable")


@pytest.fixture
def recorder():
    return StubRecorder()


@pytest.fixture
def task_client():
    return StubTasks()


@pytest.fixture
def failing_recorder():
    return StubRecorder(fail_open=True, fail_complete=True)


@pytest.fixture
def failing_task_client():
    return StubTasks(fail=True)


@pytest.fixture
def durations():
    return TimerDurations(focus=1500, break_=300)


@pytest.fixture
def make_timer(durations):
    """Build a FocusTimer wired to a ManualTicker; returns (timer, ticker)."""

    def _make(recorder, tasks, **kwargs):
        tickers = []

        def factory(callback):
            ticker = ManualTicker(callback)
            tickers.append(ticker)
            return ticker

        timer = FocusTimer(recorder, tasks, durations=kwargs.get("durations", durations),
                           ticker_factory=factory)
        return timer, tickers[0]

    return _make


# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------


@pytest.fixture
def client():
    """TestClient with authentication short-circuited to TEST_USER_ID."""
    app.dependency_overrides[get_current_user_id] = lambda: TEST_USER_ID
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def anon_client():
    return TestClient(app)


@pytest.fixture
def user_id():
    return TEST_USER_ID
