# backend/pomotask/timer/state.py
"""
Focus/break timer as a plain state object and a pure transition function.

Nothing in here does I/O. ``transition`` returns the next state together
with the side effects the caller should carry out (open or complete a
session, mark a task done); the controller in ``timer.controller`` runs
them and drives ``Tick`` events from a ticker.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Tuple, Union


class TimerMode(str, Enum):
    FOCUS = "focus"
    BREAK = "break"


class TimerStatus(str, Enum):
    IDLE_FOCUS = "idle_focus"
    RUNNING_FOCUS = "running_focus"
    IDLE_BREAK = "idle_break"
    RUNNING_BREAK = "running_break"


@dataclass(frozen=True)
class TimerDurations:
    focus: int = 25 * 60
    break_: int = 5 * 60

    def __post_init__(self):
        if self.focus <= 0 or self.break_ <= 0:
            raise ValueError("phase durations must be positive")

    def for_mode(self, mode: TimerMode) -> int:
        return self.focus if mode is TimerMode.FOCUS else self.break_


@dataclass(frozen=True)
class TimerState:
    remaining_seconds: int
    total_seconds: int
    mode: TimerMode = TimerMode.FOCUS
    running: bool = False
    completed_focus_count: int = 0
    active_task_id: Optional[str] = None
    current_session_id: Optional[str] = None
    # bumped every time a phase is (re)initialised or freshly started;
    # session-open responses carrying an older epoch are stale
    phase_epoch: int = 0

    @property
    def status(self) -> TimerStatus:
        if self.mode is TimerMode.FOCUS:
            return TimerStatus.RUNNING_FOCUS if self.running else TimerStatus.IDLE_FOCUS
        return TimerStatus.RUNNING_BREAK if self.running else TimerStatus.IDLE_BREAK

    @property
    def is_break(self) -> bool:
        return self.mode is TimerMode.BREAK

    @property
    def is_fresh(self) -> bool:
        """True until the current phase has consumed any time."""
        return self.remaining_seconds == self.total_seconds

    @property
    def progress(self) -> float:
        return 1.0 - self.remaining_seconds / self.total_seconds

    def format_remaining(self) -> str:
        mins, secs = divmod(self.remaining_seconds, 60)
        return f"{mins:02d}:{secs:02d}"


def initial_state(durations: TimerDurations = TimerDurations()) -> TimerState:
    return TimerState(remaining_seconds=durations.focus, total_seconds=durations.focus)


# ----- Events -----

@dataclass(frozen=True)
class Start:
    pass


@dataclass(frozen=True)
class Pause:
    pass


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class SelectTask:
    task_id: str


@dataclass(frozen=True)
class DeselectTask:
    pass


@dataclass(frozen=True)
class SwitchMode:
    mode: TimerMode


@dataclass(frozen=True)
class TaskRemoved:
    """The bound task was deleted or completed outside the timer."""
    task_id: str


@dataclass(frozen=True)
class SessionOpened:
    """Recorder response for the OpenSession issued in phase `epoch`."""
    session_id: str
    epoch: int


Event = Union[Start, Pause, Reset, Tick, SelectTask, DeselectTask, SwitchMode, TaskRemoved, SessionOpened]


# ----- Effects -----

@dataclass(frozen=True)
class OpenSession:
    task_id: Optional[str]
    duration_seconds: int
    session_type: TimerMode
    epoch: int


@dataclass(frozen=True)
class CompleteSession:
    session_id: str


@dataclass(frozen=True)
class CompleteTask:
    task_id: str


Effect = Union[OpenSession, CompleteSession, CompleteTask]


# ----- Transitions -----

def _reinitialise(state: TimerState, mode: TimerMode, durations: TimerDurations, **changes) -> TimerState:
    """Stopped, fresh phase for `mode`, no session attached."""
    total = durations.for_mode(mode)
    return replace(
        state,
        mode=mode,
        running=False,
        remaining_seconds=total,
        total_seconds=total,
        current_session_id=None,
        phase_epoch=state.phase_epoch + 1,
        **changes,
    )


def _expire(state: TimerState, durations: TimerDurations) -> Tuple[TimerState, List[Effect]]:
    effects: List[Effect] = []
    if state.current_session_id is not None:
        effects.append(CompleteSession(state.current_session_id))

    if state.mode is TimerMode.FOCUS:
        changes = {"completed_focus_count": state.completed_focus_count + 1}
        if state.active_task_id is not None:
            effects.append(CompleteTask(state.active_task_id))
            changes["active_task_id"] = None
        return _reinitialise(state, TimerMode.BREAK, durations, **changes), effects

    return _reinitialise(state, TimerMode.FOCUS, durations), effects


def transition(
    state: TimerState,
    event: Event,
    durations: TimerDurations = TimerDurations(),
) -> Tuple[TimerState, List[Effect]]:
    """
    Pure: returns (next_state, effects). Unknown or inapplicable events
    return the state unchanged with no effects.
    """
    if isinstance(event, Start):
        if state.running:
            return state, []
        if state.is_fresh and state.current_session_id is None:
            # a new phase: ask for a session record under a new epoch
            epoch = state.phase_epoch + 1
            started = replace(state, running=True, phase_epoch=epoch)
            return started, [OpenSession(
                task_id=state.active_task_id,
                duration_seconds=state.total_seconds,
                session_type=state.mode,
                epoch=epoch,
            )]
        # resuming a paused phase keeps whatever session it already has
        return replace(state, running=True), []

    if isinstance(event, Pause):
        if not state.running:
            return state, []
        return replace(state, running=False), []

    if isinstance(event, Reset):
        return _reinitialise(state, state.mode, durations), []

    if isinstance(event, Tick):
        if not state.running:
            return state, []
        if state.remaining_seconds <= 1:
            return _expire(state, durations)
        return replace(state, remaining_seconds=state.remaining_seconds - 1), []

    if isinstance(event, SelectTask):
        return _reinitialise(state, TimerMode.FOCUS, durations, active_task_id=event.task_id), []

    if isinstance(event, DeselectTask):
        if state.active_task_id is None:
            return state, []
        return replace(state, active_task_id=None), []

    if isinstance(event, SwitchMode):
        return _reinitialise(state, event.mode, durations), []

    if isinstance(event, TaskRemoved):
        if state.active_task_id != event.task_id:
            return state, []
        return replace(state, active_task_id=None), []

    if isinstance(event, SessionOpened):
        if event.epoch != state.phase_epoch or state.current_session_id is not None:
            return state, []
        return replace(state, current_session_id=event.session_id), []

    return state, []
