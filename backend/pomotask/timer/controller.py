# backend/pomotask/timer/controller.py

import asyncio
import logging
from typing import Callable, List, Optional, Set

from pomotask.timer.recorder import (
    SessionRecorder,
    SessionRecorderError,
    TaskClientError,
    TaskCompleter,
)
from pomotask.timer.state import (
    CompleteSession,
    CompleteTask,
    DeselectTask,
    Effect,
    Event,
    OpenSession,
    Pause,
    Reset,
    SelectTask,
    SessionOpened,
    Start,
    SwitchMode,
    TaskRemoved,
    Tick,
    TimerDurations,
    TimerMode,
    TimerState,
    initial_state,
    transition,
)
from pomotask.timer.ticker import Ticker

logger = logging.getLogger(__name__)

Listener = Callable[[TimerState], None]


class FocusTimer:
    """
    Owns the single TimerState of a client and drives it.

    - every user action and tick goes through ``dispatch``
    - the ticker runs exactly while ``state.running`` is true
    - recorder and task calls are fire-and-forget: failures are logged and
      never change the countdown or the mode switching
    - listeners get the new state after every change (UI re-render hook)
    """

    def __init__(
        self,
        recorder: SessionRecorder,
        tasks: TaskCompleter,
        durations: TimerDurations = TimerDurations(),
        ticker_factory: Callable[[Callable[[], None]], Ticker] = Ticker,
    ):
        self.recorder = recorder
        self.tasks = tasks
        self.durations = durations

        self._state = initial_state(durations)
        self._ticker = ticker_factory(self.tick)
        self._listeners: List[Listener] = []
        self._pending: Set[asyncio.Task] = set()
        self._closed = False

    @property
    def state(self) -> TimerState:
        return self._state

    # ----- Listeners -----
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ----- Public API -----
    def start(self) -> None:
        self.dispatch(Start())

    def pause(self) -> None:
        self.dispatch(Pause())

    def toggle(self) -> None:
        self.dispatch(Pause() if self._state.running else Start())

    def reset(self) -> None:
        self.dispatch(Reset())

    def tick(self) -> None:
        self.dispatch(Tick())

    def select_task(self, task_id: str) -> None:
        self.dispatch(SelectTask(task_id))

    def deselect_task(self) -> None:
        self.dispatch(DeselectTask())

    def switch_mode(self, mode: TimerMode) -> None:
        self.dispatch(SwitchMode(TimerMode(mode)))

    def task_removed(self, task_id: str) -> None:
        self.dispatch(TaskRemoved(task_id))

    def dispatch(self, event: Event) -> TimerState:
        previous = self._state
        self._state, effects = transition(previous, event, self.durations)

        if self._state.running and not self._closed:
            self._ticker.start()
        else:
            self._ticker.stop()

        if self._state.mode is not previous.mode and isinstance(event, Tick):
            logger.info("Phase %s finished, now %s", previous.mode.value, self._state.mode.value)

        for effect in effects:
            self._spawn(self._run_effect(effect))

        if self._state is not previous:
            self._notify()
        return self._state

    async def drain(self) -> None:
        """Wait until no recorder/task call is in flight."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def aclose(self) -> None:
        """
        Pause, stop ticking for good and wait for in-flight calls.
        Responses landing during the drain can no longer restart the ticker.
        """
        self._closed = True
        self.dispatch(Pause())
        self._ticker.stop()
        await self.drain()
        self._ticker.stop()

    # ----- Internals -----
    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._state)

    def _spawn(self, coro) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _run_effect(self, effect: Effect) -> None:
        if isinstance(effect, OpenSession):
            await self._open_session(effect)
        elif isinstance(effect, CompleteSession):
            await self._complete_session(effect)
        elif isinstance(effect, CompleteTask):
            await self._complete_task(effect)

    async def _open_session(self, effect: OpenSession) -> None:
        try:
            session = await self.recorder.open(
                effect.task_id, effect.duration_seconds, effect.session_type
            )
        except SessionRecorderError as e:
            logger.warning("Could not open %s session, timer keeps running: %s",
                           effect.session_type.value, e)
            return
        except Exception:
            logger.exception("Recorder failed opening a %s session", effect.session_type.value)
            return

        state = self.dispatch(SessionOpened(session.id, effect.epoch))
        if state.current_session_id != session.id:
            logger.debug("Dropped stale session %s (phase moved on)", session.id)

    async def _complete_session(self, effect: CompleteSession) -> None:
        try:
            await self.recorder.complete(effect.session_id)
        except SessionRecorderError as e:
            logger.warning("Could not complete session %s: %s", effect.session_id, e)
            return
        except Exception:
            logger.exception("Recorder failed completing session %s", effect.session_id)
            return
        logger.info("Session %s completed", effect.session_id)

    async def _complete_task(self, effect: CompleteTask) -> None:
        try:
            await self.tasks.complete_task(effect.task_id)
        except TaskClientError as e:
            logger.warning("Could not mark task %s completed: %s", effect.task_id, e)
            return
        except Exception:
            logger.exception("Task client failed completing task %s", effect.task_id)
            return
        logger.info("Task %s completed by focus session", effect.task_id)
