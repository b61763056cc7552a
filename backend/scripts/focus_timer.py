"""
Terminal focus timer against a running Pomotask backend.

    python scripts/focus_timer.py --email me@example.com --password secret [--task <id>]

Enter toggles start/pause, "r" resets, "b"/"f" switch to break/focus,
"q" quits.
"""
import argparse
import asyncio
import os
import sys

# path setup when run from a source checkout
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from pomotask.core.config import settings
from pomotask.core.logging_config import configure_logging
from pomotask.timer.controller import FocusTimer
from pomotask.timer.recorder import HttpSessionRecorder, HttpTaskClient, build_client, login
from pomotask.timer.state import TimerDurations, TimerMode, TimerState


def render(state: TimerState) -> None:
    label = "BREAK" if state.is_break else "FOCUS"
    flag = "running" if state.running else "paused "
    task = f" task={state.active_task_id}" if state.active_task_id else ""
    sys.stdout.write(
        f"\r[{label}] {state.format_remaining()} {flag} "
        f"done={state.completed_focus_count}{task}   "
    )
    sys.stdout.flush()


async def read_commands(timer: FocusTimer) -> None:
    loop = asyncio.get_running_loop()
    while True:
        line = await loop.run_in_executor(None, sys.stdin.readline)
        cmd = line.strip().lower()
        if cmd in ("q", "quit") or line == "":
            return
        if cmd == "":
            timer.toggle()
        elif cmd == "r":
            timer.reset()
        elif cmd == "b":
            timer.switch_mode(TimerMode.BREAK)
        elif cmd == "f":
            timer.switch_mode(TimerMode.FOCUS)


async def main(args) -> None:
    configure_logging(settings.LOG_LEVEL)

    async with build_client(args.api, timeout=settings.API_TIMEOUT_SECONDS) as client:
        await login(client, args.email, args.password)

        timer = FocusTimer(
            HttpSessionRecorder(client),
            HttpTaskClient(client),
            durations=TimerDurations(
                focus=settings.FOCUS_DURATION_SECONDS,
                break_=settings.BREAK_DURATION_SECONDS,
            ),
        )
        timer.subscribe(render)
        if args.task:
            timer.select_task(args.task)
        render(timer.state)

        try:
            await read_commands(timer)
        finally:
            await timer.aclose()
            sys.stdout.write("\n")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Pomodoro focus timer")
    parser.add_argument("--api", default=settings.API_BASE_URL)
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--task", help="task id to bind to the first focus phase")
    asyncio.run(main(parser.parse_args()))
