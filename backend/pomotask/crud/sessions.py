# backend/pomotask/crud/sessions.py

import logging
import math
from datetime import date
from typing import Dict, Iterable, List, Optional

from fastapi import HTTPException, status

from pomotask.crud import tasks as task_crud
from pomotask.crud.common import _day_bounds, _percent, _safe_object_id, _utcnow
from pomotask.db.mongo import get_db
from pomotask.models.session import SessionInDB
from pomotask.schemas.session import (
    SessionCreate,
    SessionHistory,
    SessionHistoryItem,
    SessionRead,
    SessionStats,
)

logger = logging.getLogger(__name__)


def get_sessions_collection():
    """
    'sessions' collection from the Motor handle.
    """
    return get_db()["sessions"]


def serialize_session(session) -> SessionRead:
    """
    Mongo document(dict) -> SessionRead
    """
    return SessionRead(
        id=str(session["_id"]),
        task_id=session.get("task_id"),
        duration_seconds=session["duration_seconds"],
        type=session["type"],
        started_at=session["started_at"],
        completed=bool(session.get("completed", False)),
    )


def focus_minutes(duration_seconds: int) -> int:
    """
    Minutes credited to a task for one completed focus session.
    """
    return math.ceil(duration_seconds / 60)


def compute_session_stats(sessions: Iterable[SessionRead]) -> SessionStats:
    sessions = list(sessions)
    focus = [s for s in sessions if s.type == "focus"]
    breaks = [s for s in sessions if s.type == "break"]
    completed_focus = sum(1 for s in focus if s.completed)

    return SessionStats(
        total_sessions=len(sessions),
        focus_sessions=len(focus),
        break_sessions=len(breaks),
        completed_focus_sessions=completed_focus,
        total_focus_time_seconds=sum(s.duration_seconds for s in focus),
        total_break_time_seconds=sum(s.duration_seconds for s in breaks),
        completion_rate=_percent(completed_focus, len(focus)),
    )


# CREATE (START)
async def start_session(user_id: str, data: SessionCreate) -> SessionRead:
    col = get_sessions_collection()

    if data.task_id is not None:
        task = await task_crud.get_task(user_id, data.task_id)
        if task is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")

    doc = SessionInDB(
        user_id=user_id,
        task_id=data.task_id,
        duration_seconds=data.duration_seconds,
        type=data.type,
        started_at=_utcnow(),
    ).model_dump(exclude={"id"})

    result = await col.insert_one(doc)
    created = await col.find_one({"_id": result.inserted_id})
    if not created:
        raise HTTPException(status_code=500, detail="Failed to create session")
    return serialize_session(created)


# READ ONE
async def get_session(user_id: str, session_id: str) -> Optional[SessionRead]:
    oid = _safe_object_id(session_id)
    if oid is None:
        return None
    session = await get_sessions_collection().find_one({"_id": oid, "user_id": user_id})
    return serialize_session(session) if session else None


# COMPLETE
async def complete_session(user_id: str, session_id: str) -> Optional[SessionRead]:
    """
    Marks a session complete. The False -> True flip is a single conditional
    update, so only one caller ever wins it and accrues focus time.
    Completing an already completed session returns it unchanged.
    """
    oid = _safe_object_id(session_id)
    if oid is None:
        return None

    col = get_sessions_collection()
    existing = await col.find_one({"_id": oid, "user_id": user_id})
    if not existing:
        return None

    result = await col.update_one(
        {"_id": oid, "user_id": user_id, "completed": False},
        {"$set": {"completed": True}},
    )
    session = serialize_session({**existing, "completed": True})

    if result.modified_count == 1 and session.type == "focus" and session.task_id:
        minutes = focus_minutes(session.duration_seconds)
        accrued = await task_crud.add_actual_minutes(user_id, session.task_id, minutes)
        if not accrued:
            logger.warning("Session %s completed but task %s is gone", session.id, session.task_id)

    return session


# HISTORY (one day)
async def get_session_history(user_id: str, day: date) -> SessionHistory:
    start, end = _day_bounds(day)
    cursor = get_sessions_collection().find(
        {"user_id": user_id, "started_at": {"$gte": start, "$lt": end}}
    ).sort("started_at", -1)
    docs = await cursor.to_list(length=None)
    sessions = [serialize_session(d) for d in docs]

    task_ids = {_safe_object_id(s.task_id) for s in sessions if s.task_id} - {None}
    texts: Dict[str, str] = {}
    if task_ids:
        async for task in task_crud.get_tasks_collection().find(
            {"_id": {"$in": list(task_ids)}, "user_id": user_id}
        ):
            texts[str(task["_id"])] = task["text"]

    items: List[SessionHistoryItem] = [
        SessionHistoryItem(**s.model_dump(), task_text=texts.get(s.task_id) if s.task_id else None)
        for s in sessions
    ]
    return SessionHistory(sessions=items, stats=compute_session_stats(sessions))
