# backend/pomotask/crud/tasks.py

import logging
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from pomotask.crud.common import (
    _day_bounds,
    _ensure_aware_utc,
    _percent,
    _safe_object_id,
    _today,
    _utcnow,
)
from pomotask.db.mongo import get_db
from pomotask.models.task import TaskHistoryInDB, TaskInDB
from pomotask.schemas.task import (
    PRIORITY_RANK,
    TaskCreate,
    TaskHistoryRead,
    TaskRead,
    TaskStats,
    TaskUpdate,
)

logger = logging.getLogger(__name__)

STATS_PERIOD_DAYS = {"day": 1, "week": 7, "month": 30}


def get_tasks_collection():
    return get_db()["tasks"]


def get_history_collection():
    return get_db()["task_history"]


def serialize_task(task) -> TaskRead:
    return TaskRead(
        id=str(task["_id"]),
        user_id=task["user_id"],
        text=task["text"],
        priority=task["priority"],
        estimated_minutes=task["estimated_minutes"],
        actual_minutes=task.get("actual_minutes", 0),
        created_at=task["created_at"],
        due_date=task.get("due_date"),
        completed=bool(task.get("completed", False)),
        completed_at=task.get("completed_at"),
    )


def _owned(user_id: str, task_id: str) -> Optional[dict]:
    """
    Filter matching a task only if it belongs to user_id.
    None when task_id is not a valid id.
    """
    oid = _safe_object_id(task_id)
    if oid is None:
        return None
    return {"_id": oid, "user_id": user_id}


def sort_tasks(tasks: Iterable[TaskRead]) -> List[TaskRead]:
    """
    Priority rank (urgent -> low), then creation time.
    """
    return sorted(tasks, key=lambda t: (PRIORITY_RANK.get(t.priority, len(PRIORITY_RANK)), t.created_at))


# ---------- HISTORY ----------

async def record_history(user_id: str, task_id: str, status: str, day: Optional[date] = None) -> None:
    """
    Upsert: at most one history row per task per day; the latest status wins.
    """
    day = day or _today()
    row = TaskHistoryInDB(task_id=task_id, user_id=user_id, date=day.isoformat(), status=status)
    await get_history_collection().update_one(
        {"task_id": row.task_id, "user_id": row.user_id, "date": row.date},
        {"$set": {"status": row.status}},
        upsert=True,
    )


async def get_task_history(user_id: str, start_date: date, end_date: date) -> List[TaskHistoryRead]:
    cursor = get_history_collection().find(
        {"user_id": user_id, "date": {"$gte": start_date.isoformat(), "$lte": end_date.isoformat()}}
    ).sort("date", -1)
    rows = await cursor.to_list(length=None)
    if not rows:
        return []

    task_ids = {_safe_object_id(r["task_id"]) for r in rows} - {None}
    tasks: Dict[str, dict] = {}
    async for doc in get_tasks_collection().find({"_id": {"$in": list(task_ids)}, "user_id": user_id}):
        tasks[str(doc["_id"])] = doc

    history = []
    for r in rows:
        task = tasks.get(r["task_id"])
        if task is None:
            # history of a deleted task
            continue
        history.append(TaskHistoryRead(
            id=str(r["_id"]),
            task_id=r["task_id"],
            date=r["date"],
            status=r["status"],
            text=task["text"],
            priority=task["priority"],
            estimated_minutes=task["estimated_minutes"],
            actual_minutes=task.get("actual_minutes", 0),
        ))
    return history


def build_task_stats(rows: Iterable[dict]) -> TaskStats:
    """
    rows: {"date", "status", "count"} sorted by date ascending.
    """
    per_day: Dict[str, Dict[str, int]] = {}
    for r in rows:
        per_day.setdefault(r["date"], {})[r["status"]] = r["count"]

    stats = TaskStats()
    for day, counts in per_day.items():
        completed = counts.get("completed", 0)
        failed = counts.get("failed", 0)
        in_progress = counts.get("in_progress", 0)
        total = completed + failed + in_progress

        stats.dates.append(day)
        stats.completed.append(completed)
        stats.failed.append(failed)
        stats.in_progress.append(in_progress)
        stats.completion_rate.append(_percent(completed, total))
    return stats


async def get_task_stats(user_id: str, period: str, today: Optional[date] = None) -> TaskStats:
    today = today or _today()
    start = today - timedelta(days=STATS_PERIOD_DAYS[period] - 1)

    pipeline = [
        {"$match": {"user_id": user_id, "date": {"$gte": start.isoformat(), "$lte": today.isoformat()}}},
        {"$group": {"_id": {"date": "$date", "status": "$status"}, "count": {"$sum": 1}}},
        {"$sort": {"_id.date": 1}},
    ]
    cursor = get_history_collection().aggregate(pipeline)
    grouped = await cursor.to_list(length=None)
    rows = [{"date": g["_id"]["date"], "status": g["_id"]["status"], "count": g["count"]} for g in grouped]
    return build_task_stats(rows)


# ---------- CRUD ----------

async def create_task(user_id: str, task_data: TaskCreate) -> TaskRead:
    tasks_collection = get_tasks_collection()
    new_task = TaskInDB(
        user_id=user_id,
        text=task_data.text,
        priority=task_data.priority,
        estimated_minutes=task_data.estimated_minutes,
        due_date=_ensure_aware_utc(task_data.due_date),
        created_at=_utcnow(),
    )
    result = await tasks_collection.insert_one(new_task.model_dump(exclude={"id"}))
    saved = await tasks_collection.find_one({"_id": result.inserted_id})

    await record_history(user_id, str(result.inserted_id), "in_progress")
    return serialize_task(saved)


async def get_tasks_for_day(user_id: str, day: Optional[date] = None) -> List[TaskRead]:
    """
    Tasks without a due date, plus tasks due on `day`.
    """
    start, end = _day_bounds(day or _today())
    cursor = get_tasks_collection().find({
        "user_id": user_id,
        "$or": [
            {"due_date": None},
            {"due_date": {"$gte": start, "$lt": end}},
        ],
    })
    return sort_tasks([serialize_task(doc) async for doc in cursor])


async def get_task(user_id: str, task_id: str) -> Optional[TaskRead]:
    query = _owned(user_id, task_id)
    if query is None:
        return None
    doc = await get_tasks_collection().find_one(query)
    return serialize_task(doc) if doc else None


async def update_task(user_id: str, task_id: str, task_data: TaskUpdate) -> Optional[TaskRead]:
    query = _owned(user_id, task_id)
    if query is None:
        return None

    tasks_collection = get_tasks_collection()
    existing = await tasks_collection.find_one(query)
    if not existing:
        return None

    update_fields = task_data.model_dump(exclude_unset=True, exclude={"completed"})
    update_fields = {k: v for k, v in update_fields.items() if v is not None or k == "due_date"}
    if "due_date" in update_fields:
        update_fields["due_date"] = _ensure_aware_utc(update_fields["due_date"])

    was_completed = bool(existing.get("completed", False))
    flipped = task_data.completed is not None and task_data.completed != was_completed
    if task_data.completed is not None:
        update_fields["completed"] = task_data.completed
        if flipped:
            update_fields["completed_at"] = _utcnow() if task_data.completed else None

    if update_fields:
        await tasks_collection.update_one(query, {"$set": update_fields})

    if flipped:
        await record_history(user_id, task_id, "completed" if task_data.completed else "in_progress")

    updated = await tasks_collection.find_one(query)
    return serialize_task(updated) if updated else None


async def add_actual_minutes(user_id: str, task_id: str, minutes: int) -> bool:
    """
    Accrue focus time onto a task. actual_minutes never decreases.
    """
    query = _owned(user_id, task_id)
    if query is None or minutes <= 0:
        return False
    result = await get_tasks_collection().update_one(query, {"$inc": {"actual_minutes": minutes}})
    return result.matched_count == 1


async def delete_task(user_id: str, task_id: str) -> bool:
    """
    Removes the task together with its history rows and sessions.
    """
    query = _owned(user_id, task_id)
    if query is None:
        return False

    tasks_collection = get_tasks_collection()
    if not await tasks_collection.find_one(query):
        return False

    await get_history_collection().delete_many({"task_id": task_id, "user_id": user_id})
    await get_db()["sessions"].delete_many({"task_id": task_id, "user_id": user_id})

    result = await tasks_collection.delete_one(query)
    if result.deleted_count == 1:
        logger.info("Deleted task %s for user %s", task_id, user_id)
    return result.deleted_count == 1
