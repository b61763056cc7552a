# backend/pomotask/models/task.py

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TaskInDB(BaseModel):
    """
    Full document stored in the 'tasks' collection.
    """
    id: Optional[str] = Field(default=None, alias="_id")
    user_id: str
    text: str
    priority: str  # urgent, high, medium, low
    estimated_minutes: int
    actual_minutes: int = 0  # only grows via completed focus sessions
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    due_date: Optional[datetime] = None
    completed: bool = False
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class TaskHistoryInDB(BaseModel):
    """
    Document stored in 'task_history'. At most one row per (task, user, date).
    """
    id: Optional[str] = Field(default=None, alias="_id")
    task_id: str
    user_id: str
    date: str  # YYYY-MM-DD
    status: str  # in_progress, completed, failed

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)
