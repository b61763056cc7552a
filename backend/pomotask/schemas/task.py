# backend/pomotask/schemas/task.py

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator

from pomotask.schemas.common import CamelModel, _strip_and_reject_blank

Priority = Literal["urgent", "high", "medium", "low"]
HistoryStatus = Literal["in_progress", "completed", "failed"]

# GET /tasks ordering: urgent first
PRIORITY_RANK = {"urgent": 0, "high": 1, "medium": 2, "low": 3}


# --- Request schemas ---

class TaskCreate(CamelModel):
    """
    [Request] POST /tasks
    user_id comes from the access token, never from the body.
    """
    text: str
    priority: Priority
    estimated_minutes: int = Field(..., gt=0)
    due_date: Optional[datetime] = None

    @field_validator("text", mode="before")
    @classmethod
    def validate_text(cls, v):
        return _strip_and_reject_blank(v, "text")


class TaskUpdate(CamelModel):
    """
    [Request] PUT /tasks/{task_id}
    Partial update. actualMinutes is not writable here; it only grows
    through completed focus sessions.
    """
    text: Optional[str] = None
    priority: Optional[Priority] = None
    estimated_minutes: Optional[int] = Field(default=None, gt=0)
    due_date: Optional[datetime] = None
    completed: Optional[bool] = None

    @field_validator("text", mode="before")
    @classmethod
    def validate_text(cls, v):
        return _strip_and_reject_blank(v, "text")


# --- Response schemas ---

class TaskRead(CamelModel):
    id: str
    user_id: str
    text: str
    priority: Priority
    estimated_minutes: int
    actual_minutes: int = 0
    created_at: datetime
    due_date: Optional[datetime] = None
    completed: bool = False
    completed_at: Optional[datetime] = None


class TaskHistoryRead(CamelModel):
    """
    [Response] GET /tasks/history
    One row per task per day, joined with the task it refers to.
    """
    id: str
    task_id: str
    date: str  # YYYY-MM-DD
    status: HistoryStatus
    text: Optional[str] = None
    priority: Optional[Priority] = None
    estimated_minutes: Optional[int] = None
    actual_minutes: Optional[int] = None


class TaskStats(CamelModel):
    """
    [Response] GET /tasks/stats?period=day|week|month
    Parallel arrays indexed by date.
    """
    dates: List[str] = Field(default_factory=list)
    completed: List[int] = Field(default_factory=list)
    failed: List[int] = Field(default_factory=list)
    in_progress: List[int] = Field(default_factory=list)
    completion_rate: List[int] = Field(default_factory=list)
