# backend/pomotask/schemas/session.py

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator

from pomotask.schemas.common import CamelModel, _strip_to_none

SessionType = Literal["focus", "break"]


# --- Request schemas ---

class SessionCreate(CamelModel):
    """
    [Request] POST /sessions/start
    Sent by the focus timer when a focus or break phase starts.
    """
    task_id: Optional[str] = None
    duration_seconds: int = Field(..., gt=0)
    type: SessionType

    @field_validator("task_id", mode="before")
    @classmethod
    def strip_task_id(cls, v):
        if isinstance(v, int):
            v = str(v)
        return _strip_to_none(v)


# --- Response schemas ---

class SessionRead(CamelModel):
    """
    [Response] A recorded session.
    Immutable except for completed, which only ever goes False -> True.
    """
    id: str
    task_id: Optional[str] = None
    duration_seconds: int
    type: SessionType
    started_at: datetime
    completed: bool = False


class SessionHistoryItem(SessionRead):
    task_text: Optional[str] = None


class SessionStats(CamelModel):
    total_sessions: int = 0
    focus_sessions: int = 0
    break_sessions: int = 0
    completed_focus_sessions: int = 0
    total_focus_time_seconds: int = 0
    total_break_time_seconds: int = 0
    completion_rate: int = 0  # percent, rounded


class SessionHistory(CamelModel):
    """
    [Response] GET /sessions/history?date=YYYY-MM-DD
    """
    sessions: List[SessionHistoryItem]
    stats: SessionStats
