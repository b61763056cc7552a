# backend/pomotask/models/session.py

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SessionInDB(BaseModel):
    """
    Full document stored in the 'sessions' collection.
    """
    id: Optional[str] = Field(default=None, alias="_id")
    user_id: str
    task_id: Optional[str] = None  # a session may have no task
    duration_seconds: int
    type: str  # focus, break
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    completed: bool = False

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)
