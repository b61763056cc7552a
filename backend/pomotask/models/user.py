# backend/pomotask/models/user.py
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserInDB(BaseModel):
    """
    Full document stored in the 'users' collection.
    """
    # MongoDB "_id" is exposed as "id"
    id: Optional[str] = Field(default=None, alias="_id")
    username: str
    email: EmailStr
    password_hash: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    last_login_at: Optional[datetime] = None

    model_config = ConfigDict(
        populate_by_name=True,       # allow id=... as well as _id=...
        from_attributes=True,
    )
