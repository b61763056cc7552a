# backend/pomotask/crud/users.py

import logging
from typing import Optional

from fastapi import HTTPException, status
from pymongo.errors import DuplicateKeyError

from pomotask.core.security import hash_password, verify_password
from pomotask.crud.common import _safe_object_id, _utcnow
from pomotask.db.mongo import get_db
from pomotask.models.user import UserInDB
from pomotask.schemas.user import UserRead

logger = logging.getLogger(__name__)


def get_users_collection():
    """
    'users' collection from the Motor handle.
    connect_to_mongo() must have run first.
    """
    return get_db()["users"]


def _to_user(doc) -> UserInDB:
    doc = dict(doc)
    doc["_id"] = str(doc["_id"])
    return UserInDB(**doc)


def to_user_read(user: UserInDB) -> UserRead:
    return UserRead(
        id=str(user.id),
        username=user.username,
        email=user.email,
        created_at=user.created_at,
    )


# ---------- READ ----------

async def get_user_by_id(user_id: str) -> Optional[UserInDB]:
    oid = _safe_object_id(user_id)
    if oid is None:
        return None
    doc = await get_users_collection().find_one({"_id": oid})
    return _to_user(doc) if doc else None


async def get_user_by_email(email: str) -> Optional[UserInDB]:
    doc = await get_users_collection().find_one({"email": email.strip().lower()})
    return _to_user(doc) if doc else None


# ---------- CREATE ----------

async def create_user(*, username: str, email: str, password: str) -> UserInDB:
    col = get_users_collection()
    email = email.strip().lower()

    taken = await col.find_one({"$or": [{"email": email}, {"username": username}]})
    if taken:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User already exists")

    user = UserInDB(
        username=username,
        email=email,
        password_hash=hash_password(password),
        created_at=_utcnow(),
    )
    doc = user.model_dump(exclude={"id"})

    try:
        result = await col.insert_one(doc)
    except DuplicateKeyError:
        # lost a race with a concurrent registration
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User already exists")

    logger.info("Registered user %s", username)
    return user.model_copy(update={"id": str(result.inserted_id)})


# ---------- AUTH ----------

async def authenticate(email: str, password: str) -> Optional[UserInDB]:
    user = await get_user_by_email(email)
    if user is None or not verify_password(password, user.password_hash):
        return None

    now = _utcnow()
    await get_users_collection().update_one(
        {"_id": _safe_object_id(user.id)},
        {"$set": {"last_login_at": now}},
    )
    return user.model_copy(update={"last_login_at": now})
