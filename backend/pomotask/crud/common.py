# backend/pomotask/crud/common.py

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple

from bson import ObjectId
from bson.errors import InvalidId


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _today() -> date:
    return _utcnow().date()


def _safe_object_id(value: Optional[str]) -> Optional[ObjectId]:
    """
    str -> ObjectId, None when the string is not a valid id.
    Callers treat an invalid id the same as a missing record (404).
    """
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str):
        # ObjectId(None) would mint a fresh id
        return None
    try:
        return ObjectId(value.strip())
    except InvalidId:
        return None


def _ensure_aware_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Naive datetimes are treated as UTC.
    """
    if dt is None:
        return dt
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _day_bounds(day: date) -> Tuple[datetime, datetime]:
    """
    [start, end) of a UTC calendar day.
    """
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


def _percent(part: int, whole: int) -> int:
    """
    Integer percentage rounded half up (1/8 -> 13); 0 when whole is 0.
    """
    if not whole:
        return 0
    return (200 * part + whole) // (2 * whole)
