# backend/pomotask/api/endpoints/health.py
import logging

from fastapi import APIRouter
from pymongo.errors import PyMongoError

from pomotask.core.config import settings
from pomotask.db.mongo import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


async def _ping_mongo():
    """
    (reachable, error message or None)
    """
    try:
        await get_db().command("ping")
    except (PyMongoError, RuntimeError) as e:
        logger.warning("Mongo ping failed: %s", e)
        return False, str(e)
    return True, None


@router.get("/health")
async def health_check():
    """
    Liveness plus a Mongo ping, for load balancers and monitoring.
    The ping error is hidden in production.
    """
    reachable, error = await _ping_mongo()
    body = {
        "status": "ok" if reachable else "degraded",
        "environment": settings.ENVIRONMENT,
        "mongo": reachable,
        "database": settings.MONGO_DB_NAME,
    }
    if not settings.is_production:
        body["mongo_error"] = error
    return body
