import logging

from fastapi import APIRouter
from sqlalchemy import text

from fundtracker.config import settings
from fundtracker.infrastructure.db import database

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.get("/ready")
async def ready():
    if database.engine is None:
        return {"status": "ready", "storage": settings.STORAGE_BACKEND, "db_connected": None}

    try:
        async with database.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        db_connected = True
    except Exception as e:
        logger.warning(f"Database readiness check failed: {e}")
        db_connected = False

    return {
        "status": "ready" if db_connected else "not_ready",
        "storage": settings.STORAGE_BACKEND,
        "db_connected": db_connected,
    }
