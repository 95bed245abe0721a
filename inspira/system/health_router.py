import logging

from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from inspira.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["System"])


@router.get("/health")
async def health(db: AsyncIOMotorDatabase = Depends(get_db)):
    """Liveness plus a round trip to MongoDB"""
    try:
        await db.command("ping")
        database = "UP"
    except PyMongoError as e:
        logger.warning("Database ping failed: %s", e)
        database = "DOWN"
    return {"status": "UP", "database": database}
