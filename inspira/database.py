import logging
from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from inspira import config
from inspira.errors import ValidationError

logger = logging.getLogger(__name__)

_client: Optional[AsyncIOMotorClient] = None


def get_client() -> AsyncIOMotorClient:
    global _client
    if _client is None:
        _client = AsyncIOMotorClient(config.MONGO_URL)
    return _client


def get_database() -> AsyncIOMotorDatabase:
    return get_client()[config.MONGO_DB_NAME]


async def get_db() -> AsyncIOMotorDatabase:
    """Database dependency"""
    return get_database()


def close_client():
    global _client
    if _client is not None:
        _client.close()
        _client = None


# ==================== HELPERS ====================

def object_id(value, field: str = "id") -> ObjectId:
    """Parse a course reference, raising ValidationError when it is not a well-formed ObjectId"""
    if isinstance(value, ObjectId):
        return value
    if not value or not isinstance(value, str) or not ObjectId.is_valid(value.strip()):
        raise ValidationError(f"Invalid {field}", field=field)
    return ObjectId(value.strip())


# ==================== INDEXES ====================

async def create_indexes(db: AsyncIOMotorDatabase):
    """
    Create MongoDB indexes
    Called during application startup
    """
    # Content documents hang off exactly one course
    await db.content.create_index("course_id", unique=True)
    await db.courses.create_index("created_at")

    # Learner profiles are keyed by the identity provider subject
    await db.user.create_index("user_id", unique=True)
    await db.user.create_index("enrolled_courses")

    await db.assignments.create_index([("created_at", -1)])
    await db.assignments.create_index("course_id")

    logger.info("Inspira indexes created")


def now_utc() -> datetime:
    return datetime.now(timezone.utc)
