import logging
from typing import List

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from inspira import config
from inspira.assignments.models import AssignmentCreate, AssignmentStatus
from inspira.database import now_utc, object_id
from inspira.errors import StorageError

logger = logging.getLogger(__name__)


def _to_assignment(doc: dict) -> dict:
    return {
        "id": str(doc["_id"]),
        "title": doc["title"],
        "description": doc["description"],
        "course_id": str(doc["course_id"]),
        "due_date": doc["due_date"],
        "status": doc.get("status", AssignmentStatus.ACTIVE),
        "created_at": doc["created_at"],
        "created_by": doc.get("created_by"),
    }


async def create_assignment(db: AsyncIOMotorDatabase, data: AssignmentCreate, created_by: str) -> str:
    assignment = {
        "title": data.title,
        "description": data.description,
        "course_id": str(object_id(data.course_id, "course_id")),
        "due_date": data.due_date,
        "status": AssignmentStatus.ACTIVE.value,
        "created_at": now_utc(),
        "created_by": created_by,
    }
    try:
        result = await db.assignments.insert_one(assignment)
    except PyMongoError as e:
        logger.error("Assignment creation failed: %s", e, exc_info=True)
        raise StorageError("Failed to create assignment")

    logger.info("Assignment %s created for course %s", result.inserted_id, assignment["course_id"])
    return str(result.inserted_id)


async def list_assignments(db: AsyncIOMotorDatabase, limit: int = config.COURSE_PAGE_SIZE) -> List[dict]:
    """Newest first"""
    try:
        docs = await db.assignments.find({}).sort("created_at", -1).to_list(length=limit)
    except PyMongoError as e:
        logger.error("Failed to list assignments: %s", e, exc_info=True)
        raise StorageError("Failed to fetch assignments")
    return [_to_assignment(doc) for doc in docs]
