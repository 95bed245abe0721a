"""
Course Catalog Store
Course documents live in `courses`; their module/quiz content lives in `content`,
keyed by the course ObjectId. Every write touching both runs in one transaction.
"""

import logging
from typing import Dict, Iterable, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from inspira import config
from inspira.courses.models import CourseCreate, CourseUpdate, Module
from inspira.database import now_utc, object_id
from inspira.errors import NotFoundError, StorageError, ValidationError

logger = logging.getLogger(__name__)


def _module_documents(modules: Iterable[Module]) -> List[dict]:
    return [module.dict() for module in modules]


def to_course_detail(course: dict, content: Optional[dict]) -> dict:
    """Flatten a course and its content document into the shape the learner page renders"""
    return {
        "id": str(course["_id"]),
        "title": course.get("title", ""),
        "description": course.get("description", ""),
        "subject": course.get("subject", ""),
        "professor_name": course.get("professor_name", ""),
        "modules": (content or {}).get("modules", []),
        "created_at": course.get("created_at"),
        "updated_at": course.get("updated_at"),
    }


# ==================== WRITES ====================

async def create_course(db: AsyncIOMotorDatabase, data: CourseCreate) -> str:
    """
    Insert the course and, when modules were supplied, its content document
    Both writes commit together or not at all
    """
    now = now_utc()
    course = {
        "title": data.title,
        "description": data.description,
        "subject": data.subject,
        "professor_name": data.professor_name,
        "created_at": now,
        "updated_at": now,
    }

    try:
        async with await db.client.start_session() as session:
            async with session.start_transaction():
                result = await db.courses.insert_one(course, session=session)

                if data.modules is not None:
                    await db.content.insert_one(
                        {
                            "course_id": result.inserted_id,
                            "title": data.content_title or data.title,
                            "modules": _module_documents(data.modules),
                            "created_at": now,
                            "updated_at": now,
                        },
                        session=session,
                    )
    except PyMongoError as e:
        logger.error("Course creation aborted: %s", e, exc_info=True)
        raise StorageError("Failed to create course")

    course_id = str(result.inserted_id)
    logger.info("Course %s created with %d module(s)", course_id, len(data.modules or []))
    return course_id


async def update_course(db: AsyncIOMotorDatabase, course_id: str, update: CourseUpdate):
    """
    Update course fields and upsert its content
    Raises NotFoundError (and rolls back) when the course does not exist
    """
    oid = object_id(course_id, "course_id")
    now = now_utc()

    fields = update.dict(exclude_unset=True, exclude={"content"})
    fields = {k: v for k, v in fields.items() if v is not None}
    fields["updated_at"] = now

    try:
        async with await db.client.start_session() as session:
            async with session.start_transaction():
                result = await db.courses.update_one({"_id": oid}, {"$set": fields}, session=session)
                if result.matched_count == 0:
                    raise NotFoundError("Course not found", field="course_id")

                if update.content is not None:
                    await db.content.update_one(
                        {"course_id": oid},
                        {
                            "$set": {
                                "title": update.content.title or fields.get("title") or "",
                                "modules": _module_documents(update.content.modules),
                                "updated_at": now,
                            },
                            "$setOnInsert": {"created_at": now},
                        },
                        upsert=True,
                        session=session,
                    )
    except PyMongoError as e:
        logger.error("Course %s update aborted: %s", course_id, e, exc_info=True)
        raise StorageError("Failed to update course")

    logger.info("Course %s updated", course_id)


async def delete_course(db: AsyncIOMotorDatabase, course_id: str):
    """Delete the course and all of its content documents"""
    oid = object_id(course_id, "course_id")

    try:
        async with await db.client.start_session() as session:
            async with session.start_transaction():
                result = await db.courses.delete_one({"_id": oid}, session=session)
                if result.deleted_count == 0:
                    raise NotFoundError("Course not found", field="course_id")
                await db.content.delete_many({"course_id": oid}, session=session)
    except PyMongoError as e:
        logger.error("Course %s deletion aborted: %s", course_id, e, exc_info=True)
        raise StorageError("Failed to delete course")

    logger.info("Course %s deleted", course_id)


# ==================== READS ====================

async def get_course(db: AsyncIOMotorDatabase, course_id: str) -> dict:
    oid = object_id(course_id, "course_id")
    try:
        course = await db.courses.find_one({"_id": oid})
        if not course:
            raise NotFoundError("Course not found", field="course_id")
        content = await db.content.find_one({"course_id": oid})
    except PyMongoError as e:
        logger.error("Failed to load course %s: %s", course_id, e, exc_info=True)
        raise StorageError("Failed to fetch course")
    return to_course_detail(course, content)


async def list_courses(db: AsyncIOMotorDatabase, limit: int = config.COURSE_PAGE_SIZE) -> List[dict]:
    """All courses, newest first, each joined with its content"""
    try:
        courses = await db.courses.find({}).sort("created_at", -1).to_list(length=limit)
        ids = [course["_id"] for course in courses]
        contents = await db.content.find({"course_id": {"$in": ids}}).to_list(length=None)
    except PyMongoError as e:
        logger.error("Failed to list courses: %s", e, exc_info=True)
        raise StorageError("Failed to fetch courses")

    by_course = {content["course_id"]: content for content in contents}
    return [to_course_detail(course, by_course.get(course["_id"])) for course in courses]


async def find_courses_by_ids(db: AsyncIOMotorDatabase, course_ids: Iterable[str]) -> Dict[str, dict]:
    """
    Resolve course references to course documents keyed by hex id
    Malformed or dangling references are simply missing from the result
    """
    oids = []
    for course_id in set(str(c) for c in course_ids):
        try:
            oids.append(object_id(course_id))
        except ValidationError:
            logger.warning("Skipping malformed course reference %r", course_id)

    if not oids:
        return {}

    try:
        courses = await db.courses.find({"_id": {"$in": oids}}).to_list(length=None)
    except PyMongoError as e:
        logger.error("Failed to resolve course references: %s", e, exc_info=True)
        raise StorageError("Failed to fetch courses")

    return {str(course["_id"]): course for course in courses}
