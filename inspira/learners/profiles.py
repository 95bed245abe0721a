"""
User Profile Store and Completion Recorder

Profiles live in the `user` collection, keyed by the identity provider subject:
    {user_id, full_name, email, image_url,
     enrolled_courses: [course_id, ...],                        # set, never shrinks
     completed_courses: [{course_id, completed_at, score}],    # most recent first
     revision}
"""

import logging
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from inspira import config
from inspira.courses.catalog import find_courses_by_ids
from inspira.database import now_utc, object_id
from inspira.errors import NotFoundError, StorageError, ValidationError

logger = logging.getLogger(__name__)


def _require_user_id(user_id: Optional[str]) -> str:
    if not user_id or not isinstance(user_id, str) or not user_id.strip():
        raise ValidationError("Missing user_id", field="user_id")
    return user_id.strip()


# ==================== PROFILE SYNC ====================

async def sync_profile(
    db: AsyncIOMotorDatabase,
    user_id: str,
    full_name: Optional[str] = None,
    email: Optional[str] = None,
    image_url: Optional[str] = None,
) -> dict:
    """
    Idempotent upsert on sign-in
    Only identity fields are touched; enrollment and history are left alone
    """
    user_id = _require_user_id(user_id)

    try:
        result = await db.user.update_one(
            {"user_id": user_id},
            {"$set": {
                "user_id": user_id,
                "full_name": full_name,
                "email": email,
                "image_url": image_url,
            }},
            upsert=True,
        )
    except PyMongoError as e:
        logger.error("Profile sync failed for %s: %s", user_id, e, exc_info=True)
        raise StorageError("Failed to save user")

    flags = {"updated": result.modified_count > 0, "upserted": result.upserted_id is not None}
    logger.info("Profile %s synced (%s)", user_id, flags)
    return flags


# ==================== COMPLETION RECORDER ====================

async def record_completion(
    db: AsyncIOMotorDatabase,
    user_id: str,
    course_id: str,
    score: Optional[int] = None,
) -> dict:
    """
    Persist a course completion for a learner

    - enrolled_courses gains course_id if absent
    - completed_courses gains {course_id, completed_at, score}, kept most recent first
    - creates the profile when the learner has none yet

    One update_one carries every modifier, so concurrent completions by the
    same learner are applied one after the other by the server.

    Returns:
        {"updated": bool, "upserted": bool}
    """
    user_id = _require_user_id(user_id)
    course_ref = str(object_id(course_id, "course_id"))

    score = 0 if score is None else score
    if not 0 <= score <= 100:
        raise ValidationError("Score must be between 0 and 100", field="score")

    record = {"course_id": course_ref, "completed_at": now_utc(), "score": score}

    try:
        result = await db.user.update_one(
            {"user_id": user_id},
            {
                "$addToSet": {"enrolled_courses": course_ref},
                "$push": {"completed_courses": {"$each": [record], "$sort": {"completed_at": -1}}},
                "$inc": {"revision": 1},
            },
            upsert=True,
        )
    except PyMongoError as e:
        logger.error("Completion for %s/%s not saved: %s", user_id, course_ref, e, exc_info=True)
        raise StorageError("Failed to save course completion")

    flags = {"updated": result.modified_count > 0, "upserted": result.upserted_id is not None}
    logger.info("Completion recorded: user=%s course=%s score=%d %s", user_id, course_ref, score, flags)
    return flags


# ==================== READS ====================

async def get_profile(db: AsyncIOMotorDatabase, user_id: str) -> dict:
    user_id = _require_user_id(user_id)
    try:
        profile = await db.user.find_one({"user_id": user_id})
    except PyMongoError as e:
        logger.error("Failed to load profile %s: %s", user_id, e, exc_info=True)
        raise StorageError("Failed to fetch user data")
    if not profile:
        raise NotFoundError("User not found", field="user_id")
    return profile


async def list_profiles(db: AsyncIOMotorDatabase, limit: int = config.COURSE_PAGE_SIZE) -> List[dict]:
    try:
        return await db.user.find({}).sort("full_name", 1).to_list(length=limit)
    except PyMongoError as e:
        logger.error("Failed to list profiles: %s", e, exc_info=True)
        raise StorageError("Failed to fetch users")


async def get_learner_courses(db: AsyncIOMotorDatabase, user_id: str) -> dict:
    """
    Enrolled courses with catalog metadata, plus every completion record
    joined with its course (course_details is None when the course was deleted)
    """
    profile = await get_profile(db, user_id)
    enrolled = [str(c) for c in profile.get("enrolled_courses", [])]
    completions = profile.get("completed_courses", [])

    courses = await find_courses_by_ids(db, enrolled + [str(c["course_id"]) for c in completions])
    completed_ids = {str(c["course_id"]) for c in completions}

    enrolled_courses = []
    for course_id in enrolled:
        course = courses.get(course_id)
        if not course:
            continue
        enrolled_courses.append({
            "id": course_id,
            "title": course.get("title", ""),
            "description": course.get("description", ""),
            "subject": course.get("subject", ""),
            "professor_name": course.get("professor_name", ""),
            "is_completed": course_id in completed_ids,
        })

    completed_courses = []
    for completion in completions:
        course = courses.get(str(completion["course_id"]))
        completed_courses.append({
            "course_id": str(completion["course_id"]),
            "completed_at": completion["completed_at"],
            "score": completion.get("score") or 0,
            "course_details": {
                "title": course.get("title", ""),
                "subject": course.get("subject", ""),
                "professor_name": course.get("professor_name", ""),
            } if course else None,
        })

    return {
        "user": {
            "user_id": profile["user_id"],
            "full_name": profile.get("full_name"),
            "email": profile.get("email"),
            "image_url": profile.get("image_url"),
        },
        "enrolled_courses": enrolled_courses,
        "completed_courses": completed_courses,
    }
