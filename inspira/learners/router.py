from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from inspira.auth import Identity, get_current_identity
from inspira.database import get_db
from inspira.learners import profiles
from inspira.learners.models import CompletionCreate, LearnerCourses, WriteFlags

router = APIRouter(prefix="/users", tags=["Learners"])


@router.post("/sync", response_model=WriteFlags)
async def sync_profile_endpoint(
    learner: Identity = Depends(get_current_identity),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """
    Create or refresh the caller's profile from the identity provider claims
    Safe to call on every sign-in
    """
    flags = await profiles.sync_profile(
        db,
        learner.user_id,
        full_name=learner.full_name,
        email=learner.email,
        image_url=learner.image_url,
    )
    return {"message": "User saved", **flags}


@router.put("/me/completions", response_model=WriteFlags)
async def record_completion_endpoint(
    data: CompletionCreate,
    learner: Identity = Depends(get_current_identity),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    flags = await profiles.record_completion(db, learner.user_id, data.course_id, data.score)
    return {"message": "Course completion saved successfully!", **flags}


@router.get("/me/courses", response_model=LearnerCourses)
async def get_my_courses(
    learner: Identity = Depends(get_current_identity),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """
    Enrolled courses with completion status, and every completion record
    Deleted courses show up with course_details = null
    """
    return await profiles.get_learner_courses(db, learner.user_id)
