import logging
from typing import List

from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from inspira.auth import Identity, get_current_identity, require_admin
from inspira.courses import catalog, scoring
from inspira.courses.models import (
    CourseCreate, CourseCreated, CourseDetail, CourseUpdate,
    QuizResult, QuizSubmission
)
from inspira.database import get_db
from inspira.errors import ValidationError
from inspira.learners.profiles import record_completion

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/courses", tags=["Courses"])

# ==================== COURSE CRUD ====================

@router.get("", response_model=List[CourseDetail])
async def list_courses_endpoint(db: AsyncIOMotorDatabase = Depends(get_db)):
    """All courses with their modules and quizzes"""
    return await catalog.list_courses(db)


@router.get("/{course_id}", response_model=CourseDetail)
async def get_course_endpoint(course_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await catalog.get_course(db, course_id)


@router.post("", response_model=CourseCreated, status_code=201)
async def create_course_endpoint(
    data: CourseCreate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    admin: Identity = Depends(require_admin)
):
    """
    Create a course with its module/quiz content
    Course and content are written in one transaction
    """
    course_id = await catalog.create_course(db, data)
    return {"course_id": course_id, "message": "Course created successfully"}


@router.put("/{course_id}")
async def update_course_endpoint(
    course_id: str,
    update: CourseUpdate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    admin: Identity = Depends(require_admin)
):
    await catalog.update_course(db, course_id, update)
    return {"message": "Course updated successfully"}


@router.delete("/{course_id}")
async def delete_course_endpoint(
    course_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    admin: Identity = Depends(require_admin)
):
    await catalog.delete_course(db, course_id)
    return {"message": "Course deleted successfully"}

# ==================== QUIZ SUBMISSION ====================

@router.post("/{course_id}/quiz", response_model=QuizResult)
async def submit_quiz_endpoint(
    course_id: str,
    submission: QuizSubmission,
    db: AsyncIOMotorDatabase = Depends(get_db),
    learner: Identity = Depends(get_current_identity)
):
    """
    Score the current module's quiz and the course so far

    Submitting the last module also records the course completion
    for the caller with the course score.
    """
    course = await catalog.get_course(db, course_id)
    modules = course["modules"]

    if submission.module_index >= len(modules):
        raise ValidationError("No such module", field="module_index")

    module_tally = scoring.score_module(modules[submission.module_index], submission.answers)
    course_tally = scoring.score_course(modules, submission.answers)
    is_last_module = submission.module_index == len(modules) - 1

    completion = None
    if is_last_module:
        completion = await record_completion(db, learner.user_id, course_id, course_tally.score)

    logger.info(
        "Quiz scored: user=%s course=%s module=%d module_score=%d course_score=%d",
        learner.user_id, course_id, submission.module_index, module_tally.score, course_tally.score
    )

    return {
        "module_score": module_tally.score,
        "course_score": course_tally.score,
        "correct": module_tally.correct,
        "answered": module_tally.answered,
        "total": module_tally.total,
        "is_last_module": is_last_module,
        "completion": completion,
    }
