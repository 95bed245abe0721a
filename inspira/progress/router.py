from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel

from inspira.auth import Identity, get_current_identity
from inspira.database import get_db
from inspira.progress import presenter

router = APIRouter(prefix="/progress", tags=["Progress"])

# ==================== RESPONSE SCHEMAS ====================

class CompletionRow(BaseModel):
    course_id: str
    course_name: str
    subject: str
    score: int


class CourseAverage(BaseModel):
    course_id: str
    course_label: str
    average_score: float
    completions: int


class TrendPoint(BaseModel):
    timestamp_label: str
    completed_at: datetime
    course_label: str
    score: int

# ==================== ENDPOINTS ====================

@router.get("/completions", response_model=List[CompletionRow])
async def get_completions(
    learner: Identity = Depends(get_current_identity),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    completions, courses = await presenter.load_history(db, learner.user_id)
    return presenter.completion_rows(completions, courses)


@router.get("/by-course", response_model=List[CourseAverage])
async def get_average_by_course(
    learner: Identity = Depends(get_current_identity),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """Average score per course, for the proportion chart"""
    completions, courses = await presenter.load_history(db, learner.user_id)
    return presenter.aggregate_by_course(completions, courses)


@router.get("/trend", response_model=List[TrendPoint])
async def get_score_trend(
    learner: Identity = Depends(get_current_identity),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """Scores over time, oldest first, for the performance chart"""
    completions, courses = await presenter.load_history(db, learner.user_id)
    return presenter.chronological_trend(completions, courses)
