"""
Admin dashboard
Learner roster with enrollment and score summaries
"""

from typing import List, Optional

from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel

from inspira.auth import Identity, require_admin
from inspira.database import get_db
from inspira.learners.profiles import list_profiles

router = APIRouter(prefix="/admin", tags=["Admin"])


class LearnerOverview(BaseModel):
    user_id: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    enrolled_count: int
    completed_count: int
    average_score: Optional[float] = None
    last_completed_course: Optional[str] = None


def summarize_profile(profile: dict) -> dict:
    completions = profile.get("completed_courses", [])
    scores = [c.get("score") or 0 for c in completions]
    return {
        "user_id": profile["user_id"],
        "full_name": profile.get("full_name"),
        "email": profile.get("email"),
        "enrolled_count": len(profile.get("enrolled_courses", [])),
        "completed_count": len(completions),
        "average_score": sum(scores) / len(scores) if scores else None,
        # history is kept most recent first
        "last_completed_course": str(completions[0]["course_id"]) if completions else None,
    }


@router.get("/learners", response_model=List[LearnerOverview])
async def list_learners(
    db: AsyncIOMotorDatabase = Depends(get_db),
    admin: Identity = Depends(require_admin)
):
    profiles = await list_profiles(db)
    return [summarize_profile(p) for p in profiles]
