from typing import List

from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from inspira.assignments import board
from inspira.assignments.models import Assignment, AssignmentCreate
from inspira.auth import Identity, get_current_identity, require_admin
from inspira.database import get_db

router = APIRouter(prefix="/assignments", tags=["Assignments"])


@router.post("", status_code=201)
async def create_assignment_endpoint(
    data: AssignmentCreate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    admin: Identity = Depends(require_admin)
):
    assignment_id = await board.create_assignment(db, data, admin.user_id)
    return {
        "success": True,
        "assignment_id": assignment_id,
        "message": "Assignment created successfully"
    }


@router.get("", response_model=List[Assignment])
async def list_assignments_endpoint(
    db: AsyncIOMotorDatabase = Depends(get_db),
    learner: Identity = Depends(get_current_identity)
):
    return await board.list_assignments(db)
