from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, validator


class AssignmentStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CLOSED = "closed"


class AssignmentCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    course_id: str
    due_date: datetime

    @validator("title", "description")
    def not_blank(cls, v):
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()


class Assignment(BaseModel):
    id: str
    title: str
    description: str
    course_id: str
    due_date: datetime
    status: AssignmentStatus = AssignmentStatus.ACTIVE
    created_at: datetime
    created_by: Optional[str] = None
