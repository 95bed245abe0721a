from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

# ==================== REQUEST SCHEMAS ====================

class CompletionCreate(BaseModel):
    course_id: str
    score: Optional[int] = Field(None, ge=0, le=100)


# ==================== RESPONSE SCHEMAS ====================

class WriteFlags(BaseModel):
    message: str
    updated: bool
    upserted: bool


class LearnerSummary(BaseModel):
    user_id: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    image_url: Optional[str] = None


class EnrolledCourse(BaseModel):
    id: str
    title: str = ""
    description: str = ""
    subject: str = ""
    professor_name: str = ""
    is_completed: bool = False


class CourseDetails(BaseModel):
    title: str = ""
    subject: str = ""
    professor_name: str = ""


class CompletedCourse(BaseModel):
    course_id: str
    completed_at: datetime
    score: int
    course_details: Optional[CourseDetails] = None


class LearnerCourses(BaseModel):
    user: LearnerSummary
    enrolled_courses: List[EnrolledCourse] = []
    completed_courses: List[CompletedCourse] = []
