from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, validator

from inspira.courses.media import normalize_youtube_url

# ==================== QUIZ MODELS ====================

class Question(BaseModel):
    question: str
    options: List[str] = Field(..., min_length=2)
    correct_answer: int = Field(..., ge=0)

    @validator("correct_answer")
    def validate_correct_answer(cls, v, values):
        options = values.get("options")
        if options is not None and v >= len(options):
            raise ValueError(f"correct_answer must index one of {len(options)} options")
        return v


class Quiz(BaseModel):
    questions: List[Question] = []
    video_url: Optional[str] = None

    @validator("video_url")
    def embed_video(cls, v):
        return normalize_youtube_url(v) or None


# ==================== MODULE / COURSE MODELS ====================

class Module(BaseModel):
    title: str
    content: str = ""
    video_url: Optional[str] = None
    quiz: Optional[Quiz] = None

    @validator("video_url")
    def embed_video(cls, v):
        return normalize_youtube_url(v) or None

    def paragraphs(self) -> List[str]:
        return [p for p in self.content.split("\n") if p.strip()]


class CourseCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    subject: str = ""
    professor_name: str = ""
    content_title: Optional[str] = None
    modules: Optional[List[Module]] = None

    @validator("title")
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError("Title is required")
        return v.strip()


class CourseContentUpdate(BaseModel):
    title: Optional[str] = None
    modules: List[Module] = []


class CourseUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    subject: Optional[str] = None
    professor_name: Optional[str] = None
    content: Optional[CourseContentUpdate] = None

    @validator("title")
    def validate_title(cls, v):
        if v is None:
            return v
        if not v.strip():
            raise ValueError("Title is required")
        return v.strip()


class CourseCreated(BaseModel):
    course_id: str
    message: str = "Course created successfully"


class CourseDetail(BaseModel):
    id: str
    title: str
    description: str = ""
    subject: str = ""
    professor_name: str = ""
    modules: List[Module] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ==================== QUIZ SUBMISSION ====================

class QuizSubmission(BaseModel):
    module_index: int = Field(..., ge=0)
    # question index -> chosen option index; unanswered questions are absent
    answers: Dict[int, Optional[int]] = {}


class CompletionFlags(BaseModel):
    updated: bool
    upserted: bool


class QuizResult(BaseModel):
    module_score: int
    course_score: int
    correct: int
    answered: int
    total: int
    is_last_module: bool
    completion: Optional[CompletionFlags] = None
