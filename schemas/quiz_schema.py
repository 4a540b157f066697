from pydantic import BaseModel, Field, validator, conint
from typing import Optional, List
from datetime import datetime

from models.enums import ContentCategory


class QuestionBase(BaseModel):
    text: str = Field(..., min_length=5)
    options: List[str]  # Exactly four, in display order
    points: int = Field(10, ge=1)

    @validator('options')
    def validate_options(cls, v):
        if len(v) != 4:
            raise ValueError('A question must have exactly 4 options')
        if any(not option.strip() for option in v):
            raise ValueError('Option cannot be empty')
        return v


class QuestionCreate(QuestionBase):
    correct_option: int = Field(..., ge=0, le=3)


class QuestionResponse(BaseModel):
    id: int
    position: int
    text: str
    options: List[str]
    points: int
    # Only returned to managers
    correct_option: Optional[int] = None

    class Config:
        from_attributes = True


class QuizBase(BaseModel):
    title: str = Field(..., min_length=3)
    description: str = Field(..., min_length=10)
    category: ContentCategory
    duration_minutes: int = Field(..., ge=1)


class QuizCreate(QuizBase):
    questions: List[QuestionCreate] = Field(..., min_length=1)


class QuizUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3)
    description: Optional[str] = Field(None, min_length=10)
    category: Optional[ContentCategory] = None
    duration_minutes: Optional[int] = Field(None, ge=1)
    questions: Optional[List[QuestionCreate]] = Field(None, min_length=1)


class QuizResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    category: ContentCategory
    duration_minutes: int
    cover_image_url: Optional[str] = None
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    total_points: int
    questions: List[QuestionResponse]


class QuizSummaryResponse(BaseModel):
    id: int
    title: str
    category: ContentCategory


class QuizSubmission(BaseModel):
    # One option index per question, null when left unanswered. Strict so
    # that JSON booleans are rejected instead of read as 0/1
    answers: List[Optional[conint(strict=True, ge=0)]]


class QuizResultResponse(BaseModel):
    id: int
    user_id: int
    quiz_id: int
    quiz_title: Optional[str] = None
    earned_points: int
    total_points: int
    percentage_score: int
    correct_count: int
    incorrect_count: int
    answers: List[Optional[int]]
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True
