from pydantic import BaseModel, model_validator
from typing import Optional, List
from datetime import datetime

from models.enums import ContentCategory, AssignmentStatus


class TrainingMaterialResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    category: ContentCategory
    document_urls: List[str] = []
    image_urls: List[str] = []
    video_urls: List[str] = []
    uploaded_by: Optional[int] = None
    uploaded_at: Optional[datetime] = None
    views: int

    class Config:
        from_attributes = True


class TrainingLogResponse(BaseModel):
    id: int
    user_id: int
    material_id: int
    material_title: Optional[str] = None
    viewed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MaterialViewResponse(BaseModel):
    log: TrainingLogResponse
    views: int
    completed_assignment_ids: List[int]


class AssignmentCreate(BaseModel):
    user_id: int
    material_id: Optional[int] = None
    quiz_id: Optional[int] = None

    @model_validator(mode="after")
    def check_single_target(self):
        if (self.material_id is None) == (self.quiz_id is None):
            raise ValueError('Assign exactly one of material_id or quiz_id')
        return self


class AssignmentResponse(BaseModel):
    id: int
    user_id: int
    material_id: Optional[int] = None
    quiz_id: Optional[int] = None
    assigned_by: Optional[int] = None
    assigned_at: Optional[datetime] = None
    status: AssignmentStatus
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True
