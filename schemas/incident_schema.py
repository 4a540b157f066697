from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from models.enums import IncidentCategory, IncidentSeverity, IncidentStatus


class IncidentBase(BaseModel):
    title: str = Field(..., min_length=3)
    category: IncidentCategory
    severity: IncidentSeverity
    location: str = Field(..., min_length=2)
    description: str = Field(..., min_length=10)


class IncidentCreate(IncidentBase):
    pass


class IncidentCommentCreate(BaseModel):
    comment: str = Field(..., min_length=1)


class IncidentCommentResponse(BaseModel):
    id: int
    user_id: int
    comment: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class IncidentStatusUpdate(BaseModel):
    status: IncidentStatus


class IncidentResponse(IncidentBase):
    id: int
    reported_by: int
    status: IncidentStatus
    media_urls: List[str] = []
    reported_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    comments: List[IncidentCommentResponse] = []

    class Config:
        from_attributes = True


class IncidentSummaryResponse(BaseModel):
    incident_id: int
    summary: str
