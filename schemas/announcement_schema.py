from pydantic import BaseModel, Field, validator
from typing import Optional
from datetime import datetime, timezone

from models.enums import AnnouncementPriority


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored timestamps are naive UTC."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class AnnouncementBase(BaseModel):
    title: str = Field(..., min_length=3)
    content: str = Field(..., min_length=1)
    priority: AnnouncementPriority = AnnouncementPriority.NORMAL
    expires_at: Optional[datetime] = None

    @validator('expires_at')
    def normalize_expiry(cls, v):
        return to_naive_utc(v)


class AnnouncementCreate(AnnouncementBase):
    pass


class AnnouncementUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3)
    content: Optional[str] = Field(None, min_length=1)
    priority: Optional[AnnouncementPriority] = None
    expires_at: Optional[datetime] = None

    @validator('expires_at')
    def normalize_expiry(cls, v):
        return to_naive_utc(v)


class AnnouncementResponse(AnnouncementBase):
    id: int
    posted_by: Optional[int] = None
    posted_at: datetime
    is_read: bool = False
    read_count: int = 0
