from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List
from datetime import datetime

from database.database import get_db
from models.enums import Action
from models.models import Announcement, AnnouncementRead, User
from schemas.announcement_schema import AnnouncementCreate, AnnouncementUpdate, AnnouncementResponse
from utils.auth import get_current_user
from utils.permissions import require_action

router = APIRouter()


def _announcement_response(announcement: Announcement, user: User) -> AnnouncementResponse:
    reader_ids = {read.user_id for read in announcement.reads}
    return AnnouncementResponse(
        id=announcement.id,
        title=announcement.title,
        content=announcement.content,
        priority=announcement.priority,
        expires_at=announcement.expires_at,
        posted_by=announcement.posted_by,
        posted_at=announcement.posted_at,
        is_read=user.id in reader_ids,
        read_count=len(reader_ids)
    )


def _get_announcement_or_404(db: Session, announcement_id: int) -> Announcement:
    announcement = db.query(Announcement).filter(Announcement.id == announcement_id).first()
    if not announcement:
        raise HTTPException(status_code=404, detail="Announcement not found")
    return announcement


@router.post("/", response_model=AnnouncementResponse)
def create_announcement(
    announcement: AnnouncementCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.CREATE_ANNOUNCEMENT))
):
    """Post an announcement to everyone."""
    db_announcement = Announcement(
        title=announcement.title,
        content=announcement.content,
        priority=announcement.priority,
        expires_at=announcement.expires_at,
        posted_by=current_user.id,
        posted_at=datetime.utcnow()
    )
    db.add(db_announcement)
    db.commit()
    db.refresh(db_announcement)
    return _announcement_response(db_announcement, current_user)


@router.get("/", response_model=List[AnnouncementResponse])
def get_announcements(
    include_expired: bool = False,
    limit: int = 50,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get announcements, newest first. Expired ones are hidden unless asked for."""
    query = db.query(Announcement)

    if not include_expired:
        query = query.filter(or_(
            Announcement.expires_at.is_(None),
            Announcement.expires_at > datetime.utcnow()
        ))

    announcements = query.order_by(
        Announcement.posted_at.desc(), Announcement.id.desc()
    ).limit(max(1, min(limit, 200))).all()
    return [_announcement_response(a, current_user) for a in announcements]


@router.get("/{announcement_id}", response_model=AnnouncementResponse)
def get_announcement(
    announcement_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get a specific announcement."""
    return _announcement_response(_get_announcement_or_404(db, announcement_id), current_user)


@router.put("/{announcement_id}", response_model=AnnouncementResponse)
def update_announcement(
    announcement_id: int,
    announcement_update: AnnouncementUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.EDIT_ANNOUNCEMENT))
):
    """Update an announcement. Sending expires_at as null removes the expiry."""
    announcement = _get_announcement_or_404(db, announcement_id)

    update_data = announcement_update.dict(exclude_unset=True)
    for key, value in update_data.items():
        if value is None and key != "expires_at":
            continue
        setattr(announcement, key, value)

    db.commit()
    db.refresh(announcement)
    return _announcement_response(announcement, current_user)


@router.delete("/{announcement_id}")
def delete_announcement(
    announcement_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.DELETE_ANNOUNCEMENT))
):
    """Delete an announcement and its read receipts."""
    announcement = _get_announcement_or_404(db, announcement_id)
    db.delete(announcement)
    db.commit()
    return {"message": "Announcement deleted", "id": announcement_id}


@router.post("/{announcement_id}/read", response_model=AnnouncementResponse)
def mark_announcement_read(
    announcement_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Record that the user has read an announcement. Repeating the call is harmless."""
    announcement = _get_announcement_or_404(db, announcement_id)

    already_read = db.query(AnnouncementRead).filter(
        AnnouncementRead.announcement_id == announcement.id,
        AnnouncementRead.user_id == current_user.id
    ).first()
    if not already_read:
        db.add(AnnouncementRead(announcement_id=announcement.id, user_id=current_user.id))
        try:
            db.commit()
        except IntegrityError:
            # A concurrent request recorded the same receipt
            db.rollback()

    db.refresh(announcement)
    return _announcement_response(announcement, current_user)
