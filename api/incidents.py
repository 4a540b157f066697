from fastapi import APIRouter, Depends, HTTPException, File, UploadFile
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime
import logging

from database.database import get_db
from models.enums import Action, IncidentStatus
from models.models import Incident, IncidentComment, User
from schemas.incident_schema import (
    IncidentCreate, IncidentResponse, IncidentStatusUpdate,
    IncidentCommentCreate, IncidentCommentResponse, IncidentSummaryResponse
)
from utils.auth import get_current_user
from utils.permissions import can_perform, require_action
from utils.storage import classify_file, save_upload, delete_media
from utils.summarizer import IncidentSummarizer, SummarizerError, SummarizerUnavailable, get_summarizer

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter()

FORBIDDEN = "You do not have permission to perform this action"


def _get_visible_incident(db: Session, incident_id: int, user: User) -> Incident:
    """Load an incident the user is allowed to see, else 404/403."""
    incident = db.query(Incident).filter(Incident.id == incident_id).first()
    if not incident:
        raise HTTPException(status_code=404, detail="Incident not found")

    if not (
        can_perform(Action.VIEW_ALL_INCIDENTS, user)
        or can_perform(Action.VIEW_OWN_INCIDENTS_ONLY, user, resource_owner_id=incident.reported_by)
    ):
        raise HTTPException(status_code=403, detail=FORBIDDEN)
    return incident


@router.post("/", response_model=IncidentResponse)
def report_incident(
    incident: IncidentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.REPORT_INCIDENT))
):
    """Report a new incident. It starts out Pending."""
    db_incident = Incident(
        reported_by=current_user.id,
        title=incident.title,
        description=incident.description,
        category=incident.category,
        location=incident.location,
        severity=incident.severity,
        status=IncidentStatus.PENDING,
        media_urls=[]
    )
    db.add(db_incident)
    db.commit()
    db.refresh(db_incident)

    logger.info(f"Incident {db_incident.id} ({incident.severity.value}) reported by user {current_user.id}")
    return db_incident


@router.post("/{incident_id}/media", response_model=IncidentResponse)
def upload_incident_media(
    incident_id: int,
    files: List[UploadFile] = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Attach photos, videos or documents to an incident. Reporter or managers only."""
    incident = _get_visible_incident(db, incident_id, current_user)
    if incident.reported_by != current_user.id and not can_perform(Action.CHANGE_INCIDENT_STATUS, current_user):
        raise HTTPException(status_code=403, detail=FORBIDDEN)

    for upload in files:
        if classify_file(upload.filename or "") is None:
            raise HTTPException(status_code=400, detail=f"Unsupported file type: {upload.filename}")

    new_urls = [save_upload(upload, f"incidents/{incident.id}") for upload in files]
    # Reassign so the JSON column is flagged dirty
    incident.media_urls = list(incident.media_urls or []) + new_urls
    db.commit()
    db.refresh(incident)
    return incident


@router.get("/", response_model=List[IncidentResponse])
def get_incidents(
    status: Optional[IncidentStatus] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Managers see every incident; workers see the ones they reported."""
    query = db.query(Incident)

    if can_perform(Action.VIEW_ALL_INCIDENTS, current_user):
        pass
    elif can_perform(Action.VIEW_OWN_INCIDENTS_ONLY, current_user):
        query = query.filter(Incident.reported_by == current_user.id)
    else:
        raise HTTPException(status_code=403, detail=FORBIDDEN)

    if status:
        query = query.filter(Incident.status == status)

    return query.order_by(Incident.id.desc()).all()


@router.get("/{incident_id}", response_model=IncidentResponse)
def get_incident(
    incident_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get a specific incident with its comments."""
    return _get_visible_incident(db, incident_id, current_user)


@router.patch("/{incident_id}/status", response_model=IncidentResponse)
def change_incident_status(
    incident_id: int,
    status_update: IncidentStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.CHANGE_INCIDENT_STATUS))
):
    """Move an incident between Pending, In Progress and Resolved."""
    incident = _get_visible_incident(db, incident_id, current_user)

    previous = incident.status
    incident.status = status_update.status
    if status_update.status == IncidentStatus.RESOLVED:
        if previous != IncidentStatus.RESOLVED:
            incident.resolved_at = datetime.utcnow()
    else:
        incident.resolved_at = None

    db.commit()
    db.refresh(incident)

    logger.info(
        f"Incident {incident.id} status {previous.value} -> {incident.status.value} by user {current_user.id}"
    )
    return incident


@router.delete("/{incident_id}")
def archive_incident(
    incident_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.ARCHIVE_INCIDENT))
):
    """Archive (remove) an incident with its comments and stored media."""
    incident = _get_visible_incident(db, incident_id, current_user)
    media_urls = list(incident.media_urls or [])

    db.delete(incident)
    db.commit()

    for url in media_urls:
        delete_media(url)

    logger.info(f"Incident {incident_id} archived by user {current_user.id}")
    return {"message": "Incident archived", "id": incident_id}


@router.post("/{incident_id}/comments", response_model=IncidentCommentResponse)
def add_incident_comment(
    incident_id: int,
    comment: IncidentCommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.COMMENT_ON_INCIDENT))
):
    """Add a management note to an incident."""
    incident = _get_visible_incident(db, incident_id, current_user)

    text = comment.comment.strip()
    if not text:
        raise HTTPException(status_code=400, detail="Comment cannot be empty")

    db_comment = IncidentComment(
        incident_id=incident.id,
        user_id=current_user.id,
        comment=text
    )
    db.add(db_comment)
    db.commit()
    db.refresh(db_comment)
    return db_comment


@router.post("/{incident_id}/summary", response_model=IncidentSummaryResponse)
def summarize_incident(
    incident_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    summarizer: IncidentSummarizer = Depends(get_summarizer)
):
    """Generate a short AI summary of an incident report."""
    incident = _get_visible_incident(db, incident_id, current_user)

    report = (
        f"Title: {incident.title}\n"
        f"Category: {incident.category.value}\n"
        f"Severity: {incident.severity.value}\n"
        f"Location: {incident.location}\n\n"
        f"{incident.description}"
    )
    try:
        summary = summarizer.summarize(report)
    except SummarizerUnavailable:
        raise HTTPException(status_code=503, detail="Summarization is not configured")
    except SummarizerError:
        raise HTTPException(status_code=502, detail="Failed to generate summary.")

    return IncidentSummaryResponse(incident_id=incident.id, summary=summary)
