from fastapi import APIRouter, Depends, HTTPException, File, UploadFile, Form
from sqlalchemy.orm import Session
from typing import List, Optional
import os
import logging

from database.database import get_db
from models.enums import Action, AssignmentStatus, ContentCategory, ContentType
from models.models import TrainingMaterial, TrainingLog, TrainingAssignment, Quiz, User
from schemas.training_schema import (
    TrainingMaterialResponse, TrainingLogResponse, MaterialViewResponse,
    AssignmentCreate, AssignmentResponse
)
from utils.assignments import complete_pending_assignments, remove_pending_assignments
from utils.auth import get_current_user
from utils.permissions import require_action
from utils.storage import EXTENSIONS, classify_file, save_upload, delete_media

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter()

URL_FIELDS = {
    ContentType.DOCUMENT: "document_urls",
    ContentType.IMAGE: "image_urls",
    ContentType.VIDEO: "video_urls",
}


def _classify_link(url: str) -> ContentType:
    # Links without a known media extension (e.g. hosted videos, web pages) count as documents
    path = url.split("?", 1)[0].split("#", 1)[0]
    return classify_file(os.path.basename(path)) or ContentType.DOCUMENT


def _get_material_or_404(db: Session, material_id: int) -> TrainingMaterial:
    material = db.query(TrainingMaterial).filter(TrainingMaterial.id == material_id).first()
    if not material:
        raise HTTPException(status_code=404, detail="Training material not found")
    return material


@router.post("/materials", response_model=TrainingMaterialResponse)
def upload_training_material(
    title: str = Form(...),
    description: str = Form(...),
    category: ContentCategory = Form(...),
    links: List[str] = Form([]),
    files: Optional[List[UploadFile]] = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.UPLOAD_TRAINING_MATERIAL))
):
    """Upload training content. Files are sorted into documents, images and videos by extension."""
    title = title.strip()
    description = description.strip()
    if len(title) < 3:
        raise HTTPException(status_code=400, detail="Title must be at least 3 characters")
    if len(description) < 10:
        raise HTTPException(status_code=400, detail="Description must be at least 10 characters")

    files = [f for f in (files or []) if f.filename]
    links = [link.strip() for link in links if link and link.strip()]
    if not files and not links:
        raise HTTPException(status_code=400, detail="Provide at least one file or link")

    for link in links:
        if not link.startswith(("http://", "https://")):
            raise HTTPException(status_code=400, detail=f"Please enter a valid URL: {link}")

    classified = []
    for upload in files:
        content_type = classify_file(upload.filename)
        if content_type is None:
            allowed = sorted(set().union(*EXTENSIONS.values()))
            raise HTTPException(
                status_code=400,
                detail=f"Unsupported file type: {upload.filename}. Allowed types: {', '.join(allowed)}"
            )
        classified.append((content_type, upload))

    saved_urls = []
    try:
        urls = {field: [] for field in URL_FIELDS.values()}
        for content_type, upload in classified:
            url = save_upload(upload, f"training/{content_type.value}s")
            saved_urls.append(url)
            urls[URL_FIELDS[content_type]].append(url)
        for link in links:
            urls[URL_FIELDS[_classify_link(link)]].append(link)

        material = TrainingMaterial(
            title=title,
            description=description,
            category=category,
            uploaded_by=current_user.id,
            views=0,
            **urls
        )
        db.add(material)
        db.commit()
    except Exception as e:
        db.rollback()
        # Remove files stored for a material that was never saved
        for url in saved_urls:
            delete_media(url)
        logger.error(f"Error saving training material: {e}")
        raise HTTPException(status_code=500, detail="Error saving training material")

    db.refresh(material)

    logger.info(f"Training material {material.id} uploaded by user {current_user.id}")
    return material


@router.get("/materials", response_model=List[TrainingMaterialResponse])
def get_training_materials(
    category: Optional[ContentCategory] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get all training materials, newest first, with an optional category filter."""
    query = db.query(TrainingMaterial)

    if category:
        query = query.filter(TrainingMaterial.category == category)

    return query.order_by(TrainingMaterial.id.desc()).all()


@router.get("/materials/{material_id}", response_model=TrainingMaterialResponse)
def get_training_material(
    material_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get a specific training material."""
    return _get_material_or_404(db, material_id)


@router.delete("/materials/{material_id}")
def delete_training_material(
    material_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.DELETE_TRAINING_MATERIAL))
):
    """Delete a training material and its stored files. View logs and completed
    assignments are kept; pending assignments for it are dropped."""
    material = _get_material_or_404(db, material_id)
    stored_urls = (material.document_urls or []) + (material.image_urls or []) + (material.video_urls or [])

    db.delete(material)
    removed = remove_pending_assignments(db, material_id=material_id)
    db.commit()

    for url in stored_urls:
        delete_media(url)

    logger.info(
        f"Training material {material_id} deleted by user {current_user.id} "
        f"({removed} pending assignments removed)"
    )
    return {"message": "Training material deleted", "id": material_id}


@router.post("/materials/{material_id}/view", response_model=MaterialViewResponse)
def record_material_view(
    material_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Log that the user opened a material and complete any pending assignment for it."""
    material = _get_material_or_404(db, material_id)

    log = TrainingLog(
        user_id=current_user.id,
        material_id=material.id,
        material_title=material.title
    )
    db.add(log)
    material.views = (material.views or 0) + 1
    completed = complete_pending_assignments(db, current_user.id, material_id=material.id)
    db.commit()
    db.refresh(log)
    db.refresh(material)

    return MaterialViewResponse(
        log=TrainingLogResponse.model_validate(log),
        views=material.views,
        completed_assignment_ids=[assignment.id for assignment in completed]
    )


@router.get("/logs/me", response_model=List[TrainingLogResponse])
def get_my_training_logs(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get the signed-in user's view history, newest first."""
    return db.query(TrainingLog).filter(
        TrainingLog.user_id == current_user.id
    ).order_by(TrainingLog.id.desc()).all()


@router.post("/assignments", response_model=AssignmentResponse)
def create_assignment(
    assignment: AssignmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.VIEW_TEAM_PROGRESS))
):
    """Assign a training material or quiz to a team member."""
    if not db.query(User).filter(User.id == assignment.user_id).first():
        raise HTTPException(status_code=404, detail="User not found")

    query = db.query(TrainingAssignment).filter(
        TrainingAssignment.user_id == assignment.user_id,
        TrainingAssignment.status == AssignmentStatus.PENDING
    )
    if assignment.material_id is not None:
        _get_material_or_404(db, assignment.material_id)
        query = query.filter(TrainingAssignment.material_id == assignment.material_id)
    else:
        if not db.query(Quiz).filter(Quiz.id == assignment.quiz_id).first():
            raise HTTPException(status_code=404, detail="Quiz not found")
        query = query.filter(TrainingAssignment.quiz_id == assignment.quiz_id)

    if query.first():
        raise HTTPException(status_code=400, detail="User already has a pending assignment for this item")

    db_assignment = TrainingAssignment(
        user_id=assignment.user_id,
        material_id=assignment.material_id,
        quiz_id=assignment.quiz_id,
        assigned_by=current_user.id,
        status=AssignmentStatus.PENDING
    )
    db.add(db_assignment)
    db.commit()
    db.refresh(db_assignment)

    logger.info(f"Assignment {db_assignment.id} created for user {assignment.user_id}")
    return db_assignment


@router.get("/assignments/me", response_model=List[AssignmentResponse])
def get_my_assignments(
    status: Optional[AssignmentStatus] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get the signed-in user's assignments with an optional status filter."""
    query = db.query(TrainingAssignment).filter(TrainingAssignment.user_id == current_user.id)

    if status:
        query = query.filter(TrainingAssignment.status == status)

    return query.order_by(TrainingAssignment.id.desc()).all()


@router.get("/assignments", response_model=List[AssignmentResponse])
def get_assignments(
    user_id: Optional[int] = None,
    status: Optional[AssignmentStatus] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.VIEW_TEAM_PROGRESS))
):
    """Get assignments across the team with optional filters."""
    query = db.query(TrainingAssignment)

    if user_id:
        query = query.filter(TrainingAssignment.user_id == user_id)

    if status:
        query = query.filter(TrainingAssignment.status == status)

    return query.order_by(TrainingAssignment.id.desc()).all()
