from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from models.enums import AssignmentStatus
from models.models import TrainingAssignment


def complete_pending_assignments(
    db: Session,
    user_id: int,
    material_id: Optional[int] = None,
    quiz_id: Optional[int] = None
) -> List[TrainingAssignment]:
    """
    Mark the user's pending assignments for a material or quiz as completed.

    Only pending rows are touched, so repeat views or retakes never restamp an
    assignment. The caller commits.
    """
    if material_id is None and quiz_id is None:
        return []

    query = db.query(TrainingAssignment).filter(
        TrainingAssignment.user_id == user_id,
        TrainingAssignment.status == AssignmentStatus.PENDING
    )
    if material_id is not None:
        query = query.filter(TrainingAssignment.material_id == material_id)
    else:
        query = query.filter(TrainingAssignment.quiz_id == quiz_id)

    completed = query.all()
    now = datetime.utcnow()
    for assignment in completed:
        assignment.status = AssignmentStatus.COMPLETED
        assignment.completed_at = now
    return completed


def remove_pending_assignments(
    db: Session,
    material_id: Optional[int] = None,
    quiz_id: Optional[int] = None
) -> int:
    """
    Delete every pending assignment that targets a material or quiz being removed.

    Completed assignments stay as history. Returns the number of rows deleted.
    The caller commits.
    """
    if material_id is None and quiz_id is None:
        return 0

    query = db.query(TrainingAssignment).filter(TrainingAssignment.status == AssignmentStatus.PENDING)
    if material_id is not None:
        query = query.filter(TrainingAssignment.material_id == material_id)
    else:
        query = query.filter(TrainingAssignment.quiz_id == quiz_id)
    return query.delete(synchronize_session=False)
