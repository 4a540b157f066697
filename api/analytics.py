from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import List

from database.database import get_db
from models.enums import Action, Role, IncidentStatus
from models.models import (
    User, Quiz, QuizResult, TrainingMaterial, TrainingLog, TrainingAssignment, Incident
)
from schemas.progress_schema import ProgressSummaryResponse, TeamMemberProgress, DashboardSummaryResponse
from schemas.quiz_schema import QuizSummaryResponse
from schemas.training_schema import AssignmentResponse
from utils.auth import get_current_user
from utils.permissions import require_action
from utils.progress import aggregate_progress, average_score

router = APIRouter()


@router.get("/progress/me", response_model=ProgressSummaryResponse)
def get_my_progress(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Dashboard metrics for the signed-in user."""
    summary = aggregate_progress(
        current_user,
        quiz_results=db.query(QuizResult).filter(QuizResult.user_id == current_user.id).all(),
        view_logs=db.query(TrainingLog).filter(TrainingLog.user_id == current_user.id).all(),
        materials=db.query(TrainingMaterial).all(),
        quizzes=db.query(Quiz).order_by(Quiz.id.desc()).all(),
        assignments=db.query(TrainingAssignment).filter(
            TrainingAssignment.user_id == current_user.id
        ).order_by(TrainingAssignment.id.desc()).all()
    )

    return ProgressSummaryResponse(
        user_id=summary.user_id,
        training_completion_percent=summary.training_completion_percent,
        average_quiz_score_percent=summary.average_quiz_score_percent,
        has_quiz_data=summary.has_quiz_data,
        quizzes_taken=summary.quizzes_taken,
        materials_viewed=summary.materials_viewed,
        total_materials=summary.total_materials,
        pending_quizzes=[
            QuizSummaryResponse(id=quiz.id, title=quiz.title, category=quiz.category)
            for quiz in summary.pending_quizzes
        ],
        pending_assignments=[AssignmentResponse.model_validate(a) for a in summary.pending_assignments]
    )


@router.get("/progress/team", response_model=List[TeamMemberProgress])
def get_team_progress(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.VIEW_TEAM_PROGRESS))
):
    """Training completion and quiz averages for every worker."""
    workers = db.query(User).filter(User.role == Role.WORKER).order_by(User.display_name).all()

    # Fetch everything once; aggregate_progress picks out each worker's rows
    quiz_results = db.query(QuizResult).all()
    view_logs = db.query(TrainingLog).all()
    materials = db.query(TrainingMaterial).all()
    assignments = db.query(TrainingAssignment).all()

    rows = []
    for worker in workers:
        summary = aggregate_progress(
            worker,
            quiz_results=quiz_results,
            view_logs=view_logs,
            materials=materials,
            assignments=assignments
        )
        rows.append(TeamMemberProgress(
            user_id=worker.id,
            display_name=worker.display_name,
            email=worker.email,
            training_completion_percent=summary.training_completion_percent,
            average_quiz_score_percent=summary.average_quiz_score_percent,
            quizzes_taken=summary.quizzes_taken,
            pending_assignment_count=len(summary.pending_assignments),
            last_activity=worker.last_login
        ))
    return rows


@router.get("/dashboard/summary", response_model=DashboardSummaryResponse)
def get_dashboard_summary(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.VIEW_TEAM_PROGRESS))
):
    """Get a summary of key metrics for the manager dashboard."""
    # Count total users by role
    user_counts = db.query(User.role, func.count(User.id)).group_by(User.role).all()
    users_by_role = {role.value: 0 for role in Role}
    users_by_role.update({role.value: count for role, count in user_counts})

    incident_counts = db.query(Incident.status, func.count(Incident.id)).group_by(Incident.status).all()
    incidents_by_status = {status.value: 0 for status in IncidentStatus}
    incidents_by_status.update({status.value: count for status, count in incident_counts})

    return DashboardSummaryResponse(
        users_by_role=users_by_role,
        incidents_by_status=incidents_by_status,
        total_materials=db.query(func.count(TrainingMaterial.id)).scalar() or 0,
        total_quizzes=db.query(func.count(Quiz.id)).scalar() or 0,
        team_average_quiz_score_percent=average_score(db.query(QuizResult).all())
    )
