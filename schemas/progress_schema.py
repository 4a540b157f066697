from pydantic import BaseModel
from typing import Optional, List, Dict
from datetime import datetime

from schemas.quiz_schema import QuizSummaryResponse
from schemas.training_schema import AssignmentResponse


class ProgressSummaryResponse(BaseModel):
    user_id: int
    training_completion_percent: int
    # null when the user has not taken any quiz yet
    average_quiz_score_percent: Optional[int] = None
    has_quiz_data: bool
    quizzes_taken: int
    materials_viewed: int
    total_materials: int
    pending_quizzes: List[QuizSummaryResponse]
    pending_assignments: List[AssignmentResponse]


class TeamMemberProgress(BaseModel):
    user_id: int
    display_name: str
    email: str
    training_completion_percent: int
    average_quiz_score_percent: Optional[int] = None
    quizzes_taken: int
    pending_assignment_count: int
    last_activity: Optional[datetime] = None


class DashboardSummaryResponse(BaseModel):
    users_by_role: Dict[str, int]
    incidents_by_status: Dict[str, int]
    total_materials: int
    total_quizzes: int
    team_average_quiz_score_percent: Optional[int] = None
