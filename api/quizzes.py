from fastapi import APIRouter, Depends, HTTPException, File, UploadFile
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database.database import get_db
from models.enums import Action, ContentCategory, ContentType
from models.models import Quiz, Question, QuizResult, User
from schemas.quiz_schema import (
    QuizCreate, QuizUpdate, QuizResponse, QuestionCreate, QuestionResponse,
    QuizSubmission, QuizResultResponse
)
from utils.assignments import complete_pending_assignments, remove_pending_assignments
from utils.auth import get_current_user
from utils.permissions import can_perform, require_action
from utils.scoring import score_quiz, InvalidAttemptError
from utils.storage import classify_file, save_upload, delete_media

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter()


def _quiz_response(quiz: Quiz, include_answers: bool) -> QuizResponse:
    return QuizResponse(
        id=quiz.id,
        title=quiz.title,
        description=quiz.description,
        category=quiz.category,
        duration_minutes=quiz.duration_minutes,
        cover_image_url=quiz.cover_image_url,
        created_by=quiz.created_by,
        created_at=quiz.created_at,
        total_points=sum(question.points for question in quiz.questions),
        questions=[
            QuestionResponse(
                id=question.id,
                position=question.position,
                text=question.text,
                options=question.options,
                points=question.points,
                correct_option=question.correct_option if include_answers else None
            )
            for question in quiz.questions
        ]
    )


def _build_questions(questions: List[QuestionCreate]) -> List[Question]:
    return [
        Question(
            position=position,
            text=question.text,
            options=list(question.options),
            correct_option=question.correct_option,
            points=question.points
        )
        for position, question in enumerate(questions)
    ]


def _get_quiz_or_404(db: Session, quiz_id: int) -> Quiz:
    quiz = db.query(Quiz).filter(Quiz.id == quiz_id).first()
    if not quiz:
        raise HTTPException(status_code=404, detail="Quiz not found")
    return quiz


@router.post("/", response_model=QuizResponse)
def create_quiz(
    quiz: QuizCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.CREATE_QUIZ))
):
    """Create a quiz together with its questions."""
    db_quiz = Quiz(
        title=quiz.title,
        description=quiz.description,
        category=quiz.category,
        duration_minutes=quiz.duration_minutes,
        created_by=current_user.id,
        questions=_build_questions(quiz.questions)
    )
    db.add(db_quiz)
    db.commit()
    db.refresh(db_quiz)

    logger.info(f"Quiz {db_quiz.id} created by user {current_user.id}")
    return _quiz_response(db_quiz, include_answers=True)


@router.get("/results/me", response_model=List[QuizResultResponse])
def get_my_results(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get the signed-in user's quiz results, newest first."""
    return db.query(QuizResult).filter(
        QuizResult.user_id == current_user.id
    ).order_by(QuizResult.id.desc()).all()


@router.get("/results", response_model=List[QuizResultResponse])
def get_results(
    user_id: Optional[int] = None,
    quiz_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.VIEW_TEAM_PROGRESS))
):
    """Get quiz results across the team with optional filters."""
    query = db.query(QuizResult)

    if user_id:
        query = query.filter(QuizResult.user_id == user_id)

    if quiz_id:
        query = query.filter(QuizResult.quiz_id == quiz_id)

    return query.order_by(QuizResult.id.desc()).all()


@router.get("/", response_model=List[QuizResponse])
def get_quizzes(
    category: Optional[ContentCategory] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get all quizzes with an optional category filter."""
    query = db.query(Quiz)

    if category:
        query = query.filter(Quiz.category == category)

    include_answers = can_perform(Action.EDIT_QUIZ, current_user)
    return [_quiz_response(quiz, include_answers) for quiz in query.order_by(Quiz.id.desc()).all()]


@router.get("/{quiz_id}", response_model=QuizResponse)
def get_quiz(
    quiz_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get a specific quiz. Correct answers are only included for quiz editors."""
    quiz = _get_quiz_or_404(db, quiz_id)
    return _quiz_response(quiz, include_answers=can_perform(Action.EDIT_QUIZ, current_user))


@router.put("/{quiz_id}", response_model=QuizResponse)
def update_quiz(
    quiz_id: int,
    quiz_update: QuizUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.EDIT_QUIZ))
):
    """Update a quiz. A new question list replaces the old one; past results are kept."""
    quiz = _get_quiz_or_404(db, quiz_id)
    update_data = quiz_update.dict(exclude_unset=True)

    if quiz_update.questions is not None:
        quiz.questions = _build_questions(quiz_update.questions)
    update_data.pop("questions", None)

    for key, value in update_data.items():
        if value is not None:
            setattr(quiz, key, value)

    db.commit()
    db.refresh(quiz)
    return _quiz_response(quiz, include_answers=True)


@router.delete("/{quiz_id}")
def delete_quiz(
    quiz_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.DELETE_QUIZ))
):
    """Delete a quiz, its questions and cover image. Past results are kept;
    pending assignments for the quiz are dropped."""
    quiz = _get_quiz_or_404(db, quiz_id)
    cover_image_url = quiz.cover_image_url

    db.delete(quiz)
    removed = remove_pending_assignments(db, quiz_id=quiz_id)
    db.commit()

    if cover_image_url:
        delete_media(cover_image_url)

    logger.info(f"Quiz {quiz_id} deleted by user {current_user.id} ({removed} pending assignments removed)")
    return {"message": "Quiz deleted", "id": quiz_id}


@router.post("/{quiz_id}/cover", response_model=QuizResponse)
def upload_quiz_cover(
    quiz_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.EDIT_QUIZ))
):
    """Upload or replace a quiz's cover image."""
    quiz = _get_quiz_or_404(db, quiz_id)

    if classify_file(file.filename or "") != ContentType.IMAGE:
        raise HTTPException(status_code=400, detail="Cover must be an image file")

    previous_url = quiz.cover_image_url
    quiz.cover_image_url = save_upload(file, "quiz-covers")
    db.commit()
    db.refresh(quiz)

    if previous_url:
        delete_media(previous_url)

    return _quiz_response(quiz, include_answers=True)


@router.post("/{quiz_id}/submit", response_model=QuizResultResponse)
def submit_quiz(
    quiz_id: int,
    submission: QuizSubmission,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Score an attempt and record the result."""
    quiz = _get_quiz_or_404(db, quiz_id)

    try:
        score = score_quiz(quiz, submission.answers)
    except InvalidAttemptError as e:
        raise HTTPException(status_code=400, detail=str(e))

    result = QuizResult(
        user_id=current_user.id,
        quiz_id=quiz.id,
        quiz_title=quiz.title,
        earned_points=score.earned_points,
        total_points=score.total_points,
        percentage_score=score.percentage_score,
        correct_count=score.correct_count,
        incorrect_count=score.incorrect_count,
        answers=list(submission.answers)
    )
    db.add(result)
    complete_pending_assignments(db, current_user.id, quiz_id=quiz.id)
    db.commit()
    db.refresh(result)

    logger.info(
        f"User {current_user.id} scored {score.percentage_score}% on quiz {quiz.id} "
        f"({score.earned_points}/{score.total_points} points)"
    )
    return result
