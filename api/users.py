from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime
import logging

from database.database import get_db
from models.enums import Action, Role
from models.models import User
from schemas.user_schema import (
    UserCreate, UserResponse, UserUpdate, UserResponseWithToken, UserLogin,
    PasswordResetRequest, PasswordResetConfirm, MessageResponse
)
from utils import config
from utils.auth import (
    hash_password, verify_password, verify_token, create_token_for_user,
    create_password_reset_token, get_current_user, PASSWORD_RESET_PURPOSE
)
from utils.mailer import send_password_reset_email
from utils.permissions import can_perform, require_action

logger = logging.getLogger(__name__)

router = APIRouter()

RESET_REQUESTED_MESSAGE = "If an account exists for that email, a password reset link has been sent."


def _with_token(user: User) -> UserResponseWithToken:
    return UserResponseWithToken(
        id=user.id,
        email=user.email,
        display_name=user.display_name,
        role=user.role,
        photo_url=user.photo_url,
        created_at=user.created_at,
        last_login=user.last_login,
        access_token=create_token_for_user(user),
        token_type="bearer"
    )


@router.post("/", response_model=UserResponseWithToken)
def create_user(user: UserCreate, db: Session = Depends(get_db)):
    """Sign up. A valid manager access code grants the manager role. Returns user data with JWT token."""
    role = Role.WORKER
    if user.manager_access_code:
        if not config.MANAGER_ACCESS_CODE or user.manager_access_code != config.MANAGER_ACCESS_CODE:
            raise HTTPException(status_code=400, detail="Invalid Manager Access Code")
        role = Role.MANAGER

    # Check if user with email already exists
    existing_user = db.query(User).filter(User.email == user.email).first()
    if existing_user:
        raise HTTPException(status_code=400, detail="Email already registered")

    db_user = User(
        email=user.email,
        display_name=user.display_name,
        role=role,
        password=hash_password(user.password),
        last_login=datetime.utcnow()
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)

    logger.info(f"Registered {role.value} account {db_user.id}")
    return _with_token(db_user)


@router.post("/login", response_model=UserResponseWithToken)
def login_user(user_login: UserLogin, db: Session = Depends(get_db)):
    """Login user with email and password. Returns user data with JWT token."""
    db_user = db.query(User).filter(User.email == user_login.email.strip().lower()).first()

    if not db_user or not verify_password(user_login.password, db_user.password):
        raise HTTPException(
            status_code=401,
            detail="Invalid email or password"
        )

    db_user.last_login = datetime.utcnow()
    db.commit()
    db.refresh(db_user)

    return _with_token(db_user)


@router.post("/password-reset", response_model=MessageResponse)
def request_password_reset(request: PasswordResetRequest, db: Session = Depends(get_db)):
    """Email a password reset link. The response never reveals whether the account exists."""
    db_user = db.query(User).filter(User.email == request.email.strip().lower()).first()
    if db_user:
        if not send_password_reset_email(db_user, create_password_reset_token(db_user)):
            logger.warning(f"Password reset email for user {db_user.id} was not delivered")
    return MessageResponse(message=RESET_REQUESTED_MESSAGE)


@router.post("/password-reset/confirm", response_model=MessageResponse)
def confirm_password_reset(request: PasswordResetConfirm, db: Session = Depends(get_db)):
    """Set a new password using a reset token."""
    payload = verify_token(request.token)
    if payload.get("purpose") != PASSWORD_RESET_PURPOSE:
        raise HTTPException(status_code=400, detail="Invalid password reset token")

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail="Invalid password reset token")

    db_user = db.query(User).filter(User.id == user_id).first()
    if not db_user:
        raise HTTPException(status_code=400, detail="Invalid password reset token")

    db_user.password = hash_password(request.new_password)
    db.commit()
    return MessageResponse(message="Password has been reset")


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """Get the signed-in user's profile."""
    return current_user


@router.put("/me", response_model=UserResponse)
def update_me(
    user_update: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update the signed-in user's profile."""
    update_data = user_update.dict(exclude_unset=True)

    # Hash password if it's being updated
    if update_data.get("password"):
        update_data["password"] = hash_password(update_data["password"])

    for key, value in update_data.items():
        if value is not None:
            setattr(current_user, key, value)

    db.commit()
    db.refresh(current_user)
    return current_user


@router.get("/", response_model=List[UserResponse])
def get_users(
    role: Optional[Role] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.VIEW_TEAM_PROGRESS))
):
    """Get all users with an optional role filter."""
    query = db.query(User)

    if role:
        query = query.filter(User.role == role)

    return query.order_by(User.display_name).all()


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get a specific user by ID. Workers may only look themselves up."""
    if user_id != current_user.id and not can_perform(Action.VIEW_TEAM_PROGRESS, current_user):
        raise HTTPException(status_code=403, detail="You do not have permission to perform this action")

    user = db.query(User).filter(User.id == user_id).first()

    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    return user
