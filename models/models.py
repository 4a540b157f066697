from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, JSON, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from database.database import Base
from models.enums import (
    Role, ContentCategory, IncidentCategory, IncidentSeverity, IncidentStatus,
    AnnouncementPriority, AssignmentStatus
)


def enum_column(enum_cls, **kwargs):
    """Column storing the enum's value (not its name) as a plain string."""
    return Column(
        Enum(enum_cls, values_callable=lambda members: [m.value for m in members], native_enum=False,
             validate_strings=True, length=32),
        **kwargs
    )


# Main models
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    display_name = Column(String, nullable=False)
    role = enum_column(Role, nullable=False, default=Role.WORKER)
    password = Column(String, nullable=False)  # hashed password
    photo_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    last_login = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    quiz_results = relationship("QuizResult", back_populates="user")
    incidents = relationship("Incident", back_populates="reporter")


class Quiz(Base):
    __tablename__ = "quizzes"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text)
    category = enum_column(ContentCategory, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    cover_image_url = Column(String, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    questions = relationship(
        "Question", back_populates="quiz", order_by="Question.position", cascade="all, delete-orphan"
    )


class Question(Base):
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id"), nullable=False)
    position = Column(Integer, nullable=False)  # Order within the quiz
    text = Column(Text, nullable=False)
    options = Column(JSON, nullable=False)  # Exactly four option strings
    correct_option = Column(Integer, nullable=False)  # 0-3
    points = Column(Integer, nullable=False, default=10)

    # Relationships
    quiz = relationship("Quiz", back_populates="questions")


class QuizResult(Base):
    """One row per attempt. Never updated after insert. quiz_id has no foreign
    key so that results outlive deleted quizzes."""
    __tablename__ = "quiz_results"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    quiz_id = Column(Integer, nullable=False, index=True)
    quiz_title = Column(String)
    earned_points = Column(Integer, nullable=False)
    total_points = Column(Integer, nullable=False)
    percentage_score = Column(Integer, nullable=False)  # 0-100
    correct_count = Column(Integer, nullable=False)
    incorrect_count = Column(Integer, nullable=False)
    answers = Column(JSON, nullable=False)  # Selected option index or null per question
    completed_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="quiz_results")


class TrainingMaterial(Base):
    __tablename__ = "training_materials"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text)
    category = enum_column(ContentCategory, nullable=False)
    document_urls = Column(JSON, default=list)
    image_urls = Column(JSON, default=list)
    video_urls = Column(JSON, default=list)
    uploaded_by = Column(Integer, ForeignKey("users.id"))
    uploaded_at = Column(DateTime(timezone=True), server_default=func.now())
    views = Column(Integer, nullable=False, default=0)


class TrainingLog(Base):
    """Append-only view log. material_id has no foreign key so that
    logs outlive deleted materials."""
    __tablename__ = "training_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    material_id = Column(Integer, nullable=False, index=True)
    material_title = Column(String)
    viewed_at = Column(DateTime(timezone=True), server_default=func.now())


class TrainingAssignment(Base):
    __tablename__ = "training_assignments"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    material_id = Column(Integer, nullable=True)  # Either a material...
    quiz_id = Column(Integer, nullable=True)  # ...or a quiz
    assigned_by = Column(Integer, ForeignKey("users.id"))
    assigned_at = Column(DateTime(timezone=True), server_default=func.now())
    status = enum_column(AssignmentStatus, nullable=False, default=AssignmentStatus.PENDING)
    completed_at = Column(DateTime(timezone=True), nullable=True)


class Incident(Base):
    __tablename__ = "incidents"

    id = Column(Integer, primary_key=True, index=True)
    reported_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    category = enum_column(IncidentCategory, nullable=False)
    location = Column(String, nullable=False)
    severity = enum_column(IncidentSeverity, nullable=False)
    status = enum_column(IncidentStatus, nullable=False, default=IncidentStatus.PENDING)
    media_urls = Column(JSON, default=list)
    reported_at = Column(DateTime(timezone=True), server_default=func.now())
    resolved_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    reporter = relationship("User", back_populates="incidents")
    comments = relationship(
        "IncidentComment", back_populates="incident", order_by="IncidentComment.id", cascade="all, delete-orphan"
    )


class IncidentComment(Base):
    __tablename__ = "incident_comments"

    id = Column(Integer, primary_key=True, index=True)
    incident_id = Column(Integer, ForeignKey("incidents.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    comment = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    incident = relationship("Incident", back_populates="comments")


class Announcement(Base):
    __tablename__ = "announcements"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    priority = enum_column(AnnouncementPriority, nullable=False, default=AnnouncementPriority.NORMAL)
    posted_by = Column(Integer, ForeignKey("users.id"))
    posted_at = Column(DateTime(timezone=True), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    reads = relationship("AnnouncementRead", back_populates="announcement", cascade="all, delete-orphan")


class AnnouncementRead(Base):
    __tablename__ = "announcement_reads"
    __table_args__ = (UniqueConstraint("announcement_id", "user_id", name="uq_announcement_reader"),)

    id = Column(Integer, primary_key=True, index=True)
    announcement_id = Column(Integer, ForeignKey("announcements.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    read_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    announcement = relationship("Announcement", back_populates="reads")
