"""Assessment (assignment, quiz, exam) and Question models."""

from sqlalchemy import (
    Column, String, Text, DateTime, ForeignKey, Integer, Float, Boolean, JSON,
    Enum as SQLEnum,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base
from ..utils import ensure_utc, utcnow
from .enums import AssessmentKind, AssessmentStatus, QuestionType


class Assessment(Base):
    """Graded work attached to a course.

    Assignments, quizzes and exams share one table and differ by ``kind``.
    """
    __tablename__ = "assessments"

    id = Column(Integer, primary_key=True, index=True)
    kind = Column(SQLEnum(AssessmentKind), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    subject = Column(String(100))
    difficulty = Column(String(20), default="medium")
    attempts = Column(Integer, nullable=False, default=1)
    time_limit = Column(Integer, nullable=True)  # minutes
    due_date = Column(DateTime(timezone=True), nullable=True)
    allow_late_submission = Column(Boolean, default=False)
    late_penalty = Column(Float, default=0.0)  # fraction of the score removed
    is_active = Column(Boolean, default=True)
    published = Column(Boolean, default=False)
    status = Column(SQLEnum(AssessmentStatus), nullable=False, default=AssessmentStatus.draft)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    course = relationship("Course", back_populates="assessments")
    created_by_user = relationship("worldcourse.auth.models.User")
    questions = relationship(
        "Question",
        back_populates="assessment",
        order_by="Question.position",
        cascade="all, delete-orphan",
    )
    submissions = relationship(
        "Submission",
        back_populates="assessment",
        order_by="Submission.id",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Assessment(id={self.id}, kind={self.kind}, title='{self.title}')>"

    @property
    def total_points(self) -> float:
        """Sum of the question point values."""
        return sum(q.points or 0 for q in self.questions)

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def submission_count(self) -> int:
        return len(self.submissions)

    @property
    def is_open(self) -> bool:
        """Whether students may currently submit."""
        return bool(self.is_active and self.published and self.status == AssessmentStatus.available)

    def is_past_due(self, now=None) -> bool:
        if self.due_date is None:
            return False
        return (now or utcnow()) > ensure_utc(self.due_date)


class Question(Base):
    """One question of an assessment, ordered by ``position``."""
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)
    assessment_id = Column(Integer, ForeignKey("assessments.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    type = Column(SQLEnum(QuestionType), nullable=False, default=QuestionType.multiple_choice)
    text = Column(Text, nullable=False)
    options = Column(JSON, default=list)
    correct_answer = Column(Text, nullable=True)  # sample answer for text/file questions
    points = Column(Float, nullable=False, default=1)

    assessment = relationship("Assessment", back_populates="questions")

    def __repr__(self):
        return f"<Question(id={self.id}, position={self.position}, type={self.type})>"

    @property
    def is_objective(self) -> bool:
        return self.type == QuestionType.multiple_choice
