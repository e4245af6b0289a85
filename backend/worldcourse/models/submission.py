"""Submission model."""

from sqlalchemy import (
    Column, DateTime, ForeignKey, Integer, Float, Boolean, JSON,
    Enum as SQLEnum, UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base
from .enums import SubmissionStatus


class Submission(Base):
    """One student's attempt at an assessment."""
    __tablename__ = "submissions"
    # Storage-level guard for the attempt limit: two concurrent inserts for the
    # same attempt number cannot both succeed.
    __table_args__ = (
        UniqueConstraint("assessment_id", "student_id", "attempt_number", name="uq_submission_attempt"),
    )

    id = Column(Integer, primary_key=True, index=True)
    assessment_id = Column(Integer, ForeignKey("assessments.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    attempt_number = Column(Integer, nullable=False, default=1)
    answers = Column(JSON, nullable=False, default=list)
    time_spent = Column(Integer, nullable=True)  # seconds
    score = Column(Float, nullable=False, default=0)
    percentage = Column(Integer, nullable=False, default=0)
    # [{"question_index", "points_awarded", "max_points", "is_correct", "comments"}, ...]
    grading = Column(JSON, nullable=False, default=list)
    teacher_comments = Column(JSON, nullable=False, default=list)
    status = Column(SQLEnum(SubmissionStatus), nullable=False, default=SubmissionStatus.submitted)
    is_late = Column(Boolean, default=False)
    needs_manual_grading = Column(Boolean, default=False)
    submitted_at = Column(DateTime(timezone=True), server_default=func.now())
    graded_at = Column(DateTime(timezone=True), nullable=True)
    graded_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    # Relationships
    assessment = relationship("Assessment", back_populates="submissions")
    student = relationship("worldcourse.auth.models.User", foreign_keys=[student_id])
    grader = relationship("worldcourse.auth.models.User", foreign_keys=[graded_by])

    def __repr__(self):
        return (
            f"<Submission(id={self.id}, assessment_id={self.assessment_id}, "
            f"student_id={self.student_id}, attempt={self.attempt_number})>"
        )

    @property
    def is_graded(self) -> bool:
        return self.status == SubmissionStatus.graded
