"""Course and Enrollment models."""

from sqlalchemy import (
    Column, String, Text, DateTime, ForeignKey, Integer, Float, Boolean,
    Enum as SQLEnum, UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base
from .enums import EnrollmentStatus


class Course(Base):
    """Catalog entry; owns its assessments and enrollments."""
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    subject = Column(String(100), index=True)
    level = Column(String(50), nullable=False)
    description = Column(Text)
    icon = Column(String(100))
    price = Column(Float, nullable=False, default=0)
    instructor_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    instructor = relationship("worldcourse.auth.models.User", back_populates="taught_courses")
    enrollments = relationship("Enrollment", back_populates="course", cascade="all, delete-orphan")
    assessments = relationship("Assessment", back_populates="course")

    def __repr__(self):
        return f"<Course(id={self.id}, title='{self.title}')>"

    @property
    def active_enrollments(self):
        return [e for e in self.enrollments if e.status == EnrollmentStatus.active]

    @property
    def student_count(self):
        return len(self.active_enrollments)


class Enrollment(Base):
    """Access grant linking a user to a course."""
    __tablename__ = "enrollments"
    __table_args__ = (UniqueConstraint("user_id", "course_id", name="uq_enrollment_user_course"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    status = Column(SQLEnum(EnrollmentStatus), nullable=False, default=EnrollmentStatus.active)
    progress = Column(Integer, nullable=False, default=0)
    granted_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    enrolled_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("worldcourse.auth.models.User", foreign_keys=[user_id], back_populates="enrollments")
    course = relationship("Course", back_populates="enrollments")

    def __repr__(self):
        return f"<Enrollment(user_id={self.user_id}, course_id={self.course_id}, status={self.status})>"

    @property
    def is_active(self) -> bool:
        return self.status == EnrollmentStatus.active
