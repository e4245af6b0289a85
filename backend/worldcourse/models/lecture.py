"""Lecture model."""

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Integer, Boolean, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base
from .enums import LectureType


class Lecture(Base):
    """Recorded lesson or handout published by a teacher."""
    __tablename__ = "lectures"

    id = Column(Integer, primary_key=True, index=True)
    teacher_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    subject = Column(String(100), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    video_url = Column(String(500))
    pdf_url = Column(String(500))
    duration = Column(Integer, nullable=True)  # minutes
    type = Column(SQLEnum(LectureType), nullable=False, default=LectureType.video)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    teacher = relationship("worldcourse.auth.models.User")

    def __repr__(self):
        return f"<Lecture(id={self.id}, title='{self.title}', type={self.type})>"
