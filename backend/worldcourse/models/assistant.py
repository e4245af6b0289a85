"""Teaching assistant model."""

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Integer, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base
from .enums import AssistantStatus


class Assistant(Base):
    """Assistant record kept by admins; not a login account."""
    __tablename__ = "assistants"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(50))
    subject = Column(String(100), nullable=False)
    availability = Column(String(100), nullable=False)
    status = Column(SQLEnum(AssistantStatus), nullable=False, default=AssistantStatus.pending)
    qualifications = Column(Text)
    specializations = Column(Text)
    role_description = Column(Text)
    teacher_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    teacher = relationship("worldcourse.auth.models.User", foreign_keys=[teacher_id])

    def __repr__(self):
        return f"<Assistant(id={self.id}, email='{self.email}', status={self.status})>"
