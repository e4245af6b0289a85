"""Schemas for lectures."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from worldcourse.models.enums import LectureType


class LectureCreate(BaseModel):
    subject: str = Field(..., min_length=1, max_length=100)
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    video_url: Optional[str] = Field(default=None, max_length=500)
    pdf_url: Optional[str] = Field(default=None, max_length=500)
    duration: Optional[int] = Field(default=None, ge=0)
    type: LectureType = LectureType.video
    # Admins may publish on behalf of a teacher
    teacher_id: Optional[int] = None


class LectureUpdate(BaseModel):
    subject: Optional[str] = Field(default=None, min_length=1, max_length=100)
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    video_url: Optional[str] = Field(default=None, max_length=500)
    pdf_url: Optional[str] = Field(default=None, max_length=500)
    duration: Optional[int] = Field(default=None, ge=0)
    type: Optional[LectureType] = None


class LectureOut(BaseModel):
    id: int
    teacher_id: int
    subject: str
    title: str
    description: Optional[str] = None
    video_url: Optional[str] = None
    pdf_url: Optional[str] = None
    duration: Optional[int] = None
    type: LectureType
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
