"""Schemas for courses, enrollments and admin access management."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from worldcourse.models.enums import EnrollmentStatus, UserRole


class CourseCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    subject: Optional[str] = None
    level: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = None
    icon: Optional[str] = None
    price: float = Field(..., ge=0)
    instructor_id: Optional[int] = None
    is_active: bool = True


class CourseOut(BaseModel):
    id: int
    title: str
    subject: Optional[str] = None
    level: str
    description: Optional[str] = None
    icon: Optional[str] = None
    price: float
    instructor_id: Optional[int] = None
    is_active: bool
    student_count: int = 0
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class EnrollmentOut(BaseModel):
    id: int
    user_id: int
    course_id: int
    course_title: Optional[str] = None
    course_level: Optional[str] = None
    status: EnrollmentStatus
    progress: int
    granted_by: Optional[int] = None
    enrolled_at: Optional[datetime] = None


class EnrolledStudent(BaseModel):
    user_id: int
    email: str
    full_name: str
    progress: int
    enrolled_at: Optional[datetime] = None


class StudentSummary(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    parent_phone: Optional[str] = None
    role: UserRole
    points: int = 0
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class GrantAccess(BaseModel):
    user_id: int
    course_id: int


class RevokeAccess(BaseModel):
    enrollment_id: Optional[int] = None
    user_id: Optional[int] = None
    course_id: Optional[int] = None

    @model_validator(mode="after")
    def target_given(self):
        if self.enrollment_id is None and (self.user_id is None or self.course_id is None):
            raise ValueError("enrollment_id or (user_id and course_id) required")
        return self


class StudentPoints(BaseModel):
    user_id: int
    points: int = Field(..., ge=0)
