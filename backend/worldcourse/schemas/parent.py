"""Schemas for the parent dashboard and student linking."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from worldcourse.schemas.progress import CourseProgress


class LinkStudent(BaseModel):
    student_email: EmailStr = Field(..., alias="studentEmail")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("student_email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class ChildSummary(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    created_at: Optional[datetime] = None
    enrolled_courses: int = 0


class ChildCourse(BaseModel):
    course_id: int
    title: str
    level: str
    instructor_id: Optional[int] = None
    progress: int = 0
    enrolled_at: Optional[datetime] = None


class ChildProgress(BaseModel):
    student: ChildSummary
    courses: list[ChildCourse]
    total_courses: int
    progress: list[CourseProgress]


class ParentDashboard(BaseModel):
    total_children: int = 0
    total_courses: int = 0
    total_enrollments: int = 0
    first_enrollment: Optional[datetime] = None
    latest_enrollment: Optional[datetime] = None


class ParentContact(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class StudentParent(BaseModel):
    student_id: int
    parent: Optional[ParentContact] = None
    parent_phone: Optional[str] = None
    parent_phone_country: Optional[str] = None
