"""Schemas for admin management of teachers and teaching assistants."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from worldcourse.models.enums import AssistantStatus


class AssistantCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: Optional[str] = None
    subject: str = Field(..., min_length=1, max_length=100)
    availability: str = Field(..., min_length=1, max_length=100)
    status: AssistantStatus = AssistantStatus.pending
    qualifications: Optional[str] = None
    specializations: Optional[str] = None
    role_description: Optional[str] = Field(default=None, alias="roleDescription")
    teacher_id: Optional[int] = None

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class AssistantUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    subject: Optional[str] = Field(default=None, min_length=1, max_length=100)
    availability: Optional[str] = Field(default=None, min_length=1, max_length=100)
    status: Optional[AssistantStatus] = None
    qualifications: Optional[str] = None
    specializations: Optional[str] = None
    role_description: Optional[str] = Field(default=None, alias="roleDescription")
    teacher_id: Optional[int] = None

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class AssistantOut(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    subject: str
    availability: str
    status: AssistantStatus
    qualifications: Optional[str] = None
    specializations: Optional[str] = None
    role_description: Optional[str] = None
    teacher_id: Optional[int] = None
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
