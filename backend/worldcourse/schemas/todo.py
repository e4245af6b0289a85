"""Schemas for personal todo lists."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from worldcourse.models.enums import TaskPriority


class TodoListCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None


class TodoListUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    priority: TaskPriority = TaskPriority.medium
    due_date: Optional[datetime] = None


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None
    completed: Optional[bool] = None


class TaskOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    completed: bool
    priority: TaskPriority
    due_date: Optional[datetime] = None
    position: int
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TodoListOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    tasks: list[TaskOut] = []
    completed_count: int
    total_count: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
