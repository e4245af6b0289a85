"""Schemas for course orders."""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from worldcourse.models.enums import OrderStatus


class OrderItem(BaseModel):
    course_id: int
    title: str = Field(..., min_length=1)
    price: float = Field(default=0, ge=0)


class OrderCreate(BaseModel):
    customer_name: Optional[str] = None
    customer_email: Optional[EmailStr] = None
    customer_phone: Optional[str] = None
    courses: list[OrderItem] = Field(..., min_length=1)
    total_amount: float = Field(..., ge=0)
    payment_method: Optional[str] = None
    payment_reference: Optional[str] = None

    @field_validator("courses")
    @classmethod
    def validate_unique_courses(cls, v: list[OrderItem]) -> list[OrderItem]:
        ids = [item.course_id for item in v]
        if len(ids) != len(set(ids)):
            raise ValueError("Each course can only be ordered once")
        return v


class OrderOut(BaseModel):
    id: int
    user_id: int
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    courses: list[dict[str, Any]]
    total_amount: float
    payment_method: Optional[str] = None
    payment_reference: Optional[str] = None
    status: OrderStatus
    approved_at: Optional[datetime] = None
    approved_by: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class OrderDecision(BaseModel):
    order_id: int


class OrderAccessStatus(BaseModel):
    has_access: bool
    orders: list[OrderOut]
