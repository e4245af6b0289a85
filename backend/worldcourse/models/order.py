"""Order model."""

from sqlalchemy import Column, String, DateTime, ForeignKey, Integer, Float, JSON, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base
from .enums import OrderStatus


class Order(Base):
    """Purchase record for one or more courses, pending until an admin approves it."""
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    customer_name = Column(String(255))
    customer_email = Column(String(255))
    customer_phone = Column(String(50))
    # [{"course_id": int, "title": str, "price": float}, ...]
    courses = Column(JSON, nullable=False, default=list)
    total_amount = Column(Float, nullable=False)
    payment_method = Column(String(50))
    payment_reference = Column(String(255))
    status = Column(SQLEnum(OrderStatus), nullable=False, default=OrderStatus.pending)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    approved_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("worldcourse.auth.models.User", foreign_keys=[user_id], back_populates="orders")

    def __repr__(self):
        return f"<Order(id={self.id}, user_id={self.user_id}, status={self.status})>"

    @property
    def course_ids(self) -> list[int]:
        return [item["course_id"] for item in (self.courses or []) if item.get("course_id") is not None]

    @property
    def is_pending(self) -> bool:
        return self.status == OrderStatus.pending
