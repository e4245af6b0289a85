"""Course orders and their approval into enrollments."""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from worldcourse.auth.models import User
from worldcourse.errors import Conflict, NotFound, PermissionDenied
from worldcourse.models import Course, Enrollment, EnrollmentStatus, Order, OrderStatus, UserRole
from worldcourse.schemas.order import OrderCreate
from worldcourse.utils import utcnow
from .courses import CourseService

logger = logging.getLogger(__name__)


def ensure_self_or_admin(user: User, user_id: int) -> None:
    if user.id != user_id and user.role != UserRole.admin:
        raise PermissionDenied("Unauthorized")


class OrderService:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, user: User, data: OrderCreate) -> Order:
        for item in data.courses:
            course = self.db.query(Course).filter(Course.id == item.course_id).first()
            if course is None or not course.is_active:
                raise NotFound(f"Course {item.course_id} not found")

        order = Order(
            user_id=user.id,
            customer_name=data.customer_name,
            customer_email=data.customer_email,
            customer_phone=data.customer_phone,
            courses=[item.model_dump() for item in data.courses],
            total_amount=data.total_amount,
            payment_method=data.payment_method,
            payment_reference=data.payment_reference,
            status=OrderStatus.pending,
        )
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        logger.info(f"User {user.id} placed order {order.id} for {len(order.courses)} course(s)")
        return order

    def get_order(self, order_id: int) -> Order:
        order = self.db.query(Order).filter(Order.id == order_id).first()
        if order is None:
            raise NotFound("Order not found")
        return order

    def latest_pending(self, user_id: int) -> Order:
        order = (
            self.db.query(Order)
            .filter(Order.user_id == user_id, Order.status == OrderStatus.pending)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .first()
        )
        if order is None:
            raise NotFound("No pending order found")
        return order

    def access_status(self, user_id: int) -> dict:
        orders = (
            self.db.query(Order)
            .filter(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )
        has_access = (
            self.db.query(Enrollment.id)
            .filter(Enrollment.user_id == user_id, Enrollment.status == EnrollmentStatus.active)
            .first()
            is not None
        )
        return {"has_access": has_access, "orders": orders}

    def list_orders(self, status: Optional[OrderStatus] = None) -> list[Order]:
        query = self.db.query(Order)
        if status is not None:
            query = query.filter(Order.status == status)
        return query.order_by(Order.created_at.desc(), Order.id.desc()).all()

    def approve(self, order_id: int, admin: User) -> tuple[Order, int]:
        """Approve a pending order and enroll its buyer in every ordered course."""
        order = self.get_order(order_id)
        if not order.is_pending:
            raise Conflict(f"Order is already {order.status.value}")

        order.status = OrderStatus.approved
        order.approved_at = utcnow()
        order.approved_by = admin.id

        courses = CourseService(self.db)
        created = 0
        for course_id in dict.fromkeys(order.course_ids):
            _, granted = courses.enroll(order.user_id, course_id, granted_by=admin.id)
            if granted:
                created += 1
        self.db.commit()
        self.db.refresh(order)
        logger.info(f"Admin {admin.id} approved order {order.id}: {created} enrollment(s) created")
        return order, created

    def reject(self, order_id: int, admin: User) -> Order:
        order = self.get_order(order_id)
        if not order.is_pending:
            raise Conflict(f"Order is already {order.status.value}")
        order.status = OrderStatus.rejected
        self.db.commit()
        self.db.refresh(order)
        logger.info(f"Admin {admin.id} rejected order {order.id}")
        return order
