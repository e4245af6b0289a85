"""Parent accounts: linking children and following their progress.

A parent only ever sees students whose ``parent_id`` points at them; any
other student id is reported as missing.
"""
import logging

from sqlalchemy.orm import Session

from worldcourse.auth.models import User
from worldcourse.errors import NotFound, ValidationFailed
from worldcourse.models import Enrollment, EnrollmentStatus, UserRole
from worldcourse.utils import ensure_utc
from .progress import course_progress

logger = logging.getLogger(__name__)


def _active_enrollments(db: Session, student_ids: list[int]) -> list[Enrollment]:
    if not student_ids:
        return []
    return (
        db.query(Enrollment)
        .filter(Enrollment.user_id.in_(student_ids), Enrollment.status == EnrollmentStatus.active)
        .order_by(Enrollment.enrolled_at.desc(), Enrollment.id.desc())
        .all()
    )


def child_summary(db: Session, student: User) -> dict:
    return {
        "id": student.id,
        "first_name": student.first_name,
        "last_name": student.last_name,
        "email": student.email,
        "phone": student.phone,
        "created_at": student.created_at,
        "enrolled_courses": len(_active_enrollments(db, [student.id])),
    }


def student_parent(db: Session, student_id: int) -> dict:
    """Parent contact details of a student, for admins."""
    student = db.query(User).filter(User.id == student_id, User.role == UserRole.student).first()
    if student is None:
        raise NotFound("Student not found")
    return {
        "student_id": student.id,
        "parent": student.parent,
        "parent_phone": student.parent_phone,
        "parent_phone_country": student.parent_phone_country,
    }


class ParentService:
    def __init__(self, db: Session, parent: User):
        self.db = db
        self.parent = parent

    def children(self) -> list[User]:
        return (
            self.db.query(User)
            .filter(User.parent_id == self.parent.id, User.role == UserRole.student)
            .order_by(User.first_name, User.last_name, User.id)
            .all()
        )

    def child(self, student_id: int) -> User:
        student = (
            self.db.query(User)
            .filter(User.id == student_id, User.parent_id == self.parent.id, User.role == UserRole.student)
            .first()
        )
        if student is None:
            raise NotFound("Student not found or access denied")
        return student

    def child_progress(self, student_id: int) -> dict:
        student = self.child(student_id)
        enrollments = _active_enrollments(self.db, [student.id])
        courses = [
            {
                "course_id": e.course_id,
                "title": e.course.title,
                "level": e.course.level,
                "instructor_id": e.course.instructor_id,
                "progress": e.progress or 0,
                "enrolled_at": e.enrolled_at,
            }
            for e in enrollments
        ]
        return {
            "student": child_summary(self.db, student),
            "courses": courses,
            "total_courses": len(courses),
            "progress": [course_progress(self.db, student, e.course_id) for e in enrollments],
        }

    def link(self, student_email: str) -> User:
        student = (
            self.db.query(User)
            .filter(User.email == student_email, User.role == UserRole.student)
            .first()
        )
        if student is None:
            raise NotFound("Student not found with this email")
        if student.parent_id == self.parent.id:
            raise ValidationFailed("Student is already linked to you")
        if student.parent_id is not None:
            raise ValidationFailed("Student is already linked to another parent")

        student.parent_id = self.parent.id
        self.db.commit()
        self.db.refresh(student)
        logger.info(f"Parent {self.parent.id} linked student {student.id}")
        return student

    def unlink(self, student_id: int) -> None:
        student = self.child(student_id)
        student.parent_id = None
        self.db.commit()
        logger.info(f"Parent {self.parent.id} unlinked student {student_id}")

    def dashboard(self) -> dict:
        children = self.children()
        enrollments = _active_enrollments(self.db, [c.id for c in children])
        dates = sorted(ensure_utc(e.enrolled_at) for e in enrollments if e.enrolled_at)
        return {
            "total_children": len(children),
            "total_courses": len({e.course_id for e in enrollments}),
            "total_enrollments": len(enrollments),
            "first_enrollment": dates[0] if dates else None,
            "latest_enrollment": dates[-1] if dates else None,
        }
