"""Course catalog, enrollments and admin access management."""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from worldcourse.auth.models import User
from worldcourse.errors import NotFound, PermissionDenied, ValidationFailed
from worldcourse.models import Course, Enrollment, EnrollmentStatus, UserRole
from worldcourse.schemas.course import CourseCreate

logger = logging.getLogger(__name__)


def enrollment_view(enrollment: Enrollment) -> dict:
    return {
        "id": enrollment.id,
        "user_id": enrollment.user_id,
        "course_id": enrollment.course_id,
        "course_title": enrollment.course.title if enrollment.course else None,
        "course_level": enrollment.course.level if enrollment.course else None,
        "status": enrollment.status,
        "progress": enrollment.progress or 0,
        "granted_by": enrollment.granted_by,
        "enrolled_at": enrollment.enrolled_at,
    }


class CourseService:
    def __init__(self, db: Session):
        self.db = db

    def list_courses(self, subject: Optional[str] = None, level: Optional[str] = None) -> list[Course]:
        query = self.db.query(Course).filter(Course.is_active == True)  # noqa: E712
        if subject:
            query = query.filter(Course.subject == subject)
        if level:
            query = query.filter(Course.level == level)
        return query.order_by(Course.created_at.desc(), Course.id.desc()).all()

    def get_course(self, course_id: int) -> Course:
        course = self.db.query(Course).filter(Course.id == course_id).first()
        if course is None:
            raise NotFound("Course not found")
        return course

    def create_course(self, data: CourseCreate) -> Course:
        if data.instructor_id is not None:
            instructor = self.db.query(User).filter(User.id == data.instructor_id).first()
            if instructor is None:
                raise NotFound("Instructor not found")
            if not instructor.is_staff:
                raise ValidationFailed("Instructor must be a teacher or admin")
        course = Course(**data.model_dump())
        self.db.add(course)
        self.db.commit()
        self.db.refresh(course)
        logger.info(f"Created course {course.id} '{course.title}'")
        return course

    def course_students(self, course: Course, viewer: User) -> list[dict]:
        if viewer.role != UserRole.admin and course.instructor_id != viewer.id:
            raise PermissionDenied("Only the course instructor can view enrolled students")
        return [
            {
                "user_id": e.user_id,
                "email": e.user.email,
                "full_name": e.user.full_name,
                "progress": e.progress or 0,
                "enrolled_at": e.enrolled_at,
            }
            for e in course.active_enrollments
        ]

    def my_enrollments(self, user: User) -> list[Enrollment]:
        return (
            self.db.query(Enrollment)
            .filter(Enrollment.user_id == user.id, Enrollment.status == EnrollmentStatus.active)
            .order_by(Enrollment.id)
            .all()
        )

    def list_students(self) -> list[User]:
        return self.db.query(User).filter(User.role == UserRole.student).order_by(User.id).all()

    def _student(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if user is None:
            raise NotFound("User not found")
        return user

    def enroll(self, user_id: int, course_id: int, granted_by: Optional[int] = None) -> tuple[Enrollment, bool]:
        """Give ``user_id`` access to the course; returns (enrollment, newly_granted).

        Revoked enrollments are reactivated. The caller commits.
        """
        enrollment = (
            self.db.query(Enrollment)
            .filter(Enrollment.user_id == user_id, Enrollment.course_id == course_id)
            .first()
        )
        if enrollment is None:
            enrollment = Enrollment(user_id=user_id, course_id=course_id, granted_by=granted_by,
                                    status=EnrollmentStatus.active, progress=0)
            self.db.add(enrollment)
            return enrollment, True
        if enrollment.status != EnrollmentStatus.active:
            enrollment.status = EnrollmentStatus.active
            enrollment.granted_by = granted_by
            return enrollment, True
        return enrollment, False

    def grant_access(self, admin: User, user_id: int, course_id: int) -> Enrollment:
        self._student(user_id)
        self.get_course(course_id)
        enrollment, granted = self.enroll(user_id, course_id, granted_by=admin.id)
        self.db.commit()
        self.db.refresh(enrollment)
        if granted:
            logger.info(f"Admin {admin.id} granted user {user_id} access to course {course_id}")
        return enrollment

    def revoke_access(self, enrollment_id: Optional[int] = None,
                      user_id: Optional[int] = None, course_id: Optional[int] = None) -> Enrollment:
        query = self.db.query(Enrollment)
        if enrollment_id is not None:
            query = query.filter(Enrollment.id == enrollment_id)
        else:
            query = query.filter(Enrollment.user_id == user_id, Enrollment.course_id == course_id)
        enrollment = query.first()
        if enrollment is None or enrollment.status == EnrollmentStatus.revoked:
            raise NotFound("No enrollment found to revoke")
        enrollment.status = EnrollmentStatus.revoked
        self.db.commit()
        self.db.refresh(enrollment)
        logger.info(f"Revoked enrollment {enrollment.id}")
        return enrollment

    def set_student_points(self, user_id: int, points: int) -> User:
        user = self._student(user_id)
        user.points = points
        self.db.commit()
        self.db.refresh(user)
        return user
