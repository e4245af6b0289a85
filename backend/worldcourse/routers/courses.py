"""Course catalog, enrollment and admin access endpoints."""
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from worldcourse.auth.models import User
from worldcourse.auth.service import get_current_active_user, require_admin, require_staff
from worldcourse.database import get_db
from worldcourse.schemas.course import (
    CourseCreate, CourseOut, EnrolledStudent, EnrollmentOut, GrantAccess, RevokeAccess, StudentPoints,
    StudentSummary,
)
from worldcourse.services.courses import CourseService, enrollment_view

router = APIRouter(prefix="/api", tags=["Courses"])


def get_course_service(db: Session = Depends(get_db)) -> CourseService:
    return CourseService(db)


@router.get("/courses", response_model=list[CourseOut])
async def list_courses(
    subject: Optional[str] = None,
    level: Optional[str] = None,
    service: CourseService = Depends(get_course_service)
):
    """Public course catalog."""
    return service.list_courses(subject=subject, level=level)


@router.get("/courses/{course_id}", response_model=CourseOut)
async def read_course(course_id: int, service: CourseService = Depends(get_course_service)):
    return service.get_course(course_id)


@router.post("/courses", response_model=CourseOut, status_code=status.HTTP_201_CREATED)
async def create_course(
    data: CourseCreate,
    current_user: User = Depends(require_admin),
    service: CourseService = Depends(get_course_service)
):
    return service.create_course(data)


@router.get("/courses/{course_id}/students", response_model=list[EnrolledStudent])
async def course_students(
    course_id: int,
    current_user: User = Depends(require_staff),
    service: CourseService = Depends(get_course_service)
):
    return service.course_students(service.get_course(course_id), current_user)


@router.get("/my-enrollments", response_model=list[EnrollmentOut])
async def my_enrollments(
    current_user: User = Depends(get_current_active_user),
    service: CourseService = Depends(get_course_service)
):
    return [enrollment_view(e) for e in service.my_enrollments(current_user)]


@router.get("/admin/students", response_model=list[StudentSummary])
async def list_students(
    current_user: User = Depends(require_admin),
    service: CourseService = Depends(get_course_service)
):
    return service.list_students()


@router.post("/admin/grant-access")
async def grant_access(
    body: GrantAccess,
    current_user: User = Depends(require_admin),
    service: CourseService = Depends(get_course_service)
):
    """Give a user access to a course; re-granting is a no-op."""
    enrollment = service.grant_access(current_user, body.user_id, body.course_id)
    return {
        "success": True,
        "message": "Access granted",
        "enrollment": EnrollmentOut(**enrollment_view(enrollment)),
    }


@router.post("/admin/revoke-access")
async def revoke_access(
    body: RevokeAccess,
    current_user: User = Depends(require_admin),
    service: CourseService = Depends(get_course_service)
):
    enrollment = service.revoke_access(
        enrollment_id=body.enrollment_id, user_id=body.user_id, course_id=body.course_id
    )
    return {
        "success": True,
        "message": "Access revoked",
        "enrollment": EnrollmentOut(**enrollment_view(enrollment)),
    }


@router.put("/admin/update-student-points")
async def update_student_points(
    body: StudentPoints,
    current_user: User = Depends(require_admin),
    service: CourseService = Depends(get_course_service)
):
    user = service.set_student_points(body.user_id, body.points)
    return {"success": True, "user_id": user.id, "points": user.points}
