"""Parent dashboard endpoints and the admin parent lookup."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from worldcourse.auth.models import User
from worldcourse.auth.service import require_admin, require_parent
from worldcourse.database import get_db
from worldcourse.schemas.parent import ChildProgress, ChildSummary, LinkStudent, ParentDashboard, StudentParent
from worldcourse.services.parents import ParentService, child_summary, student_parent

router = APIRouter(prefix="/api", tags=["Parents"])


def get_parent_service(
    current_user: User = Depends(require_parent),
    db: Session = Depends(get_db)
) -> ParentService:
    return ParentService(db, current_user)


@router.get("/parent/children", response_model=list[ChildSummary])
async def list_children(service: ParentService = Depends(get_parent_service)):
    return [child_summary(service.db, child) for child in service.children()]


@router.get("/parent/child/{student_id}/progress", response_model=ChildProgress)
async def child_progress(student_id: int, service: ParentService = Depends(get_parent_service)):
    return service.child_progress(student_id)


@router.post("/parent/link-student")
async def link_student(body: LinkStudent, service: ParentService = Depends(get_parent_service)):
    student = service.link(body.student_email)
    return {
        "success": True,
        "message": "Student linked successfully",
        "student": {"id": student.id, "name": student.full_name, "email": student.email},
    }


@router.delete("/parent/unlink-student/{student_id}")
async def unlink_student(student_id: int, service: ParentService = Depends(get_parent_service)):
    service.unlink(student_id)
    return {"success": True, "message": "Student unlinked successfully"}


@router.get("/parent/dashboard", response_model=ParentDashboard)
async def parent_dashboard(service: ParentService = Depends(get_parent_service)):
    return service.dashboard()


@router.get("/admin/student/{student_id}/parent", response_model=StudentParent)
async def read_student_parent(
    student_id: int,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    return student_parent(db, student_id)
