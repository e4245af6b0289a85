"""Admin endpoints for teacher accounts and teaching assistants."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from worldcourse.auth.models import User, UserCreate, UserResponse
from worldcourse.auth.service import require_admin
from worldcourse.database import get_db
from worldcourse.schemas.staff import AssistantCreate, AssistantOut, AssistantUpdate
from worldcourse.services.staff import StaffService

router = APIRouter(prefix="/api/admin", tags=["Staff"])


def get_staff_service(db: Session = Depends(get_db)) -> StaffService:
    return StaffService(db)


@router.get("/teachers", response_model=list[UserResponse])
async def list_teachers(
    current_user: User = Depends(require_admin),
    service: StaffService = Depends(get_staff_service)
):
    return service.list_teachers()


@router.post("/teachers", status_code=status.HTTP_201_CREATED)
async def create_teacher(
    data: UserCreate,
    current_user: User = Depends(require_admin),
    service: StaffService = Depends(get_staff_service)
):
    """Create a teacher login from the registration fields."""
    teacher = service.create_teacher(data)
    return {
        "success": True,
        "message": "Teacher created successfully",
        "teacher": UserResponse.model_validate(teacher),
    }


@router.delete("/teachers/{teacher_id}")
async def deactivate_teacher(
    teacher_id: int,
    current_user: User = Depends(require_admin),
    service: StaffService = Depends(get_staff_service)
):
    service.deactivate_teacher(teacher_id)
    return {"success": True, "message": "Teacher deactivated successfully"}


@router.post("/teachers/{teacher_id}/assistants", response_model=AssistantOut,
             status_code=status.HTTP_201_CREATED)
async def add_teacher_assistant(
    teacher_id: int,
    data: AssistantCreate,
    current_user: User = Depends(require_admin),
    service: StaffService = Depends(get_staff_service)
):
    return service.add_assistant(current_user, data.model_copy(update={"teacher_id": teacher_id}))


@router.get("/assistants", response_model=list[AssistantOut])
async def list_assistants(
    current_user: User = Depends(require_admin),
    service: StaffService = Depends(get_staff_service)
):
    return service.list_assistants()


@router.post("/add-assistant", response_model=AssistantOut, status_code=status.HTTP_201_CREATED)
async def add_assistant(
    data: AssistantCreate,
    current_user: User = Depends(require_admin),
    service: StaffService = Depends(get_staff_service)
):
    return service.add_assistant(current_user, data)


@router.put("/assistants/{assistant_id}", response_model=AssistantOut)
async def update_assistant(
    assistant_id: int,
    data: AssistantUpdate,
    current_user: User = Depends(require_admin),
    service: StaffService = Depends(get_staff_service)
):
    return service.update_assistant(assistant_id, data)


@router.put("/assistants/{assistant_id}/approve", response_model=AssistantOut)
async def approve_assistant(
    assistant_id: int,
    current_user: User = Depends(require_admin),
    service: StaffService = Depends(get_staff_service)
):
    return service.approve_assistant(assistant_id)


@router.delete("/assistants/{assistant_id}")
async def delete_assistant(
    assistant_id: int,
    current_user: User = Depends(require_admin),
    service: StaffService = Depends(get_staff_service)
):
    service.delete_assistant(assistant_id)
    return {"success": True, "message": "Assistant deleted successfully"}
