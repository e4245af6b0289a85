"""Lecture endpoints."""
from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from worldcourse.auth.models import User
from worldcourse.auth.service import require_staff
from worldcourse.database import get_db
from worldcourse.schemas.lecture import LectureCreate, LectureOut, LectureUpdate
from worldcourse.services.lectures import LectureService

router = APIRouter(prefix="/api/lectures", tags=["Lectures"])


def get_lecture_service(db: Session = Depends(get_db)) -> LectureService:
    return LectureService(db)


@router.get("", response_model=list[LectureOut])
async def list_lectures(
    teacher_id: Optional[int] = None,
    subject: Optional[str] = None,
    service: LectureService = Depends(get_lecture_service)
):
    """Public list of active lectures, newest first."""
    return service.list_lectures(teacher_id=teacher_id, subject=subject)


@router.post("", response_model=LectureOut, status_code=status.HTTP_201_CREATED)
async def create_lecture(
    data: LectureCreate,
    current_user: User = Depends(require_staff),
    service: LectureService = Depends(get_lecture_service)
):
    return service.create(current_user, data)


@router.get("/{lecture_id}", response_model=LectureOut)
async def read_lecture(lecture_id: int, service: LectureService = Depends(get_lecture_service)):
    return service.get(lecture_id)


@router.put("/{lecture_id}", response_model=LectureOut)
async def update_lecture(
    lecture_id: int,
    data: LectureUpdate,
    current_user: User = Depends(require_staff),
    service: LectureService = Depends(get_lecture_service)
):
    return service.update(service.get_managed(lecture_id, current_user), data)


@router.delete("/{lecture_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_lecture(
    lecture_id: int,
    current_user: User = Depends(require_staff),
    service: LectureService = Depends(get_lecture_service)
):
    service.delete(service.get_managed(lecture_id, current_user))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
