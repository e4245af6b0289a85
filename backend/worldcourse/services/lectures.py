"""Lecture publishing for teachers."""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from worldcourse.auth.models import User
from worldcourse.errors import NotFound, PermissionDenied, ValidationFailed
from worldcourse.models import Lecture, UserRole
from worldcourse.schemas.lecture import LectureCreate, LectureUpdate

logger = logging.getLogger(__name__)


class LectureService:
    def __init__(self, db: Session):
        self.db = db

    def list_lectures(self, teacher_id: Optional[int] = None, subject: Optional[str] = None) -> list[Lecture]:
        query = self.db.query(Lecture).filter(Lecture.is_active == True)  # noqa: E712
        if teacher_id is not None:
            query = query.filter(Lecture.teacher_id == teacher_id)
        if subject:
            query = query.filter(Lecture.subject == subject)
        return query.order_by(Lecture.created_at.desc(), Lecture.id.desc()).all()

    def get(self, lecture_id: int) -> Lecture:
        lecture = (
            self.db.query(Lecture)
            .filter(Lecture.id == lecture_id, Lecture.is_active == True)  # noqa: E712
            .first()
        )
        if lecture is None:
            raise NotFound("Lecture not found")
        return lecture

    def _teacher_for(self, author: User, teacher_id: Optional[int]) -> int:
        if teacher_id is None or teacher_id == author.id:
            return author.id
        if author.role != UserRole.admin:
            raise PermissionDenied("Teachers can only publish their own lectures")
        teacher = self.db.query(User).filter(User.id == teacher_id).first()
        if teacher is None:
            raise NotFound("Teacher not found")
        if not teacher.is_staff:
            raise ValidationFailed("Lectures must belong to a teacher")
        return teacher.id

    def create(self, author: User, data: LectureCreate) -> Lecture:
        fields = data.model_dump(exclude={"teacher_id"})
        lecture = Lecture(teacher_id=self._teacher_for(author, data.teacher_id), **fields)
        self.db.add(lecture)
        self.db.commit()
        self.db.refresh(lecture)
        logger.info(f"User {author.id} published lecture {lecture.id} '{lecture.title}'")
        return lecture

    def get_managed(self, lecture_id: int, user: User) -> Lecture:
        lecture = self.get(lecture_id)
        if user.role != UserRole.admin and lecture.teacher_id != user.id:
            raise PermissionDenied("Only the lecture's teacher can change it")
        return lecture

    def update(self, lecture: Lecture, data: LectureUpdate) -> Lecture:
        for field, value in data.model_dump(exclude_unset=True).items():
            if field in ("subject", "title", "type") and value is None:
                continue
            setattr(lecture, field, value)
        self.db.commit()
        self.db.refresh(lecture)
        return lecture

    def delete(self, lecture: Lecture) -> None:
        lecture.is_active = False
        self.db.commit()
        logger.info(f"Deactivated lecture {lecture.id}")
