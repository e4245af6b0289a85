"""Admin management of teacher accounts and teaching assistants."""
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from worldcourse.auth.models import User, UserCreate
from worldcourse.auth.service import AuthService
from worldcourse.errors import NotFound, ValidationFailed
from worldcourse.models import Assistant, AssistantStatus, UserRole
from worldcourse.schemas.staff import AssistantCreate, AssistantUpdate

logger = logging.getLogger(__name__)

DUPLICATE_ASSISTANT = "Assistant with this email already exists"


class StaffService:
    def __init__(self, db: Session):
        self.db = db

    def list_teachers(self) -> list[User]:
        return self.db.query(User).filter(User.role == UserRole.teacher).order_by(User.id).all()

    def get_teacher(self, teacher_id: int) -> User:
        teacher = self.db.query(User).filter(User.id == teacher_id, User.role == UserRole.teacher).first()
        if teacher is None:
            raise NotFound("Teacher not found")
        return teacher

    def create_teacher(self, data: UserCreate) -> User:
        return AuthService(self.db).register_user(data.model_copy(update={"role": UserRole.teacher}))

    def deactivate_teacher(self, teacher_id: int) -> User:
        # Courses, lectures and assessments keep pointing at the account
        teacher = self.get_teacher(teacher_id)
        teacher.is_active = False
        self.db.commit()
        self.db.refresh(teacher)
        logger.info(f"Deactivated teacher {teacher.id}")
        return teacher

    def list_assistants(self) -> list[Assistant]:
        return self.db.query(Assistant).order_by(Assistant.created_at.desc(), Assistant.id.desc()).all()

    def get_assistant(self, assistant_id: int) -> Assistant:
        assistant = self.db.query(Assistant).filter(Assistant.id == assistant_id).first()
        if assistant is None:
            raise NotFound("Assistant not found")
        return assistant

    def _email_taken(self, email: str, exclude_id: Optional[int] = None) -> bool:
        query = self.db.query(Assistant.id).filter(Assistant.email == email)
        if exclude_id is not None:
            query = query.filter(Assistant.id != exclude_id)
        return query.first() is not None

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ValidationFailed(DUPLICATE_ASSISTANT)

    def add_assistant(self, admin: User, data: AssistantCreate) -> Assistant:
        if data.teacher_id is not None:
            self.get_teacher(data.teacher_id)
        if self._email_taken(data.email):
            raise ValidationFailed(DUPLICATE_ASSISTANT)
        assistant = Assistant(created_by=admin.id, **data.model_dump())
        self.db.add(assistant)
        self._commit()
        self.db.refresh(assistant)
        logger.info(f"Admin {admin.id} added assistant {assistant.id} ({assistant.email})")
        return assistant

    def update_assistant(self, assistant_id: int, data: AssistantUpdate) -> Assistant:
        assistant = self.get_assistant(assistant_id)
        changes = data.model_dump(exclude_unset=True)
        if not changes:
            raise ValidationFailed("No fields to update")
        if changes.get("teacher_id") is not None:
            self.get_teacher(changes["teacher_id"])
        if changes.get("email") and self._email_taken(changes["email"], exclude_id=assistant.id):
            raise ValidationFailed(DUPLICATE_ASSISTANT)
        for field, value in changes.items():
            if value is None and field in ("name", "email", "subject", "availability", "status"):
                continue
            setattr(assistant, field, value)
        self._commit()
        self.db.refresh(assistant)
        return assistant

    def approve_assistant(self, assistant_id: int) -> Assistant:
        assistant = self.get_assistant(assistant_id)
        assistant.status = AssistantStatus.active
        self.db.commit()
        self.db.refresh(assistant)
        logger.info(f"Approved assistant {assistant.id}")
        return assistant

    def delete_assistant(self, assistant_id: int) -> None:
        assistant = self.get_assistant(assistant_id)
        self.db.delete(assistant)
        self.db.commit()
        logger.info(f"Deleted assistant {assistant_id}")
