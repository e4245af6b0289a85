"""Assessment catalog: creation, listing and instructor ownership rules."""
import logging
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from worldcourse.auth.models import User
from worldcourse.errors import NotFound, PermissionDenied
from worldcourse.models import (
    Assessment, AssessmentKind, AssessmentStatus, Course, Enrollment, EnrollmentStatus, Question, UserRole,
)
from worldcourse.schemas.assessment import AssessmentCreate, AssessmentUpdate, QuestionIn
from worldcourse.utils import ensure_utc

logger = logging.getLogger(__name__)


def can_manage(user: User, assessment: Assessment) -> bool:
    """Admins, the course instructor and the author may edit and grade."""
    if user.role == UserRole.admin:
        return True
    if user.role != UserRole.teacher:
        return False
    course = assessment.course
    return (course is not None and course.instructor_id == user.id) or assessment.created_by == user.id


def _build_questions(questions: list[QuestionIn]) -> list[Question]:
    return [
        Question(
            position=position,
            type=q.type,
            text=q.text,
            options=list(q.options),
            correct_answer=q.correct_answer,
            points=q.points,
        )
        for position, q in enumerate(questions)
    ]


class AssessmentService:
    def __init__(self, db: Session):
        self.db = db

    def get(self, kind: AssessmentKind, assessment_id: int, include_inactive: bool = False) -> Assessment:
        query = self.db.query(Assessment).filter(Assessment.id == assessment_id, Assessment.kind == kind)
        if not include_inactive:
            query = query.filter(Assessment.is_active == True)  # noqa: E712
        assessment = query.first()
        if assessment is None:
            raise NotFound(f"{kind.value.capitalize()} not found")
        return assessment

    def get_visible(self, kind: AssessmentKind, assessment_id: int, viewer: User) -> Assessment:
        """Fetch an assessment the viewer is allowed to see."""
        assessment = self.get(kind, assessment_id)
        if not viewer.is_staff and assessment.course_id not in self._enrolled_course_ids(viewer):
            raise NotFound(f"{kind.value.capitalize()} not found")
        if not viewer.is_staff and not assessment.published:
            raise NotFound(f"{kind.value.capitalize()} not found")
        return assessment

    def get_managed(self, kind: AssessmentKind, assessment_id: int, user: User) -> Assessment:
        assessment = self.get(kind, assessment_id)
        if not can_manage(user, assessment):
            raise PermissionDenied(f"Only the course instructor can manage this {kind.value}")
        return assessment

    def _enrolled_course_ids(self, user: User) -> set[int]:
        rows = (
            self.db.query(Enrollment.course_id)
            .filter(Enrollment.user_id == user.id, Enrollment.status == EnrollmentStatus.active)
            .all()
        )
        return {row[0] for row in rows}

    def search(
        self,
        kind: AssessmentKind,
        viewer: User,
        course_id: Optional[int] = None,
        status: Optional[AssessmentStatus] = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[Assessment], int]:
        """Page through the active assessments of one kind visible to ``viewer``."""
        query = self.db.query(Assessment).filter(Assessment.kind == kind, Assessment.is_active == True)  # noqa: E712
        if not viewer.is_staff:
            query = query.filter(
                Assessment.published == True,  # noqa: E712
                Assessment.course_id.in_(sorted(self._enrolled_course_ids(viewer))),
            )
        elif viewer.role == UserRole.teacher:
            taught = select(Course.id).where(Course.instructor_id == viewer.id)
            query = query.filter(or_(Assessment.course_id.in_(taught), Assessment.created_by == viewer.id))
        if course_id is not None:
            query = query.filter(Assessment.course_id == course_id)
        if status is not None:
            query = query.filter(Assessment.status == status)

        total = query.count()
        items = (
            query.order_by(Assessment.created_at.desc(), Assessment.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return items, total

    def create(self, kind: AssessmentKind, data: AssessmentCreate, author: User) -> Assessment:
        course = self.db.query(Course).filter(Course.id == data.course_id).first()
        if course is None:
            raise NotFound("Course not found")
        if author.role != UserRole.admin and course.instructor_id != author.id:
            raise PermissionDenied("Only the course instructor can add assessments to this course")

        fields = data.model_dump(exclude={"questions"})
        fields["due_date"] = ensure_utc(fields.get("due_date"))
        assessment = Assessment(kind=kind, created_by=author.id, **fields)
        assessment.questions = _build_questions(data.questions)
        self.db.add(assessment)
        self.db.commit()
        self.db.refresh(assessment)
        logger.info(f"User {author.id} created {kind.value} {assessment.id} in course {course.id}")
        return assessment

    def update(self, assessment: Assessment, changes: AssessmentUpdate) -> Assessment:
        fields = changes.model_dump(exclude_unset=True, exclude={"questions"})
        if "due_date" in fields:
            fields["due_date"] = ensure_utc(fields["due_date"])
        for name, value in fields.items():
            setattr(assessment, name, value)
        if changes.questions is not None:
            assessment.questions = _build_questions(changes.questions)
        self.db.commit()
        self.db.refresh(assessment)
        return assessment

    def deactivate(self, assessment: Assessment) -> None:
        """Soft delete: the assessment and its submissions are kept."""
        assessment.is_active = False
        self.db.commit()
        logger.info(f"Deactivated {assessment.kind.value} {assessment.id}")
