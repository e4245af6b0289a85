"""Assignment, quiz and exam endpoints.

The three kinds share one set of handlers; ``build_assessment_router`` binds
them to a kind and its URL prefix.
"""
import math
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from worldcourse.auth.models import User
from worldcourse.auth.service import get_current_active_user, require_staff
from worldcourse.database import get_db
from worldcourse.errors import PermissionDenied
from worldcourse.models import Assessment, AssessmentKind, AssessmentStatus
from worldcourse.schemas.assessment import (
    AssessmentCreate, AssessmentOut, AssessmentPage, AssessmentUpdate, GradeRequest, SubmissionOut,
    SubmitRequest,
)
from worldcourse.services.assessments import AssessmentService, can_manage
from worldcourse.services.submissions import SubmissionService


def assessment_view(assessment: Assessment, viewer: User) -> AssessmentOut:
    """Serialize an assessment, hiding the answer key from students."""
    out = AssessmentOut.model_validate(assessment)
    if not viewer.is_staff:
        for question in out.questions:
            question.correct_answer = None
    return out


def build_assessment_router(kind: AssessmentKind) -> APIRouter:
    router = APIRouter(prefix=f"/api/{kind.plural}", tags=[kind.plural.capitalize()])

    @router.get("", response_model=AssessmentPage)
    async def list_assessments(
        course: Optional[int] = Query(default=None),
        status_filter: Optional[AssessmentStatus] = Query(default=None, alias="status"),
        page: int = Query(default=1, ge=1),
        limit: int = Query(default=20, ge=1, le=100),
        current_user: User = Depends(get_current_active_user),
        db: Session = Depends(get_db),
    ):
        items, total = AssessmentService(db).search(
            kind, current_user, course_id=course, status=status_filter, page=page, limit=limit
        )
        return {
            "items": [assessment_view(a, current_user) for a in items],
            "total": total,
            "page": page,
            "limit": limit,
            "pages": math.ceil(total / limit) if total else 0,
        }

    @router.post("", response_model=AssessmentOut, status_code=status.HTTP_201_CREATED)
    async def create_assessment(
        data: AssessmentCreate,
        current_user: User = Depends(require_staff),
        db: Session = Depends(get_db),
    ):
        assessment = AssessmentService(db).create(kind, data, current_user)
        return assessment_view(assessment, current_user)

    @router.get("/{assessment_id}", response_model=AssessmentOut)
    async def read_assessment(
        assessment_id: int,
        current_user: User = Depends(get_current_active_user),
        db: Session = Depends(get_db),
    ):
        assessment = AssessmentService(db).get_visible(kind, assessment_id, current_user)
        return assessment_view(assessment, current_user)

    @router.put("/{assessment_id}", response_model=AssessmentOut)
    async def update_assessment(
        assessment_id: int,
        changes: AssessmentUpdate,
        current_user: User = Depends(require_staff),
        db: Session = Depends(get_db),
    ):
        service = AssessmentService(db)
        assessment = service.update(service.get_managed(kind, assessment_id, current_user), changes)
        return assessment_view(assessment, current_user)

    @router.delete("/{assessment_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_assessment(
        assessment_id: int,
        current_user: User = Depends(require_staff),
        db: Session = Depends(get_db),
    ):
        service = AssessmentService(db)
        service.deactivate(service.get_managed(kind, assessment_id, current_user))
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @router.post("/{assessment_id}/submit", response_model=SubmissionOut, status_code=status.HTTP_201_CREATED)
    async def submit(
        assessment_id: int,
        body: SubmitRequest,
        current_user: User = Depends(get_current_active_user),
        db: Session = Depends(get_db),
    ):
        """Record and auto-grade one attempt by the current user."""
        assessment = AssessmentService(db).get(kind, assessment_id, include_inactive=True)
        return SubmissionService(db).record(assessment, current_user, body.answers, body.time_spent)

    @router.put("/{assessment_id}/grade", response_model=SubmissionOut)
    async def grade(
        assessment_id: int,
        body: GradeRequest,
        current_user: User = Depends(require_staff),
        db: Session = Depends(get_db),
    ):
        assessment = AssessmentService(db).get(kind, assessment_id)
        return SubmissionService(db).grade(assessment, current_user, body)

    @router.get("/{assessment_id}/submissions", response_model=list[SubmissionOut])
    async def list_submissions(
        assessment_id: int,
        current_user: User = Depends(require_staff),
        db: Session = Depends(get_db),
    ):
        assessment = AssessmentService(db).get(kind, assessment_id)
        if not can_manage(current_user, assessment):
            raise PermissionDenied(f"Only the course instructor can view submissions for this {kind.value}")
        return SubmissionService(db).for_assessment(assessment)

    @router.get("/{assessment_id}/my-submissions", response_model=list[SubmissionOut])
    async def my_submissions(
        assessment_id: int,
        current_user: User = Depends(get_current_active_user),
        db: Session = Depends(get_db),
    ):
        assessment = AssessmentService(db).get_visible(kind, assessment_id, current_user)
        return SubmissionService(db).for_student(assessment, current_user)

    return router


assignments_router = build_assessment_router(AssessmentKind.assignment)
quizzes_router = build_assessment_router(AssessmentKind.quiz)
exams_router = build_assessment_router(AssessmentKind.exam)
