"""Submission recording and instructor grading."""
import logging
from typing import Optional, Sequence

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from worldcourse.auth.models import User
from worldcourse.errors import (
    AssessmentNotActive, Conflict, MaxAttemptsReached, NotEnrolled, NotFound, PermissionDenied,
)
from worldcourse.models import Assessment, Enrollment, EnrollmentStatus, Submission, SubmissionStatus
from worldcourse.schemas.assessment import GradeRequest
from worldcourse.utils import percentage, utcnow
from .assessments import can_manage
from .grading import apply_late_penalty, auto_grade, manual_grade
from .progress import refresh_enrollment_progress

logger = logging.getLogger(__name__)


class SubmissionService:
    def __init__(self, db: Session):
        self.db = db

    def _active_enrollment(self, user_id: int, course_id: int) -> Optional[Enrollment]:
        return (
            self.db.query(Enrollment)
            .filter(
                Enrollment.user_id == user_id,
                Enrollment.course_id == course_id,
                Enrollment.status == EnrollmentStatus.active,
            )
            .first()
        )

    def attempts_used(self, assessment: Assessment, student: User) -> int:
        return (
            self.db.query(func.count(Submission.id))
            .filter(Submission.assessment_id == assessment.id, Submission.student_id == student.id)
            .scalar()
        ) or 0

    def record(
        self,
        assessment: Assessment,
        student: User,
        answers: Sequence[Optional[str]],
        time_spent: Optional[int] = None,
    ) -> Submission:
        """Append a graded attempt for ``student``.

        The attempt number comes from the current count; the unique constraint
        on (assessment, student, attempt_number) rejects a concurrent insert
        that read the same count.
        """
        if not assessment.is_open:
            raise AssessmentNotActive()
        enrollment = self._active_enrollment(student.id, assessment.course_id)
        if enrollment is None:
            raise NotEnrolled()

        used = self.attempts_used(assessment, student)
        if used >= assessment.attempts:
            raise MaxAttemptsReached(f"Maximum number of attempts ({assessment.attempts}) reached")

        now = utcnow()
        late = assessment.allow_late_submission and assessment.is_past_due(now)

        result = auto_grade(assessment.questions, answers)
        score = apply_late_penalty(result.score, assessment.late_penalty) if late else result.score

        submission = Submission(
            assessment_id=assessment.id,
            student_id=student.id,
            attempt_number=used + 1,
            answers=list(answers),
            time_spent=time_spent,
            score=score,
            percentage=percentage(score, result.total_points),
            grading=result.details,
            status=SubmissionStatus.late if late else SubmissionStatus.submitted,
            is_late=late,
            needs_manual_grading=result.needs_manual_grading,
            submitted_at=now,
        )
        self.db.add(submission)
        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            logger.warning(
                f"Concurrent submission rejected for student {student.id} on assessment {assessment.id}"
            )
            raise Conflict("Another submission for this attempt was recorded at the same time")

        refresh_enrollment_progress(self.db, enrollment)
        self.db.commit()
        self.db.refresh(submission)
        logger.info(
            f"Student {student.id} submitted attempt {submission.attempt_number} of "
            f"{assessment.kind.value} {assessment.id}: {submission.score:g}/{result.total_points:g}"
            f"{' (late)' if late else ''}"
        )
        return submission

    def grade(self, assessment: Assessment, grader: User, request: GradeRequest) -> Submission:
        """Replace a submission's grading with the instructor's per-question points."""
        if not can_manage(grader, assessment):
            raise PermissionDenied("Only the course instructor can grade this submission")

        submission = (
            self.db.query(Submission)
            .filter(Submission.id == request.submission_id, Submission.assessment_id == assessment.id)
            .first()
        )
        if submission is None:
            raise NotFound("Submission not found")

        score, details = manual_grade(assessment.questions, request.grading)
        submission.grading = details
        submission.score = score
        submission.percentage = percentage(score, assessment.total_points)
        submission.teacher_comments = list(request.teacher_comments)
        submission.graded_at = utcnow()
        submission.graded_by = grader.id
        submission.status = SubmissionStatus.graded
        submission.needs_manual_grading = False
        self.db.commit()
        self.db.refresh(submission)
        logger.info(f"User {grader.id} graded submission {submission.id}: {score:g} ({submission.percentage}%)")
        return submission

    def for_assessment(self, assessment: Assessment) -> list[Submission]:
        return (
            self.db.query(Submission)
            .filter(Submission.assessment_id == assessment.id)
            .order_by(Submission.submitted_at, Submission.id)
            .all()
        )

    def for_student(self, assessment: Assessment, student: User) -> list[Submission]:
        return (
            self.db.query(Submission)
            .filter(Submission.assessment_id == assessment.id, Submission.student_id == student.id)
            .order_by(Submission.attempt_number)
            .all()
        )
