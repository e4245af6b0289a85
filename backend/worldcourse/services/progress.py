"""Progress tracking and dashboard statistics."""
import logging
from datetime import timedelta
from typing import Iterable

from sqlalchemy import func
from sqlalchemy.orm import Session

from worldcourse.auth.models import User
from worldcourse.errors import NotEnrolled
from worldcourse.models import (
    Assessment, AssessmentKind, Enrollment, EnrollmentStatus, Lecture, LectureType, Submission, SubmissionStatus,
    UserRole,
)
from worldcourse.utils import ensure_utc, percentage, round_half_up, utcnow

logger = logging.getLogger(__name__)

RECENT_DAYS = 30
RECENT_LIMIT = 5


def _course_assessments(db: Session, course_id: int) -> list[Assessment]:
    return (
        db.query(Assessment)
        .filter(
            Assessment.course_id == course_id,
            Assessment.is_active == True,  # noqa: E712
            Assessment.published == True,  # noqa: E712
        )
        .order_by(Assessment.id)
        .all()
    )


def _student_submissions(db: Session, student_id: int, assessment_ids: Iterable[int]) -> list[Submission]:
    ids = list(assessment_ids)
    if not ids:
        return []
    return (
        db.query(Submission)
        .filter(Submission.student_id == student_id, Submission.assessment_id.in_(ids))
        .all()
    )


def compute_course_progress(db: Session, student_id: int, course_id: int) -> int:
    """Share of the course's published assessments the student has submitted."""
    assessments = _course_assessments(db, course_id)
    submitted = {s.assessment_id for s in _student_submissions(db, student_id, (a.id for a in assessments))}
    return percentage(len(submitted), len(assessments))


def refresh_enrollment_progress(db: Session, enrollment: Enrollment) -> int:
    """Recompute and store the enrollment's progress; the caller commits."""
    enrollment.progress = compute_course_progress(db, enrollment.user_id, enrollment.course_id)
    logger.debug(f"Enrollment {enrollment.id} progress is now {enrollment.progress}%")
    return enrollment.progress


def kind_progress(assessments: list[Assessment], by_assessment: dict[int, list[Submission]], now=None) -> dict:
    now = now or utcnow()
    total = len(assessments)
    done = sum(1 for a in assessments if by_assessment.get(a.id))
    late = sum(1 for a in assessments if not by_assessment.get(a.id) and a.is_past_due(now))
    best = [max(s.percentage for s in by_assessment[a.id]) for a in assessments if by_assessment.get(a.id)]
    return {
        "total": total,
        "done": done,
        "pending": total - done,
        "late": late,
        "percentage": percentage(done, total),
        "average_score": round_half_up(sum(best) / len(best)) if best else None,
    }


def course_progress(db: Session, student: User, course_id: int) -> dict:
    """Per-kind progress for one course, plus recent grades."""
    enrollment = (
        db.query(Enrollment)
        .filter(
            Enrollment.user_id == student.id,
            Enrollment.course_id == course_id,
            Enrollment.status == EnrollmentStatus.active,
        )
        .first()
    )
    if enrollment is None:
        raise NotEnrolled()

    now = utcnow()
    assessments = _course_assessments(db, course_id)
    submissions = _student_submissions(db, student.id, (a.id for a in assessments))
    by_assessment: dict[int, list[Submission]] = {}
    for submission in submissions:
        by_assessment.setdefault(submission.assessment_id, []).append(submission)

    result = {"course_id": course_id, "overall": percentage(len(by_assessment), len(assessments))}
    for kind in AssessmentKind:
        of_kind = [a for a in assessments if a.kind == kind]
        result[kind.plural] = kind_progress(of_kind, by_assessment, now)

    titles = {a.id: a for a in assessments}
    cutoff = now - timedelta(days=RECENT_DAYS)
    recent = sorted(
        (s for s in submissions if s.submitted_at and ensure_utc(s.submitted_at) >= cutoff),
        key=lambda s: (ensure_utc(s.submitted_at), s.id),
        reverse=True,
    )[:RECENT_LIMIT]
    result["recent_grades"] = [
        {
            "assessment_id": s.assessment_id,
            "kind": titles[s.assessment_id].kind,
            "title": titles[s.assessment_id].title,
            "percentage": s.percentage,
            "submitted_at": s.submitted_at,
        }
        for s in recent
    ]

    if enrollment.progress != result["overall"]:
        enrollment.progress = result["overall"]
        db.commit()
    return result


def dashboard_stats(db: Session, user: User) -> dict:
    """Counts shown on the instructor dashboard."""
    owned = db.query(Assessment).filter(Assessment.is_active == True)  # noqa: E712
    if user.role != UserRole.admin:
        owned = owned.filter(Assessment.created_by == user.id)
    counts = {kind: 0 for kind in AssessmentKind}
    for kind, count in (
        owned.with_entities(Assessment.kind, func.count(Assessment.id)).group_by(Assessment.kind).all()
    ):
        counts[kind] = count

    pending = (
        db.query(func.count(Submission.id))
        .join(Assessment, Submission.assessment_id == Assessment.id)
        .filter(
            Submission.status != SubmissionStatus.graded,
            Submission.needs_manual_grading == True,  # noqa: E712
        )
    )
    if user.role != UserRole.admin:
        pending = pending.filter(Assessment.created_by == user.id)

    videos = db.query(func.count(Lecture.id)).filter(
        Lecture.type == LectureType.video, Lecture.is_active == True  # noqa: E712
    )
    if user.role != UserRole.admin:
        videos = videos.filter(Lecture.teacher_id == user.id)

    students = db.query(func.count(User.id)).filter(User.role == UserRole.student).scalar()
    return {
        "assignments": counts[AssessmentKind.assignment],
        "quizzes": counts[AssessmentKind.quiz],
        "exams": counts[AssessmentKind.exam],
        "students": students or 0,
        "pending_grading": pending.scalar() or 0,
        "video_lectures": videos.scalar() or 0,
    }
