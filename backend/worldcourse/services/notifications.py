"""Student notification feed.

Built per request from the student's enrolled courses. Order is fixed:
quizzes, assignments, exams (each newest first), then the live session and
leaderboard reminders.
"""
from datetime import datetime, UTC

from sqlalchemy.orm import Session

from worldcourse.auth.models import User
from worldcourse.models import (
    Assessment, AssessmentKind, AssessmentStatus, Enrollment, EnrollmentStatus, Submission,
)
from worldcourse.utils import ensure_utc, time_ago, utcnow

STYLES = {
    "quiz": ("📝", "#667eea"),
    "assignment": ("📚", "#f59e0b"),
    "exam": ("🎓", "#ef4444"),
    "live_session": ("🎥", "#8b5cf6"),
    "leaderboard": ("📈", "#22c55e"),
}

MESSAGES = {
    AssessmentKind.quiz: "A new quiz is available: {title}",
    AssessmentKind.assignment: "You have an assignment to complete: {title}",
    AssessmentKind.exam: "An exam is open: {title}",
}

KIND_ORDER = (AssessmentKind.quiz, AssessmentKind.assignment, AssessmentKind.exam)

_OLDEST = datetime.min.replace(tzinfo=UTC)


def _entry(kind: str, entry_id: str, title: str, message: str, **extra) -> dict:
    icon, color = STYLES[kind]
    entry = {
        "id": entry_id,
        "type": kind,
        "title": title,
        "message": message,
        "icon": icon,
        "color": color,
        "time_ago": None,
        "course_id": None,
        "assessment_id": None,
    }
    entry.update(extra)
    return entry


def _reminders() -> list[dict]:
    return [
        _entry("live_session", "live-session", "Live session",
               "Check the schedule for your next live session"),
        _entry("leaderboard", "leaderboard", "Leaderboard",
               "See where you rank on this week's leaderboard"),
    ]


def build_notifications(db: Session, user: User) -> list[dict]:
    course_ids = [
        row[0]
        for row in db.query(Enrollment.course_id)
        .filter(Enrollment.user_id == user.id, Enrollment.status == EnrollmentStatus.active)
        .all()
    ]
    if not course_ids:
        return _reminders()

    open_items = (
        db.query(Assessment)
        .filter(
            Assessment.course_id.in_(course_ids),
            Assessment.is_active == True,  # noqa: E712
            Assessment.published == True,  # noqa: E712
            Assessment.status == AssessmentStatus.available,
        )
        .all()
    )
    completed = {
        row[0]
        for row in db.query(Submission.assessment_id).filter(Submission.student_id == user.id).all()
    }

    now = utcnow()
    feed = []
    for kind in KIND_ORDER:
        items = [a for a in open_items if a.kind == kind]
        if kind == AssessmentKind.assignment:
            items = [a for a in items if a.id not in completed]
        items.sort(key=lambda a: (ensure_utc(a.created_at) or _OLDEST, a.id), reverse=True)
        for assessment in items:
            feed.append(_entry(
                kind.value,
                f"{kind.value}-{assessment.id}",
                assessment.title,
                MESSAGES[kind].format(title=assessment.title),
                time_ago=time_ago(assessment.created_at, now),
                course_id=assessment.course_id,
                assessment_id=assessment.id,
            ))
    return feed + _reminders()
