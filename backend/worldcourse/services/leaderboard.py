"""Per-course student ranking."""
from sqlalchemy.orm import Session

from worldcourse.auth.models import User
from worldcourse.errors import NotFound, PermissionDenied
from worldcourse.models import Assessment, Course, Enrollment, EnrollmentStatus, Submission, UserRole


def _is_enrolled(db: Session, user: User, course_id: int) -> bool:
    return (
        db.query(Enrollment.id)
        .filter(
            Enrollment.user_id == user.id,
            Enrollment.course_id == course_id,
            Enrollment.status == EnrollmentStatus.active,
        )
        .first()
        is not None
    )


def build_leaderboard(db: Session, viewer: User, course_id: int, limit: int = 10) -> list[dict]:
    """Rank the course's enrolled students by their summed best scores.

    Each assessment counts once per student, with the best attempt. Ties on
    score are broken by the number of submissions; equal rows share a rank.
    """
    course = db.query(Course).filter(Course.id == course_id).first()
    if course is None:
        raise NotFound("Course not found")
    is_staff_viewer = viewer.role == UserRole.admin or course.instructor_id == viewer.id
    if not is_staff_viewer and not _is_enrolled(db, viewer, course_id):
        raise PermissionDenied("Access denied. You are not enrolled in this course.")

    students = (
        db.query(User)
        .join(Enrollment, Enrollment.user_id == User.id)
        .filter(
            Enrollment.course_id == course_id,
            Enrollment.status == EnrollmentStatus.active,
            User.role == UserRole.student,
            User.is_active == True,  # noqa: E712
        )
        .all()
    )
    if not students:
        return []

    assessment_ids = [
        row[0]
        for row in db.query(Assessment.id)
        .filter(Assessment.course_id == course_id, Assessment.is_active == True)  # noqa: E712
        .all()
    ]
    best: dict[tuple[int, int], float] = {}
    submitted: dict[int, int] = {}
    if assessment_ids:
        submissions = (
            db.query(Submission)
            .filter(
                Submission.assessment_id.in_(assessment_ids),
                Submission.student_id.in_([s.id for s in students]),
            )
            .all()
        )
        for submission in submissions:
            key = (submission.student_id, submission.assessment_id)
            best[key] = max(best.get(key, 0.0), float(submission.score or 0))
            submitted[submission.student_id] = submitted.get(submission.student_id, 0) + 1

    totals: dict[int, float] = {}
    for (student_id, _), score in best.items():
        totals[student_id] = totals.get(student_id, 0.0) + score

    rows = [
        {
            "user_id": s.id,
            "first_name": s.first_name,
            "last_name": s.last_name,
            "points": s.points or 0,
            "total_score": round(totals.get(s.id, 0.0), 2),
            "total_submissions": submitted.get(s.id, 0),
        }
        for s in students
    ]
    rows.sort(key=lambda r: (-r["total_score"], -r["total_submissions"], r["user_id"]))

    previous = None
    for position, row in enumerate(rows, start=1):
        standing = (row["total_score"], row["total_submissions"])
        row["rank"] = position if standing != previous else rows[position - 2]["rank"]
        previous = standing
    return rows[:limit]
