"""Tests for progress tracking and the instructor dashboard."""

from datetime import timedelta

import pytest
from fastapi import status

from conftest import make_assessment, make_user
from worldcourse.errors import NotEnrolled
from worldcourse.models import AssessmentKind, Question, QuestionType, UserRole
from worldcourse.services.progress import compute_course_progress, course_progress, dashboard_stats
from worldcourse.services.submissions import SubmissionService
from worldcourse.utils import utcnow


class TestCourseProgress:
    """Test cases for per-course progress."""

    def test_counts_per_kind(self, db_session, course, teacher, student, enrollment):
        quiz_a = make_assessment(db_session, course, teacher, title="Quiz A", attempts=2)
        make_assessment(db_session, course, teacher, title="Quiz B")
        make_assessment(
            db_session, course, teacher, kind=AssessmentKind.assignment, title="Overdue",
            due_date=utcnow() - timedelta(days=1),
        )
        service = SubmissionService(db_session)
        service.record(quiz_a, student, ["4", "Rome"])
        service.record(quiz_a, student, ["4", "Paris"])

        result = course_progress(db_session, student, course.id)

        assert result["quizzes"] == {
            "total": 2, "done": 1, "pending": 1, "late": 0, "percentage": 50, "average_score": 100,
        }
        assert result["assignments"]["late"] == 1
        assert result["assignments"]["average_score"] is None
        assert result["exams"]["total"] == 0
        assert result["overall"] == 33
        assert [g["percentage"] for g in result["recent_grades"]] == [100, 50]

    def test_recent_grades_are_capped(self, db_session, course, teacher, student, enrollment):
        service = SubmissionService(db_session)
        for n in range(7):
            service.record(make_assessment(db_session, course, teacher, title=f"Quiz {n}"), student, ["4", "Paris"])

        result = course_progress(db_session, student, course.id)

        assert len(result["recent_grades"]) == 5
        assert result["overall"] == 100

    def test_requires_enrollment(self, db_session, course, student):
        with pytest.raises(NotEnrolled):
            course_progress(db_session, student, course.id)

    def test_empty_course(self, db_session, course, student, enrollment):
        assert compute_course_progress(db_session, student.id, course.id) == 0

    def test_endpoint(self, client, quiz, course, enrollment, student_headers):
        response = client.get(f"/api/progress/{course.id}", headers=student_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["quizzes"]["pending"] == 1


class TestDashboard:
    """Test cases for dashboard statistics."""

    def test_teacher_sees_own_counts(self, db_session, course, teacher, student, enrollment):
        make_assessment(db_session, course, teacher)
        make_assessment(db_session, course, teacher, kind=AssessmentKind.exam)
        essay = make_assessment(
            db_session, course, teacher, kind=AssessmentKind.assignment,
            questions=[Question(position=0, type=QuestionType.text, text="Discuss", points=10)],
        )
        other_teacher = make_user(db_session, "other@example.com", role=UserRole.teacher)
        make_assessment(db_session, course, other_teacher, kind=AssessmentKind.exam)
        SubmissionService(db_session).record(essay, student, ["An essay"])

        stats = dashboard_stats(db_session, teacher)

        assert stats == {
            "assignments": 1, "quizzes": 1, "exams": 1, "students": 1, "pending_grading": 1, "video_lectures": 0,
        }

    def test_admin_sees_everything(self, db_session, course, teacher, admin):
        make_assessment(db_session, course, teacher, kind=AssessmentKind.exam)
        make_assessment(db_session, course, admin, kind=AssessmentKind.exam)

        assert dashboard_stats(db_session, admin)["exams"] == 2

    def test_endpoint_is_staff_only(self, client, teacher_headers, student_headers):
        assert client.get("/api/dashboard/stats", headers=teacher_headers).status_code == status.HTTP_200_OK
        assert client.get("/api/dashboard/stats", headers=student_headers).status_code == status.HTTP_403_FORBIDDEN
