"""Tests for the course leaderboard."""

from fastapi import status

from conftest import auth_headers, make_assessment, make_user
from worldcourse.models import AssessmentKind, Enrollment, EnrollmentStatus, Submission, UserRole
from worldcourse.services.leaderboard import build_leaderboard


def enroll(db, user, course, **fields):
    enrollment = Enrollment(user_id=user.id, course_id=course.id, **fields)
    db.add(enrollment)
    db.commit()
    return enrollment


def submit(db, assessment, student, score, attempt=1):
    db.add(Submission(assessment_id=assessment.id, student_id=student.id, attempt_number=attempt, score=score))
    db.commit()


class TestLeaderboard:
    """Test cases for build_leaderboard and its endpoint."""

    def test_ranks_by_best_score_per_assessment(self, db_session, course, teacher, student, enrollment):
        rival = make_user(db_session, "rival@example.com", first_name="Riv", last_name="Al")
        enroll(db_session, rival, course)
        quiz = make_assessment(db_session, course, teacher, attempts=3)
        exam = make_assessment(db_session, course, teacher, kind=AssessmentKind.exam)
        submit(db_session, quiz, student, 4)
        submit(db_session, quiz, student, 9, attempt=2)
        submit(db_session, exam, student, 6)
        submit(db_session, quiz, rival, 10)

        board = build_leaderboard(db_session, student, course.id)

        assert [(row["user_id"], row["total_score"], row["total_submissions"]) for row in board] == [
            (student.id, 15, 3),
            (rival.id, 10, 1),
        ]
        assert [row["rank"] for row in board] == [1, 2]

    def test_ties_share_a_rank(self, db_session, course, student, enrollment):
        first = make_user(db_session, "a@example.com")
        second = make_user(db_session, "b@example.com")
        enroll(db_session, first, course)
        enroll(db_session, second, course)

        board = build_leaderboard(db_session, student, course.id)

        assert len(board) == 3
        assert {row["rank"] for row in board} == {1}

    def test_only_active_students_are_ranked(self, db_session, course, student, enrollment, admin):
        revoked = make_user(db_session, "gone@example.com")
        enroll(db_session, revoked, course, status=EnrollmentStatus.revoked)
        helper = make_user(db_session, "helper@example.com", role=UserRole.teacher)
        enroll(db_session, helper, course)

        board = build_leaderboard(db_session, admin, course.id)

        assert [row["user_id"] for row in board] == [student.id]

    def test_limit(self, client, db_session, course, student, enrollment, student_headers):
        for n in range(4):
            enroll(db_session, make_user(db_session, f"s{n}@example.com"), course)

        response = client.get(f"/api/users/leaderboard?course={course.id}&limit=2", headers=student_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["course_id"] == course.id
        assert len(response.json()["leaderboard"]) == 2

    def test_requires_course(self, client, student_headers):
        response = client.get("/api/users/leaderboard", headers=student_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unknown_course(self, client, student_headers):
        response = client.get("/api/users/leaderboard?course=999", headers=student_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_outsiders_are_denied(self, client, db_session, course, enrollment, teacher_headers):
        outsider = make_user(db_session, "outsider@example.com")

        denied = client.get(f"/api/users/leaderboard?course={course.id}", headers=auth_headers(db_session, outsider))
        instructor = client.get(f"/api/users/leaderboard?course={course.id}", headers=teacher_headers)

        assert denied.status_code == status.HTTP_403_FORBIDDEN
        assert instructor.status_code == status.HTTP_200_OK
