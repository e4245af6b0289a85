"""Test cases for SQLAlchemy models."""

from datetime import timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from conftest import make_assessment
from worldcourse.auth.models import User
from worldcourse.models import (
    AssessmentKind, AssessmentStatus, Enrollment, EnrollmentStatus, Order, OrderStatus, Question,
    QuestionType, Submission, UserRole,
)
from worldcourse.utils import utcnow


class TestUserModel:
    """Test cases for User model."""

    def test_password_hashing(self, student):
        assert student.hashed_password != "secret123"
        assert student.verify_password("secret123")
        assert not student.verify_password("Secret123")

    def test_unique_email(self, db_session, student):
        duplicate = User(email=student.email, first_name="Dup", last_name="Licate", hashed_password="x")
        db_session.add(duplicate)

        with pytest.raises(IntegrityError):
            db_session.commit()

    def test_role_helpers(self, student, teacher, admin):
        assert student.is_student and not student.is_staff
        assert teacher.is_teacher and teacher.is_staff
        assert admin.is_admin and admin.is_staff
        assert student.full_name == "Sam Student"

    def test_lock(self, db_session, student):
        assert not student.is_locked()
        student.locked_until = utcnow() + timedelta(minutes=5)
        db_session.commit()

        assert student.is_locked()

    def test_user_repr(self, student):
        assert "student@example.com" in repr(student)


class TestAssessmentModel:
    """Test cases for Assessment and Question models."""

    def test_total_points(self, quiz):
        assert quiz.total_points == 10
        assert quiz.question_count == 2
        assert quiz.kind == AssessmentKind.quiz

    def test_questions_keep_order(self, db_session, course, teacher):
        questions = [
            Question(position=1, type=QuestionType.text, text="second", points=1),
            Question(position=0, type=QuestionType.text, text="first", points=1),
        ]
        assessment = make_assessment(db_session, course, teacher, questions=questions)
        db_session.expire(assessment)

        assert [q.text for q in assessment.questions] == ["first", "second"]

    def test_is_open(self, db_session, quiz):
        assert quiz.is_open
        quiz.status = AssessmentStatus.closed
        assert not quiz.is_open

    def test_is_past_due(self, db_session, course, teacher):
        no_due = make_assessment(db_session, course, teacher)
        overdue = make_assessment(db_session, course, teacher, due_date=utcnow() - timedelta(minutes=1))

        assert not no_due.is_past_due()
        assert overdue.is_past_due()

    def test_question_is_objective(self, quiz):
        assert all(q.is_objective for q in quiz.questions)


class TestSubmissionModel:
    """Test cases for Submission model."""

    def test_attempt_numbers_are_unique(self, db_session, quiz, student):
        db_session.add(Submission(assessment_id=quiz.id, student_id=student.id, attempt_number=1))
        db_session.commit()
        db_session.add(Submission(assessment_id=quiz.id, student_id=student.id, attempt_number=1))

        with pytest.raises(IntegrityError):
            db_session.commit()

    def test_defaults(self, db_session, quiz, student):
        submission = Submission(assessment_id=quiz.id, student_id=student.id, attempt_number=1)
        db_session.add(submission)
        db_session.commit()
        db_session.refresh(submission)

        assert submission.answers == []
        assert submission.grading == []
        assert submission.score == 0
        assert submission.submitted_at is not None
        assert not submission.is_graded


class TestEnrollmentAndOrder:
    """Test cases for Enrollment and Order models."""

    def test_one_enrollment_per_course(self, db_session, enrollment, student, course):
        db_session.add(Enrollment(user_id=student.id, course_id=course.id))

        with pytest.raises(IntegrityError):
            db_session.commit()

    def test_enrollment_defaults(self, enrollment, course):
        assert enrollment.status == EnrollmentStatus.active
        assert enrollment.progress == 0
        assert course.student_count == 1

    def test_order_course_ids(self, db_session, student):
        order = Order(
            user_id=student.id,
            courses=[{"course_id": 3, "title": "A", "price": 1}, {"course_id": 7, "title": "B", "price": 2}],
            total_amount=3,
        )
        db_session.add(order)
        db_session.commit()

        assert order.course_ids == [3, 7]
        assert order.is_pending
        assert order.status == OrderStatus.pending
        assert order.user.role == UserRole.student
