"""Tests for parent accounts and child progress."""

import pytest
from fastapi import status

from conftest import auth_headers, make_assessment, make_user
from worldcourse.errors import NotFound, ValidationFailed
from worldcourse.models import UserRole
from worldcourse.services.parents import ParentService
from worldcourse.services.submissions import SubmissionService


def link(db, parent, student):
    student.parent_id = parent.id
    db.commit()


class TestParentService:
    """Test cases for ParentService."""

    def test_link_by_email(self, db_session, parent, student):
        linked = ParentService(db_session, parent).link("student@example.com")

        assert linked.id == student.id
        assert student.parent_id == parent.id
        assert [c.id for c in parent.children] == [student.id]

    def test_link_rejects_duplicates(self, db_session, parent, student):
        service = ParentService(db_session, parent)
        service.link(student.email)

        with pytest.raises(ValidationFailed, match="already linked to you"):
            service.link(student.email)

        other = make_user(db_session, "other-parent@example.com", role=UserRole.parent)
        with pytest.raises(ValidationFailed, match="another parent"):
            ParentService(db_session, other).link(student.email)

    def test_only_students_can_be_linked(self, db_session, parent, teacher):
        with pytest.raises(NotFound):
            ParentService(db_session, parent).link(teacher.email)

    def test_other_children_are_hidden(self, db_session, parent, student):
        with pytest.raises(NotFound):
            ParentService(db_session, parent).child(student.id)


class TestParentEndpoints:
    """Test cases for the /api/parent endpoints."""

    def test_link_children_and_unlink(self, client, db_session, parent, student, enrollment, parent_headers):
        linked = client.post("/api/parent/link-student", json={"studentEmail": " Student@Example.com "},
                             headers=parent_headers)
        children = client.get("/api/parent/children", headers=parent_headers).json()

        assert linked.status_code == status.HTTP_200_OK
        assert linked.json()["student"] == {"id": student.id, "name": "Sam Student", "email": student.email}
        assert [(c["id"], c["enrolled_courses"]) for c in children] == [(student.id, 1)]

        unlinked = client.delete(f"/api/parent/unlink-student/{student.id}", headers=parent_headers)
        again = client.delete(f"/api/parent/unlink-student/{student.id}", headers=parent_headers)

        assert unlinked.status_code == status.HTTP_200_OK
        assert again.status_code == status.HTTP_404_NOT_FOUND
        assert client.get("/api/parent/children", headers=parent_headers).json() == []

    def test_child_progress(self, client, db_session, parent, student, teacher, enrollment, course, quiz,
                            parent_headers):
        link(db_session, parent, student)
        make_assessment(db_session, course, teacher, title="Second quiz")
        SubmissionService(db_session).record(quiz, student, ["4", "Paris"])

        response = client.get(f"/api/parent/child/{student.id}/progress", headers=parent_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["total_courses"] == 1
        assert data["courses"][0]["title"] == "Algebra I"
        assert data["courses"][0]["progress"] == 50
        assert data["progress"][0]["quizzes"]["done"] == 1
        assert data["progress"][0]["recent_grades"][0]["percentage"] == 100

    def test_progress_of_unlinked_student(self, client, student, parent_headers):
        response = client.get(f"/api/parent/child/{student.id}/progress", headers=parent_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_dashboard(self, client, db_session, parent, student, enrollment, parent_headers):
        sibling = make_user(db_session, "sibling@example.com")
        link(db_session, parent, student)
        link(db_session, parent, sibling)

        summary = client.get("/api/parent/dashboard", headers=parent_headers).json()

        assert summary["total_children"] == 2
        assert summary["total_courses"] == 1
        assert summary["total_enrollments"] == 1
        assert summary["first_enrollment"] is not None

    def test_parent_role_required(self, client, student_headers):
        response = client.get("/api/parent/children", headers=student_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_parent_cannot_read_assessments(self, client, quiz, parent_headers):
        listed = client.get("/api/quizzes", headers=parent_headers).json()
        single = client.get(f"/api/quizzes/{quiz.id}", headers=parent_headers)

        assert listed["total"] == 0
        assert single.status_code == status.HTTP_404_NOT_FOUND

    def test_parents_can_self_register(self, client):
        response = client.post(
            "/api/register",
            json={"email": "mum@example.com", "password": "secret123", "first_name": "Mum", "role": "parent"},
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["user"]["role"] == "parent"

    def test_admin_parent_lookup(self, client, db_session, parent, student, admin_headers):
        link(db_session, parent, student)

        data = client.get(f"/api/admin/student/{student.id}/parent", headers=admin_headers).json()
        missing = client.get(f"/api/admin/student/{parent.id}/parent", headers=admin_headers)

        assert data["parent"]["email"] == parent.email
        assert missing.status_code == status.HTTP_404_NOT_FOUND
        assert client.get(
            f"/api/admin/student/{student.id}/parent", headers=auth_headers(db_session, student)
        ).status_code == status.HTTP_403_FORBIDDEN
