"""Tests for admin management of teachers and assistants."""

from fastapi import status

from conftest import PASSWORD
from worldcourse.auth.models import User
from worldcourse.models import Assistant

ASSISTANT = {
    "name": "Alex Helper",
    "email": "Alex@Example.com",
    "subject": "math",
    "availability": "weekends",
    "roleDescription": "Marks homework",
}


class TestTeachers:
    """Test cases for teacher accounts."""

    def test_admin_creates_teacher(self, client, db_session, admin_headers):
        body = {"email": "new.teacher@example.com", "password": "teach123", "first_name": "Nia", "role": "student"}

        response = client.post("/api/admin/teachers", json=body, headers=admin_headers)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["teacher"]["role"] == "teacher"
        login = client.post("/api/login", json={"email": body["email"], "password": "teach123"})
        assert login.json()["user"]["role"] == "teacher"

    def test_duplicate_teacher_email(self, client, teacher, admin_headers):
        body = {"email": teacher.email, "password": "teach123"}

        response = client.post("/api/admin/teachers", json=body, headers=admin_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_list_and_deactivate(self, client, db_session, teacher, student, admin_headers):
        listed = client.get("/api/admin/teachers", headers=admin_headers).json()
        assert [t["id"] for t in listed] == [teacher.id]

        response = client.delete(f"/api/admin/teachers/{teacher.id}", headers=admin_headers)

        assert response.status_code == status.HTTP_200_OK
        db_session.refresh(teacher)
        assert teacher.is_active is False
        login = client.post("/api/login", json={"email": teacher.email, "password": PASSWORD})
        assert login.status_code == status.HTTP_403_FORBIDDEN

    def test_deactivate_only_teachers(self, client, student, admin_headers):
        response = client.delete(f"/api/admin/teachers/{student.id}", headers=admin_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_admin_only(self, client, teacher_headers):
        assert client.get("/api/admin/teachers", headers=teacher_headers).status_code == 403
        assert client.get("/api/admin/assistants", headers=teacher_headers).status_code == 403


class TestAssistants:
    """Test cases for teaching assistant records."""

    def test_add_assistant(self, client, db_session, admin, admin_headers):
        response = client.post("/api/admin/add-assistant", json=ASSISTANT, headers=admin_headers)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["email"] == "alex@example.com"
        assert data["status"] == "pending"
        assert data["role_description"] == "Marks homework"
        assert data["created_by"] == admin.id
        # Assistants are contact records, not logins
        assert db_session.query(User).filter(User.email == "alex@example.com").count() == 0

    def test_duplicate_email(self, client, db_session, admin_headers):
        client.post("/api/admin/add-assistant", json=ASSISTANT, headers=admin_headers)

        response = client.post("/api/admin/add-assistant", json=ASSISTANT, headers=admin_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Assistant with this email already exists"
        assert db_session.query(Assistant).count() == 1

    def test_add_for_teacher(self, client, teacher, student, admin_headers):
        response = client.post(f"/api/admin/teachers/{teacher.id}/assistants", json=ASSISTANT,
                               headers=admin_headers)
        unknown = client.post(f"/api/admin/teachers/{student.id}/assistants",
                              json={**ASSISTANT, "email": "other@example.com"}, headers=admin_headers)

        assert response.json()["teacher_id"] == teacher.id
        assert unknown.status_code == status.HTTP_404_NOT_FOUND

    def test_missing_fields(self, client, admin_headers):
        response = client.post("/api/admin/add-assistant", json={"name": "No Email"}, headers=admin_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert {e["field"] for e in response.json()["errors"]} >= {"email", "subject", "availability"}

    def test_update_approve_delete(self, client, db_session, admin_headers):
        assistant_id = client.post("/api/admin/add-assistant", json=ASSISTANT, headers=admin_headers).json()["id"]

        updated = client.put(f"/api/admin/assistants/{assistant_id}", json={"availability": "evenings"},
                             headers=admin_headers)
        empty = client.put(f"/api/admin/assistants/{assistant_id}", json={}, headers=admin_headers)
        approved = client.put(f"/api/admin/assistants/{assistant_id}/approve", headers=admin_headers)

        assert updated.json()["availability"] == "evenings"
        assert updated.json()["name"] == "Alex Helper"
        assert empty.status_code == status.HTTP_400_BAD_REQUEST
        assert approved.json()["status"] == "active"

        deleted = client.delete(f"/api/admin/assistants/{assistant_id}", headers=admin_headers)
        again = client.delete(f"/api/admin/assistants/{assistant_id}", headers=admin_headers)

        assert deleted.status_code == status.HTTP_200_OK
        assert again.status_code == status.HTTP_404_NOT_FOUND
        assert client.get("/api/admin/assistants", headers=admin_headers).json() == []

    def test_update_to_taken_email(self, client, admin_headers):
        client.post("/api/admin/add-assistant", json=ASSISTANT, headers=admin_headers)
        other_id = client.post("/api/admin/add-assistant", json={**ASSISTANT, "email": "sam@example.com"},
                               headers=admin_headers).json()["id"]

        response = client.put(f"/api/admin/assistants/{other_id}", json={"email": "alex@example.com"},
                              headers=admin_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
