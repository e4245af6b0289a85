"""Tests for courses, enrollments, access management and orders."""

from fastapi import status

from conftest import auth_headers, make_user
from worldcourse.models import Course, Enrollment, EnrollmentStatus, Order, OrderStatus, UserRole


def order_body(*courses):
    return {
        "customer_name": "Sam Student",
        "customer_email": "student@example.com",
        "customer_phone": "555-0101",
        "courses": [{"course_id": c.id, "title": c.title, "price": c.price} for c in courses],
        "total_amount": sum(c.price for c in courses),
        "payment_method": "bank_transfer",
    }


class TestCourses:
    """Test cases for the course catalog."""

    def test_catalog_is_public_and_filtered(self, client, db_session, course):
        db_session.add(Course(title="Physics", subject="science", level="beginner", price=20))
        db_session.add(Course(title="Retired", subject="math", level="beginner", price=5, is_active=False))
        db_session.commit()

        everything = client.get("/api/courses").json()
        math_only = client.get("/api/courses?subject=math").json()

        assert {c["title"] for c in everything} == {"Algebra I", "Physics"}
        assert [c["title"] for c in math_only] == ["Algebra I"]

    def test_read_course(self, client, course, enrollment):
        response = client.get(f"/api/courses/{course.id}")

        assert response.json()["student_count"] == 1
        assert client.get("/api/courses/999").status_code == status.HTTP_404_NOT_FOUND

    def test_admin_creates_course(self, client, teacher, admin_headers, teacher_headers):
        body = {"title": "Geometry", "level": "intermediate", "price": 30, "instructor_id": teacher.id}

        assert client.post("/api/courses", json=body, headers=teacher_headers).status_code == 403
        response = client.post("/api/courses", json=body, headers=admin_headers)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["instructor_id"] == teacher.id

    def test_instructor_must_be_staff(self, client, student, admin_headers):
        body = {"title": "Geometry", "level": "intermediate", "price": 30, "instructor_id": student.id}

        response = client.post("/api/courses", json=body, headers=admin_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_course_students(self, client, db_session, course, student, enrollment, teacher_headers):
        response = client.get(f"/api/courses/{course.id}/students", headers=teacher_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()[0]["email"] == student.email

        outsider = make_user(db_session, "other-teacher@example.com", role=UserRole.teacher)
        denied = client.get(f"/api/courses/{course.id}/students", headers=auth_headers(db_session, outsider))
        assert denied.status_code == status.HTTP_403_FORBIDDEN

    def test_my_enrollments(self, client, course, enrollment, student_headers):
        response = client.get("/api/my-enrollments", headers=student_headers)

        assert response.json()[0]["course_title"] == "Algebra I"
        assert response.json()[0]["course_level"] == "beginner"


class TestAccessManagement:
    """Test cases for admin grant/revoke access."""

    def test_grant_is_idempotent(self, client, db_session, student, course, admin_headers):
        body = {"user_id": student.id, "course_id": course.id}

        first = client.post("/api/admin/grant-access", json=body, headers=admin_headers)
        second = client.post("/api/admin/grant-access", json=body, headers=admin_headers)

        assert first.status_code == second.status_code == status.HTTP_200_OK
        assert first.json()["enrollment"]["id"] == second.json()["enrollment"]["id"]
        assert db_session.query(Enrollment).count() == 1

    def test_revoke_then_regrant(self, client, db_session, student, course, enrollment, admin_headers):
        response = client.post("/api/admin/revoke-access", json={"enrollment_id": enrollment.id},
                               headers=admin_headers)
        assert response.json()["enrollment"]["status"] == "revoked"

        again = client.post("/api/admin/revoke-access", json={"user_id": student.id, "course_id": course.id},
                            headers=admin_headers)
        assert again.status_code == status.HTTP_404_NOT_FOUND

        regrant = client.post("/api/admin/grant-access", json={"user_id": student.id, "course_id": course.id},
                              headers=admin_headers)
        assert regrant.json()["enrollment"]["status"] == "active"
        db_session.refresh(enrollment)
        assert enrollment.status == EnrollmentStatus.active

    def test_revoke_needs_a_target(self, client, admin_headers):
        response = client.post("/api/admin/revoke-access", json={"user_id": 1}, headers=admin_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_students_and_points(self, client, student, teacher, admin_headers, student_headers):
        assert client.get("/api/admin/students", headers=student_headers).status_code == 403

        students = client.get("/api/admin/students", headers=admin_headers).json()
        assert [s["id"] for s in students] == [student.id]

        response = client.put("/api/admin/update-student-points", json={"user_id": student.id, "points": 75},
                              headers=admin_headers)
        assert response.json()["points"] == 75


class TestOrders:
    """Test cases for ordering and approval."""

    def test_order_lifecycle(self, client, db_session, student, course, admin, admin_headers, student_headers):
        created = client.post("/api/orders", json=order_body(course), headers=student_headers)
        assert created.status_code == status.HTTP_201_CREATED
        order_id = created.json()["order"]["id"]

        pending = client.get(f"/api/orders/pending/{student.id}", headers=student_headers)
        assert pending.json()["id"] == order_id

        before = client.get(f"/api/orders/status/{student.id}", headers=student_headers).json()
        assert before["has_access"] is False

        approved = client.post("/api/admin/approve-order", json={"order_id": order_id}, headers=admin_headers)
        assert approved.status_code == status.HTTP_200_OK
        assert approved.json()["enrollments_created"] == 1

        order = db_session.get(Order, order_id)
        assert order.status == OrderStatus.approved
        assert order.approved_by == admin.id
        assert order.approved_at is not None

        after = client.get(f"/api/orders/status/{student.id}", headers=student_headers).json()
        assert after["has_access"] is True
        assert after["orders"][0]["status"] == "approved"
        assert client.get(f"/api/orders/pending/{student.id}", headers=student_headers).status_code == 404

    def test_approving_twice_conflicts(self, client, db_session, student, course, admin_headers, student_headers):
        order_id = client.post("/api/orders", json=order_body(course), headers=student_headers).json()["order"]["id"]
        client.post("/api/admin/approve-order", json={"order_id": order_id}, headers=admin_headers)

        again = client.post("/api/admin/approve-order", json={"order_id": order_id}, headers=admin_headers)

        assert again.status_code == status.HTTP_409_CONFLICT
        assert db_session.query(Enrollment).count() == 1

    def test_approval_reuses_existing_enrollment(self, client, db_session, student, course, enrollment,
                                                 admin_headers, student_headers):
        order_id = client.post("/api/orders", json=order_body(course), headers=student_headers).json()["order"]["id"]

        approved = client.post("/api/admin/approve-order", json={"order_id": order_id}, headers=admin_headers)

        assert approved.json()["enrollments_created"] == 0
        assert db_session.query(Enrollment).count() == 1

    def test_duplicate_course_is_rejected(self, client, db_session, course, student_headers):
        response = client.post("/api/orders", json=order_body(course, course), headers=student_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"][0]["field"].endswith("courses")
        assert db_session.query(Order).count() == 0

    def test_approving_stored_duplicate_enrolls_once(self, client, db_session, student, course, admin_headers):
        item = {"course_id": course.id, "title": course.title, "price": course.price}
        order = Order(user_id=student.id, courses=[item, item], total_amount=course.price * 2)
        db_session.add(order)
        db_session.commit()

        approved = client.post("/api/admin/approve-order", json={"order_id": order.id}, headers=admin_headers)

        assert approved.status_code == status.HTTP_200_OK
        assert approved.json()["enrollments_created"] == 1
        assert db_session.query(Enrollment).count() == 1

    def test_reject(self, client, student, course, admin_headers, student_headers):
        order_id = client.post("/api/orders", json=order_body(course), headers=student_headers).json()["order"]["id"]

        rejected = client.post("/api/admin/reject-order", json={"order_id": order_id}, headers=admin_headers)
        listed = client.get("/api/admin/orders?status=rejected", headers=admin_headers).json()

        assert rejected.json()["order"]["status"] == "rejected"
        assert [o["id"] for o in listed] == [order_id]

    def test_order_validation(self, client, student_headers):
        empty = client.post("/api/orders", json={"courses": [], "total_amount": 0}, headers=student_headers)
        unknown = client.post(
            "/api/orders",
            json={"courses": [{"course_id": 999, "title": "Ghost"}], "total_amount": 0},
            headers=student_headers,
        )

        assert empty.status_code == status.HTTP_400_BAD_REQUEST
        assert unknown.status_code == status.HTTP_404_NOT_FOUND

    def test_other_users_orders_are_private(self, client, db_session, student, course, student_headers):
        other = make_user(db_session, "classmate@example.com")

        response = client.get(f"/api/orders/status/{other.id}", headers=student_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN
