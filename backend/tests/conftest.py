"""Test configuration and fixtures."""

import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from worldcourse.database import Base, get_db
from worldcourse.main import app
from worldcourse.auth.models import User
from worldcourse.auth.service import AuthService
from worldcourse.models import (
    Assessment, AssessmentKind, AssessmentStatus, Course, Enrollment, Question, QuestionType, UserRole,
)

TEST_DATABASE_URL = "sqlite:///:memory:"
PASSWORD = "secret123"


@pytest.fixture
def engine():
    """Fresh in-memory database per test."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    """Create test database session."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def client(db_session):
    """Test client whose requests share the test session."""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(db, email, role=UserRole.student, first_name="Test", last_name="User", points=0):
    user = User(email=email, first_name=first_name, last_name=last_name, role=role, points=points)
    user.set_password(PASSWORD)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(db, user):
    return {"Authorization": f"Bearer {AuthService(db).access_token_for(user)}"}


def make_assessment(db, course, author, kind=AssessmentKind.quiz, questions=None, **fields):
    """Published, available assessment; two 5-point multiple-choice questions by default."""
    if questions is None:
        questions = [
            Question(position=0, type=QuestionType.multiple_choice, text="2 + 2?",
                     options=["3", "4", "5"], correct_answer="4", points=5),
            Question(position=1, type=QuestionType.multiple_choice, text="Capital of France?",
                     options=["Paris", "Rome", "Madrid"], correct_answer="Paris", points=5),
        ]
    values = dict(
        kind=kind,
        course_id=course.id,
        title=f"Sample {kind.value}",
        attempts=1,
        published=True,
        status=AssessmentStatus.available,
        created_by=author.id,
    )
    values.update(fields)
    assessment = Assessment(**values)
    assessment.questions = questions
    db.add(assessment)
    db.commit()
    db.refresh(assessment)
    return assessment


@pytest.fixture
def student(db_session):
    return make_user(db_session, "student@example.com", first_name="Sam", last_name="Student")


@pytest.fixture
def teacher(db_session):
    return make_user(db_session, "teacher@example.com", role=UserRole.teacher, first_name="Tia", last_name="Teacher")


@pytest.fixture
def admin(db_session):
    return make_user(db_session, "admin@example.com", role=UserRole.admin, first_name="Ada", last_name="Admin")


@pytest.fixture
def parent(db_session):
    return make_user(db_session, "parent@example.com", role=UserRole.parent, first_name="Pat", last_name="Parent")


@pytest.fixture
def course(db_session, teacher):
    course = Course(title="Algebra I", subject="math", level="beginner", price=49.0, instructor_id=teacher.id)
    db_session.add(course)
    db_session.commit()
    db_session.refresh(course)
    return course


@pytest.fixture
def enrollment(db_session, student, course):
    enrollment = Enrollment(user_id=student.id, course_id=course.id)
    db_session.add(enrollment)
    db_session.commit()
    db_session.refresh(enrollment)
    return enrollment


@pytest.fixture
def quiz(db_session, course, teacher):
    return make_assessment(db_session, course, teacher)


@pytest.fixture
def student_headers(db_session, student):
    return auth_headers(db_session, student)


@pytest.fixture
def teacher_headers(db_session, teacher):
    return auth_headers(db_session, teacher)


@pytest.fixture
def admin_headers(db_session, admin):
    return auth_headers(db_session, admin)


@pytest.fixture
def parent_headers(db_session, parent):
    return auth_headers(db_session, parent)
