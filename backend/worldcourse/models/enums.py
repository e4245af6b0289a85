"""Shared enums for models, schemas and auth."""
import enum


class UserRole(enum.Enum):
    student = "student"
    teacher = "teacher"
    admin = "admin"
    parent = "parent"


class EnrollmentStatus(enum.Enum):
    active = "active"
    revoked = "revoked"


class OrderStatus(enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class AssessmentKind(enum.Enum):
    """Kinds of graded work; each kind has its own route prefix."""
    assignment = "assignment"
    quiz = "quiz"
    exam = "exam"

    @property
    def plural(self) -> str:
        return f"{self.value}s" if self is not AssessmentKind.quiz else "quizzes"


class AssessmentStatus(enum.Enum):
    draft = "draft"
    available = "available"
    closed = "closed"


class QuestionType(enum.Enum):
    multiple_choice = "multiple-choice"
    text = "text"
    file = "file"


class SubmissionStatus(enum.Enum):
    submitted = "submitted"
    late = "late"
    graded = "graded"


class TaskPriority(enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"


class LectureType(enum.Enum):
    video = "video"
    pdf = "pdf"


class AssistantStatus(enum.Enum):
    pending = "pending"
    active = "active"
    inactive = "inactive"
