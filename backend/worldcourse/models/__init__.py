"""SQLAlchemy models for the WorldCourse platform."""

from .enums import (
    UserRole, EnrollmentStatus, OrderStatus, AssessmentKind, AssessmentStatus,
    QuestionType, SubmissionStatus, TaskPriority, LectureType, AssistantStatus,
)
from .course import Course, Enrollment
from .order import Order
from .assessment import Assessment, Question
from .submission import Submission
from .todo import TodoList, Task
from .lecture import Lecture
from .assistant import Assistant

__all__ = [
    "UserRole",
    "EnrollmentStatus",
    "OrderStatus",
    "AssessmentKind",
    "AssessmentStatus",
    "QuestionType",
    "SubmissionStatus",
    "TaskPriority",
    "LectureType",
    "AssistantStatus",
    "Course",
    "Enrollment",
    "Order",
    "Assessment",
    "Question",
    "Submission",
    "TodoList",
    "Task",
    "Lecture",
    "Assistant",
]
