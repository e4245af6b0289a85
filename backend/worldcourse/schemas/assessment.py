"""Request/response schemas for assessments, submissions and grading."""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from worldcourse.models.enums import AssessmentKind, AssessmentStatus, QuestionType, SubmissionStatus


class QuestionIn(BaseModel):
    type: QuestionType = QuestionType.multiple_choice
    text: str = Field(..., min_length=1)
    options: list[str] = []
    correct_answer: Optional[str] = None
    points: float = Field(default=1, gt=0)

    @model_validator(mode="after")
    def check_objective_answer(self):
        if self.type == QuestionType.multiple_choice:
            if not self.correct_answer:
                raise ValueError("Multiple-choice questions need a correct_answer")
            if self.options and self.correct_answer not in self.options:
                raise ValueError("correct_answer must be one of the options")
        return self


class AssessmentCreate(BaseModel):
    course_id: int
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    subject: Optional[str] = None
    difficulty: str = "medium"
    attempts: int = Field(default=1, ge=1)
    time_limit: Optional[int] = Field(default=None, ge=1)
    due_date: Optional[datetime] = None
    allow_late_submission: bool = False
    late_penalty: float = Field(default=0.0, ge=0, le=1)
    published: bool = False
    status: AssessmentStatus = AssessmentStatus.draft
    questions: list[QuestionIn] = []


class AssessmentUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    subject: Optional[str] = None
    difficulty: Optional[str] = None
    attempts: Optional[int] = Field(default=None, ge=1)
    time_limit: Optional[int] = Field(default=None, ge=1)
    due_date: Optional[datetime] = None
    allow_late_submission: Optional[bool] = None
    late_penalty: Optional[float] = Field(default=None, ge=0, le=1)
    published: Optional[bool] = None
    status: Optional[AssessmentStatus] = None
    questions: Optional[list[QuestionIn]] = None


class QuestionPublic(BaseModel):
    """Question as shown to students: no answer key."""
    position: int
    type: QuestionType
    text: str
    options: list[str] = []
    points: float

    model_config = ConfigDict(from_attributes=True)


class QuestionOut(QuestionPublic):
    # None when the viewer may not see the answer key
    correct_answer: Optional[str] = None


class AssessmentBase(BaseModel):
    id: int
    kind: AssessmentKind
    course_id: int
    title: str
    description: Optional[str] = None
    subject: Optional[str] = None
    difficulty: Optional[str] = None
    attempts: int
    time_limit: Optional[int] = None
    due_date: Optional[datetime] = None
    allow_late_submission: bool
    late_penalty: float
    is_active: bool
    published: bool
    status: AssessmentStatus
    total_points: float
    question_count: int
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AssessmentOut(AssessmentBase):
    questions: list[QuestionOut] = []


class AssessmentPage(BaseModel):
    items: list[AssessmentOut]
    total: int
    page: int
    limit: int
    pages: int


class SubmitRequest(BaseModel):
    answers: list[Optional[str]] = []
    time_spent: Optional[int] = Field(default=None, ge=0, alias="timeSpent")

    model_config = ConfigDict(populate_by_name=True)


class GradeItem(BaseModel):
    question_index: int = Field(..., ge=0, alias="questionIndex")
    points_awarded: float = Field(..., ge=0, alias="pointsAwarded")
    comments: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class GradeRequest(BaseModel):
    submission_id: int = Field(..., alias="submissionId")
    grading: list[GradeItem] = Field(..., min_length=1)
    teacher_comments: list[str] = Field(default=[], alias="teacherComments")

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="after")
    def unique_questions(self):
        indexes = [item.question_index for item in self.grading]
        if len(indexes) != len(set(indexes)):
            raise ValueError("Each question may only be graded once")
        return self


class SubmissionOut(BaseModel):
    id: int
    assessment_id: int
    student_id: int
    attempt_number: int
    answers: list[Any] = []
    time_spent: Optional[int] = None
    score: float
    percentage: int
    grading: list[dict[str, Any]] = []
    teacher_comments: list[str] = []
    status: SubmissionStatus
    is_late: bool
    needs_manual_grading: bool
    submitted_at: Optional[datetime] = None
    graded_at: Optional[datetime] = None
    graded_by: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)
