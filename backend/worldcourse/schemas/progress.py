"""Schemas for notifications, progress tracking and dashboard statistics."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from worldcourse.models.enums import AssessmentKind


class Notification(BaseModel):
    id: str
    type: str
    title: str
    message: str
    icon: str
    color: str
    time_ago: Optional[str] = None
    course_id: Optional[int] = None
    assessment_id: Optional[int] = None


class KindProgress(BaseModel):
    total: int = 0
    done: int = 0
    pending: int = 0
    late: int = 0
    percentage: int = 0
    average_score: Optional[int] = None


class RecentGrade(BaseModel):
    assessment_id: int
    kind: AssessmentKind
    title: str
    percentage: int
    submitted_at: Optional[datetime] = None


class CourseProgress(BaseModel):
    course_id: int
    overall: int
    assignments: KindProgress
    quizzes: KindProgress
    exams: KindProgress
    recent_grades: list[RecentGrade] = []


class DashboardStats(BaseModel):
    assignments: int
    quizzes: int
    exams: int
    students: int
    pending_grading: int
    video_lectures: int = 0


class LeaderboardEntry(BaseModel):
    rank: int
    user_id: int
    first_name: str
    last_name: str
    points: int = 0
    total_score: float = 0
    total_submissions: int = 0


class Leaderboard(BaseModel):
    course_id: int
    leaderboard: list[LeaderboardEntry]
