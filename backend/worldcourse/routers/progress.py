"""Notifications, per-course progress, leaderboard and dashboard endpoints."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from worldcourse.auth.models import User
from worldcourse.auth.service import get_current_active_user, require_staff
from worldcourse.database import get_db
from worldcourse.schemas.progress import CourseProgress, DashboardStats, Leaderboard, Notification
from worldcourse.services.leaderboard import build_leaderboard
from worldcourse.services.notifications import build_notifications
from worldcourse.services.progress import course_progress, dashboard_stats

router = APIRouter(prefix="/api", tags=["Progress"])


@router.get("/notifications", response_model=list[Notification])
async def notifications(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Open work and reminders for the current student."""
    return build_notifications(db, current_user)


@router.get("/progress/{course_id}", response_model=CourseProgress)
async def read_progress(
    course_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    return course_progress(db, current_user, course_id)


@router.get("/dashboard/stats", response_model=DashboardStats)
async def read_dashboard_stats(
    current_user: User = Depends(require_staff),
    db: Session = Depends(get_db)
):
    return dashboard_stats(db, current_user)


@router.get("/users/leaderboard", response_model=Leaderboard)
async def leaderboard(
    course: int = Query(..., description="Course to rank"),
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Top students of a course; open to its students, instructor and admins."""
    return {"course_id": course, "leaderboard": build_leaderboard(db, current_user, course, limit)}
