from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import os
import logging
from contextlib import asynccontextmanager

from .config import (
    API_VERSION, AUTO_CREATE_TABLES, CORS_ORIGINS, LOG_LEVEL,
    RATE_LIMIT_ENABLED, RATE_LIMIT_REQUESTS, RATE_LIMIT_WINDOW_SECONDS,
)
from .database import get_db, check_database_connection, create_tables
from .errors import install_error_handlers
from .middleware import RateLimitMiddleware
from .auth import auth_router
from .routers import (
    assignments_router, quizzes_router, exams_router, courses_router, lectures_router, orders_router,
    parents_router, progress_router, staff_router, todos_router,
)

# Configure logging
logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Check the database on startup and create missing tables."""
    logger.info("Starting up WorldCourse API...")
    if os.getenv("PYTEST_CURRENT_TEST") is not None:
        logger.info("Skipping DB connectivity check during tests")
    else:
        if not check_database_connection():
            logger.error("Database connection failed")
            raise RuntimeError("Cannot connect to database")
        logger.info("Database connection successful")
        if AUTO_CREATE_TABLES:
            create_tables()
    yield
    logger.info("Shutting down WorldCourse API...")


app = FastAPI(
    title="WorldCourse API",
    description="Courses, enrollments and auto-graded assessments for the WorldCourse learning platform",
    version=API_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    RateLimitMiddleware,
    requests=RATE_LIMIT_REQUESTS,
    window_seconds=RATE_LIMIT_WINDOW_SECONDS,
    enabled=RATE_LIMIT_ENABLED,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_error_handlers(app)

# Routers
app.include_router(auth_router)
app.include_router(courses_router)
app.include_router(orders_router)
app.include_router(assignments_router)
app.include_router(quizzes_router)
app.include_router(exams_router)
app.include_router(progress_router)
app.include_router(todos_router)
app.include_router(lectures_router)
app.include_router(parents_router)
app.include_router(staff_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "WorldCourse API", "version": API_VERSION}


@app.get("/health")
async def health_check(db: Session = Depends(get_db)):
    """Health check endpoint with database connectivity test."""
    try:
        db.execute(text("SELECT 1"))
        return {
            "status": "healthy",
            "database": "connected",
            "version": API_VERSION
        }
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        return {
            "status": "unhealthy",
            "database": "disconnected",
            "version": API_VERSION
        }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
