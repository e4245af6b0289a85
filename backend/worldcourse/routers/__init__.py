"""HTTP routers mounted by ``worldcourse.main``."""
from .assessments import assignments_router, quizzes_router, exams_router
from .courses import router as courses_router
from .lectures import router as lectures_router
from .orders import router as orders_router
from .parents import router as parents_router
from .progress import router as progress_router
from .staff import router as staff_router
from .todos import router as todos_router

__all__ = [
    'assignments_router',
    'quizzes_router',
    'exams_router',
    'courses_router',
    'lectures_router',
    'orders_router',
    'parents_router',
    'progress_router',
    'staff_router',
    'todos_router',
]
