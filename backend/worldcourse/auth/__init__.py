"""Authentication package for the application."""
from .models import User, RefreshToken, LoginAttempt, PasswordReset
from .service import (
    AuthService, get_current_user, get_current_active_user, require_roles, require_staff, require_admin,
    require_parent,
)
from .router import router as auth_router

__all__ = [
    'User',
    'RefreshToken',
    'LoginAttempt',
    'PasswordReset',
    'AuthService',
    'get_current_user',
    'get_current_active_user',
    'require_roles',
    'require_staff',
    'require_admin',
    'require_parent',
    'auth_router'
]
