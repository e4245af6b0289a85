"""Authentication router for registration, login, password recovery and profile endpoints."""
from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from worldcourse.database import get_db
from .models import (
    User, Token, UserCreate, UserResponse, LoginRequest, AuthResponse, ProfileResponse,
    ProfileUpdate, PointsUpdate, RefreshRequest, PasswordResetRequest, VerifyResetCode,
    PasswordResetConfirm, ChangePassword,
)
from .service import AuthService, get_current_active_user

router = APIRouter(prefix="/api", tags=["Authentication"])


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    """Dependency to get an instance of AuthService."""
    return AuthService(db)


def _client_info(request: Request) -> tuple[str | None, str | None]:
    user_agent = request.headers.get("user-agent")
    ip_address = request.client.host if request.client else None
    return user_agent, ip_address


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    user_data: UserCreate,
    request: Request,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user and log them in."""
    user = service.register_user(user_data)
    user_agent, ip_address = _client_info(request)
    refresh = service.create_refresh_token(user_id=user.id, user_agent=user_agent, ip_address=ip_address)
    return {
        "success": True,
        "message": "Registration successful",
        "token": service.access_token_for(user),
        "refresh_token": refresh.token,
        "user": user,
    }


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: LoginRequest,
    request: Request,
    service: AuthService = Depends(get_auth_service)
):
    """Exchange email and password for an access token."""
    user_agent, ip_address = _client_info(request)
    user = service.authenticate_user(
        credentials.email, credentials.password, ip_address=ip_address, user_agent=user_agent
    )
    refresh = service.create_refresh_token(user_id=user.id, user_agent=user_agent, ip_address=ip_address)
    return {
        "success": True,
        "message": "Login successful",
        "token": service.access_token_for(user),
        "refresh_token": refresh.token,
        "user": user,
    }


@router.post("/refresh", response_model=Token)
async def refresh_access_token(
    body: RefreshRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Refresh an access token using a refresh token."""
    return service.refresh_tokens(body.refresh_token)


@router.post("/logout")
async def logout(
    body: RefreshRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Revoke a refresh token."""
    service.revoke_refresh_token(body.refresh_token)
    return {"success": True, "message": "Successfully logged out"}


@router.post("/change-password", status_code=status.HTTP_204_NO_CONTENT)
async def change_password(
    password_data: ChangePassword,
    current_user: User = Depends(get_current_active_user),
    service: AuthService = Depends(get_auth_service)
):
    """Change the current user's password."""
    service.change_password(current_user, password_data.current_password, password_data.new_password)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/forgot-password")
async def forgot_password(
    email_data: PasswordResetRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Issue a verification code for resetting the password."""
    service.request_password_reset(email_data.email)
    return {"success": True, "message": "Verification code sent"}


@router.post("/verify-reset-code")
async def verify_reset_code(
    body: VerifyResetCode,
    service: AuthService = Depends(get_auth_service)
):
    service.verify_reset_code(body.email, body.verification_code)
    return {"success": True, "message": "Code valid"}


@router.post("/reset-password")
async def reset_password(
    reset_data: PasswordResetConfirm,
    service: AuthService = Depends(get_auth_service)
):
    """Reset a user's password using a verification code."""
    service.reset_password(reset_data.email, reset_data.verification_code, reset_data.new_password)
    return {"success": True, "message": "Password updated successfully"}


@router.get("/profile", response_model=ProfileResponse)
async def read_profile(
    current_user: User = Depends(get_current_active_user),
    service: AuthService = Depends(get_auth_service)
):
    """Get the current user's profile with enrollment count and rank."""
    profile = UserResponse.model_validate(current_user).model_dump()
    profile.update(service.profile_stats(current_user))
    return profile


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    changes: ProfileUpdate,
    current_user: User = Depends(get_current_active_user),
    service: AuthService = Depends(get_auth_service)
):
    return service.update_profile(current_user, changes)


@router.post("/update-points")
async def update_points(
    body: PointsUpdate,
    current_user: User = Depends(get_current_active_user),
    service: AuthService = Depends(get_auth_service)
):
    user = service.set_points(current_user, body.points)
    return {"success": True, "points": user.points}
