"""Authentication service for handling user authentication and token management."""
import logging
from datetime import datetime, timedelta, UTC
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from worldcourse.config import (
    SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES, REFRESH_TOKEN_EXPIRE_DAYS,
    MAX_FAILED_LOGINS, ACCOUNT_LOCK_MINUTES, PASSWORD_RESET_CODE_MINUTES,
)
from worldcourse.database import get_db
from worldcourse.errors import (
    AccountLocked, AuthenticationFailed, DuplicateEmail, NotFound, PermissionDenied, ValidationFailed,
)
from worldcourse.models import Enrollment, EnrollmentStatus, UserRole
from .models import (
    User, Token, TokenData, UserCreate, ProfileUpdate, RefreshToken, LoginAttempt, PasswordReset,
)

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def create_access_token(self, data: dict, expires_delta: Optional[timedelta] = None) -> str:
        """Create a new access token."""
        to_encode = data.copy()
        if expires_delta:
            expire = datetime.now(UTC) + expires_delta
        else:
            expire = datetime.now(UTC) + timedelta(minutes=15)
        to_encode.update({"exp": expire, "type": "access"})
        return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)

    def access_token_for(self, user: User) -> str:
        return self.create_access_token(
            data={"sub": user.email, "user_id": user.id, "role": user.role.value},
            expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
        )

    def create_refresh_token(self, user_id: int, user_agent: str = None, ip_address: str = None) -> RefreshToken:
        """Create and store a new refresh token."""
        token = RefreshToken.generate_token()
        expires_at = datetime.now(UTC) + timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS)

        db_token = RefreshToken(
            token=token,
            user_id=user_id,
            expires_at=expires_at,
            user_agent=user_agent,
            ip_address=ip_address
        )
        self.db.add(db_token)
        self.db.commit()
        self.db.refresh(db_token)
        return db_token

    def verify_token(self, token: str) -> TokenData:
        """Verify and decode a JWT token."""
        try:
            payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        except JWTError:
            raise AuthenticationFailed("Could not validate credentials")
        email: str = payload.get("sub")
        user_id: int = payload.get("user_id")
        if email is None or user_id is None or payload.get("type") != "access":
            raise AuthenticationFailed("Could not validate credentials")
        return TokenData(email=email, user_id=user_id, role=payload.get("role"))

    def authenticate_user(self, email: str, password: str,
                          ip_address: str = None, user_agent: str = None) -> User:
        """Authenticate a user with email and password, recording the attempt."""
        user = self.db.query(User).filter(User.email == email).first()
        if not user:
            logger.info(f"Login failed for unknown email {email}")
            raise AuthenticationFailed()
        if user.is_locked():
            raise AccountLocked()
        if not user.verify_password(password):
            self.record_login_attempt(user, ip_address=ip_address, user_agent=user_agent, success=False)
            raise AuthenticationFailed()
        if not user.is_active:
            raise PermissionDenied("Inactive user")
        self.record_login_attempt(user, ip_address=ip_address, user_agent=user_agent, success=True)
        return user

    def register_user(self, user_data: UserCreate) -> User:
        """Register a new user."""
        # Check if user already exists
        if self.db.query(User).filter(User.email == user_data.email).first():
            raise DuplicateEmail()

        user = User(
            email=user_data.email,
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            phone=user_data.phone,
            phone_country=user_data.phone_country,
            parent_phone=user_data.parent_phone,
            parent_phone_country=user_data.parent_phone_country,
            role=user_data.role,
        )
        user.set_password(user_data.password)

        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race against a concurrent registration of the same email
            self.db.rollback()
            raise DuplicateEmail()
        self.db.refresh(user)
        logger.info(f"Registered {user.role.value} account {user.email} (id={user.id})")
        return user

    def refresh_tokens(self, refresh_token: str) -> Token:
        """Refresh access token using a valid refresh token."""
        db_token = self.db.query(RefreshToken).filter(
            RefreshToken.token == refresh_token,
            RefreshToken.revoked == False,  # noqa: E712
        ).first()

        if not db_token or db_token.is_expired():
            raise AuthenticationFailed("Invalid or expired refresh token")

        user = self.db.query(User).filter(User.id == db_token.user_id).first()
        if not user or not user.is_active:
            raise AuthenticationFailed("User not found or inactive")

        return Token(
            access_token=self.access_token_for(user),
            refresh_token=db_token.token
        )

    def revoke_refresh_token(self, token: str) -> None:
        """Revoke a refresh token."""
        db_token = self.db.query(RefreshToken).filter(RefreshToken.token == token).first()
        if db_token:
            db_token.revoked = True
            self.db.commit()

    def record_login_attempt(self, user: User, ip_address: str, user_agent: str, success: bool) -> None:
        """Record a login attempt and lock the account after repeated failures."""
        attempt = LoginAttempt(
            user_id=user.id,
            ip_address=ip_address,
            user_agent=user_agent,
            success=success
        )
        self.db.add(attempt)

        if success:
            user.failed_login_attempts = 0
            user.locked_until = None
            user.last_login = datetime.now(UTC)
        else:
            user.failed_login_attempts = (user.failed_login_attempts or 0) + 1
            if user.failed_login_attempts >= MAX_FAILED_LOGINS:
                user.locked_until = datetime.now(UTC) + timedelta(minutes=ACCOUNT_LOCK_MINUTES)
                logger.warning(f"Locked account {user.email} after {user.failed_login_attempts} failed logins")

        self.db.commit()

    def change_password(self, user: User, current_password: str, new_password: str) -> None:
        if not user.verify_password(current_password):
            raise ValidationFailed("Current password is incorrect")
        user.set_password(new_password)
        self.db.commit()

    def request_password_reset(self, email: str) -> PasswordReset:
        """Create a verification code for the account with this email."""
        if not self.db.query(User).filter(User.email == email).first():
            raise NotFound("No account with that email. Would you like to register?")

        reset = PasswordReset(
            email=email,
            code=PasswordReset.generate_code(),
            expires_at=datetime.now(UTC) + timedelta(minutes=PASSWORD_RESET_CODE_MINUTES),
        )
        self.db.add(reset)
        self.db.commit()
        self.db.refresh(reset)
        # Email delivery is handled outside this service
        logger.info(f"Password reset code issued for {email}")
        return reset

    def _valid_reset(self, email: str, code: str) -> PasswordReset:
        reset = (
            self.db.query(PasswordReset)
            .filter(PasswordReset.email == email, PasswordReset.code == code, PasswordReset.used == False)  # noqa: E712
            .order_by(PasswordReset.created_at.desc(), PasswordReset.id.desc())
            .first()
        )
        if not reset or reset.is_expired():
            raise ValidationFailed("Invalid or expired verification code")
        return reset

    def verify_reset_code(self, email: str, code: str) -> None:
        self._valid_reset(email, code)

    def reset_password(self, email: str, code: str, new_password: str) -> User:
        reset = self._valid_reset(email, code)
        user = self.db.query(User).filter(User.email == email).first()
        if not user:
            raise NotFound("Account not found to update")
        reset.used = True
        user.set_password(new_password)
        user.failed_login_attempts = 0
        user.locked_until = None
        self.db.commit()
        logger.info(f"Password reset completed for {email}")
        return user

    def profile_stats(self, user: User) -> dict:
        """Enrollment count and points rank among users of the same role."""
        enrolled = (
            self.db.query(func.count(Enrollment.id))
            .filter(Enrollment.user_id == user.id, Enrollment.status == EnrollmentStatus.active)
            .scalar()
        )
        ahead = (
            self.db.query(func.count(User.id))
            .filter(User.role == user.role, User.points > (user.points or 0))
            .scalar()
        )
        return {"enrolled_courses": enrolled or 0, "rank": (ahead or 0) + 1}

    def update_profile(self, user: User, changes: ProfileUpdate) -> User:
        for field, value in changes.model_dump(exclude_unset=True).items():
            setattr(user, field, value)
        self.db.commit()
        self.db.refresh(user)
        return user

    def set_points(self, user: User, points: int) -> User:
        user.points = points
        self.db.commit()
        self.db.refresh(user)
        return user


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Dependency to get the current user from the JWT token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception

    try:
        token_data = AuthService(db).verify_token(credentials.credentials)
    except AuthenticationFailed:
        raise credentials_exception

    user = db.query(User).filter(User.id == token_data.user_id).first()
    if user is None:
        raise credentials_exception
    return user


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """Dependency to get the current active user."""
    if not current_user.is_active:
        raise PermissionDenied("Inactive user")
    return current_user


def require_roles(*roles: UserRole):
    """Dependency factory that only lets users with one of ``roles`` through."""
    def checker(current_user: User = Depends(get_current_active_user)) -> User:
        if current_user.role not in roles:
            raise PermissionDenied(
                f"This action requires one of the roles: {', '.join(r.value for r in roles)}"
            )
        return current_user
    return checker


require_staff = require_roles(UserRole.teacher, UserRole.admin)
require_admin = require_roles(UserRole.admin)
require_parent = require_roles(UserRole.parent)
