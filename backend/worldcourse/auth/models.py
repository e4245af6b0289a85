"""Authentication models for the application."""
import secrets
import string
from datetime import datetime, UTC
from typing import Optional

import bcrypt
from pydantic import BaseModel, EmailStr, Field, field_validator
from pydantic import ConfigDict
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Enum as SQLEnum
from sqlalchemy.orm import relationship

from worldcourse.database import Base
from worldcourse.models.enums import UserRole
from worldcourse.utils import ensure_utc


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(50), nullable=True)
    phone_country = Column(String(10), nullable=True)
    parent_phone = Column(String(50), nullable=True)
    parent_phone_country = Column(String(10), nullable=True)
    parent_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    role = Column(SQLEnum(UserRole), nullable=False, default=UserRole.student)
    points = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)
    last_login = Column(DateTime, nullable=True)
    failed_login_attempts = Column(Integer, default=0)
    locked_until = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC))
    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC))

    refresh_tokens = relationship("worldcourse.auth.models.RefreshToken", back_populates="user", cascade="all, delete-orphan")
    login_attempts = relationship("worldcourse.auth.models.LoginAttempt", back_populates="user", cascade="all, delete-orphan")
    enrollments = relationship(
        "worldcourse.models.course.Enrollment",
        foreign_keys="Enrollment.user_id",
        back_populates="user",
    )
    taught_courses = relationship("worldcourse.models.course.Course", back_populates="instructor")
    orders = relationship(
        "worldcourse.models.order.Order",
        foreign_keys="Order.user_id",
        back_populates="user",
    )
    todo_lists = relationship("worldcourse.models.todo.TodoList", back_populates="owner", cascade="all, delete-orphan")
    parent = relationship("worldcourse.auth.models.User", remote_side=[id], back_populates="children")
    children = relationship("worldcourse.auth.models.User", back_populates="parent")

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role={self.role})>"

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    @property
    def is_student(self) -> bool:
        return self.role == UserRole.student

    @property
    def is_teacher(self) -> bool:
        return self.role == UserRole.teacher

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin

    @property
    def is_parent(self) -> bool:
        return self.role == UserRole.parent

    @property
    def is_staff(self) -> bool:
        return self.role in (UserRole.teacher, UserRole.admin)

    def set_password(self, password: str) -> None:
        """Hash and set the user's password."""
        salt = bcrypt.gensalt()
        self.hashed_password = bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')

    def verify_password(self, password: str) -> bool:
        """Verify the provided password against the stored hash."""
        return bcrypt.checkpw(password.encode('utf-8'), self.hashed_password.encode('utf-8'))

    def is_locked(self) -> bool:
        """Check if the user account is locked."""
        if self.locked_until and ensure_utc(self.locked_until) > datetime.now(UTC):
            return True
        return False


class RefreshToken(Base):
    __tablename__ = "refresh_tokens"

    id = Column(Integer, primary_key=True, index=True)
    token = Column(String(255), unique=True, index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC))
    revoked = Column(Boolean, default=False)
    user_agent = Column(String(255), nullable=True)
    ip_address = Column(String(45), nullable=True)

    user = relationship("worldcourse.auth.models.User", back_populates="refresh_tokens")

    @classmethod
    def generate_token(cls, length: int = 64) -> str:
        """Generate a secure random token."""
        alphabet = string.ascii_letters + string.digits
        return ''.join(secrets.choice(alphabet) for _ in range(length))

    def is_expired(self) -> bool:
        """Check if the refresh token has expired."""
        return datetime.now(UTC) > ensure_utc(self.expires_at)


class LoginAttempt(Base):
    __tablename__ = "login_attempts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(String(255), nullable=True)
    success = Column(Boolean, default=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC))

    user = relationship("worldcourse.auth.models.User", back_populates="login_attempts")


class PasswordReset(Base):
    """Short-lived verification code for the forgot-password flow."""
    __tablename__ = "password_resets"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), index=True, nullable=False)
    code = Column(String(6), nullable=False)
    expires_at = Column(DateTime, nullable=False)
    used = Column(Boolean, default=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC))

    @classmethod
    def generate_code(cls) -> str:
        return ''.join(secrets.choice(string.digits) for _ in range(6))

    def is_expired(self) -> bool:
        return datetime.now(UTC) > ensure_utc(self.expires_at)


# Pydantic models for request/response schemas
def _check_password(v: str) -> str:
    if len(v) < 6:
        raise ValueError('Password must be at least 6 characters long')
    return v


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    refresh_token: str


class TokenData(BaseModel):
    email: Optional[str] = None
    user_id: Optional[int] = None
    role: Optional[str] = None


class UserCreate(BaseModel):
    email: EmailStr
    password: str
    first_name: str = Field(default="Unknown", min_length=1, max_length=100)
    last_name: str = Field(default="User", min_length=1, max_length=100)
    phone: Optional[str] = None
    phone_country: Optional[str] = None
    parent_phone: Optional[str] = None
    parent_phone_country: Optional[str] = None
    role: UserRole = UserRole.student

    @field_validator('email', mode='before')
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator('password')
    @classmethod
    def password_length(cls, v: str) -> str:
        return _check_password(v)

    @field_validator('role')
    @classmethod
    def no_self_registered_admins(cls, v: UserRole) -> UserRole:
        if v == UserRole.admin:
            raise ValueError('Admin accounts cannot be self-registered')
        return v


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class UserResponse(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    full_name: str
    phone: Optional[str] = None
    phone_country: Optional[str] = None
    parent_phone: Optional[str] = None
    parent_phone_country: Optional[str] = None
    role: UserRole
    points: int = 0
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class ProfileResponse(UserResponse):
    enrolled_courses: int = 0
    rank: int = 0


class AuthResponse(BaseModel):
    success: bool = True
    message: str
    token: str
    refresh_token: Optional[str] = None
    user: UserResponse


class ProfileUpdate(BaseModel):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    phone: Optional[str] = None
    phone_country: Optional[str] = None
    parent_phone: Optional[str] = None
    parent_phone_country: Optional[str] = None


class PointsUpdate(BaseModel):
    points: int = Field(..., ge=0)


class RefreshRequest(BaseModel):
    refresh_token: str


class PasswordResetRequest(BaseModel):
    email: EmailStr


class VerifyResetCode(BaseModel):
    email: EmailStr
    verification_code: str = Field(..., min_length=6, max_length=6)


class PasswordResetConfirm(VerifyResetCode):
    new_password: str

    @field_validator('new_password')
    @classmethod
    def password_length(cls, v: str) -> str:
        return _check_password(v)


class ChangePassword(BaseModel):
    current_password: str
    new_password: str

    @field_validator('new_password')
    @classmethod
    def password_length(cls, v: str) -> str:
        return _check_password(v)
