"""
Pydantic schemas for user requests and responses.
Handles user creation, updates, and validation with email validation.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime
from uuid import UUID
from showcase.models.user import UserRole


def _check_password_strength(value: str) -> str:
    if not any(c.isalpha() for c in value):
        raise ValueError("Password must contain at least one letter")
    if not any(c.isdigit() for c in value):
        raise ValueError("Password must contain at least one number")
    return value


class UserBase(BaseModel):
    """Base user schema with common fields."""

    username: str = Field(
        ...,
        min_length=3,
        max_length=100,
        pattern=r"^[A-Za-z0-9_.-]+$",
        description="Login name",
        examples=["sara.admin"]
    )

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["sara@example.com"]
    )

    first_name: Optional[str] = Field(None, max_length=100, examples=["Sara"])
    last_name: Optional[str] = Field(None, max_length=100, examples=["Hassan"])
    phone: Optional[str] = Field(None, max_length=50, examples=["+20 100 000 0000"])

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower().strip()


class UserCreate(UserBase):
    """Schema for creating a new user."""

    password: str = Field(
        ...,
        min_length=8,
        max_length=72,
        description="User's password (minimum 8 characters, letters and digits)",
        examples=["securepassword123"]
    )

    role: UserRole = Field(
        UserRole.USER,
        description="User's role (default: user)",
        examples=["admin"]
    )

    is_active: bool = True

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        return _check_password_strength(v)


class UserUpdate(BaseModel):
    """Schema for updating a user; omitted fields are left unchanged."""

    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=50)
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower().strip() if v else v


class PasswordChangeRequest(BaseModel):
    current_password: str = Field(..., min_length=1, max_length=72)
    new_password: str = Field(..., min_length=8, max_length=72)

    @field_validator('new_password')
    @classmethod
    def validate_new_password(cls, v):
        return _check_password_strength(v)


class UserResponse(BaseModel):
    """Public representation of a user (no password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    full_name: str
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime


class UserListResponse(BaseModel):
    users: List[UserResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
