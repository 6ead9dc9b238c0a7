"""
Pydantic schemas for user-related requests and responses.
"""
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field

from app.features.permissions.roles import RoleType


class UserBase(BaseModel):
    """Base user schema with common fields."""
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)


class UserRegister(UserBase):
    """Self-registration into an existing organization."""
    password: str = Field(..., min_length=8, max_length=100)
    organization_id: int


class UserCreate(UserRegister):
    """Schema for creating a user with a role. Role defaults to Viewer."""
    role: RoleType | None = None


class OwnerCreate(UserBase):
    """Schema for provisioning an organization's Owner."""
    password: str = Field(..., min_length=8, max_length=100)


class UserResponse(UserBase):
    """Schema for user responses. Never includes the password hash."""
    id: int
    organization_id: int
    role: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
    role: str
