"""Pydantic schemas for user API endpoints."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserCreateRequest(BaseModel):
    """Request schema for user registration."""

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)
    confirm_password: str = Field(..., alias="confirmPassword")

    model_config = ConfigDict(populate_by_name=True)


class UserUpdateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr


class ChangePasswordRequest(BaseModel):
    """Request schema for changing a user's password."""

    old_password: str = Field(..., alias="oldPassword")
    new_password: str = Field(..., alias="newPassword", min_length=6)
    confirm_password: str = Field(..., alias="confirmPassword")

    model_config = ConfigDict(populate_by_name=True)


class UserResponse(BaseModel):
    """Response schema for user data."""

    id: int
    name: str
    email: str


class UserCreatedResponse(BaseModel):
    name: str
    email: str


class UserIdResponse(BaseModel):
    id: int


class EmailExistsResponse(BaseModel):
    email: str
    exists: bool
