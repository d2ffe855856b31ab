"""Pydantic DTOs for registration and login."""

from pydantic import BaseModel, Field

from app.application.schemas.record import UserResponse


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=100, examples=["admin"])
    # Characters, not bytes; the byte limit is enforced by AuthService
    password: str = Field(..., max_length=72)
    email: str | None = Field(None, max_length=320)


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., max_length=72)


class AuthResponse(BaseModel):
    message: str
    user: UserResponse
