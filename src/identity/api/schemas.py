"""Pydantic request/response schemas for the Identity API."""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- Request Schemas ---


class LoginRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "username": "testuser",
                    "password": "test@2024",
                }
            ]
        }
    }

    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1, max_length=128)


class RegisterUserRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    email: str = Field(..., max_length=254)
    password: str = Field(..., max_length=128)
    name: str | None = Field(None, max_length=100)


class UpdateProfileRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    email: str | None = Field(None, max_length=254)


class BlockUserRequest(BaseModel):
    blocked: bool


# --- Response Schemas ---


class TokenResponse(BaseModel):
    token: str


class VerifyResponse(BaseModel):
    userId: str
    username: str
    role: str


class UserIdResponse(BaseModel):
    user_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class UserResponse(BaseModel):
    id: str
    username: str
    email: str
    name: str | None = None
    role: str
    blocked: bool
    created_at: str | None = None
    last_login_at: str | None = None


class ProfileResponse(BaseModel):
    id: str
    username: str
    email: str
    name: str | None = None
    role: str
    created_at: str | None = None


class UserStats(BaseModel):
    total: int
    blocked: int
    admins: int


class UserListResponse(BaseModel):
    users: list[UserResponse]
    page: int
    total_pages: int
    total: int
    stats: UserStats


class RoleResponse(BaseModel):
    status: str = "ok"
    role: str
