"""
Authentication Models
"""

from typing import Literal

from pydantic import BaseModel, Field


RoleName = Literal['Admin', 'Commander', 'General', 'CourtClerk', 'PoliceOfficer']


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class UserCreateRequest(BaseModel):
    """Create an operator account (Admin only)"""
    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=8)
    email: str = Field(..., min_length=3, max_length=200)
    role: RoleName


class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    role: str


class RoleResponse(BaseModel):
    id: int
    role_name: str
