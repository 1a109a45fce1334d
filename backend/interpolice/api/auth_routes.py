"""
Auth Routes

Endpoints:
- POST /api/auth/login    - Exchange credentials for an access token
- GET  /api/auth/profile  - Current user
- GET  /api/auth/roles    - Available roles
- POST /api/auth/users    - Create operator account
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from interpolice.auth import (
    AuthService,
    CurrentUser,
    get_auth_service,
    get_current_user,
    require_roles,
)
from interpolice.database.database import get_db
from interpolice.database.models import Role
from interpolice.errors import AuthenticationError
from interpolice.models import (
    LoginRequest,
    TokenResponse,
    UserCreateRequest,
    UserResponse,
    RoleResponse,
)


router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    db: Session = Depends(get_db),
    auth: AuthService = Depends(get_auth_service)
):
    """Authenticate and return a Bearer token"""
    try:
        user = auth.authenticate(db, request.username, request.password)
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=str(e))

    return TokenResponse(
        access_token=auth.create_token(user),
        expires_in=auth.expiry_hours * 3600,
    )


@router.get("/profile")
async def profile(user: CurrentUser = Depends(get_current_user)):
    """Get the authenticated user's identity"""
    return {
        "id": user.id,
        "username": user.username,
        "role": user.role,
        "email": user.email,
    }


@router.get("/roles", response_model=List[RoleResponse])
async def roles(
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles('Admin', 'Commander'))
):
    return [RoleResponse(id=r.id, role_name=r.role_name) for r in db.query(Role).order_by(Role.id).all()]


@router.post("/users", response_model=UserResponse, status_code=201)
async def create_user(
    request: UserCreateRequest,
    db: Session = Depends(get_db),
    auth: AuthService = Depends(get_auth_service),
    user: CurrentUser = Depends(require_roles('Admin'))
):
    """Create an operator account"""
    created = auth.create_user(db, request.username, request.password, request.email, request.role)
    db.commit()

    return UserResponse(
        id=created.id,
        username=created.username,
        email=created.user_email,
        role=created.role.role_name,
    )
