"""
FastAPI dependencies for authentication and role allow-lists.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from interpolice.errors import AuthenticationError

from .service import get_auth_service


ALL_ROLES = ('Admin', 'Commander', 'General', 'CourtClerk', 'PoliceOfficer')
SUPERVISOR_ROLES = ('Admin', 'Commander', 'General')

_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    """Identity taken from a verified access token"""
    id: int
    username: str
    role: str
    email: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == 'Admin'


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer)
) -> CurrentUser:
    """Resolve the caller from the Bearer token (401 when missing/invalid)"""
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Access token required")

    try:
        payload = get_auth_service().verify_token(credentials.credentials)
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=str(e))

    return CurrentUser(
        id=payload['id'],
        username=payload.get('username', ''),
        role=payload['role'],
        email=payload.get('email'),
    )


def require_roles(*allowed_roles: str) -> Callable[..., CurrentUser]:
    """
    Dependency factory that admits only the given roles

    Usage:
        @router.post("/...")
        def handler(user: CurrentUser = Depends(require_roles('Admin', 'PoliceOfficer'))):
            ...
    """
    def _check(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in allowed_roles:
            raise HTTPException(
                status_code=403,
                detail=f"Access denied. Required roles: {', '.join(allowed_roles)}. Your role: {user.role}"
            )
        return user

    return _check
