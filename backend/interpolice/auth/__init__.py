"""
Authentication and role gating
"""

from .service import (
    AuthService,
    init_auth_service,
    get_auth_service,
)

from .dependencies import (
    ALL_ROLES,
    SUPERVISOR_ROLES,
    CurrentUser,
    get_current_user,
    require_roles,
)


__all__ = [
    "AuthService",
    "init_auth_service",
    "get_auth_service",
    "ALL_ROLES",
    "SUPERVISOR_ROLES",
    "CurrentUser",
    "get_current_user",
    "require_roles",
]
