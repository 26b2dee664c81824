"""
FastAPI dependencies for authentication and role checks.
"""
from typing import Annotated
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import ValidationError

from app.features.role_permissions.constants import UserRole
from app.features.users.auth import verify_jwt_token
from app.features.users.schemas import CurrentUser
from app.utils import get_logger


log = get_logger(__name__)
security = HTTPBearer()


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
) -> CurrentUser:
    """
    Get the current authenticated user from the JWT token.
    
    Usage:
        @router.get("/my-permissions")
        async def my_permissions(user: CurrentUser = Depends(get_current_user)):
            ...
    """
    payload = verify_jwt_token(credentials.credentials)
    try:
        return CurrentUser(
            id=payload.get("sub"),
            company_id=payload.get("companyId"),
            role=payload.get("role"),
            email=payload.get("email"),
        )
    except ValidationError:
        log.info("Token for %s is missing identity claims", payload.get("sub"))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
            headers={"WWW-Authenticate": "Bearer"},
        )


def require_roles(*roles: UserRole, detail: str | None = None):
    """
    FastAPI dependency factory restricting a route to some user roles.

    Usage:
        @router.patch("")
        async def update(user: CurrentUser = Depends(require_roles(UserRole.OWNER))):
            ...
    """
    allowed = {role.value for role in roles}
    message = detail or f"Requires one of the roles: {', '.join(sorted(allowed))}"

    async def role_dependency(
        user: Annotated[CurrentUser, Depends(get_current_user)]
    ) -> CurrentUser:
        if user.role not in allowed:
            log.info("User %s (role %s) denied: %s", user.id, user.role, message)
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=message)
        return user

    return role_dependency


require_owner_or_super_admin = require_roles(
    UserRole.OWNER,
    UserRole.SUPER_ADMIN,
    detail="Only Owners and Super Admins can manage role permissions",
)

require_super_admin = require_roles(
    UserRole.SUPER_ADMIN,
    detail="Only Super Admins can manage role permissions for any company",
)


def get_authorization_header(request) -> str:
    """
    Extract authorization header for rate limiting.
    Used with slowapi Limiter.
    """
    auth = request.headers.get("Authorization", "")
    return auth or "anonymous"
