"""
Feature gating for routes.

``require_feature`` resolves the caller's role record for their company and
allows the request only when the feature is granted. Super admins bypass
the check.
"""
from typing import Annotated
from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.core.exceptions import InvalidIdentifier
from app.features.role_permissions.constants import UserRole
from app.features.role_permissions.service import get_role_permission
from app.features.users.dependencies import get_current_user
from app.features.users.schemas import CurrentUser
from app.utils import get_logger


log = get_logger(__name__)


async def has_feature(db: AsyncSession, user: CurrentUser, feature: str) -> bool:
    """
    Check whether ``user`` may access ``feature``.

    Raises:
        InvalidIdentifier: the user's company id is malformed
    """
    if user.role == UserRole.SUPER_ADMIN.value:
        return True
    if not user.company_id:
        return False

    permission = await get_role_permission(db, user.company_id, user.role)
    if permission is None:
        log.warning("No permissions found for role %s in company %s", user.role, user.company_id)
        return False
    return feature in permission.features


def require_feature(feature: str):
    """
    FastAPI dependency requiring the caller's role to hold ``feature``.

    Usage:
        @router.get("/inventory")
        async def list_inventory(
            user: CurrentUser = Depends(require_feature(Feature.INVENTORY))
        ):
            ...

    Raises:
        HTTPException: 403 if the feature is not granted or cannot be verified
    """
    async def feature_dependency(
        db: Annotated[AsyncSession, Depends(get_db)],
        user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        if user.role != UserRole.SUPER_ADMIN.value and not user.company_id:
            log.warning("User %s missing companyId", user.id)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="User missing company information",
            )

        try:
            allowed = await has_feature(db, user, feature)
        except InvalidIdentifier as e:
            log.error("Error verifying permissions for user %s: %s", user.id, e)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Could not verify permissions",
            )

        if not allowed:
            log.warning("User %s (Role: %s) denied access to %s", user.id, user.role, feature)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"You do not have permission to access {feature}",
            )
        return user

    return feature_dependency
