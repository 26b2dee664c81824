"""
Role permission API routes.

Owners manage the feature lists of their own company; super admins can
manage any company through the ``/system`` routes.
"""
from typing import Annotated, List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.features.role_permissions import service
from app.features.role_permissions.constants import (
    ALL_FEATURES,
    DEFAULT_ROLE_FEATURES,
    FEATURE_CATEGORIES,
)
from app.features.role_permissions.schemas import (
    FeatureCatalogResponse,
    RolePermissionResponse,
    RolePermissionUpdate,
)
from app.features.users.dependencies import (
    get_current_user,
    require_owner_or_super_admin,
    require_super_admin,
)
from app.features.users.schemas import CurrentUser


router = APIRouter()


def _company_of(user: CurrentUser) -> str:
    if not user.company_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Company ID is required",
        )
    return user.company_id


@router.get("", response_model=List[RolePermissionResponse])
async def list_role_permissions(
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(require_owner_or_super_admin)],
):
    """Get all role permissions of the caller's company (owner or super admin)."""
    return await service.get_role_permissions(db, _company_of(user))


@router.get("/my-permissions", response_model=Optional[RolePermissionResponse])
async def get_my_permissions(
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
):
    """Get the permission record of the caller's own role."""
    return await service.get_role_permission(db, _company_of(user), user.role)


@router.patch("", response_model=RolePermissionResponse)
async def update_role_permission(
    update: RolePermissionUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(require_owner_or_super_admin)],
):
    """Replace the feature list of one role in the caller's company."""
    return await service.update_role_permission(db, _company_of(user), update, user.id)


@router.get("/features", response_model=FeatureCatalogResponse)
async def get_feature_catalog(
    user: Annotated[CurrentUser, Depends(get_current_user)],
):
    """List the known feature identifiers and each role's defaults."""
    return FeatureCatalogResponse(
        features=list(ALL_FEATURES),
        categories={name: list(features) for name, features in FEATURE_CATEGORIES.items()},
        defaults={role: list(features) for role, features in DEFAULT_ROLE_FEATURES.items()},
    )


@router.get("/system/company/{company_id}", response_model=List[RolePermissionResponse])
async def list_company_role_permissions(
    company_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(require_super_admin)],
):
    """Get all role permissions of any company (super admin only)."""
    return await service.get_role_permissions(db, company_id)


@router.patch("/system/company/{company_id}", response_model=RolePermissionResponse)
async def update_company_role_permission(
    company_id: str,
    update: RolePermissionUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(require_super_admin)],
):
    """Replace one role's feature list in any company (super admin only)."""
    return await service.update_role_permission(db, company_id, update, user.id)
