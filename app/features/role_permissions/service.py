"""
Read and write paths for role permissions.

Reads heal an uninitialized company by seeding all five staff roles. A
company counts as uninitialized when it has no record at all (for the
all-roles read) or no record for the requested role (for the single-role
read). Seeding only fills in roles that have no record; an existing record
is never overwritten or merged with the defaults.
"""
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.role_permissions import store
from app.features.role_permissions.constants import StaffRole, default_features, parse_staff_role
from app.features.role_permissions.models import RolePermission
from app.features.role_permissions.schemas import RolePermissionUpdate
from app.utils import get_logger


log = get_logger(__name__)


async def initialize_default_permissions(db: AsyncSession, company_id: str) -> list[RolePermission]:
    """
    Insert the default record of every staff role that has none yet.

    Each role is its own insert and commit; no transaction spans all five,
    so a concurrent reader can observe a partially seeded company.
    Rows that already exist, customized or not, are left as they are, so
    re-running never overwrites or duplicates anything.

    Returns:
        All records of the company after seeding
    """
    store.validate_identifier("company_id", company_id)
    log.info("Seeding default role permissions for company %s", company_id)

    for role in StaffRole:
        await store.insert_missing(db, company_id, role, default_features(role))

    permissions = await store.find_all(db, company_id)
    log.info("Company %s has %d role permissions after seeding", company_id, len(permissions))
    return permissions


async def get_role_permissions(db: AsyncSession, company_id: str) -> list[RolePermission]:
    """All records of a company, seeding defaults if it has none."""
    store.validate_identifier("company_id", company_id)

    permissions = await store.find_all(db, company_id)
    if not permissions:
        return await initialize_default_permissions(db, company_id)
    return permissions


async def get_role_permission(db: AsyncSession, company_id: str, role: str) -> RolePermission | None:
    """
    Record for one role of a company.

    A missing staff role record seeds the company. Returns None when
    ``role`` is not a staff role (super_admin, unknown strings); such roles
    only trigger seeding for a company that has no records at all.
    """
    store.validate_identifier("company_id", company_id)
    staff_role = parse_staff_role(role)

    if staff_role is None:
        log.warning("Role %r has no permission record in company %s", role, company_id)
        if not await store.find_all(db, company_id):
            await initialize_default_permissions(db, company_id)
        return None

    permission = await store.find_one(db, company_id, staff_role)
    if permission is not None:
        return permission

    seeded = await initialize_default_permissions(db, company_id)
    return next((perm for perm in seeded if perm.role == staff_role), None)


async def update_role_permission(
    db: AsyncSession,
    company_id: str,
    update: RolePermissionUpdate,
    updated_by: str | None = None,
) -> RolePermission:
    """Replace the feature list of one role (creating the record if needed)."""
    store.validate_identifier("company_id", company_id)
    if updated_by is not None:
        store.validate_identifier("updated_by", updated_by)

    permission = await store.upsert(db, company_id, update.role, update.features, updated_by)
    log.info(
        "Role permission updated: company=%s role=%s features=%d by=%s",
        company_id, update.role.value, len(permission.features), updated_by,
    )
    return permission
