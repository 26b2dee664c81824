"""
Persistence for role permission records.

Each write is a single ``INSERT ... ON CONFLICT (company_id, role)`` statement
so concurrent writers for the same key never produce two rows. Updates use
``DO UPDATE`` (last writer wins); seeding uses ``DO NOTHING`` so it never
touches a row that already exists.
"""
from collections.abc import Iterable

from sqlalchemy import select, func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.base import generate_ulid, is_valid_ulid
from app.core.exceptions import InvalidIdentifier
from app.features.role_permissions.constants import StaffRole
from app.features.role_permissions.models import RolePermission


_DIALECT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}

_ROLE_ORDER = {role: index for index, role in enumerate(StaffRole)}


def validate_identifier(field: str, value: object) -> str:
    """Return ``value`` if it is a well-formed ULID, else raise InvalidIdentifier."""
    if not is_valid_ulid(value):
        raise InvalidIdentifier(field, value)
    return value  # type: ignore[return-value]


def _dialect_insert(db: AsyncSession):
    dialect = db.get_bind().dialect.name
    try:
        return _DIALECT_INSERTS[dialect]
    except KeyError:
        raise RuntimeError(f"Session is bound to unsupported database dialect {dialect!r}")


async def find_all(db: AsyncSession, company_id: str) -> list[RolePermission]:
    """All records of a company, in role declaration order. Empty if none."""
    validate_identifier("company_id", company_id)
    result = await db.execute(
        select(RolePermission)
        .where(RolePermission.company_id == company_id)
        .execution_options(populate_existing=True)
    )
    return sorted(result.scalars().all(), key=lambda perm: _ROLE_ORDER[perm.role])


async def find_one(db: AsyncSession, company_id: str, role: StaffRole) -> RolePermission | None:
    validate_identifier("company_id", company_id)
    result = await db.execute(
        select(RolePermission)
        .where(
            RolePermission.company_id == company_id,
            RolePermission.role == StaffRole(role),
        )
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def upsert(
    db: AsyncSession,
    company_id: str,
    role: StaffRole,
    features: Iterable[str],
    updated_by: str | None = None,
) -> RolePermission:
    """
    Insert or overwrite the record for ``(company_id, role)``.

    The feature list is replaced, never merged. ``updated_by=None`` keeps
    whatever audit value an existing row already has. Commits, then reads
    the resulting row back.
    """
    validate_identifier("company_id", company_id)
    if updated_by is not None:
        validate_identifier("updated_by", updated_by)
    role = StaffRole(role)

    insert = _dialect_insert(db)
    values = {
        "id": generate_ulid(),
        "company_id": company_id,
        "role": role,
        "features": list(features),
    }
    if updated_by is not None:
        values["updated_by_id"] = updated_by

    stmt = insert(RolePermission).values(**values)
    set_ = {
        "features": stmt.excluded.features,
        "updated_at": func.now(),
    }
    if updated_by is not None:
        set_["updated_by_id"] = stmt.excluded.updated_by_id
    stmt = stmt.on_conflict_do_update(
        index_elements=["company_id", "role"],
        set_=set_,
    )

    await db.execute(stmt)
    await db.commit()

    permission = await find_one(db, company_id, role)
    if permission is None:
        # Only possible if the row was removed between commit and read
        raise LookupError(f"Role permission {role.value} for company {company_id} vanished after upsert")
    return permission


async def insert_missing(db: AsyncSession, company_id: str, role: StaffRole, features: Iterable[str]) -> None:
    """
    Insert the record for ``(company_id, role)`` only if none exists.

    An existing row is left untouched. Commits.
    """
    validate_identifier("company_id", company_id)
    role = StaffRole(role)

    insert = _dialect_insert(db)
    stmt = (
        insert(RolePermission)
        .values(
            id=generate_ulid(),
            company_id=company_id,
            role=role,
            features=list(features),
        )
        .on_conflict_do_nothing(index_elements=["company_id", "role"])
    )

    await db.execute(stmt)
    await db.commit()
