"""
Role permission model: one feature list per (company, role).
"""
from sqlalchemy import String, JSON, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database.base import Base, TimestampMixin, generate_ulid
from app.features.role_permissions.constants import StaffRole


class RolePermission(Base, TimestampMixin):
    """
    Features granted to a staff role within a company.

    At most one row exists per (company_id, role); the store writes through
    an upsert keyed on that constraint.
    """
    __tablename__ = "role_permissions"
    __table_args__ = (
        UniqueConstraint("company_id", "role", name="uq_role_permissions_company_role"),
    )
    
    # Primary key using ULID
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    
    # Opaque tenant ULID, not a foreign key
    company_id: Mapped[str] = mapped_column(String(26), nullable=False, index=True)
    role: Mapped[StaffRole] = mapped_column(
        SQLEnum(
            StaffRole,
            name="staff_role",
            native_enum=False,
            length=20,
            values_callable=lambda roles: [r.value for r in roles],
        ),
        nullable=False,
    )
    
    # Feature identifiers stored verbatim, in submitted order
    features: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    
    # Audit only
    updated_by_id: Mapped[str | None] = mapped_column(String(26), nullable=True)
    
    def __repr__(self) -> str:
        return f"<RolePermission(id={self.id}, company_id={self.company_id}, role={self.role.value})>"
