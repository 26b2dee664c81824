"""
Company (tenant) model.

A company is the multi-tenancy boundary: every role permission record is
scoped to exactly one company id. Records do not require a row here; this
table lists the tenants the seed script walks with ``--all``.
"""
from sqlalchemy import String, Boolean
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database.base import Base, TimestampMixin, generate_ulid


class Company(Base, TimestampMixin):
    """Restaurant or hotel operating as one tenant."""
    __tablename__ = "companies"
    
    # Primary key using ULID
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    
    def __repr__(self) -> str:
        return f"<Company(id={self.id}, name={self.name!r})>"
