"""
SQLAlchemy declarative base, timestamp mixin and ULID identifiers.

All SQLAlchemy models should inherit from Base and use ULID string keys.
"""
from datetime import datetime
from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from ulid import ULID


def generate_ulid() -> str:
    """Generate a new ULID string."""
    return str(ULID())


def is_valid_ulid(value: object) -> bool:
    """
    Return True if ``value`` is a canonical ULID string.

    Canonical means it decodes and encodes back to the same text: 26
    uppercase Crockford base32 characters within the 128-bit range.
    """
    if not isinstance(value, str):
        return False
    try:
        parsed = ULID.from_str(value)
    except (ValueError, TypeError, OverflowError):
        return False
    return str(parsed) == value


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.
    
    Usage:
        from app.core.database.base import Base, generate_ulid
        
        class Company(Base):
            __tablename__ = "companies"
            
            id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    """
    pass


class TimestampMixin:
    """
    Mixin to add created_at and updated_at timestamps to models.

    updated_at is refreshed by the ORM on update; Core upserts must set it
    explicitly.
    """
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
