"""
Pydantic schemas for the authenticated caller.
"""
from pydantic import BaseModel, Field, field_validator


class CurrentUser(BaseModel):
    """Identity extracted from a verified token; trusted as authenticated."""
    id: str = Field(..., min_length=1)
    company_id: str | None = None
    role: str = Field(..., min_length=1)
    email: str | None = None

    @field_validator('role')
    @classmethod
    def role_lowercase(cls, v: str) -> str:
        return v.lower()
