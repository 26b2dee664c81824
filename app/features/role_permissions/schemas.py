"""
Pydantic schemas for role permission requests and responses.
"""
from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator

from app.features.role_permissions.constants import StaffRole


class RolePermissionUpdate(BaseModel):
    """Full replacement of one role's feature list."""
    role: StaffRole = Field(..., description="Staff role to update")
    features: List[str] = Field(..., description="Feature identifiers granted to the role")

    @field_validator('role', mode='before')
    @classmethod
    def role_lowercase(cls, v):
        """Accept role names in any case."""
        return v.lower() if isinstance(v, str) else v

    @field_validator('features')
    @classmethod
    def features_unique(cls, v: List[str]) -> List[str]:
        """Drop repeated identifiers, keeping first occurrence order."""
        return list(dict.fromkeys(v))


class RolePermissionResponse(BaseModel):
    """Schema for a stored role permission record."""
    id: str
    company_id: str
    role: StaffRole
    features: List[str]
    updated_by_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FeatureCatalogResponse(BaseModel):
    """Known feature identifiers, grouped, plus each role's seed defaults."""
    features: List[str]
    categories: Dict[str, List[str]]
    defaults: Dict[StaffRole, List[str]]
