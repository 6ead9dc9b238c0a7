"""
Pydantic schemas for organization-related requests and responses.
"""
from datetime import datetime
from pydantic import BaseModel, Field


class OrganizationCreate(BaseModel):
    """Schema for creating an organization (SystemAdmin only)."""
    name: str = Field(..., min_length=1, max_length=255)
    parent_id: int | None = Field(None, description="Parent organization; must itself be a root organization")


class OrganizationPublic(BaseModel):
    """Public organization information (limited fields)."""
    id: int
    name: str
    parent_id: int | None = None

    model_config = {"from_attributes": True}


class OrganizationResponse(OrganizationPublic):
    """Schema for organization responses."""
    created_at: datetime
    updated_at: datetime


class OrganizationHierarchyResponse(BaseModel):
    """The caller's organization and everything it can reach."""
    organization: OrganizationPublic
    reachable_organization_ids: list[int]
    is_parent: bool
    organizations: list[OrganizationPublic] = Field(default_factory=list)
