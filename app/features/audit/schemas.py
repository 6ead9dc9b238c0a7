"""
Pydantic schemas for audit log queries and responses.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class AuditLogFilters(BaseModel):
    """Query parameters accepted by the audit log listing."""
    user_id: Optional[int] = None
    action: Optional[str] = Field(None, description="Substring match on the action name")
    resource_type: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    page: int = Field(1, ge=1)
    limit: int = Field(50, ge=1, le=200)


class AuditLogResponse(BaseModel):
    """Schema for audit log response."""
    id: str
    user_id: int
    action: str
    resource_type: str
    resource_id: Optional[int]
    organization_id: int
    details: Optional[Dict[str, Any]]
    ip_address: Optional[str]
    user_agent: Optional[str]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuditLogListResponse(BaseModel):
    """Schema for paginated audit log list."""
    items: List[AuditLogResponse]
    total: int
    page: int
    page_size: int
    pages: int
