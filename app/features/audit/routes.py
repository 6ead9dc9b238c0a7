"""
Audit log routes.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, Query

from app.core.schemas import ApiResponse
from app.features.audit.dependencies import get_audit_service
from app.features.audit.schemas import AuditLogFilters, AuditLogListResponse
from app.features.audit.services import AuditService
from app.features.permissions.dependencies import get_access_context
from app.features.permissions.engine import AccessContext


router = APIRouter(tags=["audit"])


@router.get("/", response_model=ApiResponse[AuditLogListResponse])
async def list_audit_logs(
    filters: Annotated[AuditLogFilters, Query()],
    ctx: Annotated[AccessContext, Depends(get_access_context)],
    service: Annotated[AuditService, Depends(get_audit_service)],
):
    """List audit entries for the caller's organization (Admin and above)."""
    result = await service.list_logs(ctx, filters)
    return ApiResponse(data=result)
