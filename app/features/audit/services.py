"""
Audit log writing and querying.
"""
from typing import Any, Dict, Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ForbiddenError
from app.features.audit.models import AuditLog
from app.features.audit.schemas import AuditLogFilters, AuditLogListResponse, AuditLogResponse
from app.features.permissions.engine import AccessContext, AccessDecisionEngine
from app.utils import get_logger


log = get_logger(__name__)

AUDIT_ACCESS_DENIED = "Access denied. Only Owners and Admins can view audit logs."


class AuditService:
    def __init__(self, db: AsyncSession, engine: AccessDecisionEngine):
        self.db = db
        self.engine = engine

    async def record(
        self,
        ctx: AccessContext,
        action: str,
        resource_type: str,
        resource_id: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        organization_id: Optional[int] = None,
    ) -> AuditLog:
        """
        Append an audit entry in the caller's session.

        The entry commits together with the change it describes.
        `organization_id` defaults to the caller's organization.
        """
        entry = AuditLog(
            user_id=ctx.user_id,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            organization_id=organization_id if organization_id is not None else ctx.organization_id,
            details=details,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        self.db.add(entry)
        await self.db.flush()

        log.info(
            f"Audit: user={ctx.user_id} action={action} resource={resource_type}:{resource_id} "
            f"org={entry.organization_id}"
        )
        return entry

    async def list_logs(self, ctx: AccessContext, filters: AuditLogFilters) -> AuditLogListResponse:
        """List audit entries for the caller's organization, newest first."""
        if not self.engine.can_view_audit_log(ctx):
            raise ForbiddenError(AUDIT_ACCESS_DENIED)

        stmt = select(AuditLog).where(AuditLog.organization_id == ctx.organization_id)

        if filters.user_id is not None:
            stmt = stmt.where(AuditLog.user_id == filters.user_id)
        if filters.action:
            stmt = stmt.where(AuditLog.action.contains(filters.action))
        if filters.resource_type:
            stmt = stmt.where(AuditLog.resource_type == filters.resource_type)
        if filters.start_date:
            stmt = stmt.where(AuditLog.created_at >= filters.start_date)
        if filters.end_date:
            stmt = stmt.where(AuditLog.created_at <= filters.end_date)

        # Get total count
        count_stmt = select(func.count()).select_from(stmt.subquery())
        total = (await self.db.execute(count_stmt)).scalar() or 0

        # Get paginated results
        offset = (filters.page - 1) * filters.limit
        stmt = stmt.order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).offset(offset).limit(filters.limit)
        result = await self.db.execute(stmt)
        logs = result.scalars().all()

        return AuditLogListResponse(
            items=[AuditLogResponse.model_validate(entry) for entry in logs],
            total=total,
            page=filters.page,
            page_size=filters.limit,
            pages=(total + filters.limit - 1) // filters.limit,
        )
