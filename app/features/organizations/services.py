"""
Organization service: hierarchy-aware creation and lookup.
"""
from typing import Any, Dict, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import BadRequestError, ForbiddenError, NotFoundError
from app.features.audit.services import AuditService
from app.features.organizations.models import Organization
from app.features.organizations.schemas import (
    OrganizationCreate,
    OrganizationHierarchyResponse,
    OrganizationPublic,
)
from app.features.permissions.engine import AccessContext, AccessDecisionEngine
from app.features.permissions.roles import RoleType
from app.features.users.models import User
from app.features.users.schemas import OwnerCreate
from app.features.users.services import UserService
from app.utils import get_logger


log = get_logger(__name__)

SYSTEM_ADMIN_ONLY = "Only system administrators can manage organizations"


class OrganizationService:
    def __init__(
        self,
        db: AsyncSession,
        engine: AccessDecisionEngine,
        audit: AuditService,
        users: UserService,
    ):
        self.db = db
        self.engine = engine
        self.audit = audit
        self.users = users

    async def create(
        self,
        ctx: AccessContext,
        data: OrganizationCreate,
        client: Optional[Dict[str, Any]] = None,
    ) -> Organization:
        """
        Create a root organization, or a child of an existing root.

        Raises:
            ForbiddenError: If the caller is not a SystemAdmin
            NotFoundError: If the parent does not exist
            BadRequestError: If the parent is itself a child (depth is capped at two)
        """
        if not self.engine.can_manage_organizations(ctx):
            raise ForbiddenError(SYSTEM_ADMIN_ONLY)

        if data.parent_id is not None:
            parent = await self.engine.hierarchy.lookup.get_org_by_id(data.parent_id)
            if parent is None:
                raise NotFoundError("Parent organization not found")
            if parent.parent_id is not None:
                raise BadRequestError("Cannot create organization under a child organization")

        organization = Organization(name=data.name, parent_id=data.parent_id)
        self.db.add(organization)
        await self.db.flush()
        await self.db.refresh(organization)

        await self.audit.record(
            ctx,
            action="organization:created",
            resource_type="organization",
            resource_id=organization.id,
            details={"name": organization.name, "parent_id": organization.parent_id},
            **(client or {}),
        )
        log.info(f"Created organization {organization.id} ({organization.name}) under {organization.parent_id}")
        return organization

    async def create_owner(
        self,
        ctx: AccessContext,
        organization_id: int,
        data: OwnerCreate,
        client: Optional[Dict[str, Any]] = None,
    ) -> User:
        """Provision an Owner for an organization (SystemAdmin only)."""
        if not self.engine.can_manage_organizations(ctx):
            raise ForbiddenError(SYSTEM_ADMIN_ONLY)

        organization = await self.engine.hierarchy.lookup.get_org_by_id(organization_id)
        if organization is None:
            raise NotFoundError("Organization not found")

        owner = await self.users.create_user_with_role(
            email=data.email,
            password=data.password,
            first_name=data.first_name,
            last_name=data.last_name,
            organization_id=organization_id,
            role=RoleType.OWNER,
        )
        await self.audit.record(
            ctx,
            action="user:created",
            resource_type="user",
            resource_id=owner.id,
            details={"email": owner.email, "role": owner.role, "organization_id": organization_id},
            **(client or {}),
        )
        return owner

    async def get_hierarchy(self, ctx: AccessContext) -> OrganizationHierarchyResponse:
        """Describe the caller's organization and its reachable set."""
        organization = await self.engine.hierarchy.lookup.get_org_by_id(ctx.organization_id)
        if organization is None:
            raise NotFoundError("Organization not found")

        reachable = await self.engine.hierarchy.reachable_org_ids(ctx.organization_id)
        result = await self.db.execute(
            select(Organization).where(Organization.id.in_(reachable)).order_by(Organization.id)
        )

        return OrganizationHierarchyResponse(
            organization=OrganizationPublic.model_validate(organization),
            reachable_organization_ids=sorted(reachable),
            is_parent=await self.engine.hierarchy.is_parent_org(ctx.organization_id),
            organizations=[OrganizationPublic.model_validate(org) for org in result.scalars().all()],
        )
