"""
SQLAlchemy-backed organization lookup used by the hierarchy resolver.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.features.organizations.models import Organization


class SqlOrganizationLookup:
    """Reads organizations from the request's database session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_org_with_children(self, org_id: int) -> Organization | None:
        # populate_existing refreshes rows already in the identity map,
        # so children created earlier in this session are visible
        result = await self.db.execute(
            select(Organization)
            .options(selectinload(Organization.children))
            .where(Organization.id == org_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_org_by_id(self, org_id: int) -> Organization | None:
        result = await self.db.execute(
            select(Organization).where(Organization.id == org_id)
        )
        return result.scalar_one_or_none()
