"""
Organization-related dependency injection functions.
"""
from typing import Annotated
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.features.audit.dependencies import get_audit_service
from app.features.audit.services import AuditService
from app.features.organizations.services import OrganizationService
from app.features.permissions.dependencies import get_access_engine
from app.features.permissions.engine import AccessDecisionEngine
from app.features.users.dependencies import get_user_service
from app.features.users.services import UserService


def get_organization_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    engine: Annotated[AccessDecisionEngine, Depends(get_access_engine)],
    audit: Annotated[AuditService, Depends(get_audit_service)],
    users: Annotated[UserService, Depends(get_user_service)],
) -> OrganizationService:
    return OrganizationService(db, engine, audit, users)
