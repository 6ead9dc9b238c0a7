"""
User-related dependency injection functions.
"""
from typing import Annotated
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.features.audit.dependencies import get_audit_service
from app.features.audit.services import AuditService
from app.features.permissions.dependencies import get_access_context, get_access_engine
from app.features.permissions.engine import AccessContext, AccessDecisionEngine
from app.features.users.models import User
from app.features.users.services import UserService


def get_user_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    engine: Annotated[AccessDecisionEngine, Depends(get_access_engine)],
    audit: Annotated[AuditService, Depends(get_audit_service)],
) -> UserService:
    return UserService(db, engine, audit)


async def get_current_user(
    ctx: Annotated[AccessContext, Depends(get_access_context)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> User:
    """
    Load the authenticated user's row.

    Usage:
        @router.get("/me")
        async def get_me(user: User = Depends(get_current_user)):
            return user
    """
    return await service.get_by_id(ctx.user_id)
