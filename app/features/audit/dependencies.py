from typing import Annotated
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.features.audit.services import AuditService
from app.features.permissions.dependencies import get_access_engine
from app.features.permissions.engine import AccessDecisionEngine


def get_audit_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    engine: Annotated[AccessDecisionEngine, Depends(get_access_engine)],
) -> AuditService:
    return AuditService(db, engine)
