"""
FastAPI dependencies for authentication and authorization.

- `get_access_context` turns a bearer token into an AccessContext
- `get_access_engine` builds a decision engine over the request's session
"""
from typing import Annotated
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.core.errors import UnauthenticatedError
from app.features.organizations.repository import SqlOrganizationLookup
from app.features.permissions.engine import AccessContext, AccessDecisionEngine
from app.features.permissions.hierarchy import OrganizationHierarchy
from app.features.users.auth import verify_access_token
from app.utils import get_logger


log = get_logger(__name__)

# auto_error=False so a missing header becomes our 401 envelope, not FastAPI's 403
security = HTTPBearer(auto_error=False)


async def get_access_context(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> AccessContext:
    """
    Build the caller's AccessContext from a verified bearer token.

    The identity is re-derived from the token on every request. A role
    string that is not recognized yields a context with `role=None`,
    which every decision treats as "no permissions".

    Raises:
        UnauthenticatedError: If no token is presented or it fails verification
    """
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("No token provided")

    payload = verify_access_token(credentials.credentials)

    try:
        user_id = int(payload["sub"])
        organization_id = int(payload["organization_id"])
    except (KeyError, TypeError, ValueError):
        raise UnauthenticatedError("Invalid token payload")

    ctx = AccessContext.build(user_id, payload.get("role"), organization_id)
    if ctx.role is None:
        log.warning(f"User {user_id} presented unrecognized role {payload.get('role')!r}")
    return ctx


def get_organization_hierarchy(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> OrganizationHierarchy:
    return OrganizationHierarchy(SqlOrganizationLookup(db))


def get_access_engine(
    hierarchy: Annotated[OrganizationHierarchy, Depends(get_organization_hierarchy)],
) -> AccessDecisionEngine:
    return AccessDecisionEngine(hierarchy)


def get_client_info(request: Request) -> dict:
    """Client address and user agent recorded with audit entries."""
    return {
        "ip_address": request.client.host if request.client else None,
        "user_agent": request.headers.get("user-agent"),
    }


def get_authorization_header(request: Request) -> str:
    """
    Extract authorization header for rate limiting.
    Used with slowapi Limiter.
    """
    auth = request.headers.get("Authorization", "")
    return auth or "anonymous"
