"""
User service: registration, login, and role-gated user creation.
"""
from typing import Any, Dict, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConflictError, ForbiddenError, NotFoundError, UnauthenticatedError
from app.features.audit.services import AuditService
from app.features.organizations.models import Organization
from app.features.permissions.engine import AccessContext, AccessDecisionEngine
from app.features.permissions.roles import DEFAULT_ROLE, RoleType
from app.features.users.auth import create_access_token, hash_password, verify_password
from app.features.users.models import User
from app.features.users.schemas import LoginRequest, LoginResponse, UserCreate, UserRegister, UserResponse
from app.utils import get_logger


log = get_logger(__name__)


class UserService:
    def __init__(self, db: AsyncSession, engine: AccessDecisionEngine, audit: AuditService):
        self.db = db
        self.engine = engine
        self.audit = audit

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_by_id(self, user_id: int) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def create_user_with_role(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        organization_id: int,
        role: RoleType,
    ) -> User:
        """
        Persist a user with a role. Performs no authorization.

        Raises:
            ConflictError: If the email is already registered
        """
        if await self.get_by_email(email) is not None:
            raise ConflictError("User with this email already exists")

        user = User(
            email=email,
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            organization_id=organization_id,
            role=role.value,
            is_active=True,
        )
        self.db.add(user)
        await self.db.flush()
        await self.db.refresh(user)

        log.info(f"Created user {user.id} ({user.email}) as {role.value} in org {organization_id}")
        return user

    async def register(self, data: UserRegister) -> User:
        """Self-registration always yields a Viewer."""
        await self._require_organization(data.organization_id)
        return await self.create_user_with_role(
            email=data.email,
            password=data.password,
            first_name=data.first_name,
            last_name=data.last_name,
            organization_id=data.organization_id,
            role=DEFAULT_ROLE,
        )

    async def login(self, data: LoginRequest) -> LoginResponse:
        user = await self.get_by_email(data.email)
        if user is None or not user.is_active or not verify_password(data.password, user.password_hash):
            log.info(f"Failed login for {data.email}")
            raise UnauthenticatedError("Invalid credentials")

        return LoginResponse(
            access_token=create_access_token(user),
            user=UserResponse.model_validate(user),
            role=user.role,
        )

    async def create_user(
        self,
        ctx: AccessContext,
        data: UserCreate,
        client: Optional[Dict[str, Any]] = None,
    ) -> User:
        """
        Create a user in the caller's organization or one of its children.

        Callers without a managing role are rejected before the target
        organization is looked up; a missing target organization is
        reported before the hierarchy rules run.
        """
        gate = self.engine.can_create_users(ctx)
        if not gate:
            raise ForbiddenError(gate.reason)

        await self._require_organization(data.organization_id)

        target_role = data.role or DEFAULT_ROLE
        decision = await self.engine.can_create_user_with_role(ctx, data.organization_id, target_role)
        if not decision:
            log.info(f"User {ctx.user_id} denied creating {target_role.value} in org {data.organization_id}: {decision.reason}")
            raise ForbiddenError(decision.reason)

        user = await self.create_user_with_role(
            email=data.email,
            password=data.password,
            first_name=data.first_name,
            last_name=data.last_name,
            organization_id=data.organization_id,
            role=target_role,
        )
        await self.audit.record(
            ctx,
            action="user:created",
            resource_type="user",
            resource_id=user.id,
            details={"email": user.email, "role": user.role, "organization_id": user.organization_id},
            **(client or {}),
        )
        return user

    async def _require_organization(self, organization_id: int) -> Organization:
        organization = await self.db.get(Organization, organization_id)
        if organization is None:
            raise NotFoundError("Organization not found")
        return organization
