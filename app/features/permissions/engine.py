"""
Access decision engine.

The single authority consulted by the resource services before they read
or mutate a task, create a user, or query the audit log. Decisions are a
function of an AccessContext, the action, and the target's organization
(and creator, for tasks). Role checks always run before any organization
lookup, and unrecognized roles are denied rather than raising.
"""
from dataclasses import dataclass, field
from typing import Any, Protocol

from app.features.permissions.hierarchy import OrganizationHierarchy
from app.features.permissions.roles import (
    DEFAULT_ROLE,
    RoleType,
    can_manage_any_resource_in_org,
    can_view_all_org_resources,
    parse_role,
    role_at_least,
)
from app.utils import get_logger


log = get_logger(__name__)


NO_ROLE_REASON = "No role assigned - contact administrator"
VIEWER_CANNOT_CREATE_USERS = "Viewers cannot create users"
OWNER_IN_CHILD_ORG = "Cannot create Owner in child organization"
ADMIN_CANNOT_CREATE_OWNER = "Admins cannot create Owner users"
UNRELATED_ORGANIZATION = "Cannot create users in unrelated organizations"
UNKNOWN_TARGET_ROLE = "Requested role does not exist"


@dataclass(frozen=True)
class AccessContext:
    """Identity of the caller for one request, taken from a verified token."""
    user_id: int
    role: RoleType | None
    organization_id: int

    @classmethod
    def build(cls, user_id: int, role: Any, organization_id: int) -> "AccessContext":
        return cls(user_id=user_id, role=parse_role(role), organization_id=organization_id)


@dataclass(frozen=True)
class Decision:
    """Outcome of an access check. Truthy when allowed."""
    allowed: bool
    reason: str | None = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "Decision":
        return cls(allowed=False, reason=reason)

    def __bool__(self) -> bool:
        return self.allowed


@dataclass(frozen=True)
class TaskListPredicate:
    """Filter applied to task list queries."""
    org_ids: frozenset[int] = field(default_factory=frozenset)
    restrict_to_creator: bool = True
    creator_id: int | None = None

    def matches(self, task: "TaskLike") -> bool:
        if task.organization_id not in self.org_ids:
            return False
        return not self.restrict_to_creator or task.created_by == self.creator_id


class TaskLike(Protocol):
    organization_id: int
    created_by: int


class AccessDecisionEngine:
    """Per-request access decisions backed by an organization hierarchy."""

    def __init__(self, hierarchy: OrganizationHierarchy):
        self.hierarchy = hierarchy

    # Tasks

    def can_create_task(self, ctx: AccessContext) -> bool:
        return role_at_least(ctx.role, RoleType.ADMIN)

    async def task_list_predicate(self, ctx: AccessContext) -> TaskListPredicate:
        """
        Scope for listing tasks.

        Every role lists tasks across its reachable organizations; Viewers
        are further restricted to tasks they created. An unrecognized role
        gets a predicate that matches nothing.
        """
        if parse_role(ctx.role) is None:
            return TaskListPredicate(creator_id=ctx.user_id)

        org_ids = await self.hierarchy.reachable_org_ids(ctx.organization_id)
        return TaskListPredicate(
            org_ids=frozenset(org_ids),
            restrict_to_creator=not can_view_all_org_resources(ctx.role),
            creator_id=ctx.user_id,
        )

    async def can_read_task(self, ctx: AccessContext, task: TaskLike) -> bool:
        if parse_role(ctx.role) is None:
            return False
        if not (can_view_all_org_resources(ctx.role) or task.created_by == ctx.user_id):
            return False
        return await self.hierarchy.can_org_access_org(ctx.organization_id, task.organization_id)

    async def can_mutate_task(self, ctx: AccessContext, task: TaskLike) -> bool:
        """
        Replace and delete share this rule: the caller must be able to read
        the task and either manage any resource or be its creator. Reach
        already covers a parent org manager acting on a child org's task.
        """
        if not (can_manage_any_resource_in_org(ctx.role) or task.created_by == ctx.user_id):
            return False
        return await self.can_read_task(ctx, task)

    # Users

    def can_create_users(self, ctx: AccessContext) -> Decision:
        """Role-only gate for user creation, decided before any target is looked up."""
        role = parse_role(ctx.role)
        if role is None:
            return Decision.deny(NO_ROLE_REASON)
        if role is RoleType.VIEWER:
            return Decision.deny(VIEWER_CANNOT_CREATE_USERS)
        return Decision.allow()

    async def can_create_user_with_role(
        self,
        ctx: AccessContext,
        target_org_id: int,
        target_role: Any = None,
    ) -> Decision:
        gate = self.can_create_users(ctx)
        if not gate:
            return gate

        role = parse_role(ctx.role)
        requested = DEFAULT_ROLE if target_role is None else parse_role(target_role)
        if requested is None:
            return Decision.deny(UNKNOWN_TARGET_ROLE)

        if role is RoleType.SYSTEM_ADMIN:
            return Decision.allow()
        if role is RoleType.ADMIN and requested is RoleType.OWNER:
            return Decision.deny(ADMIN_CANNOT_CREATE_OWNER)

        if target_org_id == ctx.organization_id:
            return Decision.allow()

        if await self.hierarchy.is_child_org_of(ctx.organization_id, target_org_id):
            if role is RoleType.OWNER and requested is RoleType.OWNER:
                return Decision.deny(OWNER_IN_CHILD_ORG)
            return Decision.allow()

        return Decision.deny(UNRELATED_ORGANIZATION)

    # Audit log and organizations

    def can_view_audit_log(self, ctx: AccessContext) -> bool:
        return role_at_least(ctx.role, RoleType.ADMIN)

    def can_manage_organizations(self, ctx: AccessContext) -> bool:
        return role_at_least(ctx.role, RoleType.SYSTEM_ADMIN)
