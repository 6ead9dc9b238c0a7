"""
Tests for the access decision engine.

Verifies that:
- Task create/read/mutate rules compose role capability with org reach
- List predicates scope Viewers to their own tasks
- User creation follows the per-role organization rules and reasons
- Role checks run before any organization lookup
"""
import pytest

from app.features.permissions.engine import (
    ADMIN_CANNOT_CREATE_OWNER,
    NO_ROLE_REASON,
    OWNER_IN_CHILD_ORG,
    UNKNOWN_TARGET_ROLE,
    UNRELATED_ORGANIZATION,
    VIEWER_CANNOT_CREATE_USERS,
    Decision,
)
from app.features.permissions.roles import RoleType
from conftest import CHILD_B, CHILD_C, LONE, ROOT, FakeTask


MANAGERS = [RoleType.SYSTEM_ADMIN, RoleType.OWNER, RoleType.ADMIN]
CALLER = 100
OTHER_USER = 200


class TestCanCreateTask:

    @pytest.mark.parametrize("role", MANAGERS)
    def test_managers_can_create(self, access_engine, make_ctx, role):
        assert access_engine.can_create_task(make_ctx(role))

    @pytest.mark.parametrize("role", [RoleType.VIEWER, None, "Intern"])
    def test_others_cannot_create(self, access_engine, make_ctx, role):
        assert not access_engine.can_create_task(make_ctx(role))


class TestTaskListPredicate:

    @pytest.mark.asyncio
    async def test_admin_sees_all_reachable_orgs(self, access_engine, make_ctx):
        predicate = await access_engine.task_list_predicate(make_ctx(RoleType.ADMIN, ROOT))
        assert predicate.org_ids == {ROOT, CHILD_B, CHILD_C}
        assert not predicate.restrict_to_creator

    @pytest.mark.asyncio
    async def test_viewer_is_restricted_to_own_tasks(self, access_engine, make_ctx):
        ctx = make_ctx(RoleType.VIEWER, ROOT, user_id=CALLER)
        predicate = await access_engine.task_list_predicate(ctx)
        assert predicate.restrict_to_creator

        own = FakeTask(organization_id=ROOT, created_by=CALLER)
        others = FakeTask(organization_id=ROOT, created_by=OTHER_USER)
        assert [t for t in (own, others) if predicate.matches(t)] == [own]

    @pytest.mark.asyncio
    async def test_child_org_predicate_excludes_siblings(self, access_engine, make_ctx):
        predicate = await access_engine.task_list_predicate(make_ctx(RoleType.OWNER, CHILD_B))
        assert predicate.org_ids == {CHILD_B, ROOT}

    @pytest.mark.asyncio
    async def test_unknown_role_matches_nothing_without_lookup(self, access_engine, make_ctx, lookup):
        predicate = await access_engine.task_list_predicate(make_ctx("Hacker", ROOT))
        assert predicate.org_ids == frozenset()
        assert not predicate.matches(FakeTask(organization_id=ROOT, created_by=CALLER))
        assert lookup.calls == 0


class TestCanReadTask:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", MANAGERS)
    async def test_managers_read_any_task_in_reachable_org(self, access_engine, make_ctx, role):
        ctx = make_ctx(role, ROOT, user_id=CALLER)
        for org in (ROOT, CHILD_B, CHILD_C):
            assert await access_engine.can_read_task(ctx, FakeTask(org, OTHER_USER))

    @pytest.mark.asyncio
    async def test_viewer_reads_only_own_tasks(self, access_engine, make_ctx):
        ctx = make_ctx(RoleType.VIEWER, ROOT, user_id=CALLER)
        assert await access_engine.can_read_task(ctx, FakeTask(ROOT, CALLER))
        assert not await access_engine.can_read_task(ctx, FakeTask(ROOT, OTHER_USER))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", [RoleType.VIEWER] + MANAGERS)
    async def test_read_is_monotonic_in_role(self, access_engine, make_ctx, role):
        """Whatever a Viewer creator can read, every higher role can too."""
        task = FakeTask(CHILD_B, CALLER)
        assert await access_engine.can_read_task(make_ctx(role, ROOT, user_id=CALLER), task)

    @pytest.mark.asyncio
    async def test_child_admin_reads_parent_task(self, access_engine, make_ctx):
        ctx = make_ctx(RoleType.ADMIN, CHILD_B, user_id=CALLER)
        assert await access_engine.can_read_task(ctx, FakeTask(ROOT, OTHER_USER))

    @pytest.mark.asyncio
    async def test_sibling_admin_cannot_read(self, access_engine, make_ctx):
        ctx = make_ctx(RoleType.ADMIN, CHILD_C, user_id=CALLER)
        assert not await access_engine.can_read_task(ctx, FakeTask(CHILD_B, OTHER_USER))

    @pytest.mark.asyncio
    async def test_unrelated_org_cannot_read_even_own_task(self, access_engine, make_ctx):
        ctx = make_ctx(RoleType.SYSTEM_ADMIN, LONE, user_id=CALLER)
        assert not await access_engine.can_read_task(ctx, FakeTask(ROOT, CALLER))

    @pytest.mark.asyncio
    async def test_unknown_role_is_denied_before_lookup(self, access_engine, make_ctx, lookup):
        ctx = make_ctx(None, ROOT, user_id=CALLER)
        assert not await access_engine.can_read_task(ctx, FakeTask(CHILD_B, CALLER))
        assert lookup.calls == 0

    @pytest.mark.asyncio
    async def test_viewer_denied_on_others_task_before_lookup(self, access_engine, make_ctx, lookup):
        ctx = make_ctx(RoleType.VIEWER, ROOT, user_id=CALLER)
        assert not await access_engine.can_read_task(ctx, FakeTask(CHILD_B, OTHER_USER))
        assert lookup.calls == 0


class TestCanMutateTask:

    @pytest.mark.asyncio
    async def test_admin_mutates_task_created_by_someone_else(self, access_engine, make_ctx):
        ctx = make_ctx(RoleType.ADMIN, ROOT, user_id=CALLER)
        assert await access_engine.can_mutate_task(ctx, FakeTask(ROOT, OTHER_USER))

    @pytest.mark.asyncio
    async def test_parent_admin_mutates_child_org_task(self, access_engine, make_ctx):
        ctx = make_ctx(RoleType.ADMIN, ROOT, user_id=CALLER)
        assert await access_engine.can_mutate_task(ctx, FakeTask(CHILD_C, OTHER_USER))

    @pytest.mark.asyncio
    async def test_viewer_cannot_mutate_others_tasks(self, access_engine, make_ctx):
        ctx = make_ctx(RoleType.VIEWER, ROOT, user_id=CALLER)
        assert not await access_engine.can_mutate_task(ctx, FakeTask(ROOT, OTHER_USER))

    @pytest.mark.asyncio
    async def test_creator_can_mutate_own_task(self, access_engine, make_ctx):
        ctx = make_ctx(RoleType.VIEWER, ROOT, user_id=CALLER)
        assert await access_engine.can_mutate_task(ctx, FakeTask(ROOT, CALLER))

    @pytest.mark.asyncio
    async def test_mutation_requires_reach(self, access_engine, make_ctx):
        ctx = make_ctx(RoleType.OWNER, CHILD_B, user_id=CALLER)
        assert not await access_engine.can_mutate_task(ctx, FakeTask(CHILD_C, OTHER_USER))


class TestCanCreateUserWithRole:

    @pytest.mark.asyncio
    async def test_viewer_always_denied(self, access_engine, make_ctx, lookup):
        decision = await access_engine.can_create_user_with_role(make_ctx(RoleType.VIEWER, ROOT), ROOT, RoleType.VIEWER)
        assert decision == Decision.deny(VIEWER_CANNOT_CREATE_USERS)
        assert lookup.calls == 0

    @pytest.mark.asyncio
    async def test_unknown_role_denied(self, access_engine, make_ctx):
        decision = await access_engine.can_create_user_with_role(make_ctx("Ghost", ROOT), ROOT)
        assert not decision
        assert decision.reason == NO_ROLE_REASON

    @pytest.mark.asyncio
    @pytest.mark.parametrize("target_role", list(RoleType))
    async def test_owner_creates_any_role_in_own_org(self, access_engine, make_ctx, target_role):
        decision = await access_engine.can_create_user_with_role(make_ctx(RoleType.OWNER, ROOT), ROOT, target_role)
        assert decision.allowed

    @pytest.mark.asyncio
    async def test_owner_cannot_create_owner_in_child_org(self, access_engine, make_ctx):
        decision = await access_engine.can_create_user_with_role(make_ctx(RoleType.OWNER, ROOT), CHILD_B, RoleType.OWNER)
        assert decision == Decision.deny(OWNER_IN_CHILD_ORG)

    @pytest.mark.asyncio
    async def test_owner_creates_admin_in_child_org(self, access_engine, make_ctx):
        decision = await access_engine.can_create_user_with_role(make_ctx(RoleType.OWNER, ROOT), CHILD_B, RoleType.ADMIN)
        assert decision

    @pytest.mark.asyncio
    async def test_owner_cannot_create_in_unrelated_org(self, access_engine, make_ctx):
        decision = await access_engine.can_create_user_with_role(make_ctx(RoleType.OWNER, ROOT), LONE, RoleType.VIEWER)
        assert decision == Decision.deny(UNRELATED_ORGANIZATION)

    @pytest.mark.asyncio
    async def test_child_owner_cannot_create_in_parent_org(self, access_engine, make_ctx):
        """Reach goes up to the parent, user creation only goes down."""
        decision = await access_engine.can_create_user_with_role(make_ctx(RoleType.OWNER, CHILD_B), ROOT, RoleType.VIEWER)
        assert decision.reason == UNRELATED_ORGANIZATION

    @pytest.mark.asyncio
    @pytest.mark.parametrize("target_org", [ROOT, CHILD_B, LONE])
    async def test_admin_cannot_create_owner_anywhere(self, access_engine, make_ctx, lookup, target_org):
        decision = await access_engine.can_create_user_with_role(make_ctx(RoleType.ADMIN, ROOT), target_org, RoleType.OWNER)
        assert decision == Decision.deny(ADMIN_CANNOT_CREATE_OWNER)
        assert lookup.calls == 0

    @pytest.mark.asyncio
    async def test_admin_creates_in_own_and_child_org(self, access_engine, make_ctx):
        ctx = make_ctx(RoleType.ADMIN, ROOT)
        assert await access_engine.can_create_user_with_role(ctx, ROOT, RoleType.ADMIN)
        assert await access_engine.can_create_user_with_role(ctx, CHILD_C, RoleType.VIEWER)

    @pytest.mark.asyncio
    async def test_admin_cannot_create_in_sibling_org(self, access_engine, make_ctx):
        decision = await access_engine.can_create_user_with_role(make_ctx(RoleType.ADMIN, CHILD_B), CHILD_C)
        assert decision == Decision.deny(UNRELATED_ORGANIZATION)

    @pytest.mark.asyncio
    async def test_target_role_defaults_to_viewer(self, access_engine, make_ctx):
        # An Admin may not create Owners, so an unspecified role must not be treated as Owner
        decision = await access_engine.can_create_user_with_role(make_ctx(RoleType.ADMIN, ROOT), ROOT)
        assert decision

    @pytest.mark.asyncio
    @pytest.mark.parametrize("target_org", [ROOT, CHILD_B, LONE, 999])
    async def test_system_admin_always_allowed(self, access_engine, make_ctx, target_org):
        decision = await access_engine.can_create_user_with_role(make_ctx(RoleType.SYSTEM_ADMIN, ROOT), target_org, RoleType.OWNER)
        assert decision == Decision.allow()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", MANAGERS)
    @pytest.mark.parametrize("target_org", [ROOT, CHILD_B])
    async def test_unrecognized_target_role_is_denied(self, access_engine, make_ctx, role, target_org):
        decision = await access_engine.can_create_user_with_role(make_ctx(role, ROOT), target_org, "Overlord")
        assert decision == Decision.deny(UNKNOWN_TARGET_ROLE)


class TestCanCreateUsers:

    @pytest.mark.parametrize("role", MANAGERS)
    def test_managers_pass_the_gate(self, access_engine, make_ctx, role):
        assert access_engine.can_create_users(make_ctx(role)) == Decision.allow()

    def test_viewer_is_stopped(self, access_engine, make_ctx):
        assert access_engine.can_create_users(make_ctx(RoleType.VIEWER)) == Decision.deny(VIEWER_CANNOT_CREATE_USERS)

    def test_unknown_role_is_stopped(self, access_engine, make_ctx):
        assert access_engine.can_create_users(make_ctx("Janitor")) == Decision.deny(NO_ROLE_REASON)


class TestAuditAndOrganizations:

    @pytest.mark.parametrize("role,expected", [
        (RoleType.SYSTEM_ADMIN, True),
        (RoleType.OWNER, True),
        (RoleType.ADMIN, True),
        (RoleType.VIEWER, False),
        ("Auditor", False),
    ])
    def test_can_view_audit_log(self, access_engine, make_ctx, role, expected):
        assert access_engine.can_view_audit_log(make_ctx(role)) is expected

    def test_only_system_admin_manages_organizations(self, access_engine, make_ctx):
        assert access_engine.can_manage_organizations(make_ctx(RoleType.SYSTEM_ADMIN))
        assert not access_engine.can_manage_organizations(make_ctx(RoleType.OWNER))
