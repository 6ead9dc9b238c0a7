"""
Tests for the organization hierarchy resolver.

Reach goes down to direct children and up one hop to the parent, never
sideways to siblings.
"""
import pytest

from conftest import CHILD_B, CHILD_C, LONE, ROOT


class TestReachableOrgIds:

    @pytest.mark.asyncio
    async def test_root_reaches_itself_and_children(self, hierarchy):
        assert await hierarchy.reachable_org_ids(ROOT) == {ROOT, CHILD_B, CHILD_C}

    @pytest.mark.asyncio
    async def test_child_reaches_itself_and_parent_but_not_sibling(self, hierarchy):
        reachable = await hierarchy.reachable_org_ids(CHILD_B)
        assert reachable == {CHILD_B, ROOT}
        assert CHILD_C not in reachable

    @pytest.mark.asyncio
    async def test_isolated_org_reaches_only_itself(self, hierarchy):
        assert await hierarchy.reachable_org_ids(LONE) == {LONE}

    @pytest.mark.asyncio
    async def test_unknown_org_degrades_to_self(self, hierarchy):
        assert await hierarchy.reachable_org_ids(999) == {999}

    @pytest.mark.asyncio
    async def test_repeated_calls_are_identical(self, hierarchy):
        first = await hierarchy.reachable_org_ids(ROOT)
        second = await hierarchy.reachable_org_ids(ROOT)
        assert first == second

    @pytest.mark.asyncio
    async def test_hierarchy_is_refetched_every_call(self, hierarchy, lookup):
        await hierarchy.reachable_org_ids(ROOT)
        await hierarchy.reachable_org_ids(ROOT)
        assert lookup.calls == 2


class TestCanOrgAccessOrg:

    @pytest.mark.asyncio
    async def test_same_org_skips_lookup(self, hierarchy, lookup):
        assert await hierarchy.can_org_access_org(CHILD_C, CHILD_C)
        assert lookup.calls == 0

    @pytest.mark.asyncio
    async def test_parent_and_child_reach_each_other(self, hierarchy):
        assert await hierarchy.can_org_access_org(ROOT, CHILD_B)
        assert await hierarchy.can_org_access_org(CHILD_B, ROOT)

    @pytest.mark.asyncio
    async def test_siblings_cannot_reach_each_other(self, hierarchy):
        assert not await hierarchy.can_org_access_org(CHILD_B, CHILD_C)
        assert not await hierarchy.can_org_access_org(CHILD_C, CHILD_B)

    @pytest.mark.asyncio
    async def test_unrelated_orgs_cannot_reach_each_other(self, hierarchy):
        assert not await hierarchy.can_org_access_org(LONE, ROOT)
        assert not await hierarchy.can_org_access_org(ROOT, LONE)


class TestParentChildQueries:

    @pytest.mark.asyncio
    async def test_is_parent_org(self, hierarchy):
        assert await hierarchy.is_parent_org(ROOT)
        assert not await hierarchy.is_parent_org(CHILD_B)
        assert not await hierarchy.is_parent_org(LONE)
        assert not await hierarchy.is_parent_org(999)

    @pytest.mark.asyncio
    async def test_is_child_org_of(self, hierarchy):
        assert await hierarchy.is_child_org_of(ROOT, CHILD_B)
        assert await hierarchy.is_child_org_of(ROOT, CHILD_C)
        assert not await hierarchy.is_child_org_of(ROOT, ROOT)
        assert not await hierarchy.is_child_org_of(CHILD_B, ROOT)
        assert not await hierarchy.is_child_org_of(CHILD_B, CHILD_C)
        assert not await hierarchy.is_child_org_of(999, CHILD_B)
