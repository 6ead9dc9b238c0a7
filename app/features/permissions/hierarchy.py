"""
Organization hierarchy resolution.

Organizations form at most two levels: a root may have children, a child
has none. Reach flows down to direct children and up one hop to the parent,
never sideways to siblings:

    root  -> {root, child_1, child_2, ...}
    child -> {child, root}

Hierarchy facts are fetched from the lookup on every call.
"""
from typing import Protocol, Sequence

from app.utils import get_logger


log = get_logger(__name__)


class OrganizationNode(Protocol):
    id: int
    parent_id: int | None


class OrganizationWithChildren(OrganizationNode, Protocol):
    children: Sequence[OrganizationNode]


class OrganizationLookup(Protocol):
    """Storage collaborator used to read organization rows."""

    async def get_org_with_children(self, org_id: int) -> OrganizationWithChildren | None:
        ...

    async def get_org_by_id(self, org_id: int) -> OrganizationNode | None:
        ...


class OrganizationHierarchy:
    """Computes which organizations an organization may act across."""

    def __init__(self, lookup: OrganizationLookup):
        self.lookup = lookup

    async def reachable_org_ids(self, org_id: int) -> set[int]:
        """
        Organizations reachable from `org_id`.

        Always contains `org_id`. Adds direct children and the parent, but
        not the parent's other children. An unknown organization reaches
        only itself.
        """
        org = await self.lookup.get_org_with_children(org_id)
        if org is None:
            log.debug(f"Organization {org_id} not found, reach limited to itself")
            return {org_id}

        reachable = {org.id}
        reachable.update(child.id for child in org.children or ())
        if org.parent_id is not None:
            reachable.add(org.parent_id)
        return reachable

    async def can_org_access_org(self, from_org_id: int, to_org_id: int) -> bool:
        if from_org_id == to_org_id:
            return True
        return to_org_id in await self.reachable_org_ids(from_org_id)

    async def is_parent_org(self, org_id: int) -> bool:
        org = await self.lookup.get_org_with_children(org_id)
        return bool(org is not None and org.children)

    async def is_child_org_of(self, parent_org_id: int, candidate_org_id: int) -> bool:
        parent = await self.lookup.get_org_with_children(parent_org_id)
        if parent is None:
            return False
        return any(child.id == candidate_org_id for child in parent.children or ())
