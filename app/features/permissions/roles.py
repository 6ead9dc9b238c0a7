"""
Role taxonomy and capability containment.

Roles are totally ordered by capability:

    SystemAdmin > Owner > Admin > Viewer

Every helper here is total over its input: a value that is not a known
role grants nothing and never raises.
"""
import enum
from typing import Any


class RoleType(str, enum.Enum):
    """The single role assigned to each user."""
    SYSTEM_ADMIN = "SystemAdmin"
    OWNER = "Owner"
    ADMIN = "Admin"
    VIEWER = "Viewer"


# Higher rank means more capabilities
ROLE_RANK: dict[RoleType, int] = {
    RoleType.VIEWER: 1,
    RoleType.ADMIN: 2,
    RoleType.OWNER: 3,
    RoleType.SYSTEM_ADMIN: 4,
}

DEFAULT_ROLE = RoleType.VIEWER


def parse_role(value: Any) -> RoleType | None:
    """
    Resolve a role from a RoleType or its string value.

    Returns None for anything unrecognized (including None, other types,
    and strings that differ only in case).
    """
    if isinstance(value, RoleType):
        return value
    if not isinstance(value, str):
        return None
    try:
        return RoleType(value)
    except ValueError:
        return None


def role_at_least(role: Any, threshold: Any) -> bool:
    """True if `role` carries every capability of `threshold`."""
    resolved = parse_role(role)
    required = parse_role(threshold)
    if resolved is None or required is None:
        return False
    return ROLE_RANK[resolved] >= ROLE_RANK[required]


def can_view_all_org_resources(role: Any) -> bool:
    """Viewers only see what they created; every other role sees everything it can reach."""
    return role_at_least(role, RoleType.ADMIN)


def can_manage_any_resource_in_org(role: Any) -> bool:
    """Managers may edit or delete resources created by other users."""
    return role_at_least(role, RoleType.ADMIN)
