"""
Idempotent seed of demo organizations and users.

Creates a two-level hierarchy and one user per managing role:

    TechCorp Holdings (root)
    └── TechCorp Development (child)

Does nothing when any organization already exists.
"""
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import config
from app.features.organizations.models import Organization
from app.features.permissions.roles import RoleType
from app.features.users.auth import hash_password
from app.features.users.models import User
from app.utils import get_logger


log = get_logger(__name__)


SEED_USERS = [
    # (email, first_name, last_name, role, org key)
    ("sysadmin@techcorp.com", "System", "Admin", RoleType.SYSTEM_ADMIN, "parent"),
    ("owner@techcorp.com", "Owner", "User", RoleType.OWNER, "parent"),
    ("admin@techcorp.com", "Admin", "User", RoleType.ADMIN, "parent"),
    ("viewer@techcorp.com", "Viewer", "User", RoleType.VIEWER, "parent"),
    ("dev.admin@techcorp.com", "Development", "Admin", RoleType.ADMIN, "child"),
]


async def seed_database(db: AsyncSession) -> bool:
    """
    Seed initial data if the organizations table is empty.

    Returns:
        True if data was created, False if the database was already seeded
    """
    org_count = (await db.execute(select(func.count()).select_from(Organization))).scalar() or 0
    if org_count > 0:
        log.debug("Database already seeded, skipping")
        return False

    log.info("Seeding initial data...")

    parent = Organization(name="TechCorp Holdings")
    db.add(parent)
    await db.flush()

    child = Organization(name="TechCorp Development", parent_id=parent.id)
    db.add(child)
    await db.flush()

    orgs = {"parent": parent, "child": child}
    password_hash = hash_password(config.SEED_PASSWORD)

    for email, first_name, last_name, role, org_key in SEED_USERS:
        db.add(User(
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            organization_id=orgs[org_key].id,
            role=role.value,
        ))
        log.info(f"  {role.value}: {email} ({orgs[org_key].name})")

    await db.commit()

    log.info(
        f"Organizations: {parent.name} (ID: {parent.id}), "
        f"{child.name} (ID: {child.id}, parent: {parent.id})"
    )
    return True
