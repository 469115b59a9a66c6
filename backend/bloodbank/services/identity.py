"""Identity Resolution — loads a user's role and permission names into an Identity.

Invariants:
    - Returns None when the user does not exist (treated as unauthenticated)
    - Permission set is the union of every permission assigned to the user's role
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bloodbank.core.access import Identity
from bloodbank.core.domain_types import UserId
from bloodbank.models.permission import Permission
from bloodbank.models.role import Role, role_permissions
from bloodbank.models.user import User


async def load_identity(db: AsyncSession, user_id: int) -> Identity | None:
    row = (await db.execute(
        select(User.id, User.email, Role.id, Role.name)
        .join(Role, Role.id == User.role_id)
        .where(User.id == user_id),
    )).one_or_none()
    if row is None:
        return None
    uid, email, role_id, role_name = row

    names = (await db.execute(
        select(Permission.name)
        .join(role_permissions, role_permissions.c.permission_id == Permission.id)
        .where(role_permissions.c.role_id == role_id),
    )).scalars().all()

    return Identity(
        user_id=UserId(uid), email=email, role=role_name,
        permissions=frozenset(names),
    )
