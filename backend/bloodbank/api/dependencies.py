"""Request Dependencies — identity, access guard and per-request service registry.

Invariants:
    - The upstream authentication layer stores the caller's id on request.state.user_id;
      no id (or an id with no user row) is an unauthenticated call
    - require(operation) runs before the route body: denied calls never reach a service
    - One LifecycleServices per request, bound to that request's session

Design Decisions:
    - The guard consumes the pure decide_access via enforce_access, so routes and
      unit tests share one decision function
"""

import logging
from typing import Callable

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from bloodbank.core.access import Identity, enforce_access
from bloodbank.core.errors import BloodBankError
from bloodbank.core.permissions import Operation, required_permissions
from bloodbank.infrastructure.database import get_db
from bloodbank.services.identity import load_identity
from bloodbank.services.registry import LifecycleServices

logger = logging.getLogger(__name__)


async def get_identity(
    request: Request, db: AsyncSession = Depends(get_db),
) -> Identity | None:
    """Resolve the authenticated caller, or None."""
    user_id = getattr(request.state, "user_id", None)
    if user_id is None:
        return None
    return await load_identity(db, user_id)


def require(operation: Operation) -> Callable:
    """Build a dependency that enforces the operation's required permissions."""
    required = required_permissions(operation)

    async def guard(
        identity: Identity | None = Depends(get_identity),
    ) -> Identity:
        try:
            return enforce_access(identity, required, operation.value)
        except BloodBankError as e:
            logger.warning(
                f"Access denied: {e.code}",
                extra={
                    "operation": operation.value,
                    "user_id": identity.user_id if identity else None,
                    "error_code": e.code,
                },
            )
            raise

    return guard


async def get_services(db: AsyncSession = Depends(get_db)) -> LifecycleServices:
    return LifecycleServices(db)
