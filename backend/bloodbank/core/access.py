"""Access Decision — allow/deny for an authenticated identity and a required capability set.

Invariants:
    - decide_access is PURE: no IO, no logging, no exceptions
    - Missing identity is denied before any permission matching
    - ALLOW iff required ⊆ identity.permissions (empty required always allows)

Design Decisions:
    - Decision returned as an Enum, mapped to errors by enforce_access: the
      transport guard and the tests consume the same pure function
    - Identity is frozen: a resolved permission set never changes mid-operation
"""

from dataclasses import dataclass, field
from enum import Enum

from bloodbank.core.domain_types import UserId
from bloodbank.core.errors import (
    ErrorContext, ForbiddenError, UnauthenticatedError,
)


class AccessDecision(str, Enum):
    ALLOW = "allow"
    DENY_UNAUTHENTICATED = "deny_unauthenticated"
    DENY_FORBIDDEN = "deny_forbidden"


@dataclass(frozen=True)
class Identity:
    """Authenticated caller with its Role's resolved permission names."""
    user_id: UserId
    email: str
    role: str
    permissions: frozenset[str] = field(default_factory=frozenset)


def decide_access(
    identity: Identity | None, required: frozenset[str],
) -> AccessDecision:
    """Pure allow/deny decision."""
    if identity is None:
        return AccessDecision.DENY_UNAUTHENTICATED
    if required <= identity.permissions:
        return AccessDecision.ALLOW
    return AccessDecision.DENY_FORBIDDEN


def missing_permissions(
    identity: Identity, required: frozenset[str],
) -> list[str]:
    """Required capabilities the identity lacks, sorted for stable messages."""
    return sorted(required - identity.permissions)


def enforce_access(
    identity: Identity | None,
    required: frozenset[str],
    operation: str | None = None,
) -> Identity:
    """Raise the matching access error on deny; return the identity on allow."""
    decision = decide_access(identity, required)
    if decision is AccessDecision.DENY_UNAUTHENTICATED:
        raise UnauthenticatedError(ErrorContext(operation=operation))
    if decision is AccessDecision.DENY_FORBIDDEN:
        raise ForbiddenError(
            missing_permissions(identity, required),
            ErrorContext(user_id=identity.user_id, operation=operation),
        )
    return identity
