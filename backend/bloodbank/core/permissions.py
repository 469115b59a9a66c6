"""Operation Permissions — the capability each protected operation requires.

Invariants:
    - Every Operation has exactly one entry in OPERATION_PERMISSIONS
    - Required sets are frozensets (immutable, hashable, superset-checkable)
    - Permission names are the persisted Permission.name strings

Design Decisions:
    - Explicit table over decorator metadata: every mapping visible in one place,
      adding an operation requires editing this dict
    - Blood bag operations reuse the blood_* capabilities (existing deployments
      grant them under those names)
"""

from enum import Enum


class Operation(str, Enum):
    """Every protected entry point of the lifecycle services."""
    BLOOD_READ_ALL = "blood.read_all"
    BLOOD_READ_ONE = "blood.read_one"

    DONOR_CREATE = "donor.create"
    DONOR_READ_ALL = "donor.read_all"
    DONOR_READ_ONE = "donor.read_one"
    DONOR_UPDATE = "donor.update"
    DONOR_DELETE = "donor.delete"

    HEALTH_ENTITY_CREATE = "health_entity.create"
    HEALTH_ENTITY_READ_ALL = "health_entity.read_all"
    HEALTH_ENTITY_READ_ONE = "health_entity.read_one"
    HEALTH_ENTITY_UPDATE = "health_entity.update"
    HEALTH_ENTITY_DELETE = "health_entity.delete"

    REQUEST_CREATE = "request.create"
    REQUEST_READ_ALL = "request.read_all"
    REQUEST_READ_ONE = "request.read_one"
    REQUEST_UPDATE = "request.update"
    REQUEST_DELETE = "request.delete"

    BLOOD_BAG_CREATE = "blood_bag.create"
    BLOOD_BAG_READ_ALL = "blood_bag.read_all"
    BLOOD_BAG_READ_ONE = "blood_bag.read_one"
    BLOOD_BAG_UPDATE = "blood_bag.update"
    BLOOD_BAG_DELETE = "blood_bag.delete"

    USER_CREATE = "user.create"
    USER_READ_ALL = "user.read_all"
    USER_READ_ONE = "user.read_one"
    USER_UPDATE = "user.update"
    USER_DELETE = "user.delete"

    ROLE_CREATE = "role.create"
    ROLE_READ_ALL = "role.read_all"
    ROLE_READ_ONE = "role.read_one"
    ROLE_UPDATE = "role.update"
    ROLE_DELETE = "role.delete"
    ROLE_ASSIGN_PERMISSIONS = "role.assign_permissions"
    ROLE_REMOVE_PERMISSION = "role.remove_permission"
    ROLE_READ_PERMISSIONS = "role.read_permissions"

    PERMISSION_CREATE = "permission.create"
    PERMISSION_READ_ALL = "permission.read_all"
    PERMISSION_READ_ONE = "permission.read_one"
    PERMISSION_UPDATE = "permission.update"
    PERMISSION_DELETE = "permission.delete"

    REPORT_READ = "report.read"


def _caps(*names: str) -> frozenset[str]:
    return frozenset(names)


OPERATION_PERMISSIONS: dict[Operation, frozenset[str]] = {
    Operation.BLOOD_READ_ALL: _caps("blood_read"),
    Operation.BLOOD_READ_ONE: _caps("blood_read"),

    Operation.DONOR_CREATE: _caps("donor_create"),
    Operation.DONOR_READ_ALL: _caps("donor_read"),
    Operation.DONOR_READ_ONE: _caps("donor_read"),
    Operation.DONOR_UPDATE: _caps("donor_update"),
    Operation.DONOR_DELETE: _caps("donor_delete"),

    Operation.HEALTH_ENTITY_CREATE: _caps("health_entity_create"),
    Operation.HEALTH_ENTITY_READ_ALL: _caps("health_entity_read"),
    Operation.HEALTH_ENTITY_READ_ONE: _caps("health_entity_read"),
    Operation.HEALTH_ENTITY_UPDATE: _caps("health_entity_update"),
    Operation.HEALTH_ENTITY_DELETE: _caps("health_entity_delete"),

    Operation.REQUEST_CREATE: _caps("request_create"),
    Operation.REQUEST_READ_ALL: _caps("request_read"),
    Operation.REQUEST_READ_ONE: _caps("request_read"),
    Operation.REQUEST_UPDATE: _caps("request_update"),
    Operation.REQUEST_DELETE: _caps("request_delete"),

    Operation.BLOOD_BAG_CREATE: _caps("blood_create"),
    Operation.BLOOD_BAG_READ_ALL: _caps("blood_read"),
    Operation.BLOOD_BAG_READ_ONE: _caps("blood_read"),
    Operation.BLOOD_BAG_UPDATE: _caps("blood_update"),
    Operation.BLOOD_BAG_DELETE: _caps("blood_delete"),

    Operation.USER_CREATE: _caps("user_create"),
    Operation.USER_READ_ALL: _caps("user_read"),
    Operation.USER_READ_ONE: _caps("user_read"),
    Operation.USER_UPDATE: _caps("user_update"),
    Operation.USER_DELETE: _caps("user_delete"),

    Operation.ROLE_CREATE: _caps("role_create"),
    Operation.ROLE_READ_ALL: _caps("role_read"),
    Operation.ROLE_READ_ONE: _caps("role_read"),
    Operation.ROLE_UPDATE: _caps("role_update"),
    Operation.ROLE_DELETE: _caps("role_delete"),
    Operation.ROLE_ASSIGN_PERMISSIONS: _caps("role_update"),
    Operation.ROLE_REMOVE_PERMISSION: _caps("role_update"),
    Operation.ROLE_READ_PERMISSIONS: _caps("role_read"),

    Operation.PERMISSION_CREATE: _caps("permission_create"),
    Operation.PERMISSION_READ_ALL: _caps("permission_read"),
    Operation.PERMISSION_READ_ONE: _caps("permission_read"),
    Operation.PERMISSION_UPDATE: _caps("permission_update"),
    Operation.PERMISSION_DELETE: _caps("permission_delete"),

    Operation.REPORT_READ: _caps("report_read"),
}


# Every capability name any operation can require.
ALL_PERMISSIONS: frozenset[str] = frozenset().union(*OPERATION_PERMISSIONS.values())


def required_permissions(operation: Operation) -> frozenset[str]:
    """Capabilities the given operation requires."""
    return OPERATION_PERMISSIONS[operation]
