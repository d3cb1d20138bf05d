"""Role-based permission table for organization-scoped actions.

Each permission lists its allowed roles explicitly. There is no role
hierarchy: GUEST may read projects but that says nothing about updating them.
"""

from enum import Enum
from types import MappingProxyType
from typing import Final

from src.taskflow.core.exceptions import PermissionDenied
from src.taskflow.models.enums import OrgRole


class Permission(str, Enum):
    """Named actions that can be performed inside an organization."""

    ORGANIZATION_READ = "organization:read"
    ORGANIZATION_UPDATE = "organization:update"
    ORGANIZATION_DELETE = "organization:delete"
    ORGANIZATION_BILLING = "organization:billing"

    MEMBER_INVITE = "member:invite"
    MEMBER_REMOVE = "member:remove"
    MEMBER_UPDATE = "member:update"

    PROJECT_CREATE = "project:create"
    PROJECT_READ = "project:read"
    PROJECT_UPDATE = "project:update"
    PROJECT_DELETE = "project:delete"

    TASK_CREATE = "task:create"
    TASK_READ = "task:read"
    TASK_UPDATE = "task:update"
    TASK_DELETE = "task:delete"
    TASK_ASSIGN = "task:assign"

    COMMENT_CREATE = "comment:create"
    COMMENT_UPDATE = "comment:update"
    COMMENT_DELETE = "comment:delete"

    TEAM_CREATE = "team:create"
    TEAM_READ = "team:read"
    TEAM_UPDATE = "team:update"
    TEAM_DELETE = "team:delete"


_ALL: Final = frozenset({OrgRole.OWNER, OrgRole.ADMIN, OrgRole.MEMBER, OrgRole.GUEST})
_CONTRIBUTORS: Final = frozenset({OrgRole.OWNER, OrgRole.ADMIN, OrgRole.MEMBER})
_MANAGERS: Final = frozenset({OrgRole.OWNER, OrgRole.ADMIN})
_OWNER_ONLY: Final = frozenset({OrgRole.OWNER})

PERMISSIONS: Final = MappingProxyType(
    {
        Permission.ORGANIZATION_READ: _ALL,
        Permission.ORGANIZATION_UPDATE: _MANAGERS,
        Permission.ORGANIZATION_DELETE: _OWNER_ONLY,
        Permission.ORGANIZATION_BILLING: _OWNER_ONLY,
        Permission.MEMBER_INVITE: _MANAGERS,
        Permission.MEMBER_REMOVE: _MANAGERS,
        Permission.MEMBER_UPDATE: _MANAGERS,
        Permission.PROJECT_CREATE: _CONTRIBUTORS,
        Permission.PROJECT_READ: _ALL,
        Permission.PROJECT_UPDATE: _CONTRIBUTORS,
        Permission.PROJECT_DELETE: _MANAGERS,
        Permission.TASK_CREATE: _CONTRIBUTORS,
        Permission.TASK_READ: _ALL,
        Permission.TASK_UPDATE: _CONTRIBUTORS,
        Permission.TASK_DELETE: _CONTRIBUTORS,
        Permission.TASK_ASSIGN: _CONTRIBUTORS,
        Permission.COMMENT_CREATE: _ALL,
        Permission.COMMENT_UPDATE: _CONTRIBUTORS,
        Permission.COMMENT_DELETE: _CONTRIBUTORS,
        Permission.TEAM_CREATE: _MANAGERS,
        Permission.TEAM_READ: _ALL,
        Permission.TEAM_UPDATE: _MANAGERS,
        Permission.TEAM_DELETE: _MANAGERS,
    }
)


def validate_permission_table() -> None:
    """Ensure every Permission has an entry with at least one known role.

    Raises:
        RuntimeError: If the table is incomplete or references unknown roles
    """
    missing = set(Permission) - set(PERMISSIONS)
    if missing:
        names = ", ".join(sorted(p.value for p in missing))
        raise RuntimeError(f"Permission table is missing entries for: {names}")
    for permission, roles in PERMISSIONS.items():
        if not roles:
            raise RuntimeError(f"Permission {permission.value} allows no roles")
        if not roles <= set(OrgRole):
            raise RuntimeError(f"Permission {permission.value} references unknown roles")


validate_permission_table()


def allowed_roles(permission: Permission) -> frozenset[OrgRole]:
    """Return the roles allowed to perform ``permission``."""
    return PERMISSIONS[permission]


def has_permission(role: OrgRole | str, permission: Permission) -> bool:
    """Check whether ``role`` is explicitly allowed to perform ``permission``."""
    try:
        role = OrgRole(role)
    except ValueError:
        return False
    return role in PERMISSIONS[permission]


def require_permission(role: OrgRole | str, permission: Permission) -> None:
    """Raise PermissionDenied unless ``role`` may perform ``permission``."""
    if not has_permission(role, permission):
        raise PermissionDenied(f"Insufficient permissions. Required: {permission.value}")
