"""Tests for the role/permission table."""

import pytest

from src.taskflow.core.exceptions import PermissionDenied
from src.taskflow.core.security import (
    PERMISSIONS,
    Permission,
    allowed_roles,
    has_permission,
    require_permission,
)
from src.taskflow.core.security.permissions import validate_permission_table
from src.taskflow.models import OrgRole

pytestmark = pytest.mark.unit

OWNER, ADMIN, MEMBER, GUEST = OrgRole.OWNER, OrgRole.ADMIN, OrgRole.MEMBER, OrgRole.GUEST

EXPECTED = {
    Permission.ORGANIZATION_READ: {OWNER, ADMIN, MEMBER, GUEST},
    Permission.ORGANIZATION_UPDATE: {OWNER, ADMIN},
    Permission.ORGANIZATION_DELETE: {OWNER},
    Permission.ORGANIZATION_BILLING: {OWNER},
    Permission.MEMBER_INVITE: {OWNER, ADMIN},
    Permission.MEMBER_REMOVE: {OWNER, ADMIN},
    Permission.MEMBER_UPDATE: {OWNER, ADMIN},
    Permission.PROJECT_CREATE: {OWNER, ADMIN, MEMBER},
    Permission.PROJECT_READ: {OWNER, ADMIN, MEMBER, GUEST},
    Permission.PROJECT_UPDATE: {OWNER, ADMIN, MEMBER},
    Permission.PROJECT_DELETE: {OWNER, ADMIN},
    Permission.TASK_CREATE: {OWNER, ADMIN, MEMBER},
    Permission.TASK_READ: {OWNER, ADMIN, MEMBER, GUEST},
    Permission.TASK_UPDATE: {OWNER, ADMIN, MEMBER},
    Permission.TASK_DELETE: {OWNER, ADMIN, MEMBER},
    Permission.TASK_ASSIGN: {OWNER, ADMIN, MEMBER},
    Permission.COMMENT_CREATE: {OWNER, ADMIN, MEMBER, GUEST},
    Permission.COMMENT_UPDATE: {OWNER, ADMIN, MEMBER},
    Permission.COMMENT_DELETE: {OWNER, ADMIN, MEMBER},
    Permission.TEAM_CREATE: {OWNER, ADMIN},
    Permission.TEAM_READ: {OWNER, ADMIN, MEMBER, GUEST},
    Permission.TEAM_UPDATE: {OWNER, ADMIN},
    Permission.TEAM_DELETE: {OWNER, ADMIN},
}


def test_every_permission_has_an_entry():
    assert set(PERMISSIONS) == set(Permission)
    validate_permission_table()


@pytest.mark.parametrize("permission", list(Permission), ids=lambda p: p.value)
def test_table_matches_expected_roles(permission: Permission):
    assert allowed_roles(permission) == EXPECTED[permission]
    for role in OrgRole:
        assert has_permission(role, permission) is (role in EXPECTED[permission])


def test_no_implicit_hierarchy():
    """GUEST can read projects, which says nothing about updating them."""
    assert has_permission(GUEST, Permission.PROJECT_READ)
    assert not has_permission(GUEST, Permission.PROJECT_UPDATE)
    assert not has_permission(GUEST, Permission.PROJECT_CREATE)


def test_admin_cannot_delete_or_bill():
    assert not has_permission(ADMIN, Permission.ORGANIZATION_DELETE)
    assert not has_permission(ADMIN, Permission.ORGANIZATION_BILLING)


def test_role_strings_are_accepted():
    assert has_permission("OWNER", Permission.ORGANIZATION_DELETE)
    assert not has_permission("MEMBER", Permission.ORGANIZATION_DELETE)


def test_unknown_role_has_no_permissions():
    assert not has_permission("SUPERUSER", Permission.ORGANIZATION_READ)
    assert not has_permission("owner", Permission.ORGANIZATION_READ)


def test_require_permission_passes_for_allowed_role():
    require_permission(MEMBER, Permission.TASK_CREATE)


def test_require_permission_names_the_missing_permission():
    with pytest.raises(PermissionDenied) as exc_info:
        require_permission(GUEST, Permission.PROJECT_CREATE)

    assert exc_info.value.message == "Insufficient permissions. Required: project:create"
    assert exc_info.value.status_code == 403
    assert exc_info.value.code == "PERMISSION_DENIED"
