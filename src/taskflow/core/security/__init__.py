"""Security utilities - crypto and permissions.

Re-exports all security-related functions for convenience.
"""

from src.taskflow.core.security.crypto import (
    DUMMY_PASSWORD_HASH,
    TokenClaims,
    TokenType,
    create_access_token,
    create_refresh_token,
    hash_password,
    hash_token,
    verify_access_token,
    verify_password,
    verify_refresh_token,
)
from src.taskflow.core.security.permissions import (
    PERMISSIONS,
    Permission,
    allowed_roles,
    has_permission,
    require_permission,
)

__all__ = [
    # Crypto
    "DUMMY_PASSWORD_HASH",
    "TokenClaims",
    "TokenType",
    "create_access_token",
    "create_refresh_token",
    "hash_password",
    "hash_token",
    "verify_access_token",
    "verify_password",
    "verify_refresh_token",
    # Permissions
    "PERMISSIONS",
    "Permission",
    "allowed_roles",
    "has_permission",
    "require_permission",
]
