"""Permission system for role-based access control (RBAC)."""

from jobguard.core.permissions.registry import (
    PERMISSIONS,
    PermissionRegistry,
    check_permission,
    list_permissions,
    registry,
    split_permission,
)
from jobguard.core.permissions.roles import (
    ROLE_DESCRIPTIONS,
    ROLE_HIERARCHY,
    Role,
    roles_by_level,
)


__all__ = [
    "PERMISSIONS",
    "ROLE_DESCRIPTIONS",
    "ROLE_HIERARCHY",
    # Registry
    "PermissionRegistry",
    # Roles
    "Role",
    "check_permission",
    "list_permissions",
    "registry",
    "roles_by_level",
    "split_permission",
]
