"""Permission registry.

This module holds the static permission matrix: a mapping from
``resource:action`` keys to the set of roles allowed to perform them.
The matrix is built once at import time and never mutated afterwards,
so it can be shared by every concurrent request without locking.

Lookups are fail-closed: an unknown permission key or an unknown role
is simply not allowed.
"""

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from jobguard.core.constants import PERMISSION_SEPARATOR
from jobguard.core.permissions.roles import Role


ADMIN = Role.ADMIN
EMPLOYER = Role.EMPLOYER
CANDIDATE = Role.CANDIDATE
VIEWER = Role.VIEWER

ALL_ROLES = (ADMIN, EMPLOYER, CANDIDATE, VIEWER)

# Declaration order is the order list_permissions() reports keys in.
PERMISSIONS: dict[str, tuple[Role, ...]] = {
    # User management
    "users:read": (ADMIN,),
    "users:create": (ADMIN,),
    "users:update": (ADMIN,),
    "users:delete": (ADMIN,),
    "users:changeRole": (ADMIN,),
    "users:readOwn": ALL_ROLES,
    "users:updateOwn": ALL_ROLES,
    # Job management
    "jobs:read": ALL_ROLES,
    "jobs:create": (ADMIN, EMPLOYER),
    "jobs:update": (ADMIN, EMPLOYER),  # ownership-scoped for employers
    "jobs:delete": (ADMIN, EMPLOYER),  # ownership-scoped for employers
    "jobs:updateAny": (ADMIN,),
    "jobs:deleteAny": (ADMIN,),
    # Application management
    "applications:read": (ADMIN, EMPLOYER, CANDIDATE),
    "applications:create": (ADMIN, CANDIDATE),
    "applications:update": (ADMIN, CANDIDATE),  # ownership-scoped for candidates
    "applications:delete": (ADMIN, CANDIDATE),  # ownership-scoped for candidates
    "applications:updateStatus": (ADMIN, EMPLOYER),  # job owners only
    "applications:readAny": (ADMIN,),
    # Admin actions
    "admin:access": (ADMIN,),
    "audit:read": (ADMIN,),
    "stats:read": (ADMIN, EMPLOYER),
}

# Actions that never change state
READ_ACTIONS = frozenset({"read", "readOwn", "readAny", "access"})


def split_permission(permission: str) -> tuple[str, str]:
    """Split a ``resource:action`` key into its two parts.

    Raises:
        ValueError: If the key is not of the form ``resource:action``
    """
    resource, sep, action = permission.partition(PERMISSION_SEPARATOR)
    if not sep or not resource or not action:
        raise ValueError(f"Malformed permission key: {permission!r}")
    return resource, action


class PermissionRegistry:
    """Read-only view over a permission matrix.

    Every key must map to at least one role; this is checked at
    construction so a bad table fails at startup rather than at
    request time.
    """

    def __init__(self, matrix: Mapping[str, Iterable[Role]]) -> None:
        frozen: dict[str, frozenset[Role]] = {}
        for permission, roles in matrix.items():
            split_permission(permission)
            role_set = frozenset(roles)
            if not role_set:
                raise ValueError(f"Permission {permission!r} has no roles")
            frozen[permission] = role_set
        self._matrix: Mapping[str, frozenset[Role]] = MappingProxyType(frozen)

    @property
    def permissions(self) -> Mapping[str, frozenset[Role]]:
        """The full matrix as an immutable mapping."""
        return self._matrix

    def __contains__(self, permission: object) -> bool:
        return permission in self._matrix

    def __len__(self) -> int:
        return len(self._matrix)

    def is_allowed(self, role: Role | str | None, permission: str) -> bool:
        """Check whether ``role`` holds ``permission``.

        Args:
            role: The actor's role (enum member or its string value)
            permission: Key in ``resource:action`` form

        Returns:
            True only if the key is registered and lists the role
        """
        if role is None:
            return False
        resolved = Role.parse(role)
        if resolved is None:
            return False
        allowed = self._matrix.get(permission)
        if allowed is None:
            return False
        return resolved in allowed

    def roles_for(self, permission: str) -> frozenset[Role]:
        """Roles granted ``permission``; empty for unknown keys."""
        return self._matrix.get(permission, frozenset())

    def list_permissions(self, role: Role | str) -> tuple[str, ...]:
        """Every permission key granted to ``role``, in declaration order.

        This is advisory (menu gating and the like). Protected actions
        are always re-checked with ``is_allowed`` at call time.
        """
        resolved = Role.parse(role)
        if resolved is None:
            return ()
        return tuple(
            permission
            for permission, roles in self._matrix.items()
            if resolved in roles
        )

    def is_mutating(self, permission: str) -> bool:
        """Whether performing ``permission`` changes state."""
        _, action = split_permission(permission)
        return action not in READ_ACTIONS


# Process-wide registry, shared by reference
registry = PermissionRegistry(PERMISSIONS)


def check_permission(role: Role | str | None, permission: str) -> bool:
    """Convenience wrapper around the process-wide registry."""
    return registry.is_allowed(role, permission)


def list_permissions(role: Role | str) -> tuple[str, ...]:
    """Convenience wrapper around the process-wide registry."""
    return registry.list_permissions(role)
